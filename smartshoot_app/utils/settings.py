"""Runtime settings read from the environment (and an optional .env file)."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from dotenv import load_dotenv

from smartshoot_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT

DEFAULT_CACHE_PATH = Path.home() / ".smartshoot" / "catalog.json"


@dataclass(frozen=True, slots=True)
class AppSettings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    cache_path: Path | None = DEFAULT_CACHE_PATH
    log_level: str = "INFO"
    shuffle_seed: int | None = None
    seed_demo_data: bool = True


def load_settings() -> AppSettings:
    load_dotenv()

    cache_value = os.getenv("SMARTSHOOT_CACHE_PATH")
    if cache_value is None:
        cache_path: Path | None = DEFAULT_CACHE_PATH
    else:
        cache_path = Path(cache_value).expanduser() if cache_value.strip() else None

    seed_value = os.getenv("SMARTSHOOT_SHUFFLE_SEED", "").strip()
    return AppSettings(
        host=os.getenv("SMARTSHOOT_HOST", DEFAULT_HOST),
        port=int(os.getenv("SMARTSHOOT_PORT", str(DEFAULT_PORT))),
        cache_path=cache_path,
        log_level=os.getenv("SMARTSHOOT_LOG_LEVEL", "INFO"),
        shuffle_seed=int(seed_value) if seed_value else None,
        seed_demo_data=os.getenv("SMARTSHOOT_SEED_DEMO", "1").strip().lower() not in {"0", "false", "no"},
    )
