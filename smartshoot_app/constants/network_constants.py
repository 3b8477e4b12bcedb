"""Network configuration constants for the game server."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8000
ADMIN_PIN_HEADER: str = "X-Admin-Pin"
