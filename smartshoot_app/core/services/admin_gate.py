"""PIN check guarding the admin surface."""

from __future__ import annotations

import logging

from smartshoot_app.constants.game_constants import MIN_ADMIN_PIN_LENGTH

logger = logging.getLogger(__name__)


class AdminGate:
    """Plain string comparison against the current PIN; no hashing or throttling."""

    def __init__(self, pin: str) -> None:
        self._pin = pin

    def get_pin(self) -> str:
        return self._pin

    def load_pin(self, pin: str) -> None:
        self._pin = pin

    def verify_pin(self, pin: str) -> bool:
        return pin == self._pin

    def update_pin(self, old_pin: str, new_pin: str) -> bool:
        if not self.verify_pin(old_pin):
            logger.warning("Rejected admin PIN update with a wrong current PIN")
            return False
        if len(new_pin) < MIN_ADMIN_PIN_LENGTH:
            raise ValueError(f"New PIN must have at least {MIN_ADMIN_PIN_LENGTH} characters.")
        self._pin = new_pin
        return True
