"""Static metadata describing SmartShoot."""

APP_NAME = "SmartShoot"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "SmartShoot is a board-style accounting quiz game. Players pick a round, "
    "shoot at question tiles and climb the leaderboard; teachers manage the "
    "question bank and rounds from a PIN-protected admin surface."
)
