"""Game-related constants shared across the engine, admin and API layers."""

from smartshoot_app.core.models import QuestionCategory

CATEGORY_ORDER: tuple[QuestionCategory, ...] = (
    QuestionCategory.C1,
    QuestionCategory.C2,
    QuestionCategory.C3,
    QuestionCategory.C4,
    QuestionCategory.C5,
    QuestionCategory.C6,
)

CATEGORY_LABELS: dict[QuestionCategory, str] = {
    QuestionCategory.C1: "Konsep Dasar",
    QuestionCategory.C2: "Pengakuan",
    QuestionCategory.C3: "Pencatatan",
    QuestionCategory.C4: "Penyesuaian",
    QuestionCategory.C5: "Pelaporan",
    QuestionCategory.C6: "Penutupan",
}

DEFAULT_ADMIN_PIN: str = "1234"
MIN_ADMIN_PIN_LENGTH: int = 4
DEFAULT_TIME_LIMIT_SECONDS: int = 30
DEFAULT_POINTS: int = 100
MULTIPLE_CHOICE_LABELS: tuple[str, ...] = ("A", "B", "C", "D")
ROUND_LEADERBOARD_SIZE: int = 5
