"""FastAPI server exposing the player flow and the PIN-gated admin surface."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field
import uvicorn

from smartshoot_app.constants.about import APP_ABOUT_TEXT, APP_NAME, APP_VERSION
from smartshoot_app.constants.game_constants import (
    CATEGORY_LABELS,
    CATEGORY_ORDER,
    DEFAULT_POINTS,
    DEFAULT_TIME_LIMIT_SECONDS,
    ROUND_LEADERBOARD_SIZE,
)
from smartshoot_app.constants.network_constants import ADMIN_PIN_HEADER, DEFAULT_HOST, DEFAULT_PORT
from smartshoot_app.core.game_manager import GameManager
from smartshoot_app.core.models import (
    MatchingPair,
    Player,
    Question,
    QuestionCategory,
    QuestionType,
    Round,
)
from smartshoot_app.core.question_importer import QuestionBankImportError
from smartshoot_app.core.prompt_renderer import renderer
from smartshoot_app.core.services.game_session import SessionSnapshot


class PlayerPayload(BaseModel):
    name: str


class RoundSelectionPayload(BaseModel):
    round_id: str


class AnswerPayload(BaseModel):
    """Boolean for true/false questions, a string for every other type."""

    answer: bool | str


class RoundPayload(BaseModel):
    name: str
    question_counts: dict[QuestionCategory, Annotated[int, Field(ge=0)]]


class MatchingPairPayload(BaseModel):
    left: str
    right: str


class QuestionPayload(BaseModel):
    category: QuestionCategory
    type: QuestionType
    prompt: str
    time_limit: int = DEFAULT_TIME_LIMIT_SECONDS
    points: int = DEFAULT_POINTS
    image_url: str | None = None
    options: list[str] | None = None
    correct_answer: bool | str | None = None
    essay_answer: str | None = None
    matching_pairs: list[MatchingPairPayload] | None = None
    matching_answer: str | None = None

    def to_question(self) -> Question:
        return Question(
            id="",
            category=self.category,
            type=self.type,
            prompt=self.prompt,
            time_limit=self.time_limit,
            points=self.points,
            image_url=self.image_url,
            options=self.options,
            correct_answer=self.correct_answer,
            essay_answer=self.essay_answer,
            matching_pairs=[MatchingPair(left=p.left, right=p.right) for p in self.matching_pairs]
            if self.matching_pairs is not None
            else None,
            matching_answer=self.matching_answer,
        )


class PinUpdatePayload(BaseModel):
    old_pin: str
    new_pin: str


def _serialize_round(round_: Round) -> dict[str, object]:
    return {
        "id": round_.id,
        "name": round_.name,
        "question_counts": {category.value: round_.count_for(category) for category in CATEGORY_ORDER},
        "total_questions": round_.total_questions,
    }


def _serialize_player(player: Player) -> dict[str, object]:
    return {
        "id": player.id,
        "name": player.name,
        "round_id": player.round_id,
        "score": player.score,
        "correct_answers": player.correct_answers,
        "wrong_answers": player.wrong_answers,
        "completed_at": player.completed_at.isoformat() if player.completed_at else None,
    }


def _serialize_question_for_player(question: Question) -> dict[str, object]:
    """Question as shown on the board; answer keys are never included."""
    return {
        "id": question.id,
        "category": question.category.value,
        "type": question.type.value,
        "prompt": question.prompt,
        "prompt_html": renderer.render_question(question),
        "image_url": question.image_url,
        "options": question.options,
        "matching_pairs": [{"left": p.left, "right": p.right} for p in question.matching_pairs]
        if question.matching_pairs is not None
        else None,
        "time_limit": question.time_limit,
        "points": question.points,
    }


def _serialize_question_for_admin(question: Question) -> dict[str, object]:
    data = _serialize_question_for_player(question)
    data.pop("prompt_html")
    data.update(
        correct_answer=question.correct_answer,
        essay_answer=question.essay_answer,
        matching_answer=question.matching_answer,
    )
    return data


def _serialize_state(snapshot: SessionSnapshot) -> dict[str, object]:
    current = snapshot.current_question
    answered = snapshot.answered_questions
    return {
        "state": snapshot.state.value,
        "player": _serialize_player(snapshot.player) if snapshot.player else None,
        "current_round": _serialize_round(snapshot.current_round) if snapshot.current_round else None,
        "tiles": [
            {
                "id": question.id,
                "category": question.category.value,
                "outcome": answered[question.id].value if question.id in answered else None,
            }
            for question in snapshot.questions
        ],
        "current_question": _serialize_question_for_player(current) if current else None,
        "current_question_index": snapshot.current_question_index,
        "answered_count": len(snapshot.answered_questions),
        "question_count": len(snapshot.questions),
        "is_playing": snapshot.is_playing,
        "show_feedback": snapshot.show_feedback,
        "last_answer_correct": snapshot.last_answer_correct,
        "game_complete": snapshot.game_complete,
    }


def _get_game_manager_dependency(game_manager: GameManager):
    def dependency() -> GameManager:
        return game_manager

    return dependency


def create_api_app(game_manager: GameManager) -> FastAPI:
    """Create a FastAPI application wired to the provided game manager."""

    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION, description=APP_ABOUT_TEXT)
    manager_dep = _get_game_manager_dependency(game_manager)

    def require_admin(
        pin: Annotated[str | None, Header(alias=ADMIN_PIN_HEADER)] = None,
        manager: GameManager = Depends(manager_dep),
    ) -> GameManager:
        if pin is None or not manager.verify_admin_pin(pin):
            raise HTTPException(status_code=401, detail="Invalid admin PIN.")
        return manager

    # --- Player flow ---

    @app.get("/categories")
    def list_categories() -> list[dict[str, str]]:
        return [{"id": category.value, "label": CATEGORY_LABELS[category]} for category in CATEGORY_ORDER]

    @app.get("/rounds")
    def list_rounds(manager: GameManager = Depends(manager_dep)) -> list[dict[str, object]]:
        return [_serialize_round(round_) for round_ in manager.get_rounds()]

    @app.get("/state")
    def get_state(manager: GameManager = Depends(manager_dep)) -> dict[str, object]:
        return _serialize_state(manager.get_session_snapshot())

    @app.post("/player", status_code=201)
    def set_player(payload: PlayerPayload, manager: GameManager = Depends(manager_dep)) -> dict[str, object]:
        manager.set_player(payload.name.strip())
        return _serialize_state(manager.get_session_snapshot())

    @app.post("/round")
    def select_round(
        payload: RoundSelectionPayload, manager: GameManager = Depends(manager_dep)
    ) -> dict[str, object]:
        manager.select_round(payload.round_id)
        return _serialize_state(manager.get_session_snapshot())

    @app.post("/start")
    def start_game(manager: GameManager = Depends(manager_dep)) -> dict[str, object]:
        manager.start_game()
        return _serialize_state(manager.get_session_snapshot())

    @app.post("/questions/{question_id}/select")
    def select_question(question_id: str, manager: GameManager = Depends(manager_dep)) -> dict[str, object]:
        manager.select_question(question_id)
        return _serialize_state(manager.get_session_snapshot())

    @app.post("/answer")
    def answer_question(payload: AnswerPayload, manager: GameManager = Depends(manager_dep)) -> dict[str, object]:
        correct = manager.answer_question(payload.answer)
        return {"correct": correct, "state": _serialize_state(manager.get_session_snapshot())}

    @app.post("/skip")
    def skip_question(manager: GameManager = Depends(manager_dep)) -> dict[str, object]:
        manager.skip_question()
        return _serialize_state(manager.get_session_snapshot())

    @app.post("/next")
    def next_question(manager: GameManager = Depends(manager_dep)) -> dict[str, object]:
        manager.next_question()
        return _serialize_state(manager.get_session_snapshot())

    @app.post("/end")
    def end_game(manager: GameManager = Depends(manager_dep)) -> dict[str, object]:
        manager.end_game()
        return _serialize_state(manager.get_session_snapshot())

    @app.post("/reset")
    def reset_game(manager: GameManager = Depends(manager_dep)) -> dict[str, object]:
        manager.reset_game()
        return _serialize_state(manager.get_session_snapshot())

    @app.get("/leaderboard")
    def get_leaderboard(
        round_id: str | None = None,
        limit: Annotated[int, Query(ge=1)] = ROUND_LEADERBOARD_SIZE,
        manager: GameManager = Depends(manager_dep),
    ) -> list[dict[str, object]]:
        """Whole leaderboard, or the top ``limit`` entries of one round."""
        if round_id is None:
            players = manager.get_leaderboard()
        else:
            players = manager.get_round_leaderboard(round_id, limit)
        return [_serialize_player(player) for player in players]

    # --- Admin surface ---

    admin = APIRouter(prefix="/admin")

    @admin.post("/login")
    def admin_login(manager: GameManager = Depends(require_admin)) -> dict[str, bool]:
        return {"ok": True}

    @admin.get("/questions")
    def admin_list_questions(manager: GameManager = Depends(require_admin)) -> list[dict[str, object]]:
        return [_serialize_question_for_admin(question) for question in manager.get_questions()]

    @admin.post("/questions", status_code=201)
    def admin_add_question(
        payload: QuestionPayload, manager: GameManager = Depends(require_admin)
    ) -> dict[str, object]:
        try:
            question = manager.add_question(payload.to_question())
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return _serialize_question_for_admin(question)

    @admin.post("/questions/import", status_code=201)
    async def admin_import_questions(
        request: Request, manager: GameManager = Depends(require_admin)
    ) -> list[dict[str, object]]:
        text = (await request.body()).decode("utf-8")
        try:
            added = manager.import_question_bank(text)
        except (QuestionBankImportError, ValueError) as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return [_serialize_question_for_admin(question) for question in added]

    @admin.get("/questions/export", response_class=PlainTextResponse)
    def admin_export_questions(manager: GameManager = Depends(require_admin)) -> str:
        return manager.export_question_bank()

    @admin.delete("/questions/{question_id}", status_code=204)
    def admin_delete_question(question_id: str, manager: GameManager = Depends(require_admin)) -> None:
        if not manager.delete_question(question_id):
            raise HTTPException(status_code=404, detail="Question not found.")

    @admin.post("/rounds", status_code=201)
    def admin_add_round(payload: RoundPayload, manager: GameManager = Depends(require_admin)) -> dict[str, object]:
        try:
            round_ = manager.add_round(payload.name, dict(payload.question_counts))
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return _serialize_round(round_)

    @admin.delete("/rounds/{round_id}", status_code=204)
    def admin_delete_round(round_id: str, manager: GameManager = Depends(require_admin)) -> None:
        if not manager.delete_round(round_id):
            raise HTTPException(status_code=404, detail="Round not found.")

    @admin.get("/stats")
    def admin_stats(manager: GameManager = Depends(require_admin)) -> dict[str, object]:
        stats = manager.get_leaderboard_stats()
        return {
            "total_games": stats.total_games,
            "average_score": stats.average_score,
            "highest_score": stats.highest_score,
            "top_player": stats.top_player,
        }

    @admin.delete("/leaderboard", status_code=204)
    def admin_clear_leaderboard(manager: GameManager = Depends(require_admin)) -> None:
        manager.clear_leaderboard()

    @admin.put("/pin")
    def admin_update_pin(payload: PinUpdatePayload, manager: GameManager = Depends(require_admin)) -> dict[str, bool]:
        try:
            updated = manager.update_admin_pin(payload.old_pin, payload.new_pin)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        if not updated:
            raise HTTPException(status_code=403, detail="Current PIN does not match.")
        return {"ok": True}

    app.include_router(admin)
    return app


def run_api_server(
    game_manager: GameManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> None:
    """Serve the API in the foreground until interrupted."""
    app = create_api_app(game_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    uvicorn.Server(config).run()
