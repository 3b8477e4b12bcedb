"""Draws the question list for a round from the full catalog."""

from __future__ import annotations

import logging
import random

from smartshoot_app.constants.game_constants import CATEGORY_ORDER
from smartshoot_app.core.models import Question, Round

logger = logging.getLogger(__name__)


def draw_questions(
    round_: Round,
    catalog: list[Question],
    rng: random.Random,
) -> list[Question]:
    """Honor the round's per-category quota, then shuffle the combined draw.

    Categories are visited in the fixed C1..C6 order. Each category pool is
    shuffled independently and the first ``n`` entries are taken; a pool with
    fewer than ``n`` questions contributes all it has. A final shuffle over the
    concatenation removes the category ordering.
    """

    selected: list[Question] = []
    for category in CATEGORY_ORDER:
        requested = round_.count_for(category)
        if requested <= 0:
            continue
        pool = [question for question in catalog if question.category == category]
        rng.shuffle(pool)
        if len(pool) < requested:
            logger.warning(
                "Round %s requests %d %s question(s) but only %d are available",
                round_.id,
                requested,
                category.value,
                len(pool),
            )
        selected.extend(pool[:requested])

    rng.shuffle(selected)
    return selected
