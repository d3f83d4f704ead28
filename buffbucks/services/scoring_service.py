"""
Activity scoring - normalizes daily totals into a composite score and maps it
onto the token mint range.
"""

import math
from dataclasses import dataclass

from buffbucks.infrastructure.observability.logging import get_logger
from buffbucks.models.domain.fitness_domain import ActivityTotals

logger = get_logger(__name__)

# Daily caps at which a metric normalizes to 1.0. Values above a cap are not
# clamped and normalize above 1.0.
MAX_HEART_POINTS = 100
MAX_CALORIES_BURNT = 5000
MAX_TOTAL_STEPS = 10000

WEIGHT_HEART_POINTS = 0.5
WEIGHT_CALORIES_BURNT = 0.3
WEIGHT_TOTAL_STEPS = 0.2

MIN_TOKENS = 0
MAX_TOKENS = 1000


@dataclass(slots=True)
class ActivityScore:
    composite: float
    component_scores: dict[str, float]


def compute_score(totals: ActivityTotals) -> ActivityScore:
    """Weighted sum of each total normalized against its cap."""
    components = {
        "heart_points": (totals.heart_points / MAX_HEART_POINTS) * WEIGHT_HEART_POINTS,
        "calories": (totals.calories / MAX_CALORIES_BURNT) * WEIGHT_CALORIES_BURNT,
        "steps": (totals.steps / MAX_TOTAL_STEPS) * WEIGHT_TOTAL_STEPS,
    }
    composite = components["heart_points"] + components["calories"] + components["steps"]
    logger.info("Activity scored", composite=composite, **components)
    return ActivityScore(composite=composite, component_scores=components)


def map_to_tokens(composite: float) -> int:
    """
    Linearly map a composite score onto [MIN_TOKENS, MAX_TOKENS].

    Halves round up. The result is not clamped, so a composite above 1.0
    mints more than MAX_TOKENS. An infinite scaled score raises OverflowError.
    """
    scaled = composite * (MAX_TOKENS - MIN_TOKENS) + MIN_TOKENS
    return math.floor(scaled + 0.5)


def tokens_for_activity(totals: ActivityTotals) -> int:
    score = compute_score(totals)
    tokens = map_to_tokens(score.composite)
    logger.info("Tokens minted", token_amount=tokens)
    return tokens
