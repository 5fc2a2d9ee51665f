"""Random sampling of practice questions for a session."""

import math
import random
from typing import Sequence, TypeVar

T = TypeVar("T")

MIN_SAMPLE_SIZE = 1
MAX_SAMPLE_SIZE = 100


def sample_questions(questions: Sequence[T], sample_size: int = 10, rng: random.Random = None) -> list[T]:
    """
    Randomly sample ``sample_size`` questions from an already filtered list.

    When there are no more questions than requested, the input is returned
    as-is without shuffling. Otherwise a Fisher-Yates shuffle of a copy is
    truncated to the requested count, so no question is picked twice.

    Args:
        questions: Candidate questions (already filtered by stage, category, difficulty)
        sample_size: Number of questions to return
        rng: Random source, defaults to the module-level generator

    Returns:
        The sampled questions
    """
    if len(questions) <= sample_size:
        return questions

    rng = rng or random
    shuffled = list(questions)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]

    return shuffled[:sample_size]


def validate_sample_size(value: float) -> int:
    """Clamp a requested sample size to [1, 100], truncating fractions downward."""
    return max(MIN_SAMPLE_SIZE, min(MAX_SAMPLE_SIZE, math.floor(value)))
