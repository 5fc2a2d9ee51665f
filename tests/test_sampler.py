import random

import pytest

from prepdeck.services.sampler import sample_questions, validate_sample_size


def test_returns_input_unchanged_when_not_larger_than_sample():
    questions = ["a", "b", "c"]
    assert sample_questions(questions, 3) is questions
    assert sample_questions(questions, 10) is questions


def test_samples_exactly_k_distinct_members():
    questions = list(range(50))
    sampled = sample_questions(questions, 7, rng=random.Random(42))

    assert len(sampled) == 7
    assert len(set(sampled)) == 7
    assert set(sampled) <= set(questions)


def test_does_not_mutate_input():
    questions = list(range(20))
    sample_questions(questions, 5, rng=random.Random(1))
    assert questions == list(range(20))


def test_deterministic_with_seeded_rng():
    questions = list(range(30))
    first = sample_questions(questions, 10, rng=random.Random(7))
    second = sample_questions(questions, 10, rng=random.Random(7))
    assert first == second


def test_default_sample_size_is_ten():
    assert len(sample_questions(list(range(25)))) == 10


@pytest.mark.parametrize(
    "value, expected",
    [(0, 1), (-5, 1), (150, 100), (7.9, 7), (1, 1), (100, 100), (42, 42)],
)
def test_validate_sample_size(value, expected):
    assert validate_sample_size(value) == expected
