"""Tests for task, transition and congruency sequences."""

from collections import Counter

import pytest

from trialforge.core.sequences import (
    classify_transitions,
    generate_congruency_sequence,
    generate_task_sequence,
)
from trialforge.errors import ConfigurationError, UnknownSequenceType, UnknownTaskError


class TestTaskSequence:
    """Random and AABB schemes."""

    @pytest.mark.parametrize("n", [0, 1, 2, 7, 120])
    def test_length(self, rng, n):
        """Test both schemes return exactly n tasks."""
        assert len(generate_task_sequence(n, "Random", 50, None, rng)) == n
        assert len(generate_task_sequence(n, "AABB", 0, None, rng)) == n

    def test_zero_switch_rate_repeats_start_task(self, rng):
        """Test switch_rate 0 never leaves the start task."""
        sequence = generate_task_sequence(50, "Random", 0, "or", rng)
        assert sequence == ["or"] * 50

    def test_full_switch_rate_alternates(self, rng):
        """Test switch_rate 100 switches on every trial."""
        sequence = generate_task_sequence(50, "Random", 100, "mov", rng)
        assert all(a != b for a, b in zip(sequence, sequence[1:]))

    def test_aabb_pattern(self, rng):
        """Test AABB produces runs of two anchored at the start task."""
        sequence = generate_task_sequence(8, "AABB", 0, "mov", rng)
        assert sequence == ["mov", "mov", "or", "or", "mov", "mov", "or", "or"]

    def test_start_task_respected(self, rng):
        """Test an explicit start task is always the first element."""
        for _ in range(10):
            assert generate_task_sequence(5, "Random", 50, "or", rng)[0] == "or"

    def test_coin_flip_start_covers_both_tasks(self, rng):
        """Test the start coin flip yields both tasks."""
        starts = {generate_task_sequence(1, "Random", 0, None, rng)[0] for _ in range(50)}
        assert starts == {"mov", "or"}

    def test_fifty_percent_switching_is_mixed(self, rng):
        """Test switch_rate 50 gives roughly half switches."""
        sequence = generate_task_sequence(400, "Random", 50, "mov", rng)
        switches = classify_transitions(sequence).count("Switch")
        assert 120 < switches < 280

    def test_unknown_sequence_type(self, rng):
        """Test an unregistered scheme raises UnknownSequenceType."""
        with pytest.raises(UnknownSequenceType, match="ABAB"):
            generate_task_sequence(10, "ABAB", 50, "mov", rng)

    def test_unknown_sequence_type_fails_even_when_empty(self, rng):
        """Test the scheme lookup happens before the length check."""
        with pytest.raises(UnknownSequenceType):
            generate_task_sequence(0, "ABAB", 50, "mov", rng)

    def test_unknown_start_task(self, rng):
        """Test an invalid start task raises UnknownTaskError."""
        with pytest.raises(UnknownTaskError):
            generate_task_sequence(4, "Random", 50, "color", rng)


class TestClassifyTransitions:
    """First / Repeat / Switch labels."""

    def test_labels(self):
        """Test labels follow task equality with the previous trial."""
        labels = classify_transitions(["mov", "mov", "or", "mov"])
        assert labels == ["First", "Repeat", "Switch", "Switch"]

    def test_empty(self):
        """Test an empty sequence has no labels."""
        assert classify_transitions([]) == []


class TestCongruencySequence:
    """Exact counts and shuffling."""

    def test_equal_split(self, rng):
        """Test a 50/50 split of 120 trials gives 60 of each."""
        sequence = generate_congruency_sequence(
            120, ["congruent", "incongruent"], [0.5, 0.5], rng
        )
        assert Counter(sequence) == {"congruent": 60, "incongruent": 60}

    def test_single_condition(self, rng):
        """Test a single condition fills the whole block."""
        sequence = generate_congruency_sequence(17, ["univalent"], [1.0], rng)
        assert sequence == ["univalent"] * 17

    def test_last_condition_absorbs_remainder(self, rng):
        """Test the last condition takes what rounding leaves over."""
        sequence = generate_congruency_sequence(
            10, ["congruent", "incongruent", "neutral"], [1 / 3, 1 / 3, 1 / 3], rng
        )
        assert Counter(sequence) == {"congruent": 3, "incongruent": 3, "neutral": 4}

    def test_half_rounds_up(self, rng):
        """Test counts ending in .5 round up."""
        sequence = generate_congruency_sequence(5, ["congruent", "incongruent"], [0.5, 0.5], rng)
        assert Counter(sequence) == {"congruent": 3, "incongruent": 2}

    @pytest.mark.parametrize("n", [0, 1, 3, 11, 49])
    def test_length_always_exact(self, rng, n):
        """Test the sequence length equals the trial count."""
        sequence = generate_congruency_sequence(
            n, ["congruent", "incongruent", "neutral"], [0.45, 0.45, 0.1], rng
        )
        assert len(sequence) == n

    def test_order_is_shuffled(self, rng):
        """Test labels are not left in assignment order."""
        sequence = generate_congruency_sequence(
            100, ["congruent", "incongruent"], [0.5, 0.5], rng
        )
        assert sequence != ["congruent"] * 50 + ["incongruent"] * 50

    def test_empty_conditions_rejected(self, rng):
        """Test a block with no congruency conditions fails fast."""
        with pytest.raises(ConfigurationError, match="at least one condition"):
            generate_congruency_sequence(10, [], [], rng)

    def test_mismatched_proportions_rejected(self, rng):
        """Test fewer proportions than conditions raises ConfigurationError."""
        with pytest.raises(ConfigurationError, match="3 conditions but 1 proportions"):
            generate_congruency_sequence(
                10, ["congruent", "incongruent", "neutral"], [0.5], rng
            )
