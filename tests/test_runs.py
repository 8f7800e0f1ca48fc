"""Tests for best-run calculation."""

from bout_stats.models import BestRuns, ResolvedEvent, Side
from bout_stats.services.runs import best_run, best_runs


def _stream(score, double, pattern):
    """Build resolved events from a pattern such as "AABDA" (D = double)."""
    events = []
    for index, code in enumerate(pattern, start=1):
        if code == "D":
            events.append(ResolvedEvent(double(f"d{index}", index), None, 1))
        else:
            scorer = "Alice" if code == "A" else "Bob"
            events.append(ResolvedEvent(score(f"e{index}", scorer, index), Side(code), 1))
    return events


class TestBestRun:
    def test_empty_stream(self):
        assert best_run([], Side.A) == 0

    def test_longest_streak_wins(self, score, double):
        """A,A,A,B,A gives a best run of 3 for A."""
        events = _stream(score, double, "AAABA")
        assert best_run(events, Side.A) == 3
        assert best_run(events, Side.B) == 1

    def test_double_touch_is_neutral(self, score, double):
        """A double touch neither extends nor breaks a run."""
        events = _stream(score, double, "AADAA")
        assert best_run(events, Side.A) == 4
        assert best_run(events, Side.B) == 0

    def test_runs_cross_period_boundaries(self, score, double):
        events = _stream(score, double, "BAA") + [
            ResolvedEvent(score("p2", "Alice", 200), Side.A, 1, period=2)
        ]
        assert best_run(events, Side.A) == 3

    def test_two_point_card_extends_run_by_one(self, score, double):
        """A run counts scoring events, not the points they award."""
        events = _stream(score, double, "A") + [
            ResolvedEvent(score("k1", "Bob", 10), Side.A, 2)
        ]
        assert best_run(events, Side.A) == 2


class TestBestRuns:
    def test_both_sides(self, score, double):
        assert best_runs(_stream(score, double, "ABBBAA")) == BestRuns(side_a=2, side_b=3)
