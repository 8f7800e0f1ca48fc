"""Tests for touches-by-period tallying."""

from bout_stats.models import PeriodTally, ResolvedEvent, Side
from bout_stats.services.touch_tally import tally_touches


class TestTallyTouches:
    def test_every_period_gets_a_row(self, period):
        """Periods without touches still appear with zero counts."""
        periods = [period(1, 0, 180), period(2, 185, 360), period(3, 365)]
        tally = tally_touches([], periods)
        assert list(tally) == [1, 2, 3]
        assert all(row == PeriodTally() for row in tally.values())

    def test_counts_per_side(self, score, period):
        periods = [period(1, 0, 180), period(2, 185)]
        events = [
            ResolvedEvent(score("e1", "Alice", 10), Side.A, 1, period=1),
            ResolvedEvent(score("e2", "Bob", 20), Side.B, 1, period=1),
            ResolvedEvent(score("e3", "Alice", 200), Side.A, 1, period=2),
            ResolvedEvent(score("e4", "Alice", 210), Side.A, 1, period=2),
        ]
        tally = tally_touches(events, periods)
        assert tally[1] == PeriodTally(side_a=1, side_b=1)
        assert tally[2] == PeriodTally(side_a=2, side_b=0)

    def test_double_counts_for_both(self, double, period):
        events = [ResolvedEvent(double("d1", 30), None, 1, period=1)]
        assert tally_touches(events, [period(1, 0)])[1] == PeriodTally(side_a=1, side_b=1)

    def test_unknown_period_gets_its_own_row(self, score):
        """Without recorded periods, events land in period 1 rather than vanish."""
        events = [ResolvedEvent(score("e1", "Alice", 10), Side.A, 1)]
        assert tally_touches(events, []) == {1: PeriodTally(side_a=1, side_b=0)}

    def test_configured_default_period(self, score):
        events = [ResolvedEvent(score("e1", "Bob", 10), Side.B, 1)]
        assert tally_touches(events, [], default_period=3) == {3: PeriodTally(side_a=0, side_b=1)}

    def test_rows_ordered_by_number(self, score, period):
        periods = [period(2, 185), period(1, 0, 180)]
        events = [ResolvedEvent(score("e1", "Bob", 5), Side.B, 1, period=5)]
        assert list(tally_touches(events, periods)) == [1, 2, 5]

    def test_total(self):
        assert PeriodTally(side_a=3, side_b=2).total() == 5
