"""Timer service for the Sideline Rotation engine."""

import logging
from typing import Dict, List, Optional, Tuple

from ..models import MatchClock
from ..utils import now_ts
from ..utils.constants import MAX_PERIOD_COUNT, MIN_PERIOD_COUNT

logger = logging.getLogger(__name__)


class TimerService:
    """Service for the match clock and the substitution timer."""

    def __init__(self, clock: Optional[MatchClock] = None):
        self.clock = clock or MatchClock()
        self.clock.ensure_period_list()

    # ------------------------------------------------------------------
    # Configuration helpers
    # ------------------------------------------------------------------
    def configure_match(
        self,
        *,
        period_count: Optional[int] = None,
        period_length_minutes: Optional[int] = None,
    ) -> None:
        """Configure the number and length of periods.

        Raises:
            ValueError: If attempting to reconfigure after the match has started
                        or with invalid values.
        """

        if self.clock.match_started:
            raise ValueError("Cannot configure timer after the match has started")

        periods = int(period_count) if period_count is not None else self.clock.period_count
        minutes = (
            int(period_length_minutes)
            if period_length_minutes is not None
            else self.clock.period_length_seconds // 60
        )
        if not MIN_PERIOD_COUNT <= periods <= MAX_PERIOD_COUNT:
            raise ValueError(
                f"Period count must be between {MIN_PERIOD_COUNT} and {MAX_PERIOD_COUNT}"
            )
        if minutes < 1:
            raise ValueError("Periods must last at least one minute")

        self.clock.period_count = periods
        self.clock.period_length_seconds = minutes * 60
        self.clock.period_elapsed = [0] * periods
        self.clock.current_period_index = 0
        self.clock.period_start_ts = None

    # ------------------------------------------------------------------
    # Match clock controls
    # ------------------------------------------------------------------
    def start_match(self) -> None:
        """Start or resume the match clock and the substitution timer."""

        now = now_ts()
        if not self.clock.match_started:
            self.clock.match_started = True
            self.clock.current_period_index = 0
            self.clock.period_elapsed = [0] * self.clock.period_count
            self.clock.sub_timer_base_seconds = 0

        if self.clock.period_start_ts is None:
            self.clock.period_start_ts = now
        if self.clock.sub_timer_started_ts is None:
            self.clock.sub_timer_started_ts = now
        self.clock.paused = False

    def pause(self) -> None:
        """Pause the match clock and the substitution timer."""

        self._bank_period()
        self.pause_sub_timer()
        self.clock.paused = True

    def resume(self) -> None:
        """Resume after a pause without resetting the period."""

        if not self.clock.match_started:
            self.start_match()
            return

        self.clock.paused = False
        if self.clock.period_start_ts is None:
            self.clock.period_start_ts = now_ts()
        self.resume_sub_timer()

    def end_period(self) -> bool:
        """Close the current period and advance to the next one.

        Returns:
            True if another period follows, False when the match is over
        """

        self.pause()
        if self.clock.current_period_index < self.clock.period_count - 1:
            self.clock.current_period_index += 1
            return True
        return False

    def _bank_period(self) -> None:
        if self.clock.period_start_ts is not None:
            idx = self.clock.current_period_index
            self.clock.period_elapsed[idx] += max(0, int(now_ts() - self.clock.period_start_ts))
            self.clock.period_start_ts = None

    # ------------------------------------------------------------------
    # Substitution timer controls
    # ------------------------------------------------------------------
    def pause_sub_timer(self) -> None:
        if self.clock.sub_timer_started_ts is not None:
            self.clock.sub_timer_base_seconds += max(
                0, int(now_ts() - self.clock.sub_timer_started_ts)
            )
            self.clock.sub_timer_started_ts = None

    def resume_sub_timer(self) -> None:
        if self.clock.sub_timer_started_ts is None:
            self.clock.sub_timer_started_ts = now_ts()

    def reset_sub_timer(self) -> None:
        """Restart the substitution timer from zero, keeping its running state."""

        self.clock.sub_timer_base_seconds = 0
        if self.clock.sub_timer_started_ts is not None:
            self.clock.sub_timer_started_ts = now_ts()

    def restore_sub_timer(self, seconds: int, anchor_ts: float) -> None:
        """Show ``seconds`` as of ``anchor_ts``.

        While the timer runs, the time elapsed since ``anchor_ts`` is added on
        top, so the value continues from where it stood at the anchor. A paused
        timer simply shows ``seconds``.
        """

        self.clock.sub_timer_base_seconds = max(0, int(seconds))
        if self.clock.sub_timer_started_ts is not None:
            self.clock.sub_timer_started_ts = min(float(anchor_ts), now_ts())
        logger.debug("Substitution timer restored to %ss anchored at %.0f", seconds, anchor_ts)

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------
    @property
    def is_paused(self) -> bool:
        return self.clock.paused

    def get_sub_timer_seconds(self) -> int:
        running = 0
        if self.clock.sub_timer_started_ts is not None:
            running = max(0, int(now_ts() - self.clock.sub_timer_started_ts))
        return self.clock.sub_timer_base_seconds + running

    def get_period_elapsed_seconds(self, index: Optional[int] = None) -> int:
        idx = self.clock.current_period_index if index is None else index
        elapsed = self.clock.period_elapsed[idx]
        if idx == self.clock.current_period_index and self.clock.period_start_ts is not None:
            elapsed += max(0, int(now_ts() - self.clock.period_start_ts))
        return elapsed

    def get_match_elapsed_seconds(self) -> int:
        return sum(
            self.get_period_elapsed_seconds(idx) for idx in range(self.clock.period_count)
        )

    def get_period_info(self) -> Tuple[int, int]:
        """Return ``(period_number, period_count)``; period numbers are 1-based."""
        return self.clock.current_period_index + 1, self.clock.period_count

    def get_remaining_period_seconds(self) -> int:
        return max(0, self.clock.period_length_seconds - self.get_period_elapsed_seconds())

    def get_period_summaries(self) -> List[Dict[str, int]]:
        """Return elapsed data for each period."""
        return [
            {
                "index": idx,
                "number": idx + 1,
                "length_seconds": self.clock.period_length_seconds,
                "elapsed_seconds": self.get_period_elapsed_seconds(idx),
            }
            for idx in range(self.clock.period_count)
        ]

    def snapshot(self) -> Dict[str, object]:
        """Timer figures for display."""
        period_number, period_count = self.get_period_info()
        return {
            "match_started": self.clock.match_started,
            "paused": self.clock.paused,
            "period_number": period_number,
            "period_count": period_count,
            "period_elapsed_seconds": self.get_period_elapsed_seconds(),
            "period_remaining_seconds": self.get_remaining_period_seconds(),
            "match_elapsed_seconds": self.get_match_elapsed_seconds(),
            "sub_timer_seconds": self.get_sub_timer_seconds(),
        }
