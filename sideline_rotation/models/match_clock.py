"""
MatchClock model for the Sideline Rotation engine.

This module contains the mutable timing record owned by the timer service:
period timing for the match clock and the substitution timer that counts
time since the last rotation.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from ..utils.constants import DEFAULT_PERIOD_COUNT, DEFAULT_PERIOD_LENGTH_MIN


@dataclass
class MatchClock:
    """
    Timing state of a match.

    Attributes:
        period_count: Number of regulation periods
        period_length_seconds: Regulation length of each period
        period_elapsed: Accumulated seconds played per period
        current_period_index: Index of active period (0-based)
        period_start_ts: When the current period started/resumed (epoch seconds)
        match_started: Whether the first period has been started
        paused: Whether the match clock is paused
        sub_timer_base_seconds: Substitution timer value banked at the last pause
        sub_timer_started_ts: When the substitution timer last started running
    """
    period_count: int = DEFAULT_PERIOD_COUNT
    period_length_seconds: int = DEFAULT_PERIOD_LENGTH_MIN * 60
    period_elapsed: List[int] = field(default_factory=list)
    current_period_index: int = 0
    period_start_ts: Optional[float] = None
    match_started: bool = False
    paused: bool = True
    sub_timer_base_seconds: int = 0
    sub_timer_started_ts: Optional[float] = None

    def ensure_period_list(self) -> None:
        """Keep ``period_elapsed`` sized to ``period_count``."""
        values = [max(0, int(v)) for v in self.period_elapsed[: self.period_count]]
        if len(values) < self.period_count:
            values.extend([0] * (self.period_count - len(values)))
        self.period_elapsed = values
        self.current_period_index = max(
            0, min(self.current_period_index, self.period_count - 1)
        )

    def to_json(self) -> dict:
        return {
            "period_count": self.period_count,
            "period_length_seconds": self.period_length_seconds,
            "period_elapsed": list(self.period_elapsed),
            "current_period_index": self.current_period_index,
            "period_start_ts": self.period_start_ts,
            "match_started": self.match_started,
            "paused": self.paused,
            "sub_timer_base_seconds": self.sub_timer_base_seconds,
            "sub_timer_started_ts": self.sub_timer_started_ts,
        }
