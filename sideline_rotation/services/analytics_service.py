"""Rotation fairness analytics for the Sideline Rotation engine."""

from __future__ import annotations

import csv
import io
import statistics
from collections import Counter
from typing import List, Optional

from ..models import GameState, PlayerStatus, PlayerTimeSummary, RotationReport
from ..utils import now_ts
from ..utils.constants import FAIRNESS_THRESHOLD_SECONDS
from .time_accounting import (
    attack_defender_balance,
    current_stint_duration,
    total_outfield_time,
)

FAIRNESS_ORDER = {"under": 0, "ok": 1, "over": 2}


class AnalyticsService:
    """
    Generate reports describing how evenly outfield time is shared.

    Outfield players are compared against the squad average; whoever has
    spent the match in goal is reported but not graded.
    """

    def generate_rotation_report(
        self,
        state: GameState,
        match_elapsed_seconds: int,
        now: Optional[float] = None,
    ) -> RotationReport:
        """Build a :class:`RotationReport` snapshot for ``state``."""

        current = now_ts() if now is None else now
        paused = state.is_sub_timer_paused
        elapsed = max(0, int(match_elapsed_seconds))

        outfield = {
            pid: total_outfield_time(p.stats, paused, current)
            for pid, p in state.players.items()
        }
        graded = [
            pid for pid, p in state.players.items()
            if p.stats.current_status is not PlayerStatus.GOALIE
        ]
        totals = [outfield[pid] for pid in graded]
        average = statistics.mean(totals) if totals else 0.0

        summaries: List[PlayerTimeSummary] = []
        for pid, player in state.players.items():
            stats = player.stats
            goalie_seconds = stats.time_as_goalie_seconds
            if stats.current_status is PlayerStatus.GOALIE and not paused:
                goalie_seconds += current_stint_duration(stats.last_stint_start_time_epoch, current)

            if pid in graded:
                delta = int(round(outfield[pid] - average))
                fairness = self._classify_fairness(delta)
            else:
                delta = 0
                fairness = "goalie"

            summaries.append(
                PlayerTimeSummary(
                    player_id=pid,
                    name=player.name,
                    number=player.number,
                    status=stats.current_status.value,
                    role=stats.current_role.value,
                    is_inactive=stats.is_inactive,
                    outfield_seconds=outfield[pid],
                    goalie_seconds=goalie_seconds,
                    bench_seconds=max(0, elapsed - outfield[pid] - goalie_seconds),
                    attack_defender_diff=attack_defender_balance(stats, paused, current),
                    delta_seconds=delta,
                    fairness=fairness,
                )
            )

        summaries.sort(
            key=lambda item: (FAIRNESS_ORDER.get(item.fairness, 3), item.delta_seconds, item.name)
        )
        fairness_counter = Counter(s.fairness for s in summaries)
        fairness_counts = {label: fairness_counter.get(label, 0) for label in FAIRNESS_ORDER}

        return RotationReport(
            generated_ts=current,
            elapsed_seconds=elapsed,
            players=summaries,
            average_seconds=average,
            median_seconds=statistics.median(totals) if totals else 0.0,
            min_seconds=min(totals) if totals else 0,
            max_seconds=max(totals) if totals else 0,
            fairness_counts=fairness_counts,
        )

    def generate_report_csv(self, report: RotationReport) -> str:
        """Return a CSV document describing ``report``.

        Args:
            report: Report produced by :meth:`generate_rotation_report`

        Returns:
            CSV formatted string containing summary rows followed by a table
            of player level metrics.

        Raises:
            ValueError: If there are no players to include in the report.
        """

        if not report.players:
            raise ValueError("Cannot export a rotation report without any players")

        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")

        writer.writerow(["Sideline Rotation Report"])
        writer.writerow(["Elapsed Seconds", report.elapsed_seconds])
        writer.writerow(["Average Seconds", round(report.average_seconds, 2)])
        writer.writerow(["Median Seconds", round(report.median_seconds, 2)])
        writer.writerow(["Minimum Seconds", report.min_seconds])
        writer.writerow(["Maximum Seconds", report.max_seconds])
        writer.writerow(["Players Under", report.fairness_counts.get("under", 0)])
        writer.writerow(["Players On Target", report.fairness_counts.get("ok", 0)])
        writer.writerow(["Players Over", report.fairness_counts.get("over", 0)])
        writer.writerow([])

        writer.writerow(
            [
                "Name",
                "Number",
                "Status",
                "Role",
                "Inactive",
                "Outfield Seconds",
                "Goalie Seconds",
                "Bench Seconds",
                "Attack-Defence Seconds",
                "Delta Seconds",
                "Fairness",
            ]
        )
        for summary in report.players:
            writer.writerow(
                [
                    summary.name,
                    summary.number if summary.number is not None else "",
                    summary.status,
                    summary.role,
                    "yes" if summary.is_inactive else "no",
                    summary.outfield_seconds,
                    summary.goalie_seconds,
                    summary.bench_seconds,
                    summary.attack_defender_diff,
                    summary.delta_seconds,
                    summary.fairness,
                ]
            )

        return buffer.getvalue()

    @staticmethod
    def _classify_fairness(delta_seconds: int) -> str:
        if delta_seconds <= -FAIRNESS_THRESHOLD_SECONDS:
            return "under"
        if delta_seconds >= FAIRNESS_THRESHOLD_SECONDS:
            return "over"
        return "ok"
