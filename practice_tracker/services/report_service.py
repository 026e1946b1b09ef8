"""Report helpers for the Practice Efficiency Tracker.

Everything in this module is a pure derivation over committed drills: the
functions read timer/counter records and never touch live engine state or
the wall clock.
"""

from __future__ import annotations

import csv
import datetime as dt
import io
from typing import Callable, Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

from ..models import (
    ActionTotal,
    CounterEvent,
    CounterTotal,
    Drill,
    DrillBoundary,
    DrillDuration,
    PracticeInfo,
    PracticeReport,
    ReportSegment,
)
from ..utils import APP_TITLE, WASTE_TIME_ACTION_ID, action_color, action_label, now_ms
from ..utils.constants import TAG_LABELS

# (drill_id, action_id, start_time, end_time, duration)
RawSegment = Tuple[int, str, int, int, int]


class ExportServiceInterface(Protocol):
    """Interface for report export - supports ISP."""

    def export_to_csv(self, report: PracticeReport) -> str:
        """Export report to CSV format."""
        ...


def drill_label(drill: Drill, with_tags: bool = False) -> str:
    label = f"Drill {drill.id}"
    if with_tags and drill.tags:
        tags = ", ".join(TAG_LABELS.get(tag, tag) for tag in sorted(drill.tags))
        label = f"{label} ({tags})"
    return label


def _closed_segments(drills: Iterable[Drill]) -> List[RawSegment]:
    raw: List[RawSegment] = []
    for drill in drills:
        for action_id, record in drill.timer_data.items():
            for segment in record.time_segments:
                if segment.end_time is None:
                    continue
                raw.append(
                    (drill.id, action_id, segment.start_time, segment.end_time, segment.duration)
                )
    return raw


def session_origin(drills: Sequence[Drill]) -> Optional[int]:
    """Earliest closed segment start; falls back to the earliest counter timestamp."""

    starts = [seg[2] for seg in _closed_segments(drills)]
    if starts:
        return min(starts)
    stamps = [
        ts
        for drill in drills
        for record in drill.counter_data.values()
        for ts in record.timestamps
    ]
    return min(stamps) if stamps else None


def project_segments(drills: Sequence[Drill]) -> List[ReportSegment]:
    """Re-express every closed segment as offsets from the session's first segment."""

    raw = _closed_segments(drills)
    if not raw:
        return []

    origin = min(seg[2] for seg in raw)
    segments = [
        ReportSegment(
            drill_id=drill_id,
            action_id=action_id,
            action_label=action_label(action_id),
            start_offset=start - origin,
            end_offset=end - origin,
            duration=duration,
            color=action_color(action_id),
        )
        for drill_id, action_id, start, end, duration in raw
    ]
    segments.sort(key=lambda s: (s.start_offset, s.drill_id, s.action_id))
    return segments


def project_counter_events(drills: Sequence[Drill]) -> List[CounterEvent]:
    origin = session_origin(drills)
    if origin is None:
        return []
    events = [
        CounterEvent(
            drill_id=drill.id,
            action_id=action_id,
            action_label=action_label(action_id),
            timestamp=ts - origin,
        )
        for drill in drills
        for action_id, record in drill.counter_data.items()
        for ts in record.timestamps
    ]
    events.sort(key=lambda e: (e.timestamp, e.drill_id, e.action_id))
    return events


def aggregate_time_by_action(drills: Sequence[Drill]) -> List[ActionTotal]:
    """Sum ``total_time`` per action id across drills; zero totals are dropped."""

    totals: Dict[str, int] = {}
    for drill in drills:
        for action_id, record in drill.timer_data.items():
            totals[action_id] = totals.get(action_id, 0) + record.total_time
    return [
        ActionTotal(action_id=action_id, action_label=action_label(action_id), total_time=total)
        for action_id, total in totals.items()
        if total > 0
    ]


def aggregate_time_by_action_for_drill(drill: Drill) -> List[ActionTotal]:
    result = [
        ActionTotal(action_id=action_id, action_label=action_label(action_id), total_time=record.total_time)
        for action_id, record in drill.timer_data.items()
        if record.total_time > 0
    ]
    if drill.waste_time > 0:
        result.append(
            ActionTotal(
                action_id=WASTE_TIME_ACTION_ID,
                action_label=action_label(WASTE_TIME_ACTION_ID),
                total_time=drill.waste_time,
            )
        )
    return result


def aggregate_counts(drills: Sequence[Drill]) -> List[CounterTotal]:
    counts: Dict[str, int] = {}
    for drill in drills:
        for action_id, record in drill.counter_data.items():
            counts[action_id] = counts.get(action_id, 0) + record.count
    return [
        CounterTotal(action_id=action_id, action_label=action_label(action_id), count=count)
        for action_id, count in counts.items()
    ]


def summarize_drills(drills: Sequence[Drill]) -> List[DrillDuration]:
    """Per drill totals (timers + waste) and the offsets spanned by its segments."""

    segments = project_segments(drills)
    summaries: List[DrillDuration] = []
    for drill in sorted(drills, key=lambda d: d.id):
        own = [s for s in segments if s.drill_id == drill.id]
        timer_time = drill.total_timer_time()
        summaries.append(
            DrillDuration(
                drill_id=drill.id,
                drill_label=drill_label(drill, with_tags=True),
                tags=sorted(drill.tags),
                timer_time=timer_time,
                waste_time=drill.waste_time,
                total_time=timer_time + drill.waste_time,
                start_offset=min(s.start_offset for s in own) if own else None,
                end_offset=max(s.end_offset for s in own) if own else None,
                counters={k: v.count for k, v in drill.counter_data.items()},
            )
        )
    return summaries


def drill_boundaries(drills: Sequence[Drill]) -> List[DrillBoundary]:
    """One timeline marker per drill at its first segment, ordered by drill id."""

    return [
        DrillBoundary(
            drill_id=summary.drill_id,
            drill_label=f"Drill {summary.drill_id}",
            start_offset=summary.start_offset,
        )
        for summary in summarize_drills(drills)
        if summary.start_offset is not None
    ]


class PracticeReportExporter:
    """Concrete implementation of export service - follows SRP."""

    def export_to_csv(self, report: PracticeReport) -> str:
        """Return a CSV document describing the practice report.

        Raises:
            ValueError: If the report covers no drills.
        """

        if report.total_drills == 0:
            raise ValueError("Cannot export a report without any drills")

        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")

        generated_dt = dt.datetime.fromtimestamp(report.generated_ts / 1000)
        info = report.practice_info
        writer.writerow([f"{APP_TITLE} Report"])
        writer.writerow(["Generated", generated_dt.isoformat(timespec="seconds")])
        writer.writerow(["Generated By", report.generated_by or ""])
        writer.writerow(["Club", info.get("club_name", "")])
        writer.writerow(["Team", info.get("team_name", "")])
        writer.writerow(["Date", info.get("date", "")])
        writer.writerow(["Coach", info.get("coach_name", "")])
        writer.writerow(["Total Drills", report.total_drills])
        writer.writerow(["Total Timer Time (ms)", report.total_timer_time])
        writer.writerow(["Total Waste Time (ms)", report.total_waste_time])
        writer.writerow(["Total Time (ms)", report.total_time])
        writer.writerow(["Waste Time (%)", report.waste_percent])
        writer.writerow([])

        writer.writerow(
            ["Drill", "Tags", "Timer Time (ms)", "Waste Time (ms)", "Total Time (ms)",
             "Start Offset (ms)", "End Offset (ms)"]
        )
        for summary in report.drills:
            writer.writerow(
                [
                    summary.drill_id,
                    ", ".join(summary.tags),
                    summary.timer_time,
                    summary.waste_time,
                    summary.total_time,
                    "" if summary.start_offset is None else summary.start_offset,
                    "" if summary.end_offset is None else summary.end_offset,
                ]
            )
        writer.writerow([])

        writer.writerow(["Action", "Total Time (ms)"])
        for total in report.action_totals:
            writer.writerow([total.action_label, total.total_time])
        for counter in report.counter_totals:
            writer.writerow([counter.action_label, counter.count])
        writer.writerow([])

        writer.writerow(["Drill", "Action", "Start Offset (ms)", "End Offset (ms)", "Duration (ms)"])
        for segment in report.segments:
            writer.writerow(
                [segment.drill_id, segment.action_id, segment.start_offset,
                 segment.end_offset, segment.duration]
            )

        csv_text = buffer.getvalue()
        buffer.close()
        return csv_text


class ReportService:
    """
    Build :class:`PracticeReport` snapshots from committed drills.

    Uses dependency injection to follow DIP - the exporter and the clock used
    to stamp reports are replaceable.
    """

    def __init__(
        self,
        clock: Optional[Callable[[], int]] = None,
        export_service: Optional[ExportServiceInterface] = None,
    ) -> None:
        self._clock = clock
        self.export_service = export_service or PracticeReportExporter()

    def build_report(
        self,
        practice_info: PracticeInfo,
        drills: Sequence[Drill],
        generated_by: Optional[str] = None,
    ) -> PracticeReport:
        total_timer = sum(drill.total_timer_time() for drill in drills)
        total_waste = sum(drill.waste_time for drill in drills)
        total = total_timer + total_waste
        waste_percent = int(round(total_waste / total * 100)) if total > 0 else 0

        return PracticeReport(
            generated_ts=int(self._clock()) if self._clock is not None else now_ms(),
            generated_by=generated_by,
            practice_info=practice_info.to_dict(),
            total_drills=len(drills),
            total_timer_time=total_timer,
            total_waste_time=total_waste,
            total_time=total,
            waste_percent=waste_percent,
            drills=summarize_drills(drills),
            action_totals=aggregate_time_by_action(drills),
            counter_totals=aggregate_counts(drills),
            segments=project_segments(drills),
            counter_events=project_counter_events(drills),
            drill_boundaries=drill_boundaries(drills),
        )

    def export_report_csv(self, report: PracticeReport) -> str:
        return self.export_service.export_to_csv(report)
