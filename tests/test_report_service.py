"""Tests for report derivations and CSV export."""

import csv
import io

import pytest

from practice_tracker.models import (
    CounterRecord, Drill, PracticeInfo, TimeSegment, TimerRecord
)
from practice_tracker.services import (
    ReportService, aggregate_counts, aggregate_time_by_action,
    aggregate_time_by_action_for_drill, drill_boundaries, project_counter_events,
    project_segments, summarize_drills
)
from practice_tracker.utils import fmt_duration, fmt_stopwatch


@pytest.fixture
def drills():
    first = Drill(id=1)
    first.timer_data["explanation"] = TimerRecord(
        total_time=3000, time_segments=[TimeSegment(10_000, 13_000, 3000)]
    )

    second = Drill(id=2, tags={"skating"})
    second.timer_data["demonstration"] = TimerRecord(
        total_time=4000, time_segments=[TimeSegment(14_000, 18_000, 4000)]
    )
    # Still running when the snapshot was taken
    second.timer_data["explanation"] = TimerRecord(time_segments=[TimeSegment(20_000)])
    second.counter_data["shots"] = CounterRecord(count=2, timestamps=[15_000, 16_000])
    second.waste_time = 500
    return [first, second]


def test_segments_are_offsets_from_first_segment(drills):
    segments = project_segments(drills)

    assert [(s.drill_id, s.action_id, s.start_offset, s.end_offset) for s in segments] == [
        (1, "explanation", 0, 3000),
        (2, "demonstration", 4000, 8000),
    ]
    assert segments[0].action_label == "Explanation"
    assert segments[1].color == "#00C49F"


def test_projection_of_two_segments():
    drill = Drill(id=1)
    drill.timer_data["timemoving"] = TimerRecord(
        total_time=7000,
        time_segments=[TimeSegment(1000, 4000, 3000), TimeSegment(5000, 9000, 4000)],
    )
    assert [(s.start_offset, s.end_offset) for s in project_segments([drill])] == [
        (0, 3000),
        (4000, 8000),
    ]


def test_open_segments_are_excluded(drills):
    assert all(s.end_offset is not None for s in project_segments(drills))
    assert project_segments([Drill(id=1)]) == []


def test_time_totals_by_action(drills):
    totals = aggregate_time_by_action(drills)
    assert [(t.action_id, t.total_time) for t in totals] == [
        ("explanation", 3000),
        ("demonstration", 4000),
    ]


def test_drill_totals_include_waste_time(drills):
    totals = aggregate_time_by_action_for_drill(drills[1])
    assert [(t.action_id, t.total_time) for t in totals] == [
        ("demonstration", 4000),
        ("wasteTime", 500),
    ]
    assert totals[-1].action_label == "Waste Time"


def test_counter_totals(drills):
    totals = aggregate_counts(drills)
    assert [(t.action_id, t.action_label, t.count) for t in totals] == [("shots", "Shots", 2)]


def test_drill_summaries(drills):
    first, second = summarize_drills(list(reversed(drills)))

    assert (first.drill_id, first.drill_label, first.timer_time, first.total_time) == (1, "Drill 1", 3000, 3000)
    assert (first.start_offset, first.end_offset) == (0, 3000)

    assert second.drill_label == "Drill 2 (Skating)"
    assert second.tags == ["skating"]
    assert (second.timer_time, second.waste_time, second.total_time) == (4000, 500, 4500)
    assert (second.start_offset, second.end_offset) == (4000, 8000)
    assert second.counters == {"shots": 2}


def test_boundaries_follow_drill_id_order(drills):
    boundaries = drill_boundaries(list(reversed(drills)))
    assert [(b.drill_id, b.start_offset) for b in boundaries] == [(1, 0), (2, 4000)]


def test_drill_without_segments_has_no_boundary(drills):
    drills.append(Drill(id=3))
    assert [b.drill_id for b in drill_boundaries(drills)] == [1, 2]


def test_counter_events_share_segment_origin(drills):
    events = project_counter_events(drills)
    assert [(e.drill_id, e.action_id, e.timestamp) for e in events] == [
        (2, "shots", 5000),
        (2, "shots", 6000),
    ]


def test_counter_events_without_segments_use_first_count():
    drill = Drill(id=1)
    drill.counter_data["passes"] = CounterRecord(count=2, timestamps=[2000, 1000])
    assert [e.timestamp for e in project_counter_events([drill])] == [0, 1000]


def test_build_report_totals(drills):
    service = ReportService(clock=lambda: 42)
    report = service.build_report(PracticeInfo(club_name="Falcons"), drills, generated_by="Lee")

    assert report.generated_ts == 42
    assert report.generated_by == "Lee"
    assert report.total_drills == 2
    assert report.total_timer_time == 7000
    assert report.total_waste_time == 500
    assert report.total_time == 7500
    assert report.waste_percent == 7
    assert report.practice_info["club_name"] == "Falcons"


def test_build_report_is_deterministic(drills):
    service = ReportService(clock=lambda: 42)
    info = PracticeInfo(date="2024-01-01T10:00:00")
    assert service.build_report(info, drills).to_dict() == service.build_report(info, drills).to_dict()


def test_empty_report_has_zero_percent():
    report = ReportService(clock=lambda: 0).build_report(PracticeInfo(), [])
    assert report.waste_percent == 0
    assert report.segments == []


def test_export_csv_layout(drills):
    service = ReportService(clock=lambda: 42)
    report = service.build_report(PracticeInfo(club_name="Falcons"), drills)
    rows = list(csv.reader(io.StringIO(service.export_report_csv(report))))

    assert rows[0] == ["Practice Efficiency Tracker Report"]
    header = {row[0]: row[1] for row in rows[1:12]}
    assert header["Club"] == "Falcons"
    assert header["Total Drills"] == "2"
    assert header["Waste Time (%)"] == "7"
    assert ["2", "skating", "4000", "500", "4500", "4000", "8000"] in rows
    assert ["Shots", "2"] in rows
    assert rows[-2:] == [
        ["1", "explanation", "0", "3000", "3000"],
        ["2", "demonstration", "4000", "8000", "4000"],
    ]


def test_export_csv_requires_drills():
    service = ReportService(clock=lambda: 0)
    report = service.build_report(PracticeInfo(), [])
    with pytest.raises(ValueError):
        service.export_report_csv(report)


def test_duration_formatting():
    assert fmt_stopwatch(65300) == "01:05.3"
    assert fmt_stopwatch(-10) == "00:00.0"
    assert fmt_duration(125000) == "2:05"
    assert fmt_duration(0) == "0:00"
