"""
Tests for the schedule reconciliation engine.

Covers:
- Planned completion date (extensions, contract types, unknown start)
- Effective schedule anchors and tie order
- Planned progress interpolation and clamping
- Latest / same-day actual progress
- Remaining days sign
- One-pass reconciliation snapshot
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from sitelog_engines.schedule import (
    ActualProgress,
    ContractType,
    Extension,
    ProgressLog,
    ProjectSchedule,
    SchedulePoint,
    actual_progress_on,
    build_effective_schedule,
    compute_planned_completion_date,
    interpolate_planned_progress,
    latest_actual_progress,
    planned_progress_as_of,
    reconcile_progress,
    remaining_days,
    total_extension_days,
)

D0 = date(2026, 3, 1)


def _point(day: date, progress) -> SchedulePoint:
    return SchedulePoint(point_date=day, progress=Decimal(str(progress)))


class TestPlannedCompletionDate:
    """Tests for compute_planned_completion_date."""

    def test_extension_shifts_completion_date(self):
        project = ProjectSchedule(
            start_date=date(2026, 1, 1),
            contract_duration=30,
            extensions=(Extension(id="e1", days=10),),
        )

        assert compute_planned_completion_date(project=project) == date(2026, 2, 9)

    def test_without_extensions(self):
        project = ProjectSchedule(start_date=date(2026, 1, 1), contract_duration=30)

        assert compute_planned_completion_date(project=project) == date(2026, 1, 30)

    def test_multiple_extensions_are_summed(self):
        project = ProjectSchedule(
            start_date=date(2026, 1, 1),
            contract_duration=30,
            extensions=(Extension(id="e1", days=5), Extension(id="e2", days=7)),
        )

        assert total_extension_days(project.extensions) == 12
        assert compute_planned_completion_date(project=project) == date(2026, 2, 11)

    def test_unknown_start_date_is_unknown(self):
        project = ProjectSchedule(contract_duration=30)

        assert compute_planned_completion_date(project=project) is None

    def test_fresh_record_without_any_fields(self):
        assert compute_planned_completion_date(project=ProjectSchedule()) is None

    def test_working_day_contract_uses_manual_end_date(self):
        project = ProjectSchedule(
            start_date=date(2026, 1, 1),
            contract_duration=30,
            end_date=date(2026, 2, 20),
            contract_type=ContractType.WORKING_DAYS,
        )

        assert compute_planned_completion_date(project=project) == date(2026, 2, 20)

    def test_working_day_contract_without_end_date_is_unknown(self):
        project = ProjectSchedule(
            start_date=date(2026, 1, 1),
            contract_duration=30,
            contract_type=ContractType.WORKING_DAYS,
        )

        assert compute_planned_completion_date(project=project) is None

    def test_calendar_contract_without_duration_falls_back_to_end_date(self):
        project = ProjectSchedule(start_date=date(2026, 1, 1), end_date=date(2026, 4, 1))

        assert compute_planned_completion_date(project=project) == date(2026, 4, 1)

    def test_missing_duration_counts_as_zero(self):
        project = ProjectSchedule(
            start_date=date(2026, 1, 1),
            extensions=(Extension(id="e1", days=10),),
        )

        assert compute_planned_completion_date(project=project) == date(2026, 1, 10)

    @pytest.mark.parametrize(
        "duration, extension_days",
        [
            (99_999_999, 0),
            (30, 1_000_000_000),
            (3_000_000, 0),
            (-3_000_000, 0),
        ],
    )
    def test_out_of_calendar_day_count_is_unknown(self, duration, extension_days, captured_logs):
        project = ProjectSchedule(
            start_date=date(2026, 1, 1),
            contract_duration=duration,
            extensions=(Extension(id="e1", days=extension_days),),
        )

        assert compute_planned_completion_date(project=project) is None
        assert any(
            r["message"] == "planned_completion_out_of_range" for r in captured_logs()
        )


class TestEffectiveSchedule:
    """Tests for build_effective_schedule."""

    def test_synthetic_anchor_injection(self):
        project = ProjectSchedule(
            start_date=date(2026, 1, 1),
            schedule_data=(_point(date(2026, 1, 15), 40),),
        )

        points = build_effective_schedule(
            project=project, planned_completion_date=date(2026, 1, 30),
        )

        assert [(p.point_date, p.progress) for p in points] == [
            (date(2026, 1, 1), Decimal("0")),
            (date(2026, 1, 15), Decimal("40")),
            (date(2026, 1, 30), Decimal("100")),
        ]

    def test_no_duplicate_anchor_when_checkpoint_on_start_date(self):
        project = ProjectSchedule(
            start_date=date(2026, 1, 1),
            schedule_data=(_point(date(2026, 1, 1), 5), _point(date(2026, 1, 30), 100)),
        )

        points = build_effective_schedule(
            project=project, planned_completion_date=date(2026, 1, 30),
        )

        assert len(points) == 2
        assert points[0].progress == Decimal("5")

    def test_unsorted_input_is_sorted(self):
        project = ProjectSchedule(
            start_date=date(2026, 1, 1),
            schedule_data=(_point(date(2026, 1, 20), 60), _point(date(2026, 1, 10), 30)),
        )

        points = build_effective_schedule(project=project, planned_completion_date=None)

        assert [p.point_date for p in points] == [
            date(2026, 1, 1), date(2026, 1, 10), date(2026, 1, 20),
        ]

    def test_duplicate_dates_keep_source_order(self):
        project = ProjectSchedule(
            start_date=date(2026, 1, 1),
            schedule_data=(_point(date(2026, 1, 10), 30), _point(date(2026, 1, 10), 40)),
        )

        points = build_effective_schedule(
            project=project, planned_completion_date=date(2026, 1, 30),
        )

        assert [p.progress for p in points] == [
            Decimal("0"), Decimal("30"), Decimal("40"), Decimal("100"),
        ]

    def test_unknown_dates_add_no_anchors(self):
        project = ProjectSchedule(schedule_data=(_point(date(2026, 1, 10), 30),))

        points = build_effective_schedule(project=project, planned_completion_date=None)

        assert points == (_point(date(2026, 1, 10), 30),)

    def test_input_not_mutated(self):
        data = (_point(date(2026, 1, 20), 60), _point(date(2026, 1, 10), 30))
        project = ProjectSchedule(start_date=date(2026, 1, 1), schedule_data=data)

        build_effective_schedule(project=project, planned_completion_date=date(2026, 1, 30))

        assert project.schedule_data == data


class TestPlannedProgress:
    """Tests for interpolation of planned progress."""

    def setup_method(self):
        self.schedule = (
            _point(D0, 0),
            _point(D0 + timedelta(days=10), 50),
            _point(D0 + timedelta(days=20), 100),
        )

    def test_midpoint_of_first_segment(self):
        result = planned_progress_as_of(schedule=self.schedule, as_of_date=D0 + timedelta(days=5))
        assert result == Decimal("25.0")

    def test_midpoint_of_second_segment(self):
        result = planned_progress_as_of(schedule=self.schedule, as_of_date=D0 + timedelta(days=15))
        assert result == Decimal("75.0")

    def test_on_first_checkpoint(self):
        assert planned_progress_as_of(schedule=self.schedule, as_of_date=D0) == Decimal("0")

    def test_no_extrapolation_before_start(self):
        result = planned_progress_as_of(schedule=self.schedule, as_of_date=D0 - timedelta(days=30))
        assert result == Decimal("0")

    def test_clamped_after_end(self):
        result = planned_progress_as_of(schedule=self.schedule, as_of_date=D0 + timedelta(days=90))
        assert result == Decimal("100")

    def test_empty_schedule_is_zero(self):
        assert planned_progress_as_of(schedule=(), as_of_date=D0) == Decimal("0")

    def test_display_rounding_one_place(self):
        schedule = (_point(D0, 0), _point(D0 + timedelta(days=3), 10))

        assert interpolate_planned_progress(schedule, D0 + timedelta(days=1)) == (
            Decimal("10") / Decimal("3")
        )
        assert planned_progress_as_of(
            schedule=schedule, as_of_date=D0 + timedelta(days=1),
        ) == Decimal("3.3")

    def test_duplicate_dates_first_match_wins(self):
        schedule = (
            _point(D0, 0),
            _point(D0 + timedelta(days=9), 30),
            _point(D0 + timedelta(days=9), 40),
            _point(D0 + timedelta(days=29), 100),
        )

        assert planned_progress_as_of(
            schedule=schedule, as_of_date=D0 + timedelta(days=9),
        ) == Decimal("30")
        # past the duplicates, the later of the two starts the next segment
        assert planned_progress_as_of(
            schedule=schedule, as_of_date=D0 + timedelta(days=11),
        ) == Decimal("46.0")


class TestActualProgress:
    """Tests for latest_actual_progress and actual_progress_on."""

    def test_first_reporting_entry_wins(self):
        logs = [
            ProgressLog(log_date=date(2026, 1, 18), actual_progress=None),
            ProgressLog(log_date=date(2026, 1, 17), actual_progress="35%", log_entry_id="b"),
            ProgressLog(log_date=date(2026, 1, 10), actual_progress="20"),
        ]

        result = latest_actual_progress(log_entries=logs)

        assert result.has_data is True
        assert result.value == Decimal("35")
        assert result.log_date == date(2026, 1, 17)
        assert result.log_entry_id == "b"

    def test_blank_string_is_not_reported(self):
        logs = [
            ProgressLog(log_date=date(2026, 1, 18), actual_progress="  "),
            ProgressLog(log_date=date(2026, 1, 10), actual_progress="20"),
        ]

        assert latest_actual_progress(log_entries=logs).value == Decimal("20")

    def test_unparseable_value_counts_as_zero_with_data(self):
        logs = [ProgressLog(log_date=date(2026, 1, 18), actual_progress="about half")]

        result = latest_actual_progress(log_entries=logs)

        assert result.has_data is True
        assert result.value == Decimal("0")

    def test_no_reports_is_no_data(self):
        logs = [ProgressLog(log_date=date(2026, 1, 18))]

        result = latest_actual_progress(log_entries=logs)

        assert result == ActualProgress.no_data()
        assert result.has_data is False

    def test_same_date_first_in_supplied_order_wins(self):
        logs = [
            ProgressLog(log_date=date(2026, 1, 18), actual_progress="30"),
            ProgressLog(log_date=date(2026, 1, 18), actual_progress="31"),
        ]

        assert latest_actual_progress(log_entries=logs).value == Decimal("30")

    def test_actual_progress_on_exact_date(self):
        logs = [
            ProgressLog(log_date=date(2026, 1, 20), actual_progress="38"),
            ProgressLog(log_date=date(2026, 1, 18), actual_progress="35"),
        ]

        assert actual_progress_on(logs, date(2026, 1, 18)).value == Decimal("35")
        assert actual_progress_on(logs, date(2026, 1, 19)).has_data is False


class TestRemainingDays:
    """Tests for remaining_days."""

    def test_future_completion(self):
        assert remaining_days(date(2026, 1, 30), date(2026, 1, 20)) == 10

    def test_completion_today(self):
        assert remaining_days(date(2026, 1, 30), date(2026, 1, 30)) == 0

    def test_overrun_is_negative(self):
        assert remaining_days(date(2026, 1, 30), date(2026, 2, 4)) == -5

    def test_unknown_completion(self):
        assert remaining_days(None, date(2026, 1, 20)) is None


class TestReconcileProgress:
    """Tests for the one-pass reconciliation snapshot."""

    def setup_method(self):
        self.project = ProjectSchedule(
            start_date=date(2026, 1, 1),
            contract_duration=30,
            extensions=(Extension(id="e1", days=10),),
            schedule_data=(_point(date(2026, 1, 15), 40),),
        )
        self.logs = [
            ProgressLog(log_date=date(2026, 1, 20), actual_progress="38"),
            ProgressLog(log_date=date(2026, 1, 10), actual_progress="20"),
        ]

    def test_snapshot_fields(self):
        snapshot = reconcile_progress(
            project=self.project, log_entries=self.logs, as_of_date=date(2026, 1, 20),
        )

        assert snapshot.planned_completion_date == date(2026, 2, 9)
        assert snapshot.total_extension_days == 10
        assert len(snapshot.effective_schedule) == 3
        # 40 + 60 * 5 / 25
        assert snapshot.planned_progress == Decimal("52.0")
        assert snapshot.actual.value == Decimal("38")
        assert snapshot.actual_today.value == Decimal("38")
        assert snapshot.remaining_days == 20
        assert snapshot.is_overrun is False
        assert snapshot.schedule_variance == Decimal("-14.0")

    def test_overrun_snapshot(self):
        snapshot = reconcile_progress(
            project=self.project, log_entries=[], as_of_date=date(2026, 3, 1),
        )

        assert snapshot.remaining_days == -20
        assert snapshot.is_overrun is True
        assert snapshot.planned_progress == Decimal("100")
        assert snapshot.actual.has_data is False
        assert snapshot.schedule_variance is None

    def test_unknown_start_date_degrades(self):
        snapshot = reconcile_progress(
            project=ProjectSchedule(), log_entries=[], as_of_date=date(2026, 1, 20),
        )

        assert snapshot.planned_completion_date is None
        assert snapshot.remaining_days is None
        assert snapshot.planned_progress == Decimal("0")
        assert snapshot.effective_schedule == ()

    def test_idempotent(self):
        first = reconcile_progress(
            project=self.project, log_entries=self.logs, as_of_date=date(2026, 1, 20),
        )
        second = reconcile_progress(
            project=self.project, log_entries=self.logs, as_of_date=date(2026, 1, 20),
        )

        assert first == second

    def test_emits_reconciled_event(self, captured_logs):
        reconcile_progress(
            project=self.project, log_entries=self.logs, as_of_date=date(2026, 1, 20),
        )

        records = [r for r in captured_logs() if r["message"] == "progress_reconciled"]
        assert len(records) == 1
        assert records[0]["planned_completion_date"] == "2026-02-09"
        assert records[0]["remaining_days"] == 20

    def test_mistyped_duration_degrades_to_unknown(self):
        project = ProjectSchedule(start_date=date(2026, 1, 1), contract_duration=99_999_999)

        snapshot = reconcile_progress(project=project, log_entries=self.logs, as_of_date=date(2026, 1, 20))

        assert snapshot.planned_completion_date is None
        assert snapshot.remaining_days is None
        assert snapshot.planned_progress == Decimal("0")
        assert snapshot.actual.value == Decimal("38")

    def test_oversized_checkpoint_progress_does_not_raise(self):
        project = ProjectSchedule(
            start_date=date(2026, 1, 1),
            contract_duration=30,
            schedule_data=(_point(date(2026, 1, 5), "1e40"),),
        )

        snapshot = reconcile_progress(project=project, log_entries=[], as_of_date=date(2026, 1, 5))

        assert snapshot.planned_progress == Decimal("0.0")
