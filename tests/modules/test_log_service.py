"""
Tests for LogService.

Covers listing order (newest date first, insertion order within a date),
edits, the calendar view, issue filtering and the review workflow.
"""

from datetime import date
from uuid import uuid4

import pytest

from sitelog_kernel.exceptions import (
    InvalidLogStatusTransitionError,
    LogEntryNotFoundError,
    ProjectNotFoundError,
)
from sitelog_modules.logs.models import LogStatus
from sitelog_modules.logs.service import LogService
from sitelog_modules.project.service import ProjectService


@pytest.fixture
def log_service(session, deterministic_clock, progress_config):
    return LogService(session, clock=deterministic_clock, config=progress_config)


@pytest.fixture
def project_id(session, deterministic_clock, progress_config, test_actor_id):
    service = ProjectService(session, clock=deterministic_clock, config=progress_config)
    return service.create_project(name="Harbor Wall", actor_id=test_actor_id).id


class TestAddLog:

    def test_defaults_to_clock_day(self, log_service, project_id, test_actor_id):
        entry = log_service.add_log(project_id, test_actor_id, weather="sunny")

        assert entry.log_date == date(2026, 1, 20)
        assert entry.status == LogStatus.DRAFT.value
        assert entry.actual_progress is None

    def test_progress_kept_as_reported(self, log_service, project_id, test_actor_id):
        entry = log_service.add_log(project_id, test_actor_id, actual_progress=" 35% ")

        assert log_service.get_log(entry.id).actual_progress == "35%"

    def test_unknown_project(self, log_service, test_actor_id):
        with pytest.raises(ProjectNotFoundError):
            log_service.add_log(uuid4(), test_actor_id)

    def test_logs_event_with_context(self, log_service, project_id, test_actor_id, captured_logs):
        entry = log_service.add_log(project_id, test_actor_id, actual_progress="10")

        events = [r for r in captured_logs() if r["message"] == "log_entry_created"]
        assert events[0]["log_entry_id"] == str(entry.id)
        assert events[0]["has_actual_progress"] is True


class TestListing:

    def test_newest_first_then_insertion_order(self, log_service, project_id, test_actor_id):
        first = log_service.add_log(project_id, test_actor_id, log_date=date(2026, 1, 10), content="a")
        second = log_service.add_log(project_id, test_actor_id, log_date=date(2026, 1, 10), content="b")
        newest = log_service.add_log(project_id, test_actor_id, log_date=date(2026, 1, 12), content="c")

        listed = log_service.logs_for_project(project_id)

        assert [e.id for e in listed] == [newest.id, first.id, second.id]

    def test_logs_on_date(self, log_service, project_id, test_actor_id):
        log_service.add_log(project_id, test_actor_id, log_date=date(2026, 1, 10))
        log_service.add_log(project_id, test_actor_id, log_date=date(2026, 1, 11))

        assert len(log_service.logs_on_date(date(2026, 1, 10))) == 1
        assert len(log_service.logs_on_date(date(2026, 1, 10), project_id=project_id)) == 1
        assert log_service.logs_on_date(date(2026, 1, 10), project_id=uuid4()) == []

    def test_issue_logs(self, log_service, project_id, test_actor_id):
        flagged = log_service.add_log(project_id, test_actor_id, status=LogStatus.ISSUE)
        described = log_service.add_log(project_id, test_actor_id, issues="Rebar delivery late")
        log_service.add_log(project_id, test_actor_id, issues="   ")

        ids = {e.id for e in log_service.issue_logs(project_id)}

        assert ids == {flagged.id, described.id}


class TestEditing:

    def test_update_fields(self, log_service, project_id, test_actor_id):
        entry = log_service.add_log(project_id, test_actor_id, actual_progress="10")

        updated = log_service.update_log(entry.id, test_actor_id, actual_progress="", content="poured slab")

        assert updated.actual_progress is None
        assert updated.content == "poured slab"

    def test_status_not_editable(self, log_service, project_id, test_actor_id):
        entry = log_service.add_log(project_id, test_actor_id)

        with pytest.raises(ValueError):
            log_service.update_log(entry.id, test_actor_id, status="approved")

    def test_delete(self, log_service, project_id, test_actor_id):
        entry = log_service.add_log(project_id, test_actor_id)

        log_service.delete_log(entry.id, test_actor_id)

        with pytest.raises(LogEntryNotFoundError):
            log_service.get_log(entry.id)


class TestReviewWorkflow:

    def test_submit_and_approve(self, log_service, project_id, test_actor_id):
        entry = log_service.add_log(project_id, test_actor_id)

        assert log_service.submit_for_review(entry.id, test_actor_id).status == "pending_review"
        assert log_service.approve(entry.id, test_actor_id).status == "approved"

    def test_reject_and_resubmit(self, log_service, project_id, test_actor_id):
        entry = log_service.add_log(project_id, test_actor_id)
        log_service.submit_for_review(entry.id, test_actor_id)

        assert log_service.reject(entry.id, test_actor_id).status == "rejected"
        assert log_service.submit_for_review(entry.id, test_actor_id).status == "pending_review"

    def test_cannot_approve_draft(self, log_service, project_id, test_actor_id):
        entry = log_service.add_log(project_id, test_actor_id)

        with pytest.raises(InvalidLogStatusTransitionError) as exc_info:
            log_service.approve(entry.id, test_actor_id)

        assert exc_info.value.from_status == "draft"
        assert exc_info.value.to_status == "approved"
        assert log_service.get_log(entry.id).status == "draft"

    def test_approved_is_final(self, log_service, project_id, test_actor_id):
        entry = log_service.add_log(project_id, test_actor_id)
        log_service.submit_for_review(entry.id, test_actor_id)
        log_service.approve(entry.id, test_actor_id)

        with pytest.raises(InvalidLogStatusTransitionError):
            log_service.submit_for_review(entry.id, test_actor_id)
