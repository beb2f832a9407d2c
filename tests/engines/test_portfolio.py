"""Tests for the dashboard portfolio counts."""

from sitelog_engines.portfolio import LogIssueInput, is_issue, summarize_portfolio


class TestPortfolioSummary:
    """Tests for summarize_portfolio."""

    def test_behind_versus_normal(self):
        summary = summarize_portfolio(
            project_statuses=["in_progress", "behind", None, "completed", "behind"],
            log_entries=[],
        )

        assert summary.behind_count == 2
        assert summary.normal_count == 3
        assert summary.project_count == 5

    def test_issue_by_status_or_text(self):
        logs = [
            LogIssueInput(status="issue"),
            LogIssueInput(status="approved", issues="crane inspection overdue"),
            LogIssueInput(status="approved", issues="   "),
            LogIssueInput(status="draft"),
        ]

        summary = summarize_portfolio(project_statuses=[], log_entries=logs)

        assert summary.issue_count == 2

    def test_configured_issue_statuses(self):
        entry = LogIssueInput(status="rejected")

        assert is_issue(entry) is False
        assert is_issue(entry, ("issue", "rejected")) is True

    def test_empty_portfolio(self):
        summary = summarize_portfolio(project_statuses=[], log_entries=[])

        assert (summary.normal_count, summary.behind_count, summary.issue_count) == (0, 0, 0)
