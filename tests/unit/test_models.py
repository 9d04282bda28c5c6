"""Unit tests for the Issue model."""

from datetime import date, datetime, timezone

import pytest

from jira_report.core.models import Issue, parse_jira_date, parse_jira_datetime


class TestDateParsing:
    """Test Jira date and timestamp parsing."""

    def test_parse_due_date(self):
        assert parse_jira_date("2026-10-16") == date(2026, 10, 16)

    @pytest.mark.parametrize("value", [None, "", "not-a-date"])
    def test_parse_due_date_invalid(self, value):
        assert parse_jira_date(value) is None

    def test_parse_jira_timestamp(self):
        result = parse_jira_datetime("2026-10-13T14:30:00.000+0000")
        assert result == datetime(2026, 10, 13, 14, 30, tzinfo=timezone.utc)

    def test_parse_iso_timestamp_with_z(self):
        result = parse_jira_datetime("2026-10-13T14:30:00Z")
        assert result == datetime(2026, 10, 13, 14, 30, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [None, "", "yesterday"])
    def test_parse_timestamp_invalid(self, value):
        assert parse_jira_datetime(value) is None


class TestIssueFromApi:
    """Test building issues from search results."""

    def test_all_fields(self, sample_raw_issue, sample_adf_description):
        issue = Issue.from_api(sample_raw_issue)

        assert issue.key == "TEST-123"
        assert issue.issue_type == "Story"
        assert issue.summary == "Fix authentication bug"
        assert issue.status == "In Progress"
        assert issue.description == sample_adf_description
        assert issue.due_date == date(2026, 10, 16)
        assert issue.updated == datetime(2026, 10, 13, 14, 30, tzinfo=timezone.utc)
        assert issue.assignee == "Jane Smith"
        assert issue.parent_key == "TEST-100"
        assert issue.epic_key is None
        assert issue.is_epic is False

    def test_missing_fields_use_defaults(self):
        issue = Issue.from_api({"key": "TEST-9", "fields": {}})

        assert issue.issue_type == "Unknown"
        assert issue.summary == "No summary"
        assert issue.status == "Unknown Status"
        assert issue.description is None
        assert issue.due_date is None
        assert issue.assignee is None
        assert issue.parent_key is None

    def test_null_assignee_and_fields(self):
        issue = Issue.from_api({"key": "TEST-8", "fields": {"assignee": None}})
        assert issue.assignee is None

        issue = Issue.from_api({"key": "TEST-7"})
        assert issue.summary == "No summary"

    def test_legacy_epic_link(self):
        raw = {"key": "TEST-6", "fields": {"epic": {"key": "TEST-1"}}}
        assert Issue.from_api(raw).epic_key == "TEST-1"

    def test_epic_type(self):
        raw = {"key": "TEST-1", "fields": {"issuetype": {"name": "Epic"}}}
        assert Issue.from_api(raw).is_epic is True

    def test_browse_url(self, make_issue):
        issue = make_issue("PROJ-42")
        assert issue.browse_url("https://x.atlassian.net/") == (
            "https://x.atlassian.net/browse/PROJ-42"
        )

    def test_issue_is_immutable(self, make_issue):
        issue = make_issue()
        with pytest.raises(AttributeError):
            issue.status = "Done"
