"""Unit tests for the Jira client."""

from datetime import date
from unittest.mock import Mock, patch

import pytest
from jira import JIRAError
from requests.exceptions import ConnectionError as RequestsConnectionError

from jira_report.core.config_manager import JiraConfig, ReportConfig
from jira_report.integrations.jira_client import SEARCH_FIELDS, JiraClient
from jira_report.utils.exceptions import (
    AuthenticationError,
    JiraIntegrationError,
    ValidationError,
)


@pytest.fixture
def client():
    """Client with test credentials."""
    return JiraClient(
        url="https://test-company.atlassian.net/",
        username="test.user@company.com",
        api_token="test_api_token_12345",
        project="TEST",
    )


@pytest.fixture
def mock_jira():
    """Patch the JIRA class used by the client."""
    with patch("jira_report.integrations.jira_client.JIRA") as mock_jira_class:
        instance = Mock()
        mock_jira_class.return_value = instance
        yield mock_jira_class, instance


class TestJiraClientInit:
    """Test client construction."""

    def test_initialization(self, client):
        assert client.url == "https://test-company.atlassian.net"
        assert client.project == "TEST"
        assert client.max_results == 100
        assert client.dev_statuses[0] == "In Progress"
        assert client._jira_client is None

    @pytest.mark.parametrize(
        "overrides",
        [
            {"url": "ftp://jira.example.com"},
            {"url": ""},
            {"project": "TEST; DROP"},
            {"api_token": ""},
            {"username": ""},
        ],
    )
    def test_invalid_settings_are_rejected(self, overrides):
        kwargs = {
            "url": "https://test-company.atlassian.net",
            "username": "user",
            "api_token": "test_api_token_12345",
            "project": "TEST",
        }
        kwargs.update(overrides)

        with pytest.raises(ValidationError):
            JiraClient(**kwargs)

    def test_from_config(self):
        jira_config = JiraConfig(
            url="https://jira.example.com",
            username="user",
            api_token="test_api_token_12345",
            project="PROJ",
            max_results=50,
            timeout=10,
        )
        report_config = ReportConfig(dev_statuses=["Coding"], lookback_days=3)

        client = JiraClient.from_config(jira_config, report_config)

        assert client.max_results == 50
        assert client.timeout == 10
        assert client.dev_statuses == ["Coding"]
        assert client.lookback_days == 3

    def test_lazy_client_creation(self, client, mock_jira):
        mock_jira_class, instance = mock_jira

        assert client._get_client() is instance
        assert client._get_client() is instance

        mock_jira_class.assert_called_once()
        kwargs = mock_jira_class.call_args.kwargs
        assert kwargs["server"] == "https://test-company.atlassian.net"
        assert kwargs["basic_auth"] == ("test.user@company.com", "test_api_token_12345")
        assert kwargs["get_server_info"] is False
        assert kwargs["options"]["rest_api_version"] == "3"


class TestBuildJql:
    """Test JQL construction."""

    def test_due_dates_query(self, client):
        assert client.build_jql() == (
            "project = TEST AND issuetype in (Epic, Story, Task, Bug)"
            " AND duedate IS NOT EMPTY"
        )

    def test_development_query(self, client):
        jql = client.build_jql(in_development_only=True, today=date(2026, 10, 14))

        assert jql == (
            "project = TEST AND issuetype in (Epic, Story, Task, Bug)"
            ' AND status in ("In Progress", "Development", "In Development",'
            ' "Coding", "Implementation")'
            " AND (updated >= 2026-10-07 OR created >= 2026-10-07)"
        )

    def test_custom_statuses_and_lookback(self):
        client = JiraClient(
            url="https://jira.example.com",
            username="user",
            api_token="test_api_token_12345",
            project="PROJ",
            dev_statuses=["Doing"],
            lookback_days=14,
        )

        jql = client.build_jql(in_development_only=True, today=date(2026, 10, 14))

        assert 'status in ("Doing")' in jql
        assert "updated >= 2026-09-30" in jql

    def test_statuses_with_any_characters_are_quoted(self):
        client = JiraClient(
            url="https://jira.example.com",
            username="user",
            api_token="secret",
            project="PROJ",
            dev_statuses=["En développement", "Code Review: Pending", 'Say "hi"'],
        )

        jql = client.build_jql(in_development_only=True, today=date(2026, 10, 14))

        assert (
            'status in ("En développement", "Code Review: Pending", "Say \\"hi\\"")'
            in jql
        )

    def test_short_credentials_are_accepted(self):
        client = JiraClient(
            url="https://jira.example.com",
            username="admin",
            api_token="p@ss!",
            project="PROJ",
        )

        assert client.api_token == "p@ss!"


class TestFetchCustomStatuses:
    """Test that configured statuses always reach Jira."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status",
        ["En développement", "Code Review: Pending", "Dev (WIP)?", 'Say "hi"'],
    )
    async def test_search_is_sent(self, mock_jira, sample_raw_issue, status):
        _, instance = mock_jira
        instance.search_issues.return_value = {"issues": [sample_raw_issue]}
        client = JiraClient(
            url="https://jira.example.com",
            username="user",
            api_token="test_api_token_12345",
            project="PROJ",
            dev_statuses=[status],
        )

        issues = await client.fetch_issues(in_development_only=True)

        assert len(issues) == 1
        instance.search_issues.assert_called_once()


class TestFetchIssues:
    """Test issue fetching and error handling."""

    @pytest.mark.asyncio
    async def test_fetch_parses_issues(self, client, mock_jira, sample_raw_issue):
        _, instance = mock_jira
        instance.search_issues.return_value = {"issues": [sample_raw_issue]}

        issues = await client.fetch_issues()

        assert [issue.key for issue in issues] == ["TEST-123"]
        instance.search_issues.assert_called_once()
        args, kwargs = instance.search_issues.call_args
        assert args[0].endswith("duedate IS NOT EMPTY")
        assert kwargs["maxResults"] == 100
        assert kwargs["fields"] == SEARCH_FIELDS
        assert kwargs["expand"] == "names"
        assert kwargs["json_result"] is True

    @pytest.mark.asyncio
    async def test_fetch_development_issues(self, client, mock_jira):
        _, instance = mock_jira
        instance.search_issues.return_value = {"issues": []}

        issues = await client.fetch_issues(in_development_only=True)

        assert issues == []
        assert "status in (" in instance.search_issues.call_args.args[0]

    @pytest.mark.asyncio
    async def test_missing_issues_key(self, client, mock_jira):
        _, instance = mock_jira
        instance.search_issues.return_value = {"total": 0}

        assert await client.fetch_issues() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            JIRAError(status_code=401, text="Unauthorized"),
            JIRAError(status_code=500, text="Server error"),
            RequestsConnectionError("Network unreachable"),
            RuntimeError("boom"),
        ],
    )
    async def test_errors_yield_empty_list(self, client, mock_jira, error):
        _, instance = mock_jira
        instance.search_issues.side_effect = error

        assert await client.fetch_issues() == []

    @pytest.mark.asyncio
    async def test_non_dict_response_yields_empty_list(self, client, mock_jira):
        _, instance = mock_jira
        instance.search_issues.return_value = ["unexpected"]

        assert await client.fetch_issues() == []


class TestSearchErrors:
    """Test the error mapping of a single search request."""

    @pytest.mark.parametrize("status_code", [401, 403])
    def test_auth_failures(self, client, mock_jira, status_code):
        _, instance = mock_jira
        instance.search_issues.side_effect = JIRAError(status_code=status_code)

        with patch.object(client.security_logger, "log_authentication_attempt") as log:
            with pytest.raises(AuthenticationError):
                client._search("project = TEST")

        log.assert_called_once()
        assert log.call_args.kwargs["success"] is False

    def test_other_jira_errors(self, client, mock_jira):
        _, instance = mock_jira
        instance.search_issues.side_effect = JIRAError(status_code=400, text="Bad JQL")

        with pytest.raises(JiraIntegrationError):
            client._search("project = TEST")

    def test_request_errors(self, client, mock_jira):
        _, instance = mock_jira
        instance.search_issues.side_effect = RequestsConnectionError("refused")

        with pytest.raises(JiraIntegrationError):
            client._search("project = TEST")


class TestClose:
    """Test client cleanup."""

    def test_close_releases_client(self, client, mock_jira):
        _, instance = mock_jira
        client._get_client()

        client.close()

        instance.close.assert_called_once()
        assert client._jira_client is None

    def test_close_swallows_close_errors(self, client, mock_jira):
        _, instance = mock_jira
        instance.close.side_effect = RuntimeError("already closed")
        client._get_client()

        client.close()

        assert client._jira_client is None

    def test_close_without_client(self, client):
        client.close()
