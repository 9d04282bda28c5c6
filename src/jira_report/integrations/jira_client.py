"""Jira integration client for fetching report issues."""

from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Sequence

from jira import JIRA, JIRAError
from requests.exceptions import RequestException

from ..core.config_manager import DEFAULT_DEV_STATUSES, JiraConfig, ReportConfig
from ..core.models import Issue
from ..utils.exceptions import AuthenticationError, JiraIntegrationError, ValidationError
from ..utils.logging_config import get_logger, get_security_logger
from ..utils.validators import InputValidator

ALLOWED_ISSUE_TYPES = ("Epic", "Story", "Task", "Bug")

SEARCH_FIELDS = (
    "summary,duedate,assignee,description,issuetype,key,parent,epic,status,created,updated"
)


def _quote_jql(value: str) -> str:
    """Quote a value for use in a JQL list."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class JiraClient:
    """Jira API client that searches issues for the reports."""

    def __init__(
        self,
        url: str,
        username: str,
        api_token: str,
        project: str,
        dev_statuses: Optional[Sequence[str]] = None,
        max_results: int = 100,
        timeout: int = 30,
        lookback_days: int = 7,
    ):
        self.logger = get_logger(__name__)
        self.security_logger = get_security_logger()

        InputValidator.validate_jira_url(url)
        InputValidator.validate_project_key(project)
        if not username or not api_token:
            raise ValidationError("Jira username and API token are required")

        self.url = url.rstrip("/")
        self.username = username
        self.api_token = api_token
        self.project = project
        self.dev_statuses = list(dev_statuses or DEFAULT_DEV_STATUSES)
        self.max_results = max_results
        self.timeout = timeout
        self.lookback_days = lookback_days

        self._jira_client: Optional[JIRA] = None

    @classmethod
    def from_config(cls, jira_config: JiraConfig, report_config: ReportConfig) -> "JiraClient":
        return cls(
            url=jira_config.url,
            username=jira_config.username,
            api_token=jira_config.api_token,
            project=jira_config.project,
            dev_statuses=report_config.dev_statuses,
            max_results=jira_config.max_results,
            timeout=jira_config.timeout,
            lookback_days=report_config.lookback_days,
        )

    def _get_client(self) -> JIRA:
        """Create the JIRA client on first use."""
        if self._jira_client is None:
            try:
                self._jira_client = JIRA(
                    server=self.url,
                    basic_auth=(self.username, self.api_token),
                    timeout=self.timeout,
                    get_server_info=False,
                    options={
                        "verify": True,
                        "check_update": False,
                        # v3 returns descriptions as Atlassian Document Format
                        "rest_api_version": "3",
                    },
                )
            except JIRAError as e:
                raise JiraIntegrationError(f"Failed to initialize Jira client: {e}")

            self.logger.info("Jira client initialized")

        return self._jira_client

    def build_jql(self, in_development_only: bool = False, today: Optional[date] = None) -> str:
        """Build the JQL for either the development or the due-date report."""
        jql = f"project = {self.project} AND issuetype in ({', '.join(ALLOWED_ISSUE_TYPES)})"

        if in_development_only:
            since = ((today or date.today()) - timedelta(days=self.lookback_days)).isoformat()
            statuses = ", ".join(_quote_jql(status) for status in self.dev_statuses)
            jql += f" AND status in ({statuses})"
            jql += f" AND (updated >= {since} OR created >= {since})"
        else:
            jql += " AND duedate IS NOT EMPTY"

        InputValidator.validate_jira_query(jql)
        return jql

    async def fetch_issues(self, in_development_only: bool = False) -> List[Issue]:
        """Fetch report issues; any failure is logged and yields an empty list."""
        try:
            self.logger.info("Fetching issues from Jira...")
            jql = self.build_jql(in_development_only)
            self.logger.info(f"JQL Query: {jql}")

            data = self._search(jql)
            issues = [Issue.from_api(raw) for raw in data.get("issues", [])]

            self.security_logger.log_api_request(
                service="jira",
                endpoint="search",
                method="GET",
                status_code=200,
                results_count=len(issues),
            )
            self.logger.info(f"Found {len(issues)} issues")
            return issues

        except AuthenticationError as e:
            self.logger.error(f"{e} (check JIRA_USERNAME and JIRA_API_TOKEN)")
            return []
        except Exception as e:
            self.logger.error(f"Error fetching Jira issues: {e}")
            return []

    def _search(self, jql: str) -> Dict[str, Any]:
        """Run a single search request and return the raw JSON payload."""
        try:
            result = self._get_client().search_issues(
                jql,
                maxResults=self.max_results,
                fields=SEARCH_FIELDS,
                expand="names",
                json_result=True,
            )
        except JIRAError as e:
            if e.status_code in (401, 403):
                self.security_logger.log_authentication_attempt(
                    service="jira", username=self.username, success=False, error=str(e)
                )
                raise AuthenticationError(f"Jira authentication failed: {e}")
            raise JiraIntegrationError(f"Jira query failed: {e}")
        except RequestException as e:
            raise JiraIntegrationError(f"Jira request failed: {e}")

        if not isinstance(result, dict):
            raise JiraIntegrationError("Unexpected search response from Jira")

        return result

    def close(self) -> None:
        """Close client connections."""
        if self._jira_client is not None:
            try:
                self._jira_client.close()
            except Exception as e:
                self.logger.error(f"Error closing Jira client: {e}")
            self._jira_client = None

        self.logger.info("Jira client closed")
