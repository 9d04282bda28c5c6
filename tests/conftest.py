"""Pytest configuration and fixtures for the Jira Report tests."""

from datetime import date, datetime, timezone
from typing import Any, Dict

import pytest

from jira_report.core.config_manager import ConfigManager
from jira_report.core.models import Issue


@pytest.fixture
def today():
    """A fixed Wednesday; its ISO week starts on Monday 2026-10-12."""
    return date(2026, 10, 14)


@pytest.fixture
def make_issue():
    """Factory for Issue objects with sensible defaults."""

    def _make(key: str = "TEST-1", **overrides: Any) -> Issue:
        values: Dict[str, Any] = {
            "key": key,
            "issue_type": "Task",
            "summary": f"Summary of {key}",
            "status": "To Do",
            "description": "Plain description",
            "due_date": None,
            "updated": datetime(2026, 10, 13, 9, 30, tzinfo=timezone.utc),
            "created": datetime(2026, 10, 1, 8, 0, tzinfo=timezone.utc),
            "assignee": "John Doe",
            "parent_key": None,
            "epic_key": None,
        }
        values.update(overrides)
        return Issue(**values)

    return _make


@pytest.fixture
def sample_adf_description():
    """Atlassian Document Format description."""
    return {
        "type": "doc",
        "version": 1,
        "content": [
            {
                "type": "paragraph",
                "content": [
                    {"type": "text", "text": "Users cannot log in"},
                    {"type": "text", "text": "with SSO."},
                ],
            },
            {
                "type": "bulletList",
                "content": [
                    {
                        "type": "listItem",
                        "content": [
                            {
                                "type": "paragraph",
                                "content": [{"type": "text", "text": "Affects Safari"}],
                            }
                        ],
                    }
                ],
            },
        ],
    }


@pytest.fixture
def sample_raw_issue(sample_adf_description):
    """One element of a Jira search response ``issues`` array."""
    return {
        "id": "10001",
        "key": "TEST-123",
        "fields": {
            "summary": "Fix authentication bug",
            "issuetype": {"name": "Story"},
            "status": {"name": "In Progress"},
            "description": sample_adf_description,
            "duedate": "2026-10-16",
            "updated": "2026-10-13T14:30:00.000+0000",
            "created": "2026-10-01T10:00:00.000+0000",
            "assignee": {"displayName": "Jane Smith"},
            "parent": {"key": "TEST-100"},
        },
    }


@pytest.fixture
def jira_env():
    """Environment with all required settings."""
    return {
        "JIRA_URL": "https://test-company.atlassian.net/",
        "JIRA_USERNAME": "test.user@company.com",
        "JIRA_API_TOKEN": "test_api_token_12345",
        "JIRA_PROJECT": "TEST",
    }


@pytest.fixture
def config_manager(jira_env, tmp_path):
    """Configuration manager built from ``jira_env`` writing into ``tmp_path``."""
    env = dict(jira_env, JIRA_REPORT_OUTPUT_DIR=str(tmp_path))
    return ConfigManager(environ=env, load_env_file=False)


@pytest.fixture(autouse=True)
def setup_test_logging():
    """Setup logging for tests."""
    import logging

    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Suppress some noisy loggers during tests
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("reportlab").setLevel(logging.WARNING)
