"""Custom exceptions for Jira Report."""

from typing import Any, Dict, Optional


class JiraReportError(Exception):
    """Base exception for Jira Report."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class AuthenticationError(JiraReportError):
    """Authentication failures."""


class ValidationError(JiraReportError):
    """Input validation errors."""


class ConfigurationError(JiraReportError):
    """Configuration-related errors."""


class IntegrationError(JiraReportError):
    """External integration errors."""


class JiraIntegrationError(IntegrationError):
    """Jira-specific integration errors."""


class ExportError(JiraReportError):
    """Report rendering and export errors."""
