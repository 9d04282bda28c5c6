"""Input validation utilities for security and data integrity."""

import html
import re
import unicodedata
from urllib.parse import urlparse

from .exceptions import ValidationError


class InputValidator:
    """Secure input validation and sanitization."""

    # Dangerous patterns for JQL injection prevention
    DANGEROUS_JQL_PATTERNS = [
        r";\s*DROP\s+TABLE",
        r";\s*DELETE\s+FROM",
        r";\s*UPDATE\s+SET",
        r"<script",
        r"javascript:",
        r"vbscript:",
        r"eval\s*\(",
        r"expression\s*\(",
    ]

    # Self-hosted Jira Server instances are often plain HTTP on intranets
    VALID_SCHEMES = ["https", "http"]

    @staticmethod
    def validate_url(url: str) -> bool:
        """Validate URL format and security."""
        if not url:
            return False

        try:
            parsed = urlparse(url)

            if parsed.scheme not in InputValidator.VALID_SCHEMES:
                raise ValidationError(
                    f"Only HTTP(S) URLs allowed, got: {parsed.scheme or 'none'}"
                )

            if not parsed.hostname:
                raise ValidationError("URL must have a valid hostname")

            if not re.match(
                r"^[a-zA-Z0-9]([a-zA-Z0-9-]*[a-zA-Z0-9])?(\.[a-zA-Z0-9]([a-zA-Z0-9-]*[a-zA-Z0-9])?)*$",
                parsed.hostname,
            ):
                raise ValidationError("Invalid hostname format")

            return True

        except ValidationError:
            raise
        except Exception as e:
            raise ValidationError(f"Invalid URL format: {e}")

    @staticmethod
    def validate_jira_url(url: str) -> bool:
        """Validate Jira URL specifically."""
        if not InputValidator.validate_url(url):
            raise ValidationError("Jira URL cannot be empty")

        parsed = urlparse(url)
        if parsed.query or parsed.fragment:
            raise ValidationError("Jira URL must not contain a query or fragment")

        return True

    @staticmethod
    def validate_project_key(project_key: str) -> bool:
        """Validate a Jira project key (e.g. ``PROJ``)."""
        if not project_key:
            raise ValidationError("Project key cannot be empty")

        if not re.match(r"^[A-Za-z][A-Za-z0-9_]{0,254}$", project_key):
            raise ValidationError(f"Invalid project key: {project_key}")

        return True

    @staticmethod
    def validate_jira_query(query: str) -> bool:
        """Reject JQL carrying script or SQL injection patterns."""
        if not query:
            return False

        for pattern in InputValidator.DANGEROUS_JQL_PATTERNS:
            if re.search(pattern, query, re.IGNORECASE):
                raise ValidationError(f"Query contains dangerous pattern: {pattern}")

        return True

    @staticmethod
    def sanitize_text(text: str) -> str:
        """Sanitize text for use inside reportlab paragraph markup."""
        if not text:
            return ""

        text = text.replace("\x00", "")

        # Paragraph text is parsed as XML
        text = html.escape(text)

        text = unicodedata.normalize("NFKC", text)

        # Remove control characters except newlines and tabs
        text = re.sub(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]", "", text)

        return text.strip()
