"""Configuration management backed by environment variables and JSON overrides."""

import json
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from dotenv import load_dotenv

from ..utils.exceptions import ConfigurationError, ValidationError
from ..utils.logging_config import get_logger
from ..utils.validators import InputValidator

DEFAULT_DEV_STATUSES = [
    "In Progress",
    "Development",
    "In Development",
    "Coding",
    "Implementation",
]

# Environment variable names for the required settings
REQUIRED_ENV_VARS = {
    "url": "JIRA_URL",
    "username": "JIRA_USERNAME",
    "api_token": "JIRA_API_TOKEN",
    "project": "JIRA_PROJECT",
}


@dataclass
class JiraConfig:
    """Jira connection settings."""

    url: str = ""
    username: str = ""
    api_token: str = ""
    project: str = ""
    max_results: int = 100
    timeout: int = 30


@dataclass
class ReportConfig:
    """Report generation settings."""

    output_dir: str = "."
    dev_report_file: str = "Jira_Development_Report.pdf"
    due_report_file: str = "Jira_Issues_Report.pdf"
    dev_statuses: List[str] = field(default_factory=lambda: list(DEFAULT_DEV_STATUSES))
    lookback_days: int = 7
    description_limit: int = 200
    log_level: str = "INFO"

    @property
    def dev_report_path(self) -> Path:
        return Path(self.output_dir) / self.dev_report_file

    @property
    def due_report_path(self) -> Path:
        return Path(self.output_dir) / self.due_report_file


@dataclass
class Configuration:
    """Main configuration container."""

    jira: JiraConfig = field(default_factory=JiraConfig)
    report: ReportConfig = field(default_factory=ReportConfig)


class ConfigManager:
    """Loads configuration from an optional JSON file and the environment.

    Precedence, lowest to highest: dataclass defaults, JSON config file,
    environment variables (including those loaded from ``.env``).
    """

    def __init__(
        self,
        config_file: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
        load_env_file: bool = True,
    ):
        self.logger = get_logger(__name__)
        self.config_file = Path(config_file) if config_file else None

        if load_env_file:
            load_dotenv()

        self._environ = environ if environ is not None else os.environ
        self._config = Configuration()
        self._load_configuration()

    def _load_configuration(self) -> None:
        """Load configuration from file, then apply environment overrides."""
        if self.config_file:
            try:
                with open(self.config_file, "r", encoding="utf-8") as f:
                    config_data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                self.logger.error(f"Failed to load configuration: {e}")
                raise ConfigurationError(f"Failed to load configuration: {e}")

            self._update_config_from_dict(config_data)
            self.logger.info(f"Configuration loaded from {self.config_file}")

        self._apply_environment()

    def _update_config_from_dict(self, config_data: Dict[str, Any]) -> None:
        """Update configuration object from dictionary."""
        if not isinstance(config_data, dict):
            raise ConfigurationError("Configuration must be a JSON object")

        try:
            if "jira" in config_data:
                jira_data = dict(config_data["jira"])
                # Secrets only come from the environment
                jira_data.pop("api_token", None)
                self._config.jira = JiraConfig(**jira_data)

            if "report" in config_data:
                self._config.report = ReportConfig(**config_data["report"])

        except TypeError as e:
            raise ConfigurationError(f"Failed to update configuration: {e}")

    def _apply_environment(self) -> None:
        """Apply environment variable overrides."""
        env = self._environ
        jira = self._config.jira
        report = self._config.report

        for attr, var in REQUIRED_ENV_VARS.items():
            value = env.get(var, "").strip()
            if value:
                setattr(jira, attr, value)

        jira.url = jira.url.rstrip("/")
        jira.max_results = self._env_int("JIRA_MAX_RESULTS", jira.max_results)
        jira.timeout = self._env_int("JIRA_TIMEOUT", jira.timeout)

        output_dir = env.get("JIRA_REPORT_OUTPUT_DIR", "").strip()
        if output_dir:
            report.output_dir = output_dir

        log_level = env.get("JIRA_REPORT_LOG_LEVEL", "").strip()
        if log_level:
            report.log_level = log_level.upper()

        dev_statuses = env.get("JIRA_DEV_STATUSES", "").strip()
        if dev_statuses:
            report.dev_statuses = [s.strip() for s in dev_statuses.split(",") if s.strip()]

    def _env_int(self, name: str, default: int) -> int:
        raw = self._environ.get(name, "").strip()
        if not raw:
            return default
        try:
            value = int(raw)
        except ValueError:
            raise ConfigurationError(f"{name} must be an integer, got {raw!r}")
        if value <= 0:
            raise ConfigurationError(f"{name} must be positive, got {value}")
        return value

    def get_jira_config(self) -> JiraConfig:
        """Get Jira configuration."""
        return self._config.jira

    def get_report_config(self) -> ReportConfig:
        """Get report configuration."""
        return self._config.report

    def update_report_config(self, **kwargs: Any) -> None:
        """Update report configuration (used for CLI overrides)."""
        for key, value in kwargs.items():
            if value is None:
                continue
            if not hasattr(self._config.report, key):
                raise ConfigurationError(f"Unknown report setting: {key}")
            setattr(self._config.report, key, value)

    def missing_required(self) -> List[str]:
        """Return the environment variable names of missing required settings."""
        jira = self._config.jira
        return [var for attr, var in REQUIRED_ENV_VARS.items() if not getattr(jira, attr)]

    def validate_configuration(self) -> bool:
        """Validate current configuration."""
        try:
            jira = self._config.jira
            InputValidator.validate_jira_url(jira.url)
            InputValidator.validate_project_key(jira.project)

            self.logger.info("Configuration validation passed")
            return True

        except ValidationError as e:
            self.logger.error(f"Configuration validation failed: {e}")
            return False

    def as_dict(self) -> Dict[str, Any]:
        """Configuration as a dictionary with secrets removed."""
        config_dict = asdict(self._config)
        config_dict["jira"].pop("api_token", None)
        return config_dict
