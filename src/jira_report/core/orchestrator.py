"""Report orchestrator: runs the development status and due-dates reports."""

import asyncio
import time
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Awaitable, Callable, List, Optional

from ..integrations.jira_client import JiraClient
from ..utils.exceptions import ExportError, JiraReportError
from ..utils.logging_config import get_logger
from .config_manager import ConfigManager
from .grouping import group_issues_by_week
from .report_renderer import ReportRenderer


class WorkflowStatus(Enum):
    """Workflow execution status."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class ReportOutcome:
    """Outcome of a single report."""

    name: str
    issue_count: int = 0
    output_path: Optional[Path] = None
    error_message: Optional[str] = None

    @property
    def generated(self) -> bool:
        return self.output_path is not None


@dataclass
class ReportRunResult:
    """Result of a full run."""

    status: WorkflowStatus
    reports: List[ReportOutcome] = field(default_factory=list)
    execution_time: float = 0.0
    error_message: Optional[str] = None

    @property
    def generated_files(self) -> List[Path]:
        return [r.output_path for r in self.reports if r.output_path is not None]


class ReportOrchestrator:
    """Sequences the two reports.

    The development status report always runs first. A failure in one
    report is logged and does not stop the other; only missing or invalid
    configuration fails the run.

    Example:
        ```python
        orchestrator = ReportOrchestrator(ConfigManager())
        result = asyncio.run(orchestrator.run())
        ```
    """

    def __init__(
        self,
        config_manager: ConfigManager,
        jira_client: Optional[JiraClient] = None,
        renderer: Optional[ReportRenderer] = None,
    ) -> None:
        self.config_manager = config_manager
        self.logger = get_logger(__name__)
        self.jira_client = jira_client
        self.renderer = renderer

    async def run(self, today: Optional[date] = None) -> ReportRunResult:
        """Validate configuration and generate both reports."""
        start_time = time.monotonic()
        result = ReportRunResult(status=WorkflowStatus.RUNNING)

        try:
            missing = self.config_manager.missing_required()
            if missing:
                self.logger.error(f"Missing Jira credentials: {', '.join(missing)}")
                result.status = WorkflowStatus.FAILED
                result.error_message = f"Missing configuration: {', '.join(missing)}"
                return result

            if not self.config_manager.validate_configuration():
                result.status = WorkflowStatus.FAILED
                result.error_message = "Invalid configuration"
                return result

            self._initialize()

            result.reports.append(
                await self._run_report("development", self.generate_dev_status_report, today)
            )
            result.reports.append(
                await self._run_report("due_dates", self.generate_due_dates_report, today)
            )
            result.status = WorkflowStatus.COMPLETED

        except JiraReportError as e:
            self.logger.error(f"Report run failed: {e}")
            result.status = WorkflowStatus.FAILED
            result.error_message = str(e)

        except Exception as e:
            self.logger.error(f"Error in main function: {e}", exc_info=True)
            result.status = WorkflowStatus.FAILED
            result.error_message = str(e)

        finally:
            self._cleanup()
            result.execution_time = time.monotonic() - start_time

        return result

    def _initialize(self) -> None:
        """Create the Jira client and renderer from configuration."""
        jira_config = self.config_manager.get_jira_config()
        report_config = self.config_manager.get_report_config()

        if self.jira_client is None:
            self.jira_client = JiraClient.from_config(jira_config, report_config)

        if self.renderer is None:
            self.renderer = ReportRenderer(
                base_url=jira_config.url,
                dev_statuses=report_config.dev_statuses,
                description_limit=report_config.description_limit,
            )

    async def _run_report(
        self,
        name: str,
        generate: Callable[[Optional[date]], Awaitable[ReportOutcome]],
        today: Optional[date],
    ) -> ReportOutcome:
        """Run one report; its errors are recorded on its outcome."""
        try:
            return await generate(today)
        except Exception as e:
            self.logger.error(f"Error in {name} report: {e}", exc_info=True)
            return ReportOutcome(name=name, error_message=str(e))

    def _cleanup(self) -> None:
        if self.jira_client is not None:
            self.jira_client.close()

    async def generate_dev_status_report(self, today: Optional[date] = None) -> ReportOutcome:
        """Fetch in-development issues and render the development report."""
        report_config = self.config_manager.get_report_config()
        outcome = ReportOutcome(name="development")

        issues = await self.jira_client.fetch_issues(in_development_only=True)
        outcome.issue_count = len(issues)

        if not issues:
            self.logger.info("No issues in development found for the last week.")
            return outcome

        await self._render(
            outcome,
            self.renderer.generate_dev_status_report,
            issues,
            report_config.dev_report_path,
            today=today,
            lookback_days=report_config.lookback_days,
        )
        return outcome

    async def generate_due_dates_report(self, today: Optional[date] = None) -> ReportOutcome:
        """Fetch issues with due dates and render the weekly report."""
        report_config = self.config_manager.get_report_config()
        outcome = ReportOutcome(name="due_dates")

        issues = await self.jira_client.fetch_issues()
        outcome.issue_count = len(issues)

        if not issues:
            self.logger.info("No issues with due dates found.")
            return outcome

        issues_by_week = group_issues_by_week(issues)
        await self._render(
            outcome,
            self.renderer.generate_due_dates_report,
            issues_by_week,
            report_config.due_report_path,
            today=today,
        )
        return outcome

    async def _render(
        self, outcome: ReportOutcome, render: Callable[..., Path], *args, **kwargs
    ) -> None:
        """Build a PDF in a worker thread, recording success or failure."""
        try:
            outcome.output_path = await asyncio.to_thread(render, *args, **kwargs)
            self.logger.info(f"{outcome.name.replace('_', ' ').title()} report written: {outcome.output_path}")
        except ExportError as e:
            self.logger.error(f"Error generating {outcome.name} report: {e}")
            outcome.error_message = str(e)
        except Exception as e:
            self.logger.error(f"Error generating {outcome.name} report: {e}", exc_info=True)
            outcome.error_message = str(e)
