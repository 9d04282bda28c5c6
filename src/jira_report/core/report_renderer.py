"""PDF rendering of the weekly due-dates and development status reports."""

from datetime import date, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from reportlab.graphics.shapes import Circle, Drawing
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import (
    Flowable,
    HRFlowable,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from ..utils.exceptions import ExportError
from ..utils.logging_config import get_logger
from ..utils.validators import InputValidator
from .grouping import (
    UNASSIGNED,
    filter_recent_weeks,
    group_issues_by_assignee,
    group_issues_by_epic,
    week_start,
)
from .models import Issue
from .presentation import (
    COLORS,
    DESCRIPTION_LIMIT,
    format_date,
    format_description,
    format_long_date,
    format_week_title,
    get_issue_type_color,
    get_status_color,
    is_delayed,
    is_in_development,
)

MARGIN = 50
DOT_SIZE = 6
DOT_COLUMN_WIDTH = 14

LEGEND_ENTRIES = (
    (COLORS["status_backlog"], "Backlog / Selected for Development"),
    (COLORS["status_in_progress"], "In Progress / In Review"),
    (COLORS["status_done"], "Ready / Production"),
)


def _escape(text: str) -> str:
    return InputValidator.sanitize_text(text)


def status_dot(color: str, size: int = DOT_SIZE) -> Drawing:
    """A filled circle used as a status marker."""
    fill = colors.HexColor(color)
    drawing = Drawing(size, size)
    drawing.add(
        Circle(size / 2, size / 2, size / 2, fillColor=fill, strokeColor=fill)
    )
    return drawing


class ReportRenderer:
    """Render grouped issues into A4 PDF reports.

    Both reports share the header, legend and per-issue layout:

    - a colored status dot
    - ``[Type] KEY`` linked to the issue
    - the summary, flagged ``(DELAYED)`` when overdue
    - status, description and due date lines
    """

    def __init__(
        self,
        base_url: str,
        dev_statuses: Sequence[str] = (),
        description_limit: int = DESCRIPTION_LIMIT,
    ):
        self.logger = get_logger(__name__)
        self.base_url = base_url.rstrip("/")
        self.dev_statuses = tuple(dev_statuses)
        self.description_limit = description_limit
        self.content_width = A4[0] - 2 * MARGIN
        self.styles = self._create_styles()

    def _create_styles(self) -> Dict[str, ParagraphStyle]:
        base = getSampleStyleSheet()["BodyText"]

        def style(name: str, font_size: float, color: str, **kwargs: Any) -> ParagraphStyle:
            options = {"spaceBefore": 0, "spaceAfter": 0, **kwargs}
            return ParagraphStyle(
                name,
                parent=base,
                fontSize=font_size,
                leading=font_size * 1.3,
                textColor=colors.HexColor(color),
                **options,
            )

        return {
            "title": style("ReportTitle", 18, COLORS["primary"], alignment=TA_CENTER),
            "subtitle": style("ReportSubtitle", 10, COLORS["secondary"], alignment=TA_CENTER),
            "message": style("ReportMessage", 12, COLORS["text"], alignment=TA_CENTER),
            "week": style("WeekTitle", 14, COLORS["secondary"], spaceAfter=6),
            "assignee": style("Assignee", 12, COLORS["secondary"], spaceAfter=4),
            "epic": style("Epic", 11, COLORS["epic"], spaceAfter=2),
            "group": style("Group", 11, COLORS["secondary"], leftIndent=10, spaceAfter=2),
            "legend_title": style("LegendTitle", 10, COLORS["secondary"], spaceAfter=4),
            "legend": style("Legend", 9, COLORS["text"]),
            "issue_key": style("IssueKey", 10, COLORS["text"]),
            "issue_summary": style("IssueSummary", 10, COLORS["text"]),
            "issue_detail": style("IssueDetail", 9, COLORS["secondary"], leftIndent=10),
            "issue_due": style("IssueDue", 6, COLORS["secondary"], leftIndent=12),
        }

    # Report entry points

    def generate_due_dates_report(
        self,
        issues_by_week: Dict[date, List[Issue]],
        output_path: Path,
        today: Optional[date] = None,
    ) -> Path:
        """Render the weekly due-dates report.

        Only the current week, the two weeks before it and future weeks are
        shown; each week is broken down by assignee and then by epic.
        """
        today = today or date.today()
        self.logger.info("Generating PDF...")

        if not issues_by_week:
            self.logger.info("No issues found with due dates. Creating empty report.")

        recent = filter_recent_weeks(issues_by_week, today)
        self.logger.info(f"Filtered to {len(recent)} recent weeks")

        story: List[Flowable] = self._header(
            "Jira Issues Report",
            [
                f"Generated on {format_long_date(today)}",
                "Showing current week and previous 2 weeks",
            ],
        )

        if not recent:
            story.append(Paragraph("No issues found for recent weeks.", self.styles["message"]))
            story.append(Spacer(1, 12))

        current_week = week_start(today)
        for week, week_issues in recent.items():
            title = format_week_title(week)
            self.logger.info(f"Processing week: {title}")

            is_current = week == current_week
            color = COLORS["primary"] if is_current else COLORS["secondary"]
            suffix = " (Current Week)" if is_current else ""
            story.append(
                Paragraph(
                    f'<font color="{color}"><u>{title}{suffix}</u></font>',
                    self.styles["week"],
                )
            )

            by_assignee = group_issues_by_assignee(week_issues)
            for assignee in sorted(by_assignee):
                story.extend(
                    self._assignee_section(assignee, by_assignee[assignee], today, dev_report=False)
                )

            story.append(Spacer(1, 6))
            story.append(
                HRFlowable(
                    width="100%",
                    thickness=0.5,
                    color=colors.HexColor(COLORS["border"]),
                    spaceAfter=12,
                )
            )

        return self._build(story, output_path, "Jira Issues Report")

    def generate_dev_status_report(
        self,
        issues: Sequence[Issue],
        output_path: Path,
        today: Optional[date] = None,
        lookback_days: int = 7,
    ) -> Path:
        """Render the development status report, by assignee and epic."""
        today = today or date.today()
        self.logger.info("Generating development status report...")

        since = today - timedelta(days=lookback_days)
        story: List[Flowable] = self._header(
            "Jira Development Status Report",
            [
                f"Issues in development since {format_long_date(since)}",
                f"Generated on {format_long_date(today)}",
            ],
        )

        by_assignee = group_issues_by_assignee(issues)
        for assignee in sorted(by_assignee):
            story.extend(
                self._assignee_section(assignee, by_assignee[assignee], today, dev_report=True)
            )

        return self._build(story, output_path, "Jira Development Status Report")

    # Sections

    def _header(self, title: str, subtitles: Sequence[str]) -> List[Flowable]:
        story: List[Flowable] = [
            Paragraph(title, self.styles["title"]),
            Spacer(1, 8),
        ]
        story.extend(Paragraph(line, self.styles["subtitle"]) for line in subtitles)
        story.append(Spacer(1, 12))
        story.append(
            HRFlowable(
                width="100%",
                thickness=1,
                color=colors.HexColor(COLORS["border"]),
                spaceAfter=12,
            )
        )
        story.extend(self._status_legend())
        return story

    def _status_legend(self) -> List[Flowable]:
        rows = [
            [status_dot(color), Paragraph(label, self.styles["legend"])]
            for color, label in LEGEND_ENTRIES
        ]
        rows.append(
            [
                "",
                Paragraph(
                    f'<font color="{COLORS["error"]}">(DELAYED)</font>'
                    " - Issue is past due date but not completed",
                    self.styles["legend"],
                ),
            ]
        )

        legend = Table(rows, colWidths=[DOT_COLUMN_WIDTH + 10, self.content_width - DOT_COLUMN_WIDTH - 10])
        legend.setStyle(self._compact_table_style(left_padding=10))

        return [
            Paragraph("Status Legend:", self.styles["legend_title"]),
            legend,
            Spacer(1, 14),
        ]

    def _assignee_section(
        self, assignee: str, issues: Sequence[Issue], today: date, dev_report: bool
    ) -> List[Flowable]:
        self.logger.info(f"  Processing assignee: {assignee} ({len(issues)} issues)")

        heading = f"Assignee: {assignee}" if dev_report else assignee
        story: List[Flowable] = [Paragraph(_escape(heading), self.styles["assignee"])]

        for epic_key, epic_issues in group_issues_by_epic(issues).items():
            if not epic_issues:
                continue

            if epic_key != UNASSIGNED:
                epic = epic_issues[0]
                story.append(self._epic_heading(epic, with_status_dot=dev_report))
                children = epic_issues[1:]
            else:
                if dev_report:
                    story.append(
                        Paragraph("Issues not assigned to any Epic:", self.styles["group"])
                    )
                children = epic_issues

            story.extend(self._issue_block(issue, today) for issue in children)
            story.append(Spacer(1, 6))

        story.append(Spacer(1, 6))
        return story

    def _epic_heading(self, epic: Issue, with_status_dot: bool) -> Flowable:
        url = _escape(epic.browse_url(self.base_url))
        heading = Paragraph(
            f'<a href="{url}"><u>Epic: {_escape(epic.summary)}</u></a>',
            self.styles["epic"],
        )
        if not with_status_dot:
            return heading
        return self._with_dot(get_status_color(epic.status), [heading])

    def _issue_block(self, issue: Issue, today: date) -> Flowable:
        delayed = is_delayed(issue, today)
        has_description = bool(issue.description)
        in_development = is_in_development(issue.status, self.dev_statuses)

        type_color = get_issue_type_color(issue.issue_type)
        url = _escape(issue.browse_url(self.base_url))
        error = COLORS["error"]

        key_line = Paragraph(
            f'<a href="{url}" color="{type_color}"><u>[{_escape(issue.issue_type)}] '
            f"{_escape(issue.key)}</u></a>",
            self.styles["issue_key"],
        )

        summary = f"• {_escape(issue.summary)}"
        if delayed:
            summary += f' <font color="{error}">(DELAYED)</font>'
        summary_line = Paragraph(summary, self.styles["issue_summary"])

        status_color = COLORS["in_progress"] if in_development else COLORS["secondary"]
        status_line = Paragraph(
            f'<font color="{status_color}">Status: {_escape(issue.status)} '
            f"(Updated: {format_date(issue.updated)})</font>",
            self.styles["issue_detail"],
        )

        description = format_description(issue.description, self.description_limit)
        description_color = COLORS["text"] if has_description else error
        description_line = Paragraph(
            f'<font color="{description_color}">{_escape(description)}</font>',
            self.styles["issue_detail"],
        )

        due_color = error if delayed else COLORS["secondary"]
        due_text = f"Due: {format_date(issue.due_date, default='No due date')}"
        if delayed:
            due_text += " (Overdue)"
        due_line = Paragraph(f'<font color="{due_color}">{due_text}</font>', self.styles["issue_due"])

        return self._with_dot(
            get_status_color(issue.status),
            [key_line, summary_line, status_line, description_line, due_line],
            space_after=6,
        )

    # Layout helpers

    def _compact_table_style(self, left_padding: float = 0) -> TableStyle:
        return TableStyle(
            [
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ("LEFTPADDING", (0, 0), (0, -1), left_padding),
                ("LEFTPADDING", (1, 0), (-1, -1), 0),
                ("RIGHTPADDING", (0, 0), (-1, -1), 0),
                ("TOPPADDING", (0, 0), (-1, -1), 1),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 1),
            ]
        )

    def _with_dot(
        self, color: str, content: List[Flowable], space_after: float = 2
    ) -> Flowable:
        """Place ``content`` to the right of a status dot."""
        table = Table(
            [[status_dot(color), content]],
            colWidths=[DOT_COLUMN_WIDTH, self.content_width - DOT_COLUMN_WIDTH],
        )
        style = self._compact_table_style()
        style.add("TOPPADDING", (0, 0), (0, 0), 3)
        table.setStyle(style)
        table.spaceAfter = space_after
        return table

    @staticmethod
    def _draw_footer(canvas: Any, doc: Any) -> None:
        canvas.saveState()
        canvas.setFont("Helvetica", 8)
        canvas.setFillColor(colors.HexColor(COLORS["secondary"]))
        canvas.drawCentredString(A4[0] / 2, MARGIN / 2, f"Page {doc.page}")
        canvas.restoreState()

    def _build(self, story: List[Flowable], output_path: Path, title: str) -> Path:
        """Write the story to ``output_path``."""
        output_path = Path(output_path)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)

            doc = SimpleDocTemplate(
                str(output_path),
                pagesize=A4,
                leftMargin=MARGIN,
                rightMargin=MARGIN,
                topMargin=MARGIN,
                bottomMargin=MARGIN,
                title=title,
            )
            doc.build(story, onFirstPage=self._draw_footer, onLaterPages=self._draw_footer)

        except Exception as e:
            self.logger.error(f"Error writing PDF {output_path}: {e}")
            raise ExportError(f"Failed to export PDF: {e}", details={"path": str(output_path)})

        self.logger.info(f"PDF generated: {output_path}")
        return output_path
