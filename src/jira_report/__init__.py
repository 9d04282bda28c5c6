"""
Jira Report - periodic project status reports.

Fetches issues from Jira, groups them by due week, assignee and epic,
and renders development status and weekly due-date PDF reports.
"""

__version__ = "1.0.0"
__author__ = "Engineering Team"
