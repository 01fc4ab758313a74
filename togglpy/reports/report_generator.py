"""ReportGenerator class for generating reports from time entries."""
from datetime import datetime, date
from typing import List, Dict, Any, Optional, Tuple
from io import StringIO

from .time_entry import TimeEntry
from ..utils.date_utils import local_now, target_date
from ..utils.format_utils import format_duration, format_total

OLDER_LIMIT = 10


class ReportGenerator:
    """Class for generating reports from time entries."""

    def __init__(self, entries: List[TimeEntry], now: Optional[datetime] = None):
        """Initialize a ReportGenerator.

        Args:
            entries: List of TimeEntry objects, newest first
            now: Current instant (default: now)
        """
        self.entries = entries
        self.now = (now or local_now()).astimezone()
        self.today = self.now.date()

    def entries_on(self, day: date) -> List[TimeEntry]:
        """Get the entries that started on a local calendar date, in input order."""
        return [entry for entry in self.entries if entry.start.date() == day]

    def today_entries(self) -> List[TimeEntry]:
        return self.entries_on(self.today)

    def older_entries(self, limit: Optional[int] = OLDER_LIMIT) -> List[TimeEntry]:
        """Get the entries that did not start today.

        Args:
            limit: Maximum number of entries to keep (None for all)

        Returns:
            The first `limit` older entries, in input order
        """
        older = [entry for entry in self.entries if entry.start.date() != self.today]
        return older if limit is None else older[:limit]

    def total_seconds(self, entries: List[TimeEntry]) -> int:
        """Sum the elapsed time of entries, counting running ones up to now."""
        return sum(entry.elapsed_seconds(self.now) for entry in entries)

    def recent_report(self) -> str:
        """Generate the recent entries report.

        Today's entries come first under a header with their total, then at
        most ten older entries.

        Returns:
            Report as a string
        """
        output = StringIO()

        today_entries = self.today_entries()
        if today_entries:
            print(f"-- Today -- {format_total(self.total_seconds(today_entries))}", file=output)
            for entry in today_entries:
                print(entry.format_line(self.now), file=output)

        older_entries = self.older_entries()
        if older_entries:
            print("-- Older --", file=output)
            for entry in older_entries:
                print(entry.format_line(self.now), file=output)

        return output.getvalue()

    def summary_rows(self, days_before: int = 0, group_by_project: bool = False) -> List[Dict[str, Any]]:
        """Group the stopped entries of one day by description.

        Running entries are left out. Each group keeps the project of the
        first entry seen for it.

        Args:
            days_before: Offset of the day from today (0 is today)
            group_by_project: Whether to also split groups by project

        Returns:
            One dict per group with "description", "project" and "duration",
            in order of first appearance
        """
        day = target_date(days_before, self.today)
        groups: Dict[Tuple, Dict[str, Any]] = {}
        for entry in self.entries_on(day):
            if entry.is_running:
                continue
            key: Tuple = (entry.description_text,)
            if group_by_project:
                key += (entry.project_name,)
            if key not in groups:
                groups[key] = {
                    "description": entry.description_text,
                    "project": entry.project_name,
                    "duration": 0,
                }
            groups[key]["duration"] += entry.duration
        return list(groups.values())

    def day_summary(self, days_before: int = 0, group_by_project: bool = False) -> str:
        """Generate the summary of a single day.

        Args:
            days_before: Offset of the day from today (0 is today)
            group_by_project: Whether to also split groups by project

        Returns:
            Report as a string
        """
        output = StringIO()

        day = target_date(days_before, self.today)
        label = "Today" if days_before == 0 else day.isoformat()
        total = self.total_seconds(self.entries_on(day))
        print(f"-- {label} -- {format_total(total)}", file=output)

        for row in self.summary_rows(days_before, group_by_project):
            line = format_duration(row["duration"])
            if row["project"]:
                line += f"\t[{row['project']}]"
            print(f"{line}\t{row['description']}", file=output)

        return output.getvalue()
