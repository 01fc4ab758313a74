"""TimeEntry class for representing Toggl time entries."""
from datetime import datetime
from typing import Optional, Dict, Any

from ..errors import RecordParseError
from ..utils.date_utils import parse_timestamp, local_now, relative_day, format_clock
from ..utils.format_utils import format_duration

NO_DESCRIPTION = "no description"
IN_PROGRESS = "in progress"


class TimeEntry:
    """Class representing a Toggl time entry."""

    def __init__(self, id: int, workspace_id: int, start: datetime, stop: Optional[datetime] = None,
                 duration: int = 0, description: Optional[str] = None, project_id: Optional[int] = None,
                 project_name: Optional[str] = None):
        """Initialize a TimeEntry.

        Args:
            id: Time entry ID
            workspace_id: Workspace ID
            start: Start time (timezone aware, local)
            stop: Stop time, or None while the entry is running
            duration: Duration in seconds as reported by the API
            description: Description (optional)
            project_id: Project ID (optional)
            project_name: Project name (optional)
        """
        self.id = id
        self.workspace_id = workspace_id
        self.start = start
        self.stop = stop
        self.duration = duration
        self.description = description
        self.project_id = project_id
        self.project_name = project_name

    @classmethod
    def from_dto(cls, dto: Dict[str, Any], project_id_to_name: Optional[Dict[int, str]] = None) -> "TimeEntry":
        """Create a TimeEntry from a record returned by the API.

        Args:
            dto: Raw time entry data from the Toggl API
            project_id_to_name: Project lookup table (optional)

        Returns:
            TimeEntry

        Raises:
            RecordParseError: If the record is missing fields or has an invalid timestamp
        """
        try:
            entry_id = int(dto["id"])
            workspace_id = int(dto["workspace_id"])
            start = parse_timestamp(dto["start"])
            stop = parse_timestamp(dto["stop"]) if dto.get("stop") else None
            duration = int(dto.get("duration") or 0)
        except KeyError as e:
            raise RecordParseError(f"Time entry {dto.get('id', '?')} is missing field {e}") from e
        except (TypeError, ValueError) as e:
            raise RecordParseError(f"Could not parse time entry {dto.get('id', '?')}: {e}") from e

        project_id = dto.get("project_id")
        project_name = None
        if project_id is not None and project_id_to_name:
            project_name = project_id_to_name.get(project_id)

        return cls(
            id=entry_id,
            workspace_id=workspace_id,
            start=start,
            stop=stop,
            duration=duration,
            description=dto.get("description"),
            project_id=project_id,
            project_name=project_name,
        )

    @property
    def is_running(self) -> bool:
        return self.stop is None

    @property
    def description_text(self) -> str:
        """Get the description, or the placeholder when it is missing or empty."""
        return self.description or NO_DESCRIPTION

    def elapsed_seconds(self, now: Optional[datetime] = None) -> int:
        """Get the time spent on this entry.

        A running entry's duration is a negative placeholder, so the
        elapsed time is measured from its start instead.

        Args:
            now: Current instant (default: now)

        Returns:
            Elapsed seconds
        """
        if not self.is_running:
            return self.duration
        now = now or local_now()
        return max(int((now - self.start).total_seconds()), 0)

    def format_line(self, now: Optional[datetime] = None) -> str:
        """Format the entry for display.

        Args:
            now: Current instant, used to label the day (default: now)

        Returns:
            "<start> - <stop|in progress>[ <day>][ (<duration>)][\\t[<project>]]\\t<description>"
        """
        now = now or local_now()
        stop = format_clock(self.stop) if self.stop else IN_PROGRESS
        line = f"{format_clock(self.start)} - {stop}"

        day = relative_day(self.start.date(), now.astimezone().date())
        if day:
            line += f" {day}"
        if not self.is_running:
            line += f" ({format_duration(self.duration)})"
        if self.project_name:
            line += f"\t[{self.project_name}]"
        return f"{line}\t{self.description_text}"

    def __str__(self) -> str:
        return self.format_line()

    def __repr__(self) -> str:
        return f"TimeEntry(id={self.id!r}, start={self.start.isoformat()!r}, description={self.description!r})"
