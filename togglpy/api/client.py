"""
TogglClient: A client for interacting with the Toggl Track API.
"""
import requests
from typing import Optional, Dict, Any, List
from datetime import date, datetime, time, timedelta

from ..errors import ApiError, MissingPrecondition
from ..utils.date_utils import local_now, to_api_timestamp

CREATED_WITH = "togglpy"


class TogglClient:
    """A client for interacting with the Toggl Track API."""

    def __init__(self, api_token: Optional[str]):
        """Initialize the TogglClient.

        Args:
            api_token: Toggl API token

        Raises:
            MissingPrecondition: If no API token is given
        """
        if not api_token:
            raise MissingPrecondition("Missing API token. Use login command to set it")
        self.api_token = api_token
        self.base_url = "https://api.track.toggl.com/api/v9"
        self.session = requests.Session()
        self.session.auth = (api_token, "api_token")
        self.session.headers.update({"Content-Type": "application/json"})

    def api_request(self, method: str, path: str, params: Optional[dict] = None,
                    json: Optional[dict] = None, context: str = "API request failed") -> Any:
        """Make a request to the Toggl API.

        Args:
            method: HTTP method
            path: API path relative to the base URL
            params: Query parameters (optional)
            json: JSON body (optional)
            context: Message to report if the request fails

        Returns:
            API response as JSON (None for an empty body)

        Raises:
            ApiError: If the API request fails
        """
        url = f"{self.base_url}/{path}"
        try:
            resp = self.session.request(method, url, params=params, json=json)
            resp.raise_for_status()
            if not resp.content:
                return None
            return resp.json()
        except (requests.RequestException, ValueError) as e:
            raise ApiError(f"{context}: {e}") from e

    def get_recent_entries(self) -> List[Dict[str, Any]]:
        """Get the most recent time entries, newest first.

        Returns:
            List of time entries
        """
        return self.api_request("GET", "me/time_entries", context="Could not get time entries") or []

    def get_entries_between(self, start_date: date, end_date: date) -> List[Dict[str, Any]]:
        """Get time entries that started within a date range.

        Args:
            start_date: First day (inclusive)
            end_date: Last day (inclusive)

        Returns:
            List of time entries, newest first
        """
        # bounds at local midnight, entries are grouped by local date
        start = datetime.combine(start_date, time.min).astimezone()
        end = datetime.combine(end_date + timedelta(days=1), time.min).astimezone()
        params = {
            "start_date": to_api_timestamp(start),
            "end_date": to_api_timestamp(end),
        }
        return self.api_request("GET", "me/time_entries", params=params,
                                context="Could not get time entries") or []

    def get_current_entry(self) -> Optional[Dict[str, Any]]:
        """Get the running time entry.

        Returns:
            Time entry, or None if nothing is running
        """
        return self.api_request("GET", "me/time_entries/current", context="Could not get time entry")

    def stop_current_entry(self) -> Optional[Dict[str, Any]]:
        """Stop the running time entry.

        Returns:
            The stopped time entry, or None if nothing was running
        """
        running = self.get_current_entry()
        if not running:
            return None
        path = f"workspaces/{running['workspace_id']}/time_entries/{running['id']}/stop"
        return self.api_request("PATCH", path, context="Could not stop the current time entry")

    def start(self, workspace_id: int, description: Optional[str] = None,
              project_id: Optional[int] = None) -> Dict[str, Any]:
        """Start a new time entry now.

        Args:
            workspace_id: Workspace ID
            description: Description (optional)
            project_id: Project ID (optional)

        Returns:
            The started time entry
        """
        now = local_now()
        new_entry = {
            "workspace_id": workspace_id,
            "created_with": CREATED_WITH,
            "description": description,
            "project_id": project_id,
            "start": to_api_timestamp(now),
            # running entries carry the negated start as their duration
            "duration": -int(now.timestamp()),
        }
        path = f"workspaces/{workspace_id}/time_entries"
        return self.api_request("POST", path, json=new_entry, context="Could not start a time entry")

    def restart(self, entry: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Start a new time entry copying an existing one.

        Args:
            entry: Time entry to copy (default: the most recent one)

        Returns:
            The started time entry

        Raises:
            MissingPrecondition: If there is no time entry to copy
        """
        if entry is None:
            entries = self.get_recent_entries()
            if not entries:
                raise MissingPrecondition("There are no time entries to restart")
            entry = entries[0]
        return self.start(entry["workspace_id"], entry.get("description"), entry.get("project_id"))

    def switch(self) -> Dict[str, Any]:
        """Stop the running entry and restart the one before it.

        Returns:
            The started time entry

        Raises:
            MissingPrecondition: If there is no previous time entry
        """
        current = self.get_current_entry()
        current_id = current["id"] if current else None
        previous = [e for e in self.get_recent_entries() if e.get("id") != current_id]
        if not previous:
            raise MissingPrecondition("There is no previous time entry to switch to")
        if current:
            self.stop_current_entry()
        return self.restart(previous[0])

    def get_projects(self) -> List[Dict[str, Any]]:
        """Get all projects of the user.

        Returns:
            List of projects
        """
        return self.api_request("GET", "me/projects", context="Could not get projects") or []

    def get_project_mapping(self, entries: List[Dict[str, Any]]) -> Dict[int, str]:
        """Get project names for the projects used by time entries.

        Args:
            entries: List of time entries

        Returns:
            Mapping of project ID to project name (empty if no entry has a project)
        """
        if not any(e.get("project_id") for e in entries):
            return {}
        return {p["id"]: p.get("name", "") for p in self.get_projects() if "id" in p}

    def get_default_workspace_id(self) -> int:
        """Get the user's default workspace ID."""
        user = self.api_request("GET", "me", context="Could not get user data")
        try:
            return int(user["default_workspace_id"])
        except (TypeError, KeyError, ValueError) as e:
            raise ApiError("Could not get user data: no default workspace id") from e
