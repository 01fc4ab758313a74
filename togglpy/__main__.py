"""Main module for the togglPy package."""
import sys
import argparse
from typing import Optional, List

from tabulate import tabulate

from .api.client import TogglClient
from .config import Config, load_config, update_config
from .credentials import CredentialStore, load_environment, resolve_api_token
from .errors import TogglError, MissingPrecondition, cause_chain
from .reports.time_entry import TimeEntry
from .reports.report_generator import ReportGenerator
from .utils.date_utils import target_date
from .utils.file_utils import write_markdown
from .utils.format_utils import mask_token


# --- CLI Logic ---
def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Arguments to parse (default: sys.argv)

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="Track time with Toggl from the command line.",
        epilog="""
Examples:
    # Store the API token and a default workspace
  togglpy login <api token>
  togglpy set --global --workspace-id 1234567
    ---
    # Use a default project for everything below the current directory
  togglpy set --project-id 7654321
    ---
    # Start and stop a time entry
  togglpy start "Write report"
  togglpy stop
    ---
    # Show yesterday grouped by description and export it as markdown
  togglpy summary 1 --md yesterday.md
""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        prog="togglpy"
    )
    subparsers = parser.add_subparsers(dest="command")

    start = subparsers.add_parser("start", help="Start a new time entry")
    start.add_argument("description", nargs="?", help="Description of the time entry")
    start.add_argument("-p", "--project-id", type=int, help="Project id (default: configured project)")

    subparsers.add_parser("stop", help="Stop the current time entry")
    subparsers.add_parser("status", help="Print the current time entry")

    recent = subparsers.add_parser("recent", help="Print recent time entries (default)")
    summary = subparsers.add_parser("summary", help="Print time entries from a given day grouped by description")
    summary.add_argument("days_before", nargs="?", type=int, default=0, help="Number of days before today")
    summary.add_argument("--by-project", action="store_true",
                         help="Group by description and project instead of description only")
    for sub in (recent, summary):
        sub.add_argument("--md", help="Export the report as markdown to the given file path")
        sub.add_argument("--overwrite", action="store_true", help="Overwrite the markdown file if it exists")

    subparsers.add_parser("restart", help="Restart the last time entry")
    subparsers.add_parser("switch", help="Switch to the time entry before the current one")
    subparsers.add_parser("projects", help="List all projects")
    subparsers.add_parser("default-workspace-id", help="Print the default workspace id")

    set_parser = subparsers.add_parser("set", help="Set configuration options")
    set_parser.add_argument("--global", dest="global_", action="store_true", help="Set config globally")
    set_parser.add_argument("-p", "--project-id", type=int, help="Set default project id")
    set_parser.add_argument("-w", "--workspace-id", type=int, help="Set default workspace id")
    set_parser.add_argument("--api-token", help="Set the API token (global only)")

    subparsers.add_parser("config", help="Print the effective configuration")

    login = subparsers.add_parser("login", help="Set the API token (an empty token removes it)")
    login.add_argument("api_token", help="Toggl API token")

    args = parser.parse_args(argv)
    for name in ("project_id", "workspace_id"):
        value = getattr(args, name, None)
        if value is not None and value < 0:
            parser.error(f"--{name.replace('_', '-')} must be a non-negative integer")
    if getattr(args, "days_before", 0) < 0:
        parser.error("days_before must be a non-negative integer")
    return args


def create_client(config: Config) -> TogglClient:
    return TogglClient(resolve_api_token(config))


def to_time_entries(client: TogglClient, raw_entries: list) -> List[TimeEntry]:
    """Convert raw API entries to TimeEntry objects with project names."""
    project_id_to_name = client.get_project_mapping(raw_entries)
    return [TimeEntry.from_dto(e, project_id_to_name) for e in raw_entries]


def print_report(report: str, md_path: Optional[str], report_date, overwrite: bool):
    """Print a report to stdout or export it to a markdown file."""
    if md_path:
        write_markdown(md_path, report, report_date, overwrite)
        print(f"[SUCCESS] Markdown output written to '{md_path}'")
    else:
        print(report, end="")


def print_recent_entries(client: TogglClient, md_path: Optional[str] = None, overwrite: bool = False):
    """Print today's and older time entries."""
    entries = to_time_entries(client, client.get_recent_entries())
    report_generator = ReportGenerator(entries)
    print_report(report_generator.recent_report(), md_path, report_generator.today, overwrite)


def print_day_summary(client: TogglClient, days_before: int = 0, group_by_project: bool = False,
                      md_path: Optional[str] = None, overwrite: bool = False):
    """Print the time entries of one day grouped by description."""
    day = target_date(days_before)
    entries = to_time_entries(client, client.get_entries_between(day, day))
    report_generator = ReportGenerator(entries)
    print_report(report_generator.day_summary(days_before, group_by_project), md_path, day, overwrite)


def print_current_entry(client: TogglClient):
    current = client.get_current_entry()
    if current:
        print(to_time_entries(client, [current])[0])
    else:
        print("There are no active time entries")


def start_entry(client: TogglClient, config: Config, description: Optional[str], project_id: Optional[int]):
    """Start a time entry in the configured workspace.

    Raises:
        MissingPrecondition: If no workspace id is configured
    """
    if config.workspace_id is None:
        raise MissingPrecondition(
            "Workspace id is not set. Set it via configuration: togglpy set --workspace-id <id>"
        )
    project_id = project_id if project_id is not None else config.project_id
    started = client.start(config.workspace_id, description, project_id)
    print(f"Time entry started: {to_time_entries(client, [started])[0]}")


def stop_entry(client: TogglClient):
    stopped = client.stop_current_entry()
    if stopped:
        print(f"Stopped time entry: {to_time_entries(client, [stopped])[0]}")
    else:
        print("There are no active time entries")


def print_projects(client: TogglClient):
    rows = [[p.get("id"), p.get("name")] for p in client.get_projects()]
    print(tabulate(rows, headers=["ID", "Project"], tablefmt="github"))


def print_config(config: Config):
    rows = [
        ["API token", mask_token(config.api_token) if config.api_token else "-"],
        ["Workspace id", config.workspace_id if config.workspace_id is not None else "-"],
        ["Project id", config.project_id if config.project_id is not None else "-"],
    ]
    print(tabulate(rows, headers=["Setting", "Value"], tablefmt="github"))


def login(api_token: str):
    store = CredentialStore()
    if api_token:
        store.set(api_token)
        print("[SUCCESS] API token saved")
    else:
        store.delete()
        print("[SUCCESS] API token removed")


def run(args: argparse.Namespace):
    """Execute the parsed command."""
    command = args.command or "recent"

    if command == "login":
        login(args.api_token)
        return
    if command == "set":
        update_config(args.global_, Config(
            api_token=args.api_token,
            workspace_id=args.workspace_id,
            project_id=args.project_id,
        ))
        return

    config = load_config()
    if command == "config":
        print_config(config)
        return

    client = create_client(config)
    if command == "start":
        start_entry(client, config, args.description, args.project_id)
    elif command == "stop":
        stop_entry(client)
    elif command == "status":
        print_current_entry(client)
    elif command == "summary":
        print_day_summary(client, args.days_before, args.by_project, args.md, args.overwrite)
    elif command == "restart":
        print(f"Time entry started: {to_time_entries(client, [client.restart()])[0]}")
    elif command == "switch":
        print(f"Time entry started: {to_time_entries(client, [client.switch()])[0]}")
    elif command == "projects":
        print_projects(client)
    elif command == "default-workspace-id":
        print(f"Workspace id {client.get_default_workspace_id()}")
    else:
        print_recent_entries(client, getattr(args, "md", None), getattr(args, "overwrite", False))


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    args = parse_args(argv)
    try:
        # Load environment variables
        load_environment()
        run(args)
    except TogglError as e:
        messages = cause_chain(e)
        print(f"[ERROR] {messages[0]}")
        for message in messages[1:]:
            print(f"  caused by: {message}")
        sys.exit(1)


if __name__ == "__main__":
    main()
