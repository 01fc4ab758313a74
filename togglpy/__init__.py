"""
togglPy: A CLI companion for Toggl Track time entries.

- Starts, stops, restarts and switches time entries
- Shows recent entries split into today and older, with today's total
- Summarizes a single day grouped by description
- Resolves configuration from a global file and a per-directory `.toggl` override
- Can be used as a CLI (via `python -m togglpy` or `togglpy` if installed as a package)
"""

__version__ = "0.1.0"
