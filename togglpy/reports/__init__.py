"""Report generation modules for togglPy."""

from .time_entry import TimeEntry
from .report_generator import ReportGenerator

__all__ = ['TimeEntry', 'ReportGenerator']
