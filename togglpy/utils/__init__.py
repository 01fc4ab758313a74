"""Utility modules for togglPy."""

from .date_utils import local_now, parse_timestamp, to_api_timestamp, target_date, relative_day, format_clock
from .format_utils import format_duration, format_total, mask_token
from .dir_utils import global_config_dir, find_local_config, is_within_home, iter_search_dirs
from .file_utils import read_config_file, write_config_file, write_markdown

__all__ = [
    'local_now', 'parse_timestamp', 'to_api_timestamp', 'target_date', 'relative_day', 'format_clock',
    'format_duration', 'format_total', 'mask_token',
    'global_config_dir', 'find_local_config', 'is_within_home', 'iter_search_dirs',
    'read_config_file', 'write_config_file', 'write_markdown'
]
