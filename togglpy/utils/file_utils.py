"""File I/O utility functions for togglPy."""
import os
from datetime import date
from typing import Optional

import markdown

from ..errors import ConfigIoError, ExportError


def read_config_file(path: str) -> Optional[str]:
    """Read a config file.

    Args:
        path: Config file path

    Returns:
        File content, or None if the file does not exist

    Raises:
        ConfigIoError: If the file exists but cannot be read
    """
    if not os.path.exists(path):
        return None
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()
    except OSError as e:
        raise ConfigIoError(f"Couldn't read config file '{path}'") from e


def write_config_file(path: str, content: str):
    """Write a config file, replacing any previous content.

    Args:
        path: Config file path
        content: Text to write

    Raises:
        ConfigIoError: If the file cannot be written
    """
    try:
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
            if content and not content.endswith("\n"):
                f.write("\n")
    except OSError as e:
        raise ConfigIoError(f"Could not save config file '{path}'") from e


def write_markdown(md_path: str, content: str, report_date: date, overwrite: bool = False):
    """Write a report to a Markdown file.

    Args:
        md_path: Output file path
        content: Report text
        report_date: Date the report is about, used in the title
        overwrite: Whether to overwrite the file if it exists

    Raises:
        ExportError: If the file cannot be written or is not valid Markdown
    """
    # File existence feedback
    file_exists = os.path.exists(md_path)
    if file_exists and not overwrite:
        mode = 'a'
        print(f"[INFO] File '{md_path}' exists. Appending output.")
    elif file_exists and overwrite:
        mode = 'w'
        print(f"[INFO] File '{md_path}' exists. Overwriting as requested.")
    else:
        mode = 'w'
        print(f"[INFO] File '{md_path}' does not exist. Creating new file.")

    try:
        with open(md_path, mode, encoding='utf-8') as f:
            if mode == 'w' or (mode == 'a' and os.stat(md_path).st_size == 0):
                f.write(f"# Time entries {report_date}\n\n")
            # Reports are tab separated, keep them verbatim
            f.write("```\n")
            f.write(content.rstrip("\n") + "\n")
            f.write("```\n\n")
    except OSError as e:
        raise ExportError(f"Failed to write to '{md_path}'") from e

    # Markdown validation
    try:
        with open(md_path, 'r', encoding='utf-8') as f:
            md_text = f.read()
        markdown.markdown(md_text)
    except (OSError, ValueError) as e:
        raise ExportError(f"Markdown validation failed for '{md_path}'") from e
