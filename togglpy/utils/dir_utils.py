"""Directory utility functions for togglPy."""
import os
from typing import Iterator, Optional

from ..errors import ConfigIoError

APP_DIRNAME = "togglpy"


def home_dir() -> str:
    """Get the user's home directory.

    Returns:
        Absolute path of the home directory
    """
    return os.path.abspath(os.path.expanduser("~"))


def global_config_dir(create: bool = True) -> str:
    """Get the directory holding the global config file.

    Lookup order: $TOGGLPY_CONFIG_DIR, %APPDATA% on Windows,
    $XDG_CONFIG_HOME, then ~/.config.

    Args:
        create: Whether to create the directory if it does not exist

    Returns:
        Absolute path of the config directory

    Raises:
        ConfigIoError: If the directory cannot be created
    """
    override = os.environ.get("TOGGLPY_CONFIG_DIR")
    if override:
        config_dir = override
    elif os.name == "nt" and os.environ.get("APPDATA"):
        config_dir = os.path.join(os.environ["APPDATA"], APP_DIRNAME)
    elif os.environ.get("XDG_CONFIG_HOME"):
        config_dir = os.path.join(os.environ["XDG_CONFIG_HOME"], APP_DIRNAME)
    else:
        config_dir = os.path.join(home_dir(), ".config", APP_DIRNAME)
    config_dir = os.path.abspath(config_dir)

    if create:
        try:
            os.makedirs(config_dir, exist_ok=True)
        except OSError as e:
            raise ConfigIoError(f"Could not create config directory '{config_dir}'") from e
    return config_dir


def is_within_home(path: str, home: str) -> bool:
    """Check whether a path is the home directory or one of its descendants.

    Pure path comparison, the filesystem is not touched.

    Args:
        path: Absolute path to check
        home: Absolute home directory

    Returns:
        True if path lies inside home
    """
    path = os.path.normpath(path)
    home = os.path.normpath(home)
    try:
        return os.path.commonpath([path, home]) == home
    except ValueError:
        # Different drives on Windows, or a mix of relative and absolute paths
        return False


def iter_search_dirs(start: str, home: str) -> Iterator[str]:
    """Iterate over start and its ancestors, stopping at home.

    Nothing is yielded when start is outside home.

    Args:
        start: Absolute directory to start from
        home: Absolute home directory that bounds the walk

    Yields:
        Directories from start up to and including home
    """
    if not is_within_home(start, home):
        return
    current = os.path.normpath(start)
    home = os.path.normpath(home)
    while True:
        yield current
        if current == home:
            return
        parent = os.path.dirname(current)
        if parent == current:
            return
        current = parent


def find_local_config(config_name: str, start: Optional[str] = None, home: Optional[str] = None) -> Optional[str]:
    """Search for a config file from start upwards to the home directory.

    Args:
        config_name: File name to look for (e.g. ".toggl")
        start: Directory to start from (default: current working directory)
        home: Boundary directory (default: user's home)

    Returns:
        Path of the first match, or None if there is none
    """
    start = os.path.abspath(start or current_dir())
    home = os.path.abspath(home or home_dir())
    for directory in iter_search_dirs(start, home):
        path = os.path.join(directory, config_name)
        if os.path.isfile(path):
            return path
    return None


def current_dir() -> str:
    """Get the current working directory.

    Raises:
        ConfigIoError: If the working directory is not accessible
    """
    try:
        return os.getcwd()
    except OSError as e:
        raise ConfigIoError("Could not get current directory") from e


def local_config_dir(cwd: Optional[str] = None, home: Optional[str] = None) -> str:
    """Get the directory a local config gets written to.

    Local writes are scoped to the exact invocation directory, which has
    to be inside the user's home.

    Args:
        cwd: Invocation directory (default: current working directory)
        home: User's home directory (default: detected)

    Returns:
        Absolute path of the directory

    Raises:
        ConfigIoError: If the directory is outside the home directory
    """
    cwd = os.path.abspath(cwd or current_dir())
    home = os.path.abspath(home or home_dir())
    if not is_within_home(cwd, home):
        raise ConfigIoError(
            f"Current directory '{cwd}' is not in the user's home folder. Cannot create local config."
        )
    return cwd
