"""
Configuration for togglPy.

Two layers of KEY=VALUE files are consulted on every invocation:

  1) Global: `<config dir>/config` (see `utils.dir_utils.global_config_dir`)
  2) Local: the first `.toggl` file found walking up from the current
     directory, never leaving the user's home directory

Each field of the effective config is resolved on its own: local value,
else global value, else unset.

Example `.toggl`:
  WORKSPACE_ID=1234567
  PROJECT_ID=7654321
"""
import os
from dataclasses import dataclass, fields
from io import StringIO
from typing import Dict, Optional

from dotenv.parser import parse_stream

from .errors import ConfigParseError
from .utils.dir_utils import global_config_dir, find_local_config, local_config_dir
from .utils.file_utils import read_config_file, write_config_file

GLOBAL_CONFIG_NAME = "config"
LOCAL_CONFIG_NAME = ".toggl"

# field name -> file key
KEYS = {
    "api_token": "API_TOKEN",
    "workspace_id": "WORKSPACE_ID",
    "project_id": "PROJECT_ID",
}


def _parse_id(raw: Optional[str], field_name: str) -> int:
    value = (raw or "").strip()
    if not (value.isascii() and value.isdigit()):
        raise ConfigParseError(f"Could not parse {field_name}: {raw!r} is not an unsigned integer")
    return int(value)


def _read_values(text: str) -> Dict[str, Optional[str]]:
    values = {}
    for binding in parse_stream(StringIO(text)):
        if binding.error:
            line = binding.original.string.strip()
            for field_name, key in KEYS.items():
                if line.startswith(key):
                    raise ConfigParseError(f"Could not parse {field_name}: {line!r} (line {binding.original.line})")
            raise ConfigParseError(f"Could not parse line {binding.original.line}: {line!r}")
        if binding.key is not None:
            values[binding.key] = binding.value
    return values


@dataclass
class Config:
    """Effective or partial configuration. Every field is optional."""
    api_token: Optional[str] = None
    workspace_id: Optional[int] = None
    project_id: Optional[int] = None

    @classmethod
    def from_text(cls, text: str) -> "Config":
        """Parse the content of a config file.

        Unknown keys are ignored.

        Args:
            text: KEY=VALUE lines

        Returns:
            Parsed Config

        Raises:
            ConfigParseError: If a line cannot be parsed or a known key has a value of the wrong type
        """
        values = _read_values(text)

        api_token = None
        if KEYS["api_token"] in values:
            raw = values[KEYS["api_token"]]
            if raw is None:
                raise ConfigParseError("Could not parse api_token: missing value")
            api_token = raw.strip() or None

        workspace_id = None
        if KEYS["workspace_id"] in values:
            workspace_id = _parse_id(values[KEYS["workspace_id"]], "workspace_id")

        project_id = None
        if KEYS["project_id"] in values:
            project_id = _parse_id(values[KEYS["project_id"]], "project_id")

        return cls(api_token=api_token, workspace_id=workspace_id, project_id=project_id)

    def to_text(self) -> str:
        """Serialize the fields that are set, one KEY=VALUE per line."""
        lines = []
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                lines.append(f"{KEYS[f.name]}={value}")
        return "\n".join(lines)

    def merged_over(self, base: "Config") -> "Config":
        """Merge field by field, preferring this config's values.

        Args:
            base: Config supplying values this one lacks

        Returns:
            New merged Config
        """
        merged = {}
        for f in fields(self):
            value = getattr(self, f.name)
            merged[f.name] = value if value is not None else getattr(base, f.name)
        return Config(**merged)

    def update(self, delta: "Config"):
        """Overwrite fields with the values set in delta; unset fields are left alone."""
        for f in fields(self):
            value = getattr(delta, f.name)
            if value is not None:
                setattr(self, f.name, value)

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))


def merge_configs(local: Optional[Config], global_: Optional[Config]) -> Config:
    """Merge a local config over a global one.

    Args:
        local: Local layer (may be None)
        global_: Global layer (may be None)

    Returns:
        Effective Config
    """
    return (local or Config()).merged_over(global_ or Config())


def _load_file(path: Optional[str]) -> Optional[Config]:
    if not path:
        return None
    text = read_config_file(path)
    if text is None:
        return None
    try:
        return Config.from_text(text)
    except ConfigParseError as e:
        raise ConfigParseError(f"Couldn't parse config file '{path}': {e}") from e


def global_config_path(config_dir: Optional[str] = None) -> str:
    return os.path.join(config_dir or global_config_dir(), GLOBAL_CONFIG_NAME)


def load_global_config(config_dir: Optional[str] = None) -> Optional[Config]:
    """Load the global config.

    Args:
        config_dir: Config directory (default: detected and created if missing)

    Returns:
        Config, or None if there is no global config file
    """
    return _load_file(global_config_path(config_dir))


def save_global_config(config: Config, config_dir: Optional[str] = None):
    write_config_file(global_config_path(config_dir), config.to_text())


def load_local_config(cwd: Optional[str] = None, home: Optional[str] = None) -> Optional[Config]:
    """Load the nearest `.toggl` file between cwd and the home directory.

    Args:
        cwd: Directory to start searching from (default: current directory)
        home: Search boundary (default: user's home)

    Returns:
        Config, or None if no local config is found
    """
    return _load_file(find_local_config(LOCAL_CONFIG_NAME, cwd, home))


def load_current_dir_config(cwd: Optional[str] = None, home: Optional[str] = None) -> Optional[Config]:
    """Load the `.toggl` file of exactly the current directory, without walking up."""
    return _load_file(os.path.join(local_config_dir(cwd, home), LOCAL_CONFIG_NAME))


def save_current_dir_config(config: Config, cwd: Optional[str] = None, home: Optional[str] = None):
    write_config_file(os.path.join(local_config_dir(cwd, home), LOCAL_CONFIG_NAME), config.to_text())


def load_config(config_dir: Optional[str] = None, cwd: Optional[str] = None,
                home: Optional[str] = None) -> Config:
    """Resolve the effective config for this invocation.

    Args:
        config_dir: Global config directory (default: detected)
        cwd: Directory the local search starts from (default: current directory)
        home: Local search boundary (default: user's home)

    Returns:
        Effective Config

    Raises:
        ConfigIoError: If a config file cannot be read
        ConfigParseError: If a config file holds an invalid value
    """
    global_config = load_global_config(config_dir)
    local_config = load_local_config(cwd, home)
    return merge_configs(local_config, global_config)


def update_config(global_: bool, delta: Config, config_dir: Optional[str] = None,
                  cwd: Optional[str] = None, home: Optional[str] = None) -> Config:
    """Apply changes to the global config or the current directory's config.

    The API token can only be stored globally; passing one for the local
    config prints a warning and skips it.

    Args:
        global_: Whether to update the global config
        delta: Fields to change (unset fields are left untouched)
        config_dir: Global config directory (default: detected)
        cwd: Invocation directory for local updates (default: current directory)
        home: User's home directory (default: detected)

    Returns:
        The config as saved
    """
    if global_:
        config = load_global_config(config_dir) or Config()
        config.update(delta)
        save_global_config(config, config_dir)
        return config

    existing = load_current_dir_config(cwd, home)
    config = existing or Config()
    if delta.api_token is not None:
        print("[WARNING] API token can only be set globally. Use --global option.")
    config.update(Config(workspace_id=delta.workspace_id, project_id=delta.project_id))
    # nothing to store, don't leave an empty .toggl behind
    if existing is None and config.is_empty():
        return config
    save_current_dir_config(config, cwd, home)
    return config
