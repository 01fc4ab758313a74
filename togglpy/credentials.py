"""Storage of the Toggl API token."""
import os
from typing import Optional

from dotenv import load_dotenv

from .config import Config, load_global_config, save_global_config
from .utils.dir_utils import global_config_dir

TOKEN_ENV_VAR = "TOGGL_API_TOKEN"
ENV_FILE_NAME = "togglpy.env"


class CredentialStore:
    """Keeps the API token in the global config file."""

    def __init__(self, config_dir: Optional[str] = None):
        """Initialize the CredentialStore.

        Args:
            config_dir: Global config directory (default: detected)
        """
        self.config_dir = config_dir

    def get(self) -> Optional[str]:
        config = load_global_config(self.config_dir)
        return config.api_token if config else None

    def set(self, value: str):
        config = load_global_config(self.config_dir) or Config()
        config.api_token = value
        save_global_config(config, self.config_dir)

    def delete(self):
        config = load_global_config(self.config_dir)
        if config is None or config.api_token is None:
            return
        config.api_token = None
        save_global_config(config, self.config_dir)


def load_environment(config_dir: Optional[str] = None):
    """Load environment variables from an optional togglpy.env in the config dir."""
    env_file = os.path.join(config_dir or global_config_dir(), ENV_FILE_NAME)
    if os.path.exists(env_file):
        load_dotenv(env_file)


def resolve_api_token(config: Config) -> Optional[str]:
    """Get the token to authenticate with.

    Args:
        config: Effective config

    Returns:
        $TOGGL_API_TOKEN if set, else the config's token, else None
    """
    return os.getenv(TOKEN_ENV_VAR) or config.api_token
