# src/acl_pivot/utils/config.py

import yaml
import os
from pathlib import Path
import logging
from typing import Dict, Any, List, Optional

from acl_pivot.exceptions import ConfigurationError

DEFAULT_LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
PROJECT_ENV_VAR = 'GOOGLE_CLOUD_PROJECT'


class ConfigLoader:
    """Configuration loader for the project"""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize config loader

        Args:
            config_path: Path to config.yaml. If None, uses default project location
                and an absent file yields an empty configuration
        """
        self.required = config_path is not None
        if config_path is None:
            # Get project root directory (4 levels up from this file)
            project_root = Path(__file__).parent.parent.parent.parent
            config_path = os.path.join(project_root, 'config', 'config.yaml')

        self.config_path = config_path
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from yaml file"""
        try:
            with open(self.config_path, 'r') as f:
                config = yaml.safe_load(f)
        except FileNotFoundError:
            if self.required:
                raise ConfigurationError(f"Config file not found at {self.config_path}")
            return {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Error parsing config file: {str(e)}")

        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ConfigurationError(f"Config file {self.config_path} must contain a mapping")
        return config

    def get_config(self) -> Dict[str, Any]:
        """Get full configuration"""
        return self.config

    def get_gcp_config(self) -> Dict[str, Any]:
        """Get Google Cloud Platform configuration"""
        return self.config.get('gcp') or {}

    def get_logging_config(self) -> Dict[str, Any]:
        return self.config.get('logging') or {}

    def get_group_config(self) -> Dict[str, List[Any]]:
        """Get static group membership used for group expansion"""
        return self.config.get('groups') or {}

    def resolve_project_id(self, cli_value: Optional[str] = None) -> str:
        """Pick the project id from the command line, environment or config file"""
        project_id = cli_value or os.getenv(PROJECT_ENV_VAR) or self.get_gcp_config().get('project_id')
        if not project_id:
            raise ConfigurationError(
                f"Please add --project_id <project-id> or set {PROJECT_ENV_VAR}"
            )
        return project_id

    def setup_logging(self, level: Optional[str] = None):
        """Setup logging based on configuration"""
        logging_config = self.get_logging_config()

        # Logs go to stderr so the report can be piped from stdout
        handlers: List[logging.Handler] = [logging.StreamHandler()]
        log_path = logging_config.get('file')
        if log_path:
            os.makedirs(os.path.dirname(log_path) or '.', exist_ok=True)
            handlers.append(logging.FileHandler(log_path))

        level = level or logging_config.get('level', 'INFO')
        if isinstance(level, str):
            level = level.upper()

        logging.basicConfig(
            level=level,
            format=logging_config.get('format', DEFAULT_LOG_FORMAT),
            handlers=handlers,
            force=True
        )
