"""
Configuration Manager for the nearest-neighbor model testing framework

Loads every YAML file in the configuration directory (``app_config.yaml`` is
required) plus YAML files in nested subdirectories. A nested file such as
``core/model_testing_config.yaml`` is exposed as
``config.core.model_testing_config``.
"""

from pathlib import Path
from types import SimpleNamespace
import logging
from typing import Dict, Any

from knn_framework.core.app_file_handling.base_app_file_handler import BaseAppFileHandler
from .base_config_manager import BaseConfigManager

logger = logging.getLogger(__name__)


class ConfigManager(BaseConfigManager):
    def __init__(self, config_dir: Path = None, app_file_handler: BaseAppFileHandler = None):
        self.app_file_handler = app_file_handler
        self.config_dir = self._get_default_config_dir() if config_dir is None else Path(config_dir)
        self._load_configurations()

    def _get_default_config_dir(self) -> Path:
        """
        Get the default configuration directory from the config_path.yaml file.
        Falls back to <project root>/configs if the file cannot be loaded.
        """
        config_path_file = Path(__file__).parent / 'config_path.yaml'
        try:
            config_path_data = self.app_file_handler.read_yaml(config_path_file)
            config_path = config_path_data.get('default_config_dir')
            return Path(self.app_file_handler.resolve_project_root_path(config_path))
        except Exception as e:
            logger.warning(f"Could not load config_path.yaml: {str(e)}. Using default path.")
            return Path(__file__).resolve().parents[4] / 'configs'

    def get_config(self) -> SimpleNamespace:
        return self

    def _load_configurations(self):
        """
        Load all configuration files, including those in nested directories.
        """
        logger.debug(f"Loading configuration files from: {self.config_dir}")
        config_dict = self.app_file_handler.load_yaml_files_in_directory(
            self.config_dir,
            required_files=['app_config.yaml']
        )

        nested_configs = self._load_nested_configurations()
        config_dict = self._deep_merge(config_dict, nested_configs)

        config_obj = self._dict_to_namespace(config_dict)
        for key, value in vars(config_obj).items():
            setattr(self, key, value)

    def _load_nested_configurations(self) -> Dict[str, Any]:
        """
        Recursively load configurations from nested directories.
        Returns a dictionary with nested configuration data.
        """
        nested_configs = {}

        for item in sorted(self.config_dir.rglob('*.yaml')):
            # Skip files in the root config directory
            if item.parent == self.config_dir:
                continue

            try:
                current_level = nested_configs
                relative_path = item.relative_to(self.config_dir)
                for part in relative_path.parts[:-1]:
                    current_level = current_level.setdefault(part, {})

                current_level[item.stem] = self.app_file_handler.read_yaml(item) or {}

                logger.debug(f"Loaded nested configuration from: {item}")
            except Exception as e:
                logger.error(f"Error loading nested configuration {item}: {str(e)}")
                raise

        return nested_configs

    def _deep_merge(self, dict1: Dict[str, Any], dict2: Dict[str, Any]) -> Dict[str, Any]:
        """
        Recursively merge two dictionaries, preserving nested structures.
        """
        result = dict1.copy()

        for key, value in dict2.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def _dict_to_namespace(self, d: Dict[str, Any]) -> Any:
        """
        Recursively convert a dictionary to SimpleNamespace.
        Handles path resolution for string values.
        """
        if isinstance(d, str):
            return self.app_file_handler.resolve_project_root_path(d)
        if isinstance(d, list):
            return [self._dict_to_namespace(v) for v in d]
        if not isinstance(d, dict):
            return d
        return SimpleNamespace(**{k: self._dict_to_namespace(v) for k, v in d.items()})
