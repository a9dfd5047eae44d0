from pathlib import Path
from typing import Dict, Any, Union, List
import json

import yaml
import pandas as pd

from .base_app_file_handler import BaseAppFileHandler

PROJECT_ROOT = Path(__file__).resolve().parents[4]


class LocalAppFileHandler(BaseAppFileHandler):
    def read_yaml(self, path: Union[str, Path]) -> Dict[str, Any]:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"YAML file not found: {path}")
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f)

    def write_json(self, data: Dict[str, Any], path: Union[str, Path]) -> None:
        path = Path(path)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)

    def read_csv(self, path: Union[str, Path]) -> pd.DataFrame:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"CSV file not found: {path}")
        return pd.read_csv(path)

    def write_csv(self, df: pd.DataFrame, path: Union[str, Path]) -> None:
        path = Path(path)
        df.to_csv(path, index=False)

    def ensure_directory(self, path: Union[str, Path]) -> None:
        path = Path(path)
        path.mkdir(parents=True, exist_ok=True)

    def resolve_project_root_path(self, path: str) -> str:
        """Resolves paths that contain ${PROJECT_ROOT} to absolute paths"""
        if "${PROJECT_ROOT}" in path:
            return path.replace("${PROJECT_ROOT}", str(PROJECT_ROOT))
        return path

    def load_yaml_files_in_directory(self, directory: Path, required_files: List[str] = None) -> Dict[str, Any]:
        """
        Load and merge all YAML files in a directory
        Args:
            directory: Directory containing YAML files
            required_files: List of filenames that must exist
        Raises:
            FileNotFoundError: If any required files are missing
        """
        directory = Path(directory)
        config_dict = {}

        if required_files:
            missing_files = [name for name in required_files if not (directory / name).exists()]
            if missing_files:
                raise FileNotFoundError(f"Required config files not found: {', '.join(missing_files)}")

        for config_file in sorted(directory.glob('*.yaml')):
            config_dict.update(self.read_yaml(config_file) or {})
        return config_dict
