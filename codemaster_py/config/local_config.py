"""Local configuration management (.codemaster_py.local)."""

import json
from pathlib import Path
from typing import Optional
from dataclasses import dataclass


@dataclass
class LocalConfig:
    """
    Local configuration for a practice directory.
    Stored at .codemaster_py.local in the project directory.
    Holds an optional custom catalog path and the default problem id.
    """

    catalog: Optional[str] = None
    default_problem: Optional[str] = None

    @classmethod
    def load(cls, path: Optional[Path] = None) -> Optional["LocalConfig"]:
        """
        Load local config from file.
        If path is not specified, searches upward from current directory.
        """
        if path is None:
            path = cls.find_config()

        if path is None or not path.exists():
            return None

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            config = cls(
                catalog=data.get("catalog"),
                default_problem=data.get("default_problem"),
            )
        except (json.JSONDecodeError, IOError, AttributeError):
            return None

        # Relative catalog paths are resolved against the config file
        if config.catalog and not Path(config.catalog).is_absolute():
            config.catalog = str(path.parent / config.catalog)
        return config

    def save(self, path: Optional[Path] = None) -> None:
        """Save local config to file."""
        if path is None:
            path = Path.cwd() / ".codemaster_py.local"

        data = {"catalog": self.catalog, "default_problem": self.default_problem}

        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    @staticmethod
    def find_config() -> Optional[Path]:
        """
        Search for .codemaster_py.local starting from current directory,
        walking up to root.
        """
        current = Path.cwd()

        while True:
            config_path = current / ".codemaster_py.local"
            if config_path.exists():
                return config_path

            if current == current.parent:
                return None

            current = current.parent
