"""Global configuration management (~/.codemaster_py.global)."""

import json
from pathlib import Path
from typing import Optional
from dataclasses import dataclass, asdict

DEFAULT_PATH_NAME = ".codemaster_py.global"


@dataclass
class GlobalConfig:
    """
    Global configuration storing the remembered username and service endpoints.
    Stored at ~/.codemaster_py.global
    """

    user: str = ""
    api_url: str = "http://localhost:3001"
    judge_url: str = "http://localhost:8080/evaluate"
    sync_delay: float = 1.0
    timeout: float = 30.0

    @staticmethod
    def default_path() -> Path:
        return Path.home() / DEFAULT_PATH_NAME

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "GlobalConfig":
        """Load global config from file."""
        if path is None:
            path = cls.default_path()

        if not path.exists():
            return cls()

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            defaults = cls()
            return cls(
                user=str(data.get("user", "")),
                api_url=data.get("api_url", defaults.api_url),
                judge_url=data.get("judge_url", defaults.judge_url),
                sync_delay=float(data.get("sync_delay", defaults.sync_delay)),
                timeout=float(data.get("timeout", defaults.timeout)),
            )
        except (json.JSONDecodeError, IOError, AttributeError, TypeError, ValueError):
            return cls()

    def save(self, path: Optional[Path] = None) -> None:
        """Save global config to file."""
        if path is None:
            path = self.default_path()

        with open(path, "w", encoding="utf-8") as f:
            json.dump(asdict(self), f, indent=2)


class RememberedUser:
    """
    The single persisted identity key: read at boot, written at login,
    cleared at logout.
    """

    def __init__(self, config: GlobalConfig, path: Optional[Path] = None):
        self.config = config
        self.path = path

    def get(self) -> Optional[str]:
        return self.config.user or None

    def set(self, username: str) -> None:
        self.config.user = username
        self.config.save(self.path)

    def clear(self) -> None:
        self.config.user = ""
        self.config.save(self.path)
