"""
CLI configuration stored as JSON under ``~/.shipyard/config.json``.

``SHIPYARD_CONFIG_DIR`` relocates the directory (tests, CI).
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger("shipyard_cli.config")

DEFAULT_API_URL = "http://localhost:5000"


def default_config_dir() -> Path:
    env_dir = os.getenv("SHIPYARD_CONFIG_DIR")
    if env_dir:
        return Path(env_dir)
    return Path.home() / ".shipyard"


class ConfigManager:
    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = config_dir or default_config_dir()
        self.config_file = self.config_dir / "config.json"
        self._data: Dict[str, Any] = {"token": "", "apiUrl": DEFAULT_API_URL}
        self._load()

    def _load(self) -> None:
        if not self.config_file.exists():
            return
        try:
            with open(self.config_file, encoding="utf-8") as f:
                self._data.update(json.load(f))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable config file %s: %s", self.config_file, e)

    def _save(self) -> None:
        self.config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w", encoding="utf-8") as f:
            json.dump(self._data, f, indent=2)
        # Holds the API token
        os.chmod(self.config_file, 0o600)

    @property
    def token(self) -> str:
        return self._data.get("token") or ""

    @property
    def api_url(self) -> str:
        return self._data.get("apiUrl") or DEFAULT_API_URL

    def is_logged_in(self) -> bool:
        return bool(self.token)

    def set_token(self, token: str) -> None:
        self._data["token"] = token
        self._save()

    def set_api_url(self, api_url: str) -> None:
        self._data["apiUrl"] = api_url.rstrip("/")
        self._save()

    def clear_token(self) -> None:
        self._data["token"] = ""
        self._save()
