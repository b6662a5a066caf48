"""
Settings management for gitdesk
"""

import copy
import json
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

from gitdesk.constants import (
    DEFAULT_ANTHROPIC_MODEL,
    DEFAULT_DEBOUNCE_MS,
    DEFAULT_MAX_COUNT,
    DEFAULT_OLLAMA_MODEL,
    DEFAULT_OLLAMA_URL,
    DEFAULT_OPENAI_MODEL,
)


@dataclass
class AiConfig:
    """Provider selection and credentials for commit message generation."""

    provider: str = "ollama"  # "ollama", "openai" or "anthropic"
    ollama_url: str = DEFAULT_OLLAMA_URL
    ollama_model: str = DEFAULT_OLLAMA_MODEL
    openai_key: str = ""
    openai_model: str = DEFAULT_OPENAI_MODEL
    anthropic_key: str = ""
    anthropic_model: str = DEFAULT_ANTHROPIC_MODEL


class Settings:
    """Manages application settings"""

    DEFAULT_SETTINGS: dict[str, Any] = {
        "ai": asdict(AiConfig()),
        "github": {
            "token": "",
            "favorites": [],  # GitHub repository ids
        },
        "graph": {"max_count": DEFAULT_MAX_COUNT},
        "watcher": {"debounce_ms": DEFAULT_DEBOUNCE_MS},
    }

    def __init__(self, config_path: Path | None = None) -> None:
        """Initialize settings"""
        if config_path is None:
            config_path = Path.home() / ".config" / "gitdesk" / "settings.json"

        self.config_path = config_path
        self.settings = copy.deepcopy(self.DEFAULT_SETTINGS)
        self.load()

    def load(self) -> None:
        """Load settings from file"""
        if self.config_path.exists():
            with open(self.config_path, encoding="utf-8") as f:
                loaded = json.load(f)
                # Merge with defaults to handle new settings
                self._merge_settings(self.settings, loaded)

    def save(self) -> None:
        """Save settings to file"""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "w", encoding="utf-8") as f:
            json.dump(self.settings, f, indent=2)

    def _merge_settings(self, base: dict[str, Any], updates: dict[str, Any]) -> None:
        """Recursively merge settings dictionaries"""
        for key, value in updates.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                base_dict: dict[str, Any] = base[key]
                value_dict: dict[str, Any] = value
                self._merge_settings(base_dict, value_dict)
            else:
                base[key] = value

    def get(self, path: str, default: Any = None) -> Any:
        """Get a setting by dot-separated path (e.g., 'ai.provider')"""
        parts = path.split(".")
        value: Any = self.settings

        for part in parts:
            if isinstance(value, dict):
                value_dict: dict[str, Any] = value
                if part in value_dict:
                    value = value_dict[part]
                else:
                    return default
            else:
                return default

        return value

    def set(self, path: str, value: Any) -> None:
        """Set a setting by dot-separated path"""
        parts = path.split(".")
        target: Any = self.settings

        for part in parts[:-1]:
            if part not in target:
                target[part] = {}
            target = target[part]

        target[parts[-1]] = value

    # --- AI ---

    def get_ai_config(self) -> AiConfig:
        """AI config from settings, with API keys falling back to the environment"""
        stored: dict[str, Any] = self.get("ai", {})
        known = {f.name for f in fields(AiConfig)}
        config = AiConfig(**{k: v for k, v in stored.items() if k in known})
        if not config.openai_key:
            config.openai_key = os.environ.get("OPENAI_API_KEY", "")
        if not config.anthropic_key:
            config.anthropic_key = os.environ.get("ANTHROPIC_API_KEY", "")
        return config

    def save_ai_config(self, config: AiConfig) -> None:
        self.set("ai", asdict(config))
        self.save()

    # --- Graph / watcher ---

    def get_max_count(self) -> int:
        return max(1, int(self.get("graph.max_count", DEFAULT_MAX_COUNT)))

    def get_debounce_ms(self) -> int:
        return max(0, int(self.get("watcher.debounce_ms", DEFAULT_DEBOUNCE_MS)))

    # --- GitHub ---

    def save_github_token(self, token: str) -> None:
        self.set("github.token", token.strip())
        self.save()

    def get_github_token(self) -> str | None:
        """Stored token, else GITHUB_TOKEN from the environment; None when neither is set"""
        token = str(self.get("github.token", "") or "").strip()
        if not token:
            token = os.environ.get("GITHUB_TOKEN", "").strip()
        return token or None

    def delete_github_token(self) -> None:
        self.set("github.token", "")
        self.save()

    def get_github_favorites(self) -> list[int]:
        return [int(repo_id) for repo_id in self.get("github.favorites", [])]

    def add_github_favorite(self, repo_id: int) -> None:
        favorites = self.get_github_favorites()
        if repo_id not in favorites:
            favorites.append(repo_id)
            self.set("github.favorites", favorites)
            self.save()

    def remove_github_favorite(self, repo_id: int) -> None:
        favorites = [f for f in self.get_github_favorites() if f != repo_id]
        self.set("github.favorites", favorites)
        self.save()
