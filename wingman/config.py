"""
Configuration.

Values come from, lowest precedence first: built-in defaults, the
settings.json file in the data directory, then environment variables
(a .env file is loaded first). API keys are only ever read from the
environment and are never written back to settings.json.
"""

import json
import logging
import os
from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = "~/.wingman"
SETTINGS_FILE = "settings.json"

SECRET_KEYS = ("gemini_api_key", "openai_api_key", "anthropic_api_key")

# setting name -> environment variable
ENV_VARS = {
    "active_provider": "WINGMAN_ACTIVE_PROVIDER",
    "active_model": "WINGMAN_ACTIVE_MODEL",
    "fallback_order": "WINGMAN_FALLBACK_ORDER",
    "use_ollama": "WINGMAN_USE_OLLAMA",
    "ollama_url": "OLLAMA_URL",
    "ollama_model": "OLLAMA_MODEL",
    "gemini_api_key": "GEMINI_API_KEY",
    "openai_api_key": "OPENAI_API_KEY",
    "anthropic_api_key": "ANTHROPIC_API_KEY",
    "speech_language": "WINGMAN_SPEECH_LANGUAGE",
    "coaching_cooldown_seconds": "WINGMAN_COACHING_COOLDOWN",
    "host": "WINGMAN_HOST",
    "port": "WINGMAN_PORT",
}


@dataclass
class Settings:
    """Application settings."""
    active_provider: str = "gemini"
    active_model: Optional[str] = None
    fallback_order: List[str] = field(default_factory=list)
    use_ollama: bool = False
    ollama_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.2"
    gemini_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None
    speech_language: str = "en-US"
    coaching_cooldown_seconds: float = 10.0
    data_dir: str = DEFAULT_DATA_DIR
    host: str = "127.0.0.1"
    port: int = 8765

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir).expanduser()

    @property
    def settings_path(self) -> Path:
        return self.data_path / SETTINGS_FILE

    @property
    def db_path(self) -> Path:
        return self.data_path / "meetings.db"

    @property
    def playbooks_dir(self) -> Path:
        return self.data_path / "playbooks"

    @property
    def conversation_path(self) -> Path:
        return self.data_path / "conversation-history.json"

    def public_dict(self) -> Dict[str, Any]:
        """Settings without API keys."""
        data = asdict(self)
        for key in SECRET_KEYS:
            data.pop(key, None)
        return data


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _coerce(name: str, value: Any) -> Any:
    if name == "fallback_order":
        if isinstance(value, str):
            return [v.strip() for v in value.split(",") if v.strip()]
        return [str(v) for v in value]
    if name == "use_ollama":
        return _parse_bool(value) if isinstance(value, str) else bool(value)
    if name == "coaching_cooldown_seconds":
        return float(value)
    if name == "port":
        return int(value)
    return value


def _read_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning(f"Ignoring malformed settings file {path}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Ignoring settings file {path}: expected an object")
        return {}
    return data


def load_settings(path: Optional[str] = None) -> Settings:
    """
    Build Settings from defaults, the settings file and the environment.

    Args:
        path: settings file to read. Defaults to settings.json in the data
            directory (WINGMAN_DATA_DIR, else ~/.wingman).
    """
    data_dir = os.getenv("WINGMAN_DATA_DIR", DEFAULT_DATA_DIR)
    settings_path = Path(path) if path else Path(data_dir).expanduser() / SETTINGS_FILE

    known = {f.name for f in fields(Settings)}
    values: Dict[str, Any] = {"data_dir": data_dir}

    for name, value in _read_file(settings_path).items():
        if name not in known or name in SECRET_KEYS or name == "data_dir":
            continue
        values[name] = value

    for name, env_var in ENV_VARS.items():
        raw = os.getenv(env_var)
        if raw:
            values[name] = raw

    for name in list(values):
        try:
            values[name] = _coerce(name, values[name])
        except (TypeError, ValueError):
            logger.warning(f"Invalid value for setting {name!r}, using default")
            del values[name]

    return Settings(**values)


def save_settings(settings: Settings, path: Optional[str] = None) -> Path:
    """Persist non-secret settings. Returns the file written."""
    target = Path(path) if path else settings.settings_path
    data = settings.public_dict()
    data.pop("data_dir", None)

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(data, indent=2), encoding="utf-8")
    logger.info(f"Saved settings to {target}")
    return target
