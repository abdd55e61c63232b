"""Configuration models and loading."""

import json
import os
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from core.exceptions import ConfigurationError

CONFIG_DIR = Path.home() / ".config" / "gridcurl"
CONFIG_FILE = CONFIG_DIR / "config.json"
CONFIG_ENV = "GRIDCURL_CONFIG"


class RequestDefaults(BaseModel):
    timeout: int = Field(default=0, ge=0)
    verbose: int = Field(default=0, ge=0)


class TLSSettings(BaseModel):
    root_ca: str | None = None
    insecure: bool = False
    # {uid} is replaced with the numeric user id
    default_proxy: str = "/tmp/x509up_u{uid}"

    @field_validator("default_proxy")
    @classmethod
    def check_template(cls, v: str) -> str:
        try:
            v.format(uid=0)
        except (KeyError, IndexError, AttributeError, ValueError) as e:
            raise ValueError(f"only the {{uid}} placeholder is supported: {e!r}") from e
        return v


class Config(BaseModel):
    defaults: RequestDefaults = Field(default_factory=RequestDefaults)
    tls: TLSSettings = Field(default_factory=TLSSettings)


def config_path(override: str | None = None) -> Path:
    """Return the config file location: explicit path, $GRIDCURL_CONFIG, then default."""
    if override:
        return Path(override)
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return Path(env_path)
    return CONFIG_FILE


def load_config(path: str | Path | None = None) -> Config:
    """Load configuration from JSON file, falling back to defaults if it does not exist."""
    config_file = config_path(str(path) if path else None)
    if not config_file.exists():
        return Config()

    try:
        data = json.loads(config_file.read_text())
        return Config.model_validate(data)
    except OSError as e:
        raise ConfigurationError(f"Unable to read config {config_file}: {e}") from e
    except (json.JSONDecodeError, ValidationError) as e:
        raise ConfigurationError(f"Invalid config {config_file}: {e}") from e
