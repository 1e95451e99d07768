"""Configuration models and loading."""

import json
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

CONFIG_DIR = Path.home() / ".config" / "frame-proxy"
CONFIG_FILE = CONFIG_DIR / "config.json"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


class ProxySettings(BaseModel):
    host: str = "127.0.0.1"
    port: int = 8080
    debug: bool = False


class FetchSettings(BaseModel):
    timeout: float = 15.0
    user_agent: str = DEFAULT_USER_AGENT
    follow_redirects: bool = True
    max_connections: int = 100
    max_keepalive_connections: int = 20

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be positive")
        return value


class RewriteSettings(BaseModel):
    endpoint: str = "/api/proxy"
    asset_endpoint: str = "/api/asset"


class LimitSettings(BaseModel):
    keep_alive_timeout: int = 5


class Config(BaseModel):
    proxy: ProxySettings = Field(default_factory=ProxySettings)
    fetch: FetchSettings = Field(default_factory=FetchSettings)
    rewrite: RewriteSettings = Field(default_factory=RewriteSettings)
    limits: LimitSettings = Field(default_factory=LimitSettings)


def load_config(config_file: Path = CONFIG_FILE) -> Config:
    """Load configuration from JSON file, creating default if needed."""
    if not config_file.exists():
        config_file.parent.mkdir(parents=True, exist_ok=True)
        default = Config()
        config_file.write_text(default.model_dump_json(indent=2))
        return default

    try:
        data = json.loads(config_file.read_text())
        return Config.model_validate(data)
    except (json.JSONDecodeError, ValidationError):
        # Backup corrupted config and recreate default
        backup = config_file.with_suffix(".json.bak")
        config_file.rename(backup)
        default = Config()
        config_file.write_text(default.model_dump_json(indent=2))
        return default
