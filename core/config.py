"""Configuration models and loading."""

import json
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from core.exceptions import ConfigurationError

CONFIG_DIR = Path(__file__).resolve().parent.parent
CONFIG_FILE = CONFIG_DIR / "config.json"


class ServerSettings(BaseModel):
    host: str = "127.0.0.1"
    port: int = 9000
    direct_path: str = "/"
    event_path: str = "/event"
    max_body_size: int = 6 * 1024 * 1024  # 6MB


class ForwardSettings(BaseModel):
    """Transport policy applied to every outbound request."""

    timeout: float = Field(default=10.0, gt=0)
    follow_redirects: bool = False
    verify_tls: bool = False


class GatewaySettings(BaseModel):
    # Body is always base64 text; this only controls the reported flag.
    base64_flag: bool = False


class LoggingSettings(BaseModel):
    console: bool = True
    cli_log: bool = False
    request_logs: bool = False
    log_root: str = "logs"


class Config(BaseModel):
    server: ServerSettings = Field(default_factory=ServerSettings)
    forward: ForwardSettings = Field(default_factory=ForwardSettings)
    gateway: GatewaySettings = Field(default_factory=GatewaySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def load_config(path: Path = CONFIG_FILE) -> Config:
    """Load configuration from a JSON file, falling back to defaults if it is absent."""
    if not path.exists():
        return Config()

    try:
        data = json.loads(path.read_text())
        return Config.model_validate(data)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        raise ConfigurationError(f"Invalid config file {path}: {e}") from e
