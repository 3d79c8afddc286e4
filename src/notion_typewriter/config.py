# ABOUTME: Configuration loading and validation for notion-typewriter.
# ABOUTME: Parses config.yaml into validated dataclasses with environment fallbacks.

from dataclasses import dataclass, field
from pathlib import Path
import os
import yaml

# Tried in order when no token_env is configured
DEFAULT_TOKEN_ENVS = ("NOTION_API_TOKEN", "NOTION_TOKEN")

DEFAULT_PAGE_ENVS = ("NOTION_PAGE_URL", "NOTION_PAGE_ID")


class ConfigError(Exception):
    """Raised when configuration is invalid."""
    pass


@dataclass
class ServerConfig:
    """Configuration for the HTTP server."""
    host: str = "127.0.0.1"
    port: int = 3000
    public_dir: Path = Path("public")
    dist_dir: Path = Path("dist")
    max_upload_bytes: int = 10 * 1024 * 1024

    def __post_init__(self):
        if not 0 < self.port < 65536:
            raise ConfigError(f"server.port must be between 1 and 65535, got {self.port}")
        if self.max_upload_bytes < 1:
            raise ConfigError(f"server.max_upload_bytes must be positive, got {self.max_upload_bytes}")


@dataclass
class Config:
    """Main configuration for notion-typewriter."""
    page: str | None = None
    token_env: str | None = None
    poll_interval_seconds: int = 60
    output_path: Path | None = None
    server: ServerConfig = field(default_factory=ServerConfig)

    def __post_init__(self):
        if self.poll_interval_seconds < 1:
            raise ConfigError(
                f"poll_interval_seconds must be at least 1, got {self.poll_interval_seconds}"
            )

    def get_token(self) -> str:
        """Retrieve the Notion token from the environment."""
        names = (self.token_env,) if self.token_env else DEFAULT_TOKEN_ENVS
        for name in names:
            token = os.environ.get(name)
            if token:
                return token
        raise ConfigError(f"Notion token not set (tried environment variable(s): {', '.join(names)})")


def _page_from_env() -> str | None:
    for name in DEFAULT_PAGE_ENVS:
        value = os.environ.get(name)
        if value:
            return value
    return None


def _parse_server(raw: dict) -> ServerConfig:
    if not isinstance(raw, dict):
        raise ConfigError("'server' must be a mapping")

    port = raw.get("port", 3000)
    if os.environ.get("PORT"):
        port = os.environ["PORT"]

    try:
        return ServerConfig(
            host=raw.get("host", "127.0.0.1"),
            port=int(port),
            public_dir=Path(raw.get("public_dir", "public")),
            dist_dir=Path(raw.get("dist_dir", "dist")),
            max_upload_bytes=int(raw.get("max_upload_bytes", 10 * 1024 * 1024)),
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid server config: {e}")


def parse_config(raw: dict) -> Config:
    """Validate a raw config mapping and fill in environment fallbacks."""
    if not isinstance(raw, dict):
        raise ConfigError("Config file must contain a YAML mapping")

    output_path = raw.get("output_path")

    try:
        poll_interval = int(raw.get("poll_interval_seconds", 60))
    except (TypeError, ValueError):
        raise ConfigError(f"poll_interval_seconds must be an integer, got {raw['poll_interval_seconds']!r}")

    return Config(
        page=raw.get("page") or _page_from_env(),
        token_env=raw.get("token_env"),
        poll_interval_seconds=poll_interval,
        output_path=Path(output_path) if output_path else None,
        server=_parse_server(raw.get("server") or {}),
    )


def load_config(path: Path, required: bool = True) -> Config:
    """Load and validate configuration from a YAML file.

    Args:
        path: Location of config.yaml.
        required: If False, a missing file yields defaults plus environment.
    """
    if not path.exists():
        if required:
            raise ConfigError(f"Config file not found: {path}")
        return parse_config({})

    with open(path) as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in config file: {e}")

    # An empty file is treated as an empty mapping
    return parse_config(raw if raw is not None else {})
