"""Unified configuration loaded from .republish.toml, env vars, and CLI flags.

Loading order: defaults → TOML file → env vars → CLI flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".republish.toml"
CONFIG_SEARCH_PATHS = [
    Path("."),
]
GLOBAL_CONFIG_PATH = Path.home() / ".config" / "republish" / "config.toml"

DEFAULT_ENDPOINT = "republish"
DEFAULT_SUBTITLE_META_KEY = "newspack_post_subtitle"
DEFAULT_SHORTCODES = ["caption", "wp_caption", "gallery", "playlist", "audio", "video", "embed"]
DEFAULT_FOOTER_TEMPLATE = (
    '<p>This <a target="_blank" href="{url}">article</a> first appeared on '
    '<a target="_blank" href="{site_url}">{site_name}</a> and is republished here '
    "under a Creative Commons license.</p>"
)


class SiteConfig(BaseModel):
    """[site] section."""

    url: str = "http://localhost:8000"
    name: str = ""
    timezone: str = "UTC"

    @property
    def home_url(self) -> str:
        return self.url.rstrip("/")


class RepublishSectionConfig(BaseModel):
    """[republish] section: the site-wide republication policy."""

    endpoint: str = DEFAULT_ENDPOINT
    post_types: list[str] = Field(default_factory=lambda: ["post"])
    license_statement: str = ""
    # Replaces the default whitelist entirely when set: tag -> allowed attributes.
    allowed_tags: dict[str, list[str]] | None = None
    subtitle_meta_key: str = DEFAULT_SUBTITLE_META_KEY
    shortcodes: list[str] = Field(default_factory=lambda: list(DEFAULT_SHORTCODES))
    footer_template: str = DEFAULT_FOOTER_TEMPLATE
    tracking_pixel: bool = True
    analytics_id: str = ""

    @field_validator("endpoint")
    @classmethod
    def _trim_endpoint(cls, value: str) -> str:
        return value.strip("/") or DEFAULT_ENDPOINT


class AttributionConfig(BaseModel):
    """[attribution] section: per-image "can distribute" tracking."""

    enabled: bool = False


class StoreConfig(BaseModel):
    """[store] section."""

    directory: str = "."


class ServerConfig(BaseModel):
    """[server] section."""

    host: str = "127.0.0.1"
    port: int = 8000


class RepublishConfig(BaseModel):
    """Top-level configuration model for the republication service."""

    site: SiteConfig = Field(default_factory=SiteConfig)
    republish: RepublishSectionConfig = Field(default_factory=RepublishSectionConfig)
    attribution: AttributionConfig = Field(default_factory=AttributionConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    @property
    def store_path(self) -> Path:
        return Path(self.store.directory)


def load_config(path: str | Path | None = None) -> RepublishConfig:
    """Load configuration from a TOML file.

    Search order:
    1. Explicit path (if provided)
    2. .republish.toml in CWD
    3. ~/.config/republish/config.toml

    Then overlay environment variables.

    Args:
        path: Explicit path to a TOML file.

    Returns:
        Merged RepublishConfig.
    """
    data: dict[str, object] = {}

    if path is not None:
        toml_path = Path(path)
        if toml_path.exists():
            data = _load_toml(toml_path)
        else:
            logger.warning("Config file not found: %s", toml_path)
    else:
        for search_dir in CONFIG_SEARCH_PATHS:
            candidate = search_dir / CONFIG_FILENAME
            if candidate.exists():
                data = _load_toml(candidate)
                logger.info("Loaded config from %s", candidate)
                break
        if not data and GLOBAL_CONFIG_PATH.exists():
            data = _load_toml(GLOBAL_CONFIG_PATH)
            logger.info("Loaded config from %s", GLOBAL_CONFIG_PATH)

    config = RepublishConfig.model_validate(data) if data else RepublishConfig()

    return _apply_env_vars(config)


def merge_cli_overrides(config: RepublishConfig, **cli_kwargs: object) -> RepublishConfig:
    """Overlay explicitly-set CLI flags onto the config.

    Only overrides values where the CLI flag was explicitly provided
    (i.e., not None).

    Args:
        config: Base config.
        **cli_kwargs: CLI flag values, keyed ``<section>_<field>``
            (e.g., ``server_port``, ``site_timezone``).

    Returns:
        Updated config with CLI overrides applied.
    """
    data = config.model_dump()

    mapping: dict[str, tuple[str, str]] = {
        "site_url": ("site", "url"),
        "site_timezone": ("site", "timezone"),
        "store_directory": ("store", "directory"),
        "server_host": ("server", "host"),
        "server_port": ("server", "port"),
        "endpoint": ("republish", "endpoint"),
    }

    for key, value in cli_kwargs.items():
        if value is None:
            continue
        if key in mapping:
            section, field = mapping[key]
            data[section][field] = value

    return RepublishConfig.model_validate(data)


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _apply_env_vars(config: RepublishConfig) -> RepublishConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    env_mapping: dict[str, tuple[str, str]] = {
        "REPUBLISH_SITE_URL": ("site", "url"),
        "REPUBLISH_SITE_NAME": ("site", "name"),
        "REPUBLISH_TIMEZONE": ("site", "timezone"),
        "REPUBLISH_ENDPOINT": ("republish", "endpoint"),
        "REPUBLISH_LICENSE_STATEMENT": ("republish", "license_statement"),
        "REPUBLISH_ANALYTICS_ID": ("republish", "analytics_id"),
        "REPUBLISH_STORE_DIR": ("store", "directory"),
        "REPUBLISH_HOST": ("server", "host"),
    }

    for env_var, (section, field) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            data[section][field] = value

    post_types_raw = os.environ.get("REPUBLISH_POST_TYPES")
    if post_types_raw is not None:
        data["republish"]["post_types"] = [
            t.strip() for t in post_types_raw.split(",") if t.strip()
        ]
    attribution_raw = os.environ.get("REPUBLISH_ATTRIBUTION")
    if attribution_raw is not None:
        data["attribution"]["enabled"] = attribution_raw.lower() in ("true", "1", "yes")
    port_raw = os.environ.get("REPUBLISH_PORT")
    if port_raw is not None:
        data["server"]["port"] = int(port_raw)

    return RepublishConfig.model_validate(data)
