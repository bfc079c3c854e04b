"""
MangaShelf - Application settings

Settings are read once at startup (YAML file merged over defaults, then
environment overrides) into an AppSettings object that create_app attaches
to the Flask application. Request handlers read it from current_app.settings.
"""
import copy
import logging
import os
import secrets
from dataclasses import dataclass, field

import yaml

from constants import CONFIG_FILE, DEFAULT_SETTINGS

# Retrieve main logger
logger = logging.getLogger("main")

# Environment variable -> (section, key)
ENV_OVERRIDES = {
    "MANGASHELF_DATABASE_URI": ("database", "uri"),
    "MANGASHELF_JWT_SECRET": ("auth", "jwt_secret"),
    "MANGASHELF_ACCESS_TOKEN_MINUTES": ("auth", "access_token_minutes"),
    "MANGASHELF_LOG_LEVEL": ("logging", "level"),
    "LOG_FORMAT": ("logging", "format"),
    "MANGASHELF_HOST": ("server", "host"),
    "MANGASHELF_PORT": ("server", "port"),
}


@dataclass(frozen=True)
class SearchSettings:
    default_limit: int = 20
    max_limit: int = 50
    pool_min: int = 100
    pool_max: int = 300
    pool_factor: int = 5
    recent_days: int = 7


@dataclass
class AppSettings:
    database_uri: str
    jwt_secret: str
    access_token_minutes: int = 60 * 24 * 7
    login_rate_limit: str = "20 per minute"
    comment_post_rate_limit: str = "2 per minute"
    notification_retention_days: int = 30
    default_per_page: int = 20
    max_per_page: int = 100
    log_level: str = "INFO"
    log_format: str = "console"
    host: str = "0.0.0.0"
    port: int = 5000
    testing: bool = False
    search: SearchSettings = field(default_factory=SearchSettings)

    @classmethod
    def from_dict(cls, data, testing=False):
        auth = data.get("auth", {})
        jwt_secret = auth.get("jwt_secret")
        if not jwt_secret:
            logger.warning("No JWT secret configured, using a non-persistent random secret")
            jwt_secret = secrets.token_hex(32)

        search = data.get("search", {})
        return cls(
            database_uri=data["database"]["uri"],
            jwt_secret=jwt_secret,
            access_token_minutes=int(auth.get("access_token_minutes", 60 * 24 * 7)),
            login_rate_limit=auth.get("login_rate_limit", "20 per minute"),
            comment_post_rate_limit=data.get("comments", {}).get("post_rate_limit", "2 per minute"),
            notification_retention_days=int(data.get("notifications", {}).get("retention_days", 30)),
            default_per_page=int(data.get("pagination", {}).get("default_per_page", 20)),
            max_per_page=int(data.get("pagination", {}).get("max_per_page", 100)),
            log_level=str(data.get("logging", {}).get("level", "INFO")).upper(),
            log_format=data.get("logging", {}).get("format", "console"),
            host=data.get("server", {}).get("host", "0.0.0.0"),
            port=int(data.get("server", {}).get("port", 5000)),
            testing=testing,
            search=SearchSettings(
                default_limit=int(search.get("default_limit", 20)),
                max_limit=int(search.get("max_limit", 50)),
                pool_min=int(search.get("pool_min", 100)),
                pool_max=int(search.get("pool_max", 300)),
                pool_factor=int(search.get("pool_factor", 5)),
                recent_days=int(search.get("recent_days", 7)),
            ),
        )


def merge_settings(base, overrides):
    """Section-wise merge of overrides into a copy of base"""
    merged = copy.deepcopy(base)
    for section, values in (overrides or {}).items():
        if isinstance(values, dict) and isinstance(merged.get(section), dict):
            merged[section].update(values)
        else:
            merged[section] = values
    return merged


def apply_env_overrides(settings, environ=None):
    environ = os.environ if environ is None else environ
    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value:
            settings.setdefault(section, {})[key] = value
    return settings


def load_settings(config_file=CONFIG_FILE, overrides=None, environ=None, testing=False):
    """Build the AppSettings for this process"""
    settings = copy.deepcopy(DEFAULT_SETTINGS)

    if config_file and os.path.exists(config_file):
        logger.debug(f"Reading configuration file: {config_file}")
        with open(config_file, "r") as yaml_file:
            settings = merge_settings(settings, yaml.safe_load(yaml_file) or {})
    elif config_file:
        logger.debug(f"Configuration file {config_file} not found, using defaults")

    settings = apply_env_overrides(settings, environ)
    settings = merge_settings(settings, overrides)

    return AppSettings.from_dict(settings, testing=testing)
