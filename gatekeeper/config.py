# gatekeeper/config.py
"""
Application configuration using Pydantic-Settings, loaded from config.yaml.
Values can be overridden via GATEKEEPER_* environment variables or a .env file
(nested keys use a double underscore, e.g. GATEKEEPER_DATABASE__HOST).

On first run the YAML file does not exist yet: a blank template is written
and ConfigMissingError is raised so the operator can fill it in.
"""

import os
from typing import Optional

import yaml
from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url

from gatekeeper.exceptions import ConfigMissingError, ConfigParseError

DEFAULT_CONFIG_PATH = "config.yaml"
DEFAULT_DB_PORT = 3306
# Aliased fields do not get env_prefix, so "global" is also read under this name
ENV_GLOBAL_KEY = "GATEKEEPER_GLOBAL"

TEMPLATE = {
    "global": {
        "debug": False,
    },
    "database": {
        "user": "",
        "password": "",
        "host": "",
        "port": "",
        "database": "",
    },
}


class DatabaseSettings(BaseModel):
    user: str = ""
    password: str = ""
    host: str = ""
    port: int = DEFAULT_DB_PORT
    database: str = ""
    driver: str = "mysql+pymysql"
    url_override: Optional[str] = Field(default=None, alias="url")

    model_config = {"populate_by_name": True}

    @field_validator("port", mode="before")
    @classmethod
    def _blank_port(cls, value):
        # The template ships port as an empty string
        if value is None or value == "":
            return DEFAULT_DB_PORT
        return value

    @property
    def url(self) -> URL:
        if self.url_override:
            return make_url(self.url_override)
        return URL.create(
            drivername=self.driver,
            username=self.user or None,
            password=self.password or None,
            host=self.host or None,
            port=self.port,
            database=self.database or None,
        )


class GlobalSettings(BaseModel):
    debug: bool = False
    log_dir: str = "logs"
    log_file: str = "trace.log"
    site_name: str = "Gatekeeper"


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8080


class Settings(BaseSettings):
    # ── Database ──────────────────────────────────────────────────────────
    database: DatabaseSettings = DatabaseSettings()

    # ── Global ────────────────────────────────────────────────────────────
    global_: GlobalSettings = Field(
        default=GlobalSettings(),
        alias="global",
        validation_alias=AliasChoices("global", ENV_GLOBAL_KEY),
    )

    # ── Network ───────────────────────────────────────────────────────────
    server: ServerSettings = ServerSettings()

    model_config = SettingsConfigDict(
        env_prefix="GATEKEEPER_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _merge_global_env(cls, data):
        # Fold GATEKEEPER_GLOBAL__* values over the YAML "global" section
        if not isinstance(data, dict):
            return data
        base = data.get("global") or {}
        if not isinstance(base, (dict, BaseModel)):
            return data
        merged = base.model_dump() if isinstance(base, BaseModel) else dict(base)
        found = False
        for key in list(data):
            if key != "global" and key.lower() in ("global_", ENV_GLOBAL_KEY.lower()):
                value = data.pop(key)
                if isinstance(value, BaseModel):
                    value = value.model_dump()
                if isinstance(value, dict):
                    merged.update(value)
                    found = True
        if found:
            data["global"] = merged
        return data

    @classmethod
    def settings_customise_sources(cls, settings_cls, init_settings, env_settings,
                                   dotenv_settings, file_secret_settings):
        # Environment beats the YAML file
        return env_settings, dotenv_settings, init_settings, file_secret_settings


def write_template(path: str = DEFAULT_CONFIG_PATH) -> None:
    """Write a blank config file for the operator to fill in."""
    try:
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(TEMPLATE, f, default_flow_style=False, sort_keys=False)
    except OSError as e:
        raise ConfigParseError(f"Cannot write config template {path}: {e}") from e


def load_settings(path: str = DEFAULT_CONFIG_PATH) -> Settings:
    """
    Read config.yaml into a Settings object.
    Raises ConfigMissingError after writing a template if the file is absent,
    ConfigParseError if it cannot be read, decoded or coerced.
    """
    if not os.path.exists(path):
        write_template(path)
        raise ConfigMissingError(
            f"Config file {path} does not exist. A new config file has been created. "
            "Please fill in the configuration data and restart the program."
        )

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigParseError(f"Cannot read the YAML file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigParseError(f"Cannot decode YAML file {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigParseError(f"Cannot decode YAML file {path}: expected a mapping at top level")

    try:
        return Settings(**data)
    except ValidationError as e:
        raise ConfigParseError(f"Invalid configuration in {path}: {e}") from e
