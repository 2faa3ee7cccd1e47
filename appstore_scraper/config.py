"""Client configuration merged from config.yaml and APPSTORE_* environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from appstore_scraper.constants import DEFAULT_COUNTRY, MARKETS
from appstore_scraper.utils.http_client import (
    DEFAULT_RETRIES,
    DEFAULT_TIMEOUT,
    RequestOptions,
)

logger = logging.getLogger(__name__)

ENV_PREFIX = "APPSTORE_"


class ConfigError(ValueError):
    """Raised when the configuration file or environment holds an invalid value."""


def _as_float(name: str, value) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a number, got {value!r}") from None
    if result <= 0:
        raise ConfigError(f"{name} must be positive, got {value!r}")
    return result


def _as_int(name: str, value) -> int:
    try:
        result = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be an integer, got {value!r}") from None
    if result < 0:
        raise ConfigError(f"{name} must not be negative, got {value!r}")
    return result


@dataclass
class ClientConfig:
    """Defaults applied to every operation the CLI runs."""

    country: str = DEFAULT_COUNTRY
    lang: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    retries: int = DEFAULT_RETRIES
    headers: dict = field(default_factory=dict)
    output_dir: str = "output"

    @classmethod
    def from_raw(cls, global_cfg: dict | None = None, env: dict | None = None) -> "ClientConfig":
        global_cfg = global_cfg or {}
        env = dict(os.environ) if env is None else env

        country = env.get(f"{ENV_PREFIX}COUNTRY") or global_cfg.get("country", DEFAULT_COUNTRY)
        country = str(country).lower()
        if country not in MARKETS:
            raise ConfigError(f"Unknown country: {country!r}")

        headers = global_cfg.get("headers") or {}
        if not isinstance(headers, dict):
            raise ConfigError("headers must be a mapping")

        return cls(
            country=country,
            lang=env.get(f"{ENV_PREFIX}LANG") or global_cfg.get("lang"),
            timeout=_as_float(
                "timeout", env.get(f"{ENV_PREFIX}TIMEOUT") or global_cfg.get("timeout", DEFAULT_TIMEOUT)
            ),
            retries=_as_int(
                "retries", env.get(f"{ENV_PREFIX}RETRIES") or global_cfg.get("retries", DEFAULT_RETRIES)
            ),
            headers={str(k): str(v) for k, v in headers.items()},
            output_dir=global_cfg.get("output_dir", "output"),
        )

    def request_options(self) -> RequestOptions:
        return RequestOptions(headers=dict(self.headers), timeout=self.timeout, retries=self.retries)


def load_config(config_path: str | Path) -> dict:
    """Read a YAML config file. A missing file is an empty config."""
    path = Path(config_path)
    if not path.exists():
        logger.debug("Config file %s not found; using defaults", path)
        return {}
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Could not parse {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")
    return data
