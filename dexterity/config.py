"""Router configuration.

Configuration is merged from (lowest to highest precedence): defaults,
environment variables, the first config file found, explicit overrides.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Literal

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_snake

from dexterity.constants import (
    CACHE_MAX_ITEMS,
    DEFAULT_API_URL,
    DEFAULT_MAX_HOPS,
    DEFAULT_ROUTER_CONTRACT,
    MAX_HOPS_LIMIT,
    QUOTE_CACHE_TTL,
)
from dexterity.errors import ConfigError

logger = structlog.get_logger()

# Config file locations in order of precedence
CONFIG_LOCATIONS = (
    Path(".dexterity.json"),
    Path.home() / ".dexterity" / "config.json",
    Path("/etc/dexterity/config.json"),
)

# Environment variable -> config field
ENV_FIELDS = {
    "DEXTERITY_MAX_HOPS": "max_hops",
    "DEXTERITY_PATH_STRATEGY": "path_strategy",
    "DEXTERITY_QUOTE_TIMEOUT": "quote_timeout",
    "DEXTERITY_PARALLEL_REQUESTS": "parallel_requests",
    "DEXTERITY_QUOTE_CACHE_TTL": "quote_cache_ttl",
    "DEXTERITY_DEBUG": "debug",
    "DEXTERITY_API_URL": "api_url",
    "DEXTERITY_ROUTER_CONTRACT": "router_contract",
}

PathStrategy = Literal["vault_sequence", "asset_sequence"]


class RouterConfig(BaseModel):
    """Validated router settings.

    Attributes:
        max_hops: Maximum number of swaps (edges) in a path
        path_strategy: "vault_sequence" evaluates every distinct vault sequence;
            "asset_sequence" evaluates each token sequence once and picks the
            best parallel vault at each hop
        quote_timeout: Per-query deadline in seconds (None = wait forever)
        parallel_requests: Maximum concurrent vault quote calls
        quote_cache_ttl: Seconds a cached quote stays valid
        cache_max_items: Cache capacity before the oldest entry is evicted
        debug: Enable debug logging
        api_url: Stacks API base URL for contract reads
        api_key: Optional API key sent with contract reads
        router_contract: Multi-hop router contract id
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    max_hops: int = Field(default=DEFAULT_MAX_HOPS, ge=1, le=MAX_HOPS_LIMIT)
    path_strategy: PathStrategy = "vault_sequence"
    quote_timeout: float | None = Field(default=None, gt=0)
    parallel_requests: int = Field(default=10, ge=1, le=10)
    quote_cache_ttl: float = Field(default=QUOTE_CACHE_TTL, ge=0)
    cache_max_items: int = Field(default=CACHE_MAX_ITEMS, ge=1)
    debug: bool = False
    api_url: str = DEFAULT_API_URL
    api_key: str | None = None
    router_contract: str = DEFAULT_ROUTER_CONTRACT


def load_file_config(locations: tuple[Path, ...] = CONFIG_LOCATIONS) -> dict[str, Any]:
    """Load the first readable JSON config file.

    Args:
        locations: Candidate paths, checked in order

    Returns:
        Parsed settings, or an empty dict if no file was found
    """
    for location in locations:
        if not location.exists():
            continue
        try:
            with open(location) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("config_file_unreadable", path=str(location), error=str(e))
            continue
        if isinstance(data, dict):
            # Files may use camelCase keys (maxHops)
            return {to_snake(key): value for key, value in data.items()}
        logger.warning("config_file_not_object", path=str(location))
    return {}


def load_env_config(environ: dict[str, str] | None = None) -> dict[str, Any]:
    """Read settings from DEXTERITY_* environment variables."""
    env = os.environ if environ is None else environ
    config: dict[str, Any] = {}
    for var, field in ENV_FIELDS.items():
        if env.get(var):
            config[field] = env[var]
    api_key = env.get("HIRO_API_KEY") or env.get("STACKS_API_KEY")
    if api_key:
        config["api_key"] = api_key
    return config


def load_config(
    overrides: dict[str, Any] | None = None,
    *,
    environ: dict[str, str] | None = None,
    locations: tuple[Path, ...] = CONFIG_LOCATIONS,
) -> RouterConfig:
    """Build a RouterConfig from environment, config file and overrides.

    Raises:
        ConfigError: If the merged settings fail validation
    """
    merged: dict[str, Any] = {
        **load_env_config(environ),
        **load_file_config(locations),
        **(overrides or {}),
    }
    try:
        return RouterConfig.model_validate(merged)
    except ValidationError as e:
        raise ConfigError(f"Invalid router configuration: {e}") from e


DEFAULT_CONFIG = RouterConfig()

__all__ = ["RouterConfig", "PathStrategy", "load_config", "DEFAULT_CONFIG", "CONFIG_LOCATIONS"]
