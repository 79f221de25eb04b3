"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — exchange credentials (gitignored)
  4. Environment variables        — ``TRADE_SIGNALS_*`` prefix, plus
                                    ``BTCTURK_API_KEY`` / ``BTCTURK_API_SECRET``

Entry point: ``load_config(config_path=None) -> AppConfig``

The exchange client, signal service and CLI commands all receive an
``AppConfig`` (or one of its sections) explicitly.  There is no process-wide
client or credential holder.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

from trade_signals.signals.strategies import STRATEGY_NAMES

# ── Sub-config models ─────────────────────────────────────────────────────────


class ExchangeConfig(BaseModel):
    """BtcTurk endpoints and credentials.

    ``api_key`` / ``api_secret`` are only needed for private endpoints
    (balances, orders).  Candle data comes from the public graph API.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = "https://api.btcturk.com"
    graph_url: str = "https://graph-api.btcturk.com"
    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    timeout_seconds: float = 10.0

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {v}.")
        return v

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key and self.api_secret)


class SignalConfig(BaseModel):
    """Signal generation parameters."""

    model_config = ConfigDict(frozen=True)

    resolution: str = "1h"
    candle_count: int = 100
    min_data_points: int = 20
    rsi_period: int = 14
    default_strategy: str = "orb"

    @field_validator("default_strategy")
    @classmethod
    def validate_strategy(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in STRATEGY_NAMES:
            raise ValueError(
                f"default_strategy must be one of {list(STRATEGY_NAMES)}, got '{v}'."
            )
        return v

    @field_validator("candle_count", "min_data_points", "rsi_period")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"value must be >= 1, got {v}.")
        return v


class PortfolioConfig(BaseModel):
    """Portfolio valuation settings."""

    model_config = ConfigDict(frozen=True)

    quote_asset: str = "TRY"


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration — the single source of truth.

    Constructed by ``load_config()`` which merges TOML + .env + environment.
    """

    model_config = ConfigDict(frozen=True)

    exchange: ExchangeConfig = ExchangeConfig()
    signals: SignalConfig = SignalConfig()
    portfolio: PortfolioConfig = PortfolioConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    load_dotenv(dotenv_path=root / ".env", override=False)

    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    raw = _apply_env_overrides(raw)

    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variables to the raw config dict.

    Supported overrides:
      BTCTURK_API_KEY                 → raw["exchange"]["api_key"]
      BTCTURK_API_SECRET              → raw["exchange"]["api_secret"]
      TRADE_SIGNALS_DEFAULT_STRATEGY  → raw["signals"]["default_strategy"]
      TRADE_SIGNALS_LOG_LEVEL         → raw["logging"]["level"]
      TRADE_SIGNALS_DEBUG             → raw["debug"]
    """
    if api_key := os.environ.get("BTCTURK_API_KEY"):
        raw.setdefault("exchange", {})["api_key"] = api_key

    if api_secret := os.environ.get("BTCTURK_API_SECRET"):
        raw.setdefault("exchange", {})["api_secret"] = api_secret

    if strategy := os.environ.get("TRADE_SIGNALS_DEFAULT_STRATEGY"):
        raw.setdefault("signals", {})["default_strategy"] = strategy

    if log_level := os.environ.get("TRADE_SIGNALS_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("TRADE_SIGNALS_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        exchange=ExchangeConfig(**raw.get("exchange", {})),
        signals=SignalConfig(**raw.get("signals", {})),
        portfolio=PortfolioConfig(**raw.get("portfolio", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
