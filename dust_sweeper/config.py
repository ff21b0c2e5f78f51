"""Configuration loader — reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
WRAPPED_SOL_MINT = "So11111111111111111111111111111111111111112"
DEFAULT_FEE_ACCOUNT = "C7xVEy4THaBQzNiBMgwm6ewsG4Y1AkpRGURtHnpRid7R"

COMMITMENT_LEVELS = ("processed", "confirmed", "finalized")

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WalletConfig:
    keypair_path: str = ""
    address: str = ""


@dataclass(frozen=True)
class ChainConfig:
    rpc_endpoints: tuple[str, ...] = ("https://api.mainnet-beta.solana.com",)
    rpc_timeout: int = 30
    commitment: str = "confirmed"
    token_program_id: str = TOKEN_PROGRAM_ID


@dataclass(frozen=True)
class AggregatorConfig:
    quote_url: str = "https://quote-api.jup.ag/v6/quote"
    swap_url: str = "https://quote-api.jup.ag/v6/swap"
    timeout: int = 30


@dataclass(frozen=True)
class FeeConfig:
    """Operator fee routed out of every swap."""

    fee_bps: int = 50
    fee_account: str = DEFAULT_FEE_ACCOUNT


@dataclass(frozen=True)
class SweepConfig:
    base_asset_mint: str = WRAPPED_SOL_MINT
    base_asset_decimals: int = 9
    confirm_timeout_seconds: float = 60.0
    confirm_poll_interval_seconds: float = 2.0
    fee: FeeConfig = field(default_factory=FeeConfig)


@dataclass(frozen=True)
class TelegramConfig:
    enabled: bool = False
    bot_token: str = ""
    chat_id: str = ""


@dataclass(frozen=True)
class NotificationsConfig:
    telegram: TelegramConfig = field(default_factory=TelegramConfig)


@dataclass(frozen=True)
class AppConfig:
    wallet: WalletConfig = field(default_factory=WalletConfig)
    chain: ChainConfig = field(default_factory=ChainConfig)
    aggregator: AggregatorConfig = field(default_factory=AggregatorConfig)
    sweep: SweepConfig = field(default_factory=SweepConfig)
    notifications: NotificationsConfig = field(default_factory=NotificationsConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_wallet(raw: dict[str, Any]) -> WalletConfig:
    return WalletConfig(
        keypair_path=str(raw.get("keypair_path", "") or ""),
        address=str(raw.get("address", "") or ""),
    )


def _build_chain(raw: dict[str, Any]) -> ChainConfig:
    endpoints = raw.get("rpc_endpoints")
    return ChainConfig(
        rpc_endpoints=(
            tuple(e for e in endpoints if e)
            if endpoints is not None
            else ChainConfig.rpc_endpoints
        ),
        rpc_timeout=int(raw.get("rpc_timeout", 30)),
        commitment=str(raw.get("commitment", "confirmed")).lower(),
        token_program_id=raw.get("token_program_id", TOKEN_PROGRAM_ID),
    )


def _build_aggregator(raw: dict[str, Any]) -> AggregatorConfig:
    return AggregatorConfig(
        quote_url=raw.get("quote_url", AggregatorConfig.quote_url),
        swap_url=raw.get("swap_url", AggregatorConfig.swap_url),
        timeout=int(raw.get("timeout", 30)),
    )


def _build_sweep(raw: dict[str, Any]) -> SweepConfig:
    fee = raw.get("fee", {})
    return SweepConfig(
        base_asset_mint=raw.get("base_asset_mint", WRAPPED_SOL_MINT),
        base_asset_decimals=int(raw.get("base_asset_decimals", 9)),
        confirm_timeout_seconds=float(raw.get("confirm_timeout_seconds", 60.0)),
        confirm_poll_interval_seconds=float(
            raw.get("confirm_poll_interval_seconds", 2.0)
        ),
        fee=FeeConfig(
            fee_bps=int(fee.get("fee_bps", 50)),
            fee_account=fee.get("fee_account", DEFAULT_FEE_ACCOUNT),
        ),
    )


def _build_notifications(raw: dict[str, Any]) -> NotificationsConfig:
    tg = raw.get("telegram", {})
    return NotificationsConfig(
        telegram=TelegramConfig(
            enabled=bool(tg.get("enabled", False)),
            bot_token=tg.get("bot_token", ""),
            chat_id=str(tg.get("chat_id", "")),
        ),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (two levels up from this file).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        wallet=_build_wallet(raw.get("wallet", {})),
        chain=_build_chain(raw.get("chain", {})),
        aggregator=_build_aggregator(raw.get("aggregator", {})),
        sweep=_build_sweep(raw.get("sweep", {})),
        notifications=_build_notifications(raw.get("notifications", {})),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    if not cfg.wallet.keypair_path and not cfg.wallet.address:
        raise ValueError("Wallet needs either a keypair_path or an address")

    if not cfg.chain.rpc_endpoints:
        raise ValueError("At least one RPC endpoint must be configured")
    if cfg.chain.commitment not in COMMITMENT_LEVELS:
        raise ValueError(
            f"Unknown commitment '{cfg.chain.commitment}', "
            f"expected one of {', '.join(COMMITMENT_LEVELS)}"
        )

    sweep = cfg.sweep
    if not 0 <= sweep.fee.fee_bps <= 10_000:
        raise ValueError(f"fee_bps must be between 0 and 10000, got {sweep.fee.fee_bps}")
    if not sweep.fee.fee_account:
        raise ValueError("A fee_account must be configured")
    if not sweep.base_asset_mint:
        raise ValueError("base_asset_mint must not be empty")
    if sweep.base_asset_decimals < 0:
        raise ValueError("base_asset_decimals must not be negative")
    if sweep.confirm_timeout_seconds <= 0:
        raise ValueError("confirm_timeout_seconds must be positive")
    if sweep.confirm_poll_interval_seconds <= 0:
        raise ValueError("confirm_poll_interval_seconds must be positive")
