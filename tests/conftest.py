"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from nacl.signing import SigningKey

from dust_sweeper.chains.solana.base58 import b58encode
from dust_sweeper.chains.solana.transaction import Transaction, encode_compact_u16
from dust_sweeper.config import (
    AggregatorConfig,
    AppConfig,
    ChainConfig,
    FeeConfig,
    NotificationsConfig,
    SweepConfig,
    TelegramConfig,
    WalletConfig,
)
from dust_sweeper.models import HoldingRecord, PricedHolding

MINT_A = "AAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAA"
MINT_B = "BBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBB"
MINT_C = "CCCCCCCCCCCCCCCCCCCCCCCCCCCCCCCCCCCCCCCCCCCC"
WSOL = "So11111111111111111111111111111111111111112"


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_fee_config() -> FeeConfig:
    return FeeConfig(fee_bps=50, fee_account="FeeAccount1111111111111111111111111111111111")


@pytest.fixture()
def sample_sweep_config(sample_fee_config: FeeConfig) -> SweepConfig:
    return SweepConfig(
        base_asset_mint=WSOL,
        base_asset_decimals=9,
        confirm_timeout_seconds=5.0,
        confirm_poll_interval_seconds=0.01,
        fee=sample_fee_config,
    )


@pytest.fixture()
def sample_chain_config() -> ChainConfig:
    return ChainConfig(
        rpc_endpoints=("https://rpc1.example.com", "https://rpc2.example.com"),
        rpc_timeout=10,
        commitment="confirmed",
    )


@pytest.fixture()
def sample_app_config(
    sample_chain_config: ChainConfig, sample_sweep_config: SweepConfig
) -> AppConfig:
    return AppConfig(
        wallet=WalletConfig(address="11111111111111111111111111111111"),
        chain=sample_chain_config,
        aggregator=AggregatorConfig(
            quote_url="https://quote.example.com/quote",
            swap_url="https://quote.example.com/swap",
            timeout=5,
        ),
        sweep=sample_sweep_config,
        notifications=NotificationsConfig(telegram=TelegramConfig(enabled=False)),
    )


SAMPLE_YAML = textwrap.dedent("""\
    wallet:
      address: "11111111111111111111111111111111"
    chain:
      rpc_endpoints: ["https://rpc.example.com"]
      rpc_timeout: 10
      commitment: finalized
    aggregator:
      quote_url: "https://quote.example.com/quote"
      swap_url: "https://quote.example.com/swap"
      timeout: 7
    sweep:
      base_asset_decimals: 9
      confirm_timeout_seconds: 45
      fee:
        fee_bps: 25
        fee_account: "FeeAccount1111111111111111111111111111111111"
    notifications:
      telegram:
        enabled: true
        bot_token: "tok"
        chat_id: "999"
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file


# ---------------------------------------------------------------------------
# Model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def holding_a() -> HoldingRecord:
    return HoldingRecord(
        account="AcctA", mint=MINT_A, raw_amount=100, decimals=6, display_amount=0.0001
    )


@pytest.fixture()
def priced_holdings() -> list[PricedHolding]:
    return [
        PricedHolding(
            account="AcctA", mint=MINT_A, raw_amount=1_500_000, decimals=6,
            display_amount=1.5, base_value=0.02,
        ),
        PricedHolding(
            account="AcctB", mint=MINT_B, raw_amount=42, decimals=0,
            display_amount=42.0, base_value=0.0,
        ),
        PricedHolding(
            account="AcctC", mint=MINT_C, raw_amount=7_000_000_000, decimals=9,
            display_amount=7.0, base_value=1.25,
        ),
    ]


# ---------------------------------------------------------------------------
# Sample on-chain data
# ---------------------------------------------------------------------------


def make_token_account(
    pubkey: str, mint: str, amount: int, decimals: int, ui_string: str | None = None
) -> dict[str, Any]:
    token_amount: dict[str, Any] = {"amount": str(amount), "decimals": decimals}
    if ui_string is not None:
        token_amount["uiAmountString"] = ui_string
    return {
        "pubkey": pubkey,
        "account": {
            "data": {
                "parsed": {
                    "info": {"mint": mint, "owner": "Owner", "tokenAmount": token_amount},
                    "type": "account",
                },
                "program": "spl-token",
            },
            "lamports": 2039280,
        },
    }


@pytest.fixture()
def token_account_factory():
    return make_token_account


# ---------------------------------------------------------------------------
# Keys and transactions
# ---------------------------------------------------------------------------


@pytest.fixture()
def signing_key() -> SigningKey:
    return SigningKey(bytes(range(32)))


@pytest.fixture()
def wallet_address(signing_key: SigningKey) -> str:
    return b58encode(bytes(signing_key.verify_key))


def build_message(signers: list[bytes], others: list[bytes], versioned: bool = False) -> bytes:
    keys = signers + others
    body = (
        bytes([len(signers), 0, len(others)])
        + encode_compact_u16(len(keys))
        + b"".join(keys)
        + bytes(range(32))  # recent blockhash
        + encode_compact_u16(0)  # no instructions
    )
    if versioned:
        return b"\x80" + body + encode_compact_u16(0)
    return body


def build_unsigned_tx(signers: list[bytes], others: list[bytes], versioned: bool = False) -> bytes:
    message = build_message(signers, others, versioned)
    return encode_compact_u16(len(signers)) + bytes(64) * len(signers) + message


@pytest.fixture()
def unsigned_swap_tx(signing_key: SigningKey) -> bytes:
    """Versioned transaction whose fee payer is the test wallet."""
    program = bytes([7]) * 32
    return build_unsigned_tx([bytes(signing_key.verify_key)], [program], versioned=True)


# ---------------------------------------------------------------------------
# Collaborator mocks
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_connection() -> MagicMock:
    connection = MagicMock()
    connection.get_parsed_token_accounts_by_owner = AsyncMock(return_value=[])
    connection.deserialize_transaction = MagicMock(side_effect=Transaction.from_bytes)
    connection.send_raw_transaction = AsyncMock(return_value="SIG")
    connection.confirm_transaction = AsyncMock(return_value="confirmed")
    return connection


@pytest.fixture()
def mock_wallet(mock_connection: MagicMock, wallet_address: str) -> MagicMock:
    wallet = MagicMock()
    wallet.identity = wallet_address
    wallet.is_connected = True
    wallet.can_sign = True
    wallet.connection = mock_connection
    wallet.sign_transaction = AsyncMock(side_effect=lambda tx: tx)
    wallet.send_transaction = AsyncMock(return_value="SIG")
    return wallet


@pytest.fixture()
def mock_aggregator(unsigned_swap_tx: bytes) -> AsyncMock:
    aggregator = AsyncMock()
    aggregator.get_quote.return_value = {"outAmount": 500_000_000, "routePlan": []}
    aggregator.build_swap_transaction.return_value = unsigned_swap_tx
    return aggregator


@pytest.fixture()
def tx_builder():
    return build_unsigned_tx


@pytest.fixture()
def message_builder():
    return build_message
