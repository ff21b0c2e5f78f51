"""Unit tests for config loading, env interpolation, and validation."""
from __future__ import annotations

from pathlib import Path

import pytest

from dust_sweeper.config import (
    DEFAULT_FEE_ACCOUNT,
    TOKEN_PROGRAM_ID,
    WRAPPED_SOL_MINT,
    AppConfig,
    FeeConfig,
    SweepConfig,
    _interpolate_env,
    load_config,
)


class TestInterpolateEnv:
    def test_simple_substitution(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MY_VAR", "hello")
        assert _interpolate_env("${MY_VAR}") == "hello"

    def test_missing_var_becomes_empty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NONEXISTENT_VAR_XYZ", raising=False)
        assert _interpolate_env("${NONEXISTENT_VAR_XYZ}") == ""

    def test_nested_structures(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TOK", "secret")
        result = _interpolate_env({"key": "${TOK}", "items": ["${TOK}", 3]})
        assert result == {"key": "secret", "items": ["secret", 3]}


class TestDefaults:
    def test_fee_defaults(self) -> None:
        fee = FeeConfig()
        assert fee.fee_bps == 50
        assert fee.fee_account == DEFAULT_FEE_ACCOUNT

    def test_sweep_defaults(self) -> None:
        sweep = SweepConfig()
        assert sweep.base_asset_mint == WRAPPED_SOL_MINT
        assert sweep.base_asset_decimals == 9

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            FeeConfig().fee_bps = 0  # type: ignore[misc]


class TestLoadConfig:
    def test_loads_valid_yaml(self, sample_yaml_path: Path) -> None:
        cfg = load_config(sample_yaml_path)
        assert isinstance(cfg, AppConfig)
        assert cfg.wallet.address == "11111111111111111111111111111111"
        assert cfg.chain.rpc_endpoints == ("https://rpc.example.com",)
        assert cfg.chain.commitment == "finalized"
        assert cfg.chain.token_program_id == TOKEN_PROGRAM_ID
        assert cfg.aggregator.timeout == 7
        assert cfg.sweep.confirm_timeout_seconds == 45.0
        assert cfg.sweep.fee.fee_bps == 25
        assert cfg.notifications.telegram.chat_id == "999"

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nonexistent.yaml")

    def test_env_interpolation_in_yaml(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("TEST_KEYPAIR", "/keys/id.json")
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text('wallet:\n  keypair_path: "${TEST_KEYPAIR}"\n')
        cfg = load_config(cfg_file)
        assert cfg.wallet.keypair_path == "/keys/id.json"
        assert cfg.sweep.fee.fee_bps == 50


class TestValidation:
    def _load(self, tmp_path: Path, content: str) -> AppConfig:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text(content)
        return load_config(cfg_file)

    def test_no_wallet_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="keypair_path or an address"):
            self._load(tmp_path, "chain: {}\n")

    def test_empty_endpoints_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="RPC endpoint"):
            self._load(tmp_path, "wallet: {address: x}\nchain: {rpc_endpoints: []}\n")

    def test_unknown_commitment_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="commitment"):
            self._load(tmp_path, "wallet: {address: x}\nchain: {commitment: instant}\n")

    def test_fee_bps_out_of_range_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="fee_bps"):
            self._load(tmp_path, "wallet: {address: x}\nsweep: {fee: {fee_bps: 10001}}\n")

    def test_empty_fee_account_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="fee_account"):
            self._load(tmp_path, "wallet: {address: x}\nsweep: {fee: {fee_account: ''}}\n")

    def test_non_positive_timeout_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="confirm_timeout_seconds"):
            self._load(tmp_path, "wallet: {address: x}\nsweep: {confirm_timeout_seconds: 0}\n")
