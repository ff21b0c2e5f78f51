"""Local wallet sessions backed by a Solana CLI keypair file."""
from __future__ import annotations

import json
import logging
from pathlib import Path

from nacl.signing import SigningKey

from ..chains.solana.base58 import b58encode, decode_pubkey
from ..chains.solana.transaction import Transaction
from ..config import WalletConfig
from ..errors import SigningError
from ..interfaces.chain import ChainConnection

logger = logging.getLogger(__name__)


class KeypairWallet:
    """Wallet that signs with an ed25519 key held in memory."""

    def __init__(self, signing_key: SigningKey, connection: ChainConnection) -> None:
        self._signing_key = signing_key
        self._public_key = bytes(signing_key.verify_key)
        self._connection = connection
        self._connected = True

    @classmethod
    def from_secret(cls, secret: bytes, connection: ChainConnection) -> KeypairWallet:
        """Build from a 64-byte secret (seed + public key) or a 32-byte seed."""
        if len(secret) not in (32, 64):
            raise ValueError(f"Keypair must be 32 or 64 bytes, got {len(secret)}")

        signing_key = SigningKey(secret[:32])
        if len(secret) == 64 and bytes(signing_key.verify_key) != secret[32:]:
            raise ValueError("Keypair public key does not match its secret seed")
        return cls(signing_key, connection)

    @classmethod
    def from_file(cls, path: str | Path, connection: ChainConnection) -> KeypairWallet:
        """Load a ``solana-keygen`` JSON file (array of 64 integers)."""
        path = Path(path).expanduser()
        if not path.exists():
            raise FileNotFoundError(f"Keypair file not found: {path}")

        with open(path) as f:
            data = json.load(f)

        if not isinstance(data, list) or not all(isinstance(b, int) for b in data):
            raise ValueError(f"Keypair file {path} is not a JSON array of bytes")

        wallet = cls.from_secret(bytes(data), connection)
        logger.info("Loaded keypair for %s", wallet.identity)
        return wallet

    @property
    def identity(self) -> str | None:
        return b58encode(self._public_key) if self._connected else None

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def can_sign(self) -> bool:
        return self._connected

    @property
    def connection(self) -> ChainConnection:
        return self._connection

    def disconnect(self) -> None:
        self._connected = False

    async def sign_transaction(self, tx: Transaction) -> Transaction:
        if not self._connected:
            raise SigningError("Wallet is disconnected")
        try:
            index = tx.signer_index(self._public_key)
        except ValueError as e:
            raise SigningError(str(e)) from e

        signature = self._signing_key.sign(tx.message).signature
        return tx.with_signature(index, signature)

    async def send_transaction(
        self, signed: Transaction, connection: ChainConnection
    ) -> str:
        if not signed.is_signed:
            raise SigningError("Transaction is missing required signatures")
        return await connection.send_raw_transaction(signed.serialize())


class WatchOnlyWallet:
    """Address-only session: can discover and value holdings but never sign."""

    def __init__(self, address: str, connection: ChainConnection) -> None:
        decode_pubkey(address)
        self._address = address
        self._connection = connection

    @property
    def identity(self) -> str | None:
        return self._address

    @property
    def is_connected(self) -> bool:
        return True

    @property
    def can_sign(self) -> bool:
        return False

    @property
    def connection(self) -> ChainConnection:
        return self._connection

    async def sign_transaction(self, tx: Transaction) -> Transaction:
        raise SigningError(f"Watch-only wallet {self._address} cannot sign")

    async def send_transaction(
        self, signed: Transaction, connection: ChainConnection
    ) -> str:
        raise SigningError(f"Watch-only wallet {self._address} cannot send")


def load_wallet(
    config: WalletConfig, connection: ChainConnection
) -> KeypairWallet | WatchOnlyWallet:
    """Prefer the keypair when configured, otherwise fall back to watch-only."""
    if config.keypair_path:
        return KeypairWallet.from_file(config.keypair_path, connection)
    if config.address:
        logger.info("No keypair configured, using watch-only wallet %s", config.address)
        return WatchOnlyWallet(config.address, connection)
    raise ValueError("Wallet needs either a keypair_path or an address")
