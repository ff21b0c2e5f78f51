"""Solana transaction wire format — just enough to sign prebuilt transactions.

Layout::

    compact-u16  number of signatures
    [64 bytes]   signatures
    message      legacy, or versioned when the first byte has the high bit set

Only the message header and static account keys are parsed; the rest of the
message (blockhash, instructions, lookup tables) is carried as opaque bytes.
"""
from __future__ import annotations

from dataclasses import dataclass

from ...errors import TransactionDecodeError
from .base58 import b58encode

SIGNATURE_LENGTH = 64
PUBKEY_LENGTH = 32
_VERSION_PREFIX_MASK = 0x80


def decode_compact_u16(data: bytes, offset: int) -> tuple[int, int]:
    """Decode a compact-u16 at ``offset``; returns (value, new_offset)."""
    value = 0
    for i in range(3):
        if offset + i >= len(data):
            raise TransactionDecodeError("Truncated compact-u16")
        byte = data[offset + i]
        value |= (byte & 0x7F) << (7 * i)
        if not byte & 0x80:
            return value, offset + i + 1
    raise TransactionDecodeError("compact-u16 longer than 3 bytes")


def encode_compact_u16(value: int) -> bytes:
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"compact-u16 out of range: {value}")
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


@dataclass(frozen=True)
class MessageHeader:
    version: int | None
    num_required_signatures: int
    num_readonly_signed: int
    num_readonly_unsigned: int
    account_keys: tuple[bytes, ...]


def parse_message_header(message: bytes) -> MessageHeader:
    offset = 0
    if not message:
        raise TransactionDecodeError("Empty transaction message")

    version: int | None = None
    if message[0] & _VERSION_PREFIX_MASK:
        version = message[0] & 0x7F
        offset = 1

    if len(message) < offset + 3:
        raise TransactionDecodeError("Truncated message header")
    required, ro_signed, ro_unsigned = message[offset:offset + 3]
    offset += 3

    num_keys, offset = decode_compact_u16(message, offset)
    end = offset + num_keys * PUBKEY_LENGTH
    if len(message) < end:
        raise TransactionDecodeError("Truncated account keys")
    keys = tuple(
        message[i:i + PUBKEY_LENGTH] for i in range(offset, end, PUBKEY_LENGTH)
    )

    if required > num_keys:
        raise TransactionDecodeError(
            f"Header requires {required} signers but only {num_keys} keys present"
        )

    return MessageHeader(
        version=version,
        num_required_signatures=required,
        num_readonly_signed=ro_signed,
        num_readonly_unsigned=ro_unsigned,
        account_keys=keys,
    )


@dataclass(frozen=True)
class Transaction:
    """A serialized transaction split into signature slots and message bytes."""

    signatures: tuple[bytes, ...]
    message: bytes

    @classmethod
    def from_bytes(cls, raw: bytes) -> Transaction:
        count, offset = decode_compact_u16(raw, 0)
        end = offset + count * SIGNATURE_LENGTH
        if len(raw) < end:
            raise TransactionDecodeError("Truncated signatures")
        signatures = tuple(
            raw[i:i + SIGNATURE_LENGTH] for i in range(offset, end, SIGNATURE_LENGTH)
        )
        tx = cls(signatures=signatures, message=raw[end:])

        header = tx.header
        if header.num_required_signatures != count:
            raise TransactionDecodeError(
                f"Transaction has {count} signature slots, "
                f"message requires {header.num_required_signatures}"
            )
        return tx

    @property
    def header(self) -> MessageHeader:
        return parse_message_header(self.message)

    @property
    def version(self) -> int | None:
        """Message version, or None for legacy messages."""
        return self.header.version

    @property
    def signer_keys(self) -> tuple[bytes, ...]:
        header = self.header
        return header.account_keys[: header.num_required_signatures]

    def signer_index(self, pubkey: bytes) -> int:
        try:
            return self.signer_keys.index(pubkey)
        except ValueError:
            raise ValueError(
                f"{b58encode(pubkey)} is not a required signer of this transaction"
            ) from None

    def with_signature(self, index: int, signature: bytes) -> Transaction:
        if len(signature) != SIGNATURE_LENGTH:
            raise ValueError("Signature must be 64 bytes")
        sigs = list(self.signatures)
        sigs[index] = signature
        return Transaction(signatures=tuple(sigs), message=self.message)

    @property
    def is_signed(self) -> bool:
        empty = bytes(SIGNATURE_LENGTH)
        return all(sig != empty for sig in self.signatures)

    @property
    def signature_id(self) -> str:
        """Base58 of the fee payer's signature — the transaction id."""
        return b58encode(self.signatures[0]) if self.signatures else ""

    def serialize(self) -> bytes:
        return (
            encode_compact_u16(len(self.signatures))
            + b"".join(self.signatures)
            + self.message
        )
