"""Base58 (Bitcoin alphabet) encoding used for Solana keys and signatures."""
from __future__ import annotations

_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_INDEX = {char: index for index, char in enumerate(_ALPHABET)}


def b58encode(data: bytes) -> str:
    if not data:
        return ""
    num = int.from_bytes(data, "big")
    encoded = ""
    while num > 0:
        num, rem = divmod(num, 58)
        encoded = _ALPHABET[rem] + encoded
    pad = len(data) - len(data.lstrip(b"\x00"))
    return "1" * pad + encoded


def b58decode(value: str) -> bytes:
    if not value:
        return b""
    num = 0
    for char in value:
        if char not in _INDEX:
            raise ValueError(f"Invalid base58 character: {char!r}")
        num = num * 58 + _INDEX[char]
    combined = num.to_bytes((num.bit_length() + 7) // 8, "big") if num else b""
    pad = len(value) - len(value.lstrip("1"))
    return b"\x00" * pad + combined


def decode_pubkey(value: str) -> bytes:
    """Decode a base58 public key, requiring exactly 32 bytes."""
    key = b58decode(value)
    if len(key) != 32:
        raise ValueError(f"Invalid Solana public key length: {value}")
    return key
