"""Fixed-width word codec shared by the host and the guest."""

from __future__ import annotations

from typing import Iterable, List, Sequence

from .errors import SerializationError

WORD_BYTES = 4
U32_MAX = (1 << 32) - 1
U128_BYTES = 16
U128_MAX = (1 << 128) - 1
HEX_PREFIX = "0x"
_HEX_DIGITS = frozenset("0123456789abcdef")


def u128_to_words(value: int) -> List[int]:
    if not 0 <= value <= U128_MAX:
        raise SerializationError(f"Value does not fit in u128: {value}")
    return [(value >> (32 * i)) & U32_MAX for i in range(U128_BYTES // WORD_BYTES)]


def words_to_u128(words: Sequence[int]) -> int:
    if len(words) != U128_BYTES // WORD_BYTES:
        raise SerializationError(f"u128 needs 4 words, got {len(words)}")
    value = 0
    for i, word in enumerate(words):
        value |= (word & U32_MAX) << (32 * i)
    return value


def words_to_bytes(words: Iterable[int]) -> bytes:
    out = bytearray()
    for word in words:
        if not 0 <= word <= U32_MAX:
            raise SerializationError(f"Word out of u32 range: {word}")
        out += word.to_bytes(WORD_BYTES, "little")
    return bytes(out)


def bytes_to_words(data: bytes) -> List[int]:
    if len(data) % WORD_BYTES:
        raise SerializationError(f"Byte length {len(data)} is not a multiple of {WORD_BYTES}")
    return [int.from_bytes(data[i : i + WORD_BYTES], "little") for i in range(0, len(data), WORD_BYTES)]


def encode_u128(value: int) -> bytes:
    return words_to_bytes(u128_to_words(value))


def decode_u128(data: bytes) -> int:
    if len(data) != U128_BYTES:
        raise SerializationError(f"u128 needs {U128_BYTES} bytes, got {len(data)}")
    return words_to_u128(bytes_to_words(data))


def to_hex(data: bytes, *, prefixed: bool = True) -> str:
    digits = data.hex()
    return f"{HEX_PREFIX}{digits}" if prefixed else digits


def from_hex(text: str, *, prefixed: bool = True) -> bytes:
    if not isinstance(text, str):
        raise SerializationError(f"Expected hex string, got {type(text).__name__}")
    if prefixed:
        if not text.startswith(HEX_PREFIX):
            raise SerializationError(f"Hex string is missing the {HEX_PREFIX!r} prefix")
        text = text[len(HEX_PREFIX) :]
    if not set(text) <= _HEX_DIGITS:
        raise SerializationError("Hex string must contain only lowercase hex digits")
    try:
        return bytes.fromhex(text)
    except ValueError as exc:
        raise SerializationError(f"Invalid hex payload: {exc}") from exc
