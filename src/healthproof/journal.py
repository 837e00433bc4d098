"""Journal layout: the ordered values the guest commits as public output."""

from __future__ import annotations

from typing import NamedTuple, Protocol

from .codec import U128_BYTES, decode_u128, encode_u128
from .errors import SerializationError

JOURNAL_FIELDS = ("health_factor", "collateral_value_usd", "total_minted")
JOURNAL_SIZE = U128_BYTES * len(JOURNAL_FIELDS)


class JournalValues(NamedTuple):
    health_factor: int
    collateral_value_usd: int
    total_minted: int


class CommitSink(Protocol):
    def commit_u128(self, value: int) -> None: ...


def commit_outputs(sink: CommitSink, health_factor: int, collateral_value_usd: int, total_minted: int) -> None:
    # Field order is part of the wire format read by external verifiers.
    sink.commit_u128(health_factor)
    sink.commit_u128(collateral_value_usd)
    sink.commit_u128(total_minted)


def encode_journal(values: JournalValues) -> bytes:
    return b"".join(encode_u128(value) for value in values)


def decode_journal(data: bytes) -> JournalValues:
    if len(data) != JOURNAL_SIZE:
        raise SerializationError(f"Journal must be {JOURNAL_SIZE} bytes, got {len(data)}")
    fields = [decode_u128(data[i : i + U128_BYTES]) for i in range(0, JOURNAL_SIZE, U128_BYTES)]
    return JournalValues(*fields)
