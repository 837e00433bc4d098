"""Code that runs inside the execution boundary.

The guest sees only the serialized input words through :class:`GuestEnv` and
publishes results by committing them to the journal. Nothing else leaves the
boundary.
"""

from __future__ import annotations

from typing import List

from .calculator import compute_health_factor
from .codec import U128_BYTES, WORD_BYTES, bytes_to_words, encode_u128, words_to_u128
from .errors import SerializationError
from .journal import commit_outputs


class GuestEnv:
    def __init__(self, input_bytes: bytes):
        self._words = bytes_to_words(input_bytes)
        self._cursor = 0
        self._journal = bytearray()

    def _read_words(self, count: int) -> List[int]:
        end = self._cursor + count
        if end > len(self._words):
            raise SerializationError(
                f"Guest read past end of input ({len(self._words)} words available, wanted {end})"
            )
        words = self._words[self._cursor : end]
        self._cursor = end
        return words

    def read_u128(self) -> int:
        return words_to_u128(self._read_words(U128_BYTES // WORD_BYTES))

    def commit_u128(self, value: int) -> None:
        self._journal += encode_u128(value)

    @property
    def remaining_words(self) -> int:
        return len(self._words) - self._cursor

    @property
    def journal(self) -> bytes:
        return bytes(self._journal)


def health_factor_main(env: GuestEnv) -> None:
    total_minted = env.read_u128()
    collateral_value_usd = env.read_u128()
    health_factor = compute_health_factor(total_minted, collateral_value_usd)
    commit_outputs(env, health_factor, collateral_value_usd, total_minted)
