"""Interface to the verifiable execution boundary."""

from __future__ import annotations

import logging
from typing import Protocol

from .errors import ExecutionError
from .guest import GuestEnv
from .program import GuestProgram, ImageId
from .receipt import Receipt

logger = logging.getLogger(__name__)


class Prover(Protocol):
    """Executes guest programs and checks the receipts they produce.

    ``execute`` must yield the same journal bytes for the same program and
    input. ``verify`` returns the journal only when the receipt was produced
    for exactly ``image_id``, and raises :class:`VerificationError` otherwise.
    """

    def execute(self, program: GuestProgram, input_bytes: bytes) -> Receipt: ...

    def verify(self, receipt: Receipt, image_id: ImageId) -> bytes: ...


def run_guest(program: GuestProgram, input_bytes: bytes) -> bytes:
    """Run ``program`` on a fresh environment and return its journal."""
    try:
        env = GuestEnv(input_bytes)
        program.entry(env)
    except Exception as exc:
        raise ExecutionError(f"Guest program {program.name!r} aborted: {exc}") from exc
    if env.remaining_words:
        raise ExecutionError(f"Guest program {program.name!r} left {env.remaining_words} input words unread")
    logger.debug("guest %s committed %d journal bytes", program.name, len(env.journal))
    return env.journal
