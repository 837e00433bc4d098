"""Error taxonomy for the proof pipeline."""

from __future__ import annotations


class PipelineError(RuntimeError):
    """Base class for every failure the pipeline surfaces to its caller."""


class InputError(PipelineError, ValueError):
    """Raised when textual or numeric input is malformed or out of range."""


class ArithmeticOverflowError(PipelineError, ArithmeticError):
    """Raised when a u128 operation inside the calculator would overflow."""


class ExecutionError(PipelineError):
    """Raised when the prover fails to run the guest program to completion."""


class VerificationError(PipelineError):
    """Raised when a receipt does not verify against the expected image id."""


class SerializationError(PipelineError):
    """Raised when encoding, decoding or writing artifacts fails."""
