"""Host-side orchestration: prove, self-verify, package."""

from __future__ import annotations

import logging

from .backends import create_prover
from .boundary import Prover
from .config import ProverConfig
from .emitter import ProofOutput
from .errors import ExecutionError, PipelineError, VerificationError
from .inputs import HealthFactorInput
from .journal import JournalValues, decode_journal
from .program import HEALTH_FACTOR_PROGRAM, GuestProgram, ImageId
from .receipt import Receipt

logger = logging.getLogger(__name__)


class ProofPackager:
    def __init__(self, prover: Prover, program: GuestProgram = HEALTH_FACTOR_PROGRAM):
        self.prover = prover
        self.program = program

    def produce_proof(self, request: HealthFactorInput) -> ProofOutput:
        receipt = self._prove(request)
        return self._package(receipt)

    def _prove(self, request: HealthFactorInput) -> Receipt:
        input_bytes = request.to_bytes()
        logger.info("executing %s (image id %s)", self.program.name, self.program.image_id.hex())
        try:
            receipt = self.prover.execute(self.program, input_bytes)
        except PipelineError:
            raise
        except Exception as exc:
            raise ExecutionError(f"Prover failed to execute {self.program.name!r}: {exc}") from exc

        # A failed self-check is a defect, not a transient fault: no retry.
        try:
            journal = self.prover.verify(receipt, self.program.image_id)
        except PipelineError:
            raise
        except Exception as exc:
            raise VerificationError(f"Prover failed to verify its own receipt: {exc}") from exc
        if journal != receipt.journal:
            raise VerificationError("Verified journal differs from the receipt journal")
        logger.info("receipt verified against image id %s", self.program.image_id.hex())
        return receipt

    def _package(self, receipt: Receipt) -> ProofOutput:
        proof = receipt.to_cbor()
        output = ProofOutput.from_bytes(proof, receipt.journal, self.program.image_id.to_bytes())
        logger.debug("proof %d bytes, journal %d bytes", len(proof), len(receipt.journal))
        return output


def produce_proof(
    request: HealthFactorInput,
    prover: Prover | None = None,
    program: GuestProgram = HEALTH_FACTOR_PROGRAM,
) -> ProofOutput:
    if prover is None:
        prover = create_prover(ProverConfig())
    return ProofPackager(prover, program).produce_proof(request)


def verify_proof_output(
    output: ProofOutput,
    prover: Prover,
    image_id: ImageId = HEALTH_FACTOR_PROGRAM.image_id,
) -> JournalValues:
    """Check a proof document the way an external verifier would."""
    if output.image_id_bytes() != image_id.to_bytes():
        raise VerificationError(f"Document image id {output.image_id} does not match {image_id.hex(prefixed=True)}")
    receipt = Receipt.from_cbor(output.proof_bytes())
    if receipt.journal != output.journal_bytes():
        raise VerificationError("pub_inputs do not match the journal inside the proof")
    journal = prover.verify(receipt, image_id)
    return decode_journal(journal)
