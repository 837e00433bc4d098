from typing import List

import pytest

from healthproof.backends import LocalProver, claim_digest
from healthproof.boundary import run_guest
from healthproof.errors import VerificationError
from healthproof.program import GuestProgram, ImageId
from healthproof.receipt import Receipt
from healthproof.sealing import HMACSealer


class RecordingProver:
    """Deterministic stand-in for a proving engine that records every call."""

    scheme = "mock-digest"

    def __init__(self) -> None:
        self.executed: List[bytes] = []
        self.verified: List[ImageId] = []

    def execute(self, program: GuestProgram, input_bytes: bytes) -> Receipt:
        self.executed.append(input_bytes)
        journal = run_guest(program, input_bytes)
        return Receipt(
            image_id=program.image_id,
            journal=journal,
            seal=claim_digest(program.image_id, journal),
            scheme=self.scheme,
        )

    def verify(self, receipt: Receipt, image_id: ImageId) -> bytes:
        self.verified.append(image_id)
        if receipt.seal != claim_digest(image_id, receipt.journal):
            raise VerificationError("mock seal does not match the claim")
        return receipt.journal


@pytest.fixture
def recording_prover() -> RecordingProver:
    return RecordingProver()


@pytest.fixture
def hmac_prover() -> LocalProver:
    return LocalProver(HMACSealer(key=b"healthproof-test-key"))


@pytest.fixture
def unrelated_image_id() -> ImageId:
    return ImageId(tuple(range(1, 9)))
