"""Prover backends: an in-process sealer and an external prover command."""

from __future__ import annotations

import hashlib
import logging
import os
import shlex
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

from .boundary import Prover, run_guest
from .config import ProverConfig
from .errors import ExecutionError, SerializationError, VerificationError
from .program import GuestProgram, ImageId
from .receipt import Receipt
from .sealing import Sealer, create_sealer, generate_hmac_key

logger = logging.getLogger(__name__)

CLAIM_DOMAIN = b"healthproof.claim.v1"


def claim_digest(image_id: ImageId, journal: bytes) -> bytes:
    journal_digest = hashlib.sha256(journal).digest()
    return hashlib.sha256(CLAIM_DOMAIN + image_id.to_bytes() + journal_digest).digest()


class LocalProver:
    """Runs the guest in-process and seals the (image id, journal) claim."""

    def __init__(self, sealer: Sealer):
        self.sealer = sealer

    def execute(self, program: GuestProgram, input_bytes: bytes) -> Receipt:
        journal = run_guest(program, input_bytes)
        try:
            seal = self.sealer.seal(claim_digest(program.image_id, journal))
        except ValueError as exc:
            raise ExecutionError(f"Sealer {self.sealer.scheme} cannot seal receipts: {exc}") from exc
        return Receipt(image_id=program.image_id, journal=journal, seal=seal, scheme=self.sealer.scheme)

    def verify(self, receipt: Receipt, image_id: ImageId) -> bytes:
        if receipt.scheme != self.sealer.scheme:
            raise VerificationError(f"Receipt sealed with {receipt.scheme}, expected {self.sealer.scheme}")
        if receipt.image_id != image_id:
            raise VerificationError(f"Receipt image id {receipt.image_id.hex()} does not match {image_id.hex()}")
        if not self.sealer.check(claim_digest(image_id, receipt.journal), receipt.seal):
            raise VerificationError("Receipt seal does not authenticate its claim")
        return receipt.journal


@dataclass(slots=True)
class CommandPaths:
    input: Path
    receipt: Path


def _command_env(paths: CommandPaths, program_name: str, image_id: ImageId) -> Dict[str, str]:
    env = os.environ.copy()
    env.update(
        {
            "HEALTHPROOF_INPUT": str(paths.input),
            "HEALTHPROOF_RECEIPT": str(paths.receipt),
            "HEALTHPROOF_IMAGE_ID": image_id.hex(),
            "HEALTHPROOF_PROGRAM": program_name,
        }
    )
    return env


def _run_command(cmd: str, env: Dict[str, str]) -> None:
    args = shlex.split(cmd)
    subprocess.run(args, check=True, env=env, capture_output=True, text=True)


def _describe_failure(exc: subprocess.CalledProcessError) -> str:
    detail = (exc.stderr or "").strip() or (exc.stdout or "").strip()
    return f"exit status {exc.returncode}" + (f": {detail}" if detail else "")


class CommandProver:
    """Delegates proving and verification to external executables.

    Each call works in its own temporary directory under ``work_dir`` so
    concurrent requests never share files.
    """

    def __init__(self, prover_cmd: str, verifier_cmd: str, work_dir: Path | None = None):
        if not prover_cmd or not verifier_cmd:
            raise ValueError("Command backend needs both prover_cmd and verifier_cmd.")
        self.prover_cmd = prover_cmd
        self.verifier_cmd = verifier_cmd
        self.work_dir = work_dir

    def _scratch(self) -> tempfile.TemporaryDirectory:
        if self.work_dir is not None:
            self.work_dir.mkdir(parents=True, exist_ok=True)
        return tempfile.TemporaryDirectory(prefix="healthproof-", dir=self.work_dir)

    def execute(self, program: GuestProgram, input_bytes: bytes) -> Receipt:
        with self._scratch() as scratch:
            paths = CommandPaths(input=Path(scratch) / "input.bin", receipt=Path(scratch) / "receipt.cbor")
            paths.input.write_bytes(input_bytes)
            logger.info("running external prover for %s", program.name)
            try:
                _run_command(self.prover_cmd, _command_env(paths, program.name, program.image_id))
            except subprocess.CalledProcessError as exc:
                raise ExecutionError(f"Prover command failed with {_describe_failure(exc)}") from exc
            except OSError as exc:
                raise ExecutionError(f"Prover command could not be started: {exc}") from exc
            if not paths.receipt.exists():
                raise ExecutionError(f"Prover command did not write a receipt to {paths.receipt}")
            try:
                return Receipt.from_cbor(paths.receipt.read_bytes())
            except SerializationError as exc:
                raise ExecutionError(f"Prover command wrote an unreadable receipt: {exc}") from exc

    def verify(self, receipt: Receipt, image_id: ImageId) -> bytes:
        with self._scratch() as scratch:
            paths = CommandPaths(input=Path(scratch) / "input.bin", receipt=Path(scratch) / "receipt.cbor")
            paths.receipt.write_bytes(receipt.to_cbor())
            try:
                _run_command(self.verifier_cmd, _command_env(paths, "", image_id))
            except subprocess.CalledProcessError as exc:
                raise VerificationError(f"Verifier command rejected the receipt with {_describe_failure(exc)}") from exc
            except OSError as exc:
                raise VerificationError(f"Verifier command could not be started: {exc}") from exc
        if receipt.image_id != image_id:
            raise VerificationError(f"Receipt image id {receipt.image_id.hex()} does not match {image_id.hex()}")
        return receipt.journal


def create_prover(config: ProverConfig) -> Prover:
    if config.backend == "command":
        return CommandProver(config.prover_cmd or "", config.verifier_cmd or "", config.work_dir)
    private_key = config.sealing_key
    if private_key is None and config.seal_scheme.lower() == "hmac-sha256":
        logger.warning("no sealing key configured; using a per-process HMAC key")
        private_key = generate_hmac_key()
    return LocalProver(create_sealer(config.seal_scheme, private_key, config.verifying_key))
