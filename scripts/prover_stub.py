#!/usr/bin/env python3
"""Placeholder external prover/verifier executable for the command backend."""

from __future__ import annotations

import os
import sys
from pathlib import Path

from healthproof.backends import LocalProver
from healthproof.program import HEALTH_FACTOR_PROGRAM, ImageId
from healthproof.receipt import Receipt
from healthproof.sealing import HMACSealer

DEFAULT_STUB_KEY = "prover-stub-key".encode("utf-8").hex()


def _stub_prover() -> LocalProver:
    key_hex = os.environ.get("HEALTHPROOF_STUB_KEY", DEFAULT_STUB_KEY)
    return LocalProver(HMACSealer(key=bytes.fromhex(key_hex)))


def prove(input_path: Path, receipt_path: Path, program_name: str) -> None:
    if program_name != HEALTH_FACTOR_PROGRAM.name:
        raise RuntimeError(f"Unknown guest program: {program_name}")
    receipt = _stub_prover().execute(HEALTH_FACTOR_PROGRAM, input_path.read_bytes())
    receipt_path.write_bytes(receipt.to_cbor())
    print(f"prover_stub: wrote receipt to {receipt_path}")


def verify(receipt_path: Path, image_id_hex: str) -> None:
    if not receipt_path.exists():
        raise FileNotFoundError(f"Receipt missing: {receipt_path}")
    receipt = Receipt.from_cbor(receipt_path.read_bytes())
    _stub_prover().verify(receipt, ImageId.from_bytes(bytes.fromhex(image_id_hex)))
    print("prover_stub: verification passed (stub)")


def main() -> None:
    if len(sys.argv) < 2 or sys.argv[1] not in {"prove", "verify"}:
        raise SystemExit("Usage: prover_stub.py [prove|verify]")
    receipt = Path(os.environ.get("HEALTHPROOF_RECEIPT", ""))
    image_id_hex = os.environ.get("HEALTHPROOF_IMAGE_ID", "")
    if not image_id_hex:
        raise SystemExit("HEALTHPROOF_IMAGE_ID env var is required")
    try:
        if sys.argv[1] == "prove":
            input_path = Path(os.environ.get("HEALTHPROOF_INPUT", ""))
            prove(input_path, receipt, os.environ.get("HEALTHPROOF_PROGRAM", ""))
        else:
            verify(receipt, image_id_hex)
    except (OSError, RuntimeError, ValueError) as exc:
        print(f"prover_stub: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
