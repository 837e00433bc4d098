"""External representation of a packaged proof."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Tuple

from .codec import from_hex, to_hex
from .errors import SerializationError

logger = logging.getLogger(__name__)

PROOF_OUTPUT_FIELDS = ("proof", "pub_inputs", "image_id")


@dataclass(frozen=True, slots=True)
class ProofOutput:
    proof: str
    pub_inputs: str
    image_id: str

    @classmethod
    def from_bytes(cls, proof: bytes, journal: bytes, image_id: bytes) -> "ProofOutput":
        return cls(proof=to_hex(proof), pub_inputs=to_hex(journal), image_id=to_hex(image_id))

    def proof_bytes(self) -> bytes:
        return from_hex(self.proof)

    def journal_bytes(self) -> bytes:
        return from_hex(self.pub_inputs)

    def image_id_bytes(self) -> bytes:
        return from_hex(self.image_id)

    def raw_proof_hex(self) -> str:
        return to_hex(self.proof_bytes(), prefixed=False)

    def to_dict(self) -> Dict[str, str]:
        return {"proof": self.proof, "pub_inputs": self.pub_inputs, "image_id": self.image_id}

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, raw: Any) -> "ProofOutput":
        if not isinstance(raw, dict):
            raise SerializationError("Proof document must be a JSON object")
        keys = set(raw)
        if keys != set(PROOF_OUTPUT_FIELDS):
            missing = sorted(set(PROOF_OUTPUT_FIELDS) - keys)
            extra = sorted(keys - set(PROOF_OUTPUT_FIELDS))
            raise SerializationError(f"Proof document fields mismatch (missing={missing}, unexpected={extra})")
        for name in PROOF_OUTPUT_FIELDS:
            # Validates the 0x prefix and the hex payload.
            from_hex(raw[name])
        return cls(proof=raw["proof"], pub_inputs=raw["pub_inputs"], image_id=raw["image_id"])

    @classmethod
    def from_json(cls, text: str) -> "ProofOutput":
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as exc:
            raise SerializationError(f"Proof document is not valid JSON: {exc}") from exc
        return cls.from_dict(raw)


def load_proof_output(path: Path) -> ProofOutput:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SerializationError(f"Cannot read proof document {path}: {exc}") from exc
    return ProofOutput.from_json(text)


def load_raw_proof(path: Path) -> bytes:
    try:
        text = path.read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise SerializationError(f"Cannot read raw proof {path}: {exc}") from exc
    return from_hex(text, prefixed=False)


def _roll_back(staged: List[Tuple[Path, Path]], backups: Dict[Path, Path], committed: List[Path]) -> None:
    for target in committed:
        target.unlink(missing_ok=True)
    for target, backup in backups.items():
        os.replace(backup, target)
    for tmp_path, _ in staged:
        tmp_path.unlink(missing_ok=True)


def write_artifacts(output: ProofOutput, proof_txt: Path, proof_json: Path) -> None:
    """Write the raw proof hex and the JSON document, or neither.

    Existing files are moved aside before the new ones are renamed into place
    and are restored if any rename fails.
    """
    staged: List[Tuple[Path, Path]] = []
    backups: Dict[Path, Path] = {}
    committed: List[Path] = []
    try:
        for target, text in ((proof_txt, output.raw_proof_hex()), (proof_json, output.to_json())):
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
            staged.append((Path(tmp_name), target))
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(text)
        for tmp_path, target in staged:
            if target.is_file():
                backup = tmp_path.with_suffix(".bak")
                os.replace(target, backup)
                backups[target] = backup
            os.replace(tmp_path, target)
            committed.append(target)
    except OSError as exc:
        _roll_back(staged, backups, committed)
        raise SerializationError(f"Failed to write proof artifacts: {exc}") from exc
    for backup in backups.values():
        backup.unlink(missing_ok=True)
    logger.info("wrote %s and %s", proof_txt, proof_json)
