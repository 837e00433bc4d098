"""Receipts produced by a prover and their CBOR encoding."""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Any, Dict

import cbor2

from .errors import SerializationError
from .program import ImageId

RECEIPT_VERSION = 1


@dataclass(frozen=True, slots=True)
class Receipt:
    image_id: ImageId
    journal: bytes
    seal: bytes
    scheme: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": RECEIPT_VERSION,
            "claim": {"image_id": list(self.image_id.words)},
            "journal": {"bytes": self.journal},
            "inner": {"scheme": self.scheme, "seal": self.seal},
        }

    def to_cbor(self) -> bytes:
        try:
            return cbor2.dumps(self.to_dict(), canonical=True)
        except (cbor2.CBOREncodeError, TypeError, ValueError) as exc:
            raise SerializationError(f"Failed to encode receipt: {exc}") from exc

    @classmethod
    def from_dict(cls, raw: Any) -> "Receipt":
        if not isinstance(raw, dict):
            raise SerializationError("Receipt must decode to a map")
        if raw.get("version") != RECEIPT_VERSION:
            raise SerializationError(f"Unsupported receipt version: {raw.get('version')!r}")
        try:
            words = raw["claim"]["image_id"]
            journal = raw["journal"]["bytes"]
            scheme = raw["inner"]["scheme"]
            seal = raw["inner"]["seal"]
        except (KeyError, TypeError) as exc:
            raise SerializationError(f"Malformed receipt: missing {exc}") from exc
        if not isinstance(journal, bytes) or not isinstance(seal, bytes) or not isinstance(scheme, str):
            raise SerializationError("Malformed receipt: unexpected field types")
        if not isinstance(words, list) or not all(isinstance(word, int) for word in words):
            raise SerializationError("Malformed receipt: image id must be a list of words")
        return cls(image_id=ImageId(tuple(words)), journal=journal, seal=seal, scheme=scheme)

    @classmethod
    def from_cbor(cls, data: bytes) -> "Receipt":
        stream = io.BytesIO(data)
        try:
            raw = cbor2.CBORDecoder(stream).decode()
        except (cbor2.CBORDecodeError, ValueError) as exc:
            raise SerializationError(f"Failed to decode receipt: {exc}") from exc
        if stream.tell() != len(data):
            raise SerializationError(f"Receipt has {len(data) - stream.tell()} trailing bytes")
        return cls.from_dict(raw)
