"""Configuration dataclasses for the proof pipeline."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

from .sealing import SUPPORTED_SCHEMES, generate_ecdsa_keypair, generate_hmac_key

BACKENDS = ("local", "command")


@dataclass(slots=True)
class ProverConfig:
    backend: str = "local"
    seal_scheme: str = "hmac-sha256"
    sealing_key_hex: str | None = None
    verifying_key_hex: str | None = None
    prover_cmd: str | None = None
    verifier_cmd: str | None = None
    work_dir: Path | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.backend, str) or not isinstance(self.seal_scheme, str):
            raise ValueError("Prover backend and seal_scheme must be strings.")
        for name in ("sealing_key_hex", "verifying_key_hex", "prover_cmd", "verifier_cmd"):
            if not isinstance(getattr(self, name), (str, type(None))):
                raise ValueError(f"Prover {name} must be a string or null.")
        if self.backend not in BACKENDS:
            raise ValueError(f"Unknown prover backend: {self.backend}")
        if self.seal_scheme.lower() not in SUPPORTED_SCHEMES:
            raise ValueError(f"Unsupported seal scheme: {self.seal_scheme}")

    @property
    def sealing_key(self) -> bytes | None:
        return bytes.fromhex(self.sealing_key_hex) if self.sealing_key_hex else None

    @property
    def verifying_key(self) -> bytes | None:
        return bytes.fromhex(self.verifying_key_hex) if self.verifying_key_hex else None


@dataclass(slots=True)
class OutputConfig:
    proof_txt: Path = Path("proof.txt")
    proof_json: Path = Path("proof.json")


@dataclass(slots=True)
class PipelineConfig:
    prover: ProverConfig = field(default_factory=ProverConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def to_dict(self) -> Dict[str, Any]:
        prover = self.prover
        return {
            "prover": {
                "backend": prover.backend,
                "seal_scheme": prover.seal_scheme,
                "sealing_key_hex": prover.sealing_key_hex,
                "verifying_key_hex": prover.verifying_key_hex,
                "prover_cmd": prover.prover_cmd,
                "verifier_cmd": prover.verifier_cmd,
                "work_dir": str(prover.work_dir) if prover.work_dir is not None else None,
            },
            "output": {
                "proof_txt": str(self.output.proof_txt),
                "proof_json": str(self.output.proof_json),
            },
        }

    def dump(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as handle:
            json.dump(self.to_dict(), handle, indent=2)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any], base_dir: Path | None = None) -> "PipelineConfig":
        def _resolve(value: str | None) -> Path | None:
            if value is None:
                return None
            if not isinstance(value, str):
                raise ValueError(f"Config paths must be strings, got {value!r}")
            p = Path(value)
            if base_dir is not None and not p.is_absolute():
                p = (base_dir / p).resolve()
            return p

        prover_section = raw.get("prover", {})
        output_raw = raw.get("output", {})
        if not isinstance(prover_section, dict) or not isinstance(output_raw, dict):
            raise ValueError("Config sections \"prover\" and \"output\" must be JSON objects.")
        prover_raw = dict(prover_section)
        prover_raw["work_dir"] = _resolve(prover_raw.get("work_dir"))
        defaults = OutputConfig()
        output = OutputConfig(
            proof_txt=_resolve(output_raw.get("proof_txt")) or defaults.proof_txt,
            proof_json=_resolve(output_raw.get("proof_json")) or defaults.proof_json,
        )
        try:
            prover = ProverConfig(**prover_raw)
        except TypeError as exc:
            raise ValueError(f"Invalid prover section: {exc}") from exc
        return cls(prover=prover, output=output)

    @classmethod
    def load(cls, path: Path) -> "PipelineConfig":
        with path.open("r", encoding="utf-8") as handle:
            try:
                raw = json.load(handle)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Config {path} is not valid JSON: {exc}") from exc
        if not isinstance(raw, dict):
            raise ValueError(f"Config {path} must hold a JSON object.")
        return cls.from_dict(raw, base_dir=path.parent)


def create_pipeline_config(output_path: Path, *, seal_scheme: str = "ecdsa-p256") -> PipelineConfig:
    scheme = seal_scheme.lower()
    if scheme in {"hmac", "hmac-sha256"}:
        prover = ProverConfig(seal_scheme="hmac-sha256", sealing_key_hex=generate_hmac_key().hex())
    elif scheme in {"ecdsa", "ecdsa-p256"}:
        priv, pub = generate_ecdsa_keypair()
        prover = ProverConfig(seal_scheme="ecdsa-p256", sealing_key_hex=priv.hex(), verifying_key_hex=pub.hex())
    else:
        raise ValueError(f"Unsupported seal scheme: {seal_scheme}")
    cfg = PipelineConfig(prover=prover)
    cfg.dump(output_path)
    return cfg
