import json
from pathlib import Path

import pytest

from healthproof.backends import create_prover
from healthproof.config import OutputConfig, PipelineConfig, ProverConfig, create_pipeline_config
from healthproof.program import HEALTH_FACTOR_PROGRAM


def test_config_roundtrip_resolves_relative_paths(tmp_path: Path):
    cfg = PipelineConfig(
        prover=ProverConfig(backend="command", prover_cmd="prove", verifier_cmd="verify", work_dir=Path("work")),
        output=OutputConfig(proof_txt=Path("artifacts/proof.txt"), proof_json=Path("artifacts/proof.json")),
    )
    path = tmp_path / "conf" / "pipeline.json"
    cfg.dump(path)

    loaded = PipelineConfig.load(path)
    base = path.parent.resolve()
    assert loaded.prover.backend == "command"
    assert loaded.prover.prover_cmd == "prove"
    assert loaded.prover.work_dir == base / "work"
    assert loaded.output.proof_txt == base / "artifacts" / "proof.txt"
    assert loaded.output.proof_json == base / "artifacts" / "proof.json"


def test_config_defaults_when_sections_missing(tmp_path: Path):
    path = tmp_path / "empty.json"
    path.write_text("{}", encoding="utf-8")
    loaded = PipelineConfig.load(path)
    assert loaded.prover.backend == "local"
    assert loaded.output.proof_txt == Path("proof.txt")


def test_invalid_values_are_rejected(tmp_path: Path):
    with pytest.raises(ValueError):
        ProverConfig(backend="remote")
    with pytest.raises(ValueError):
        ProverConfig(seal_scheme="rsa")
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"prover": {"unknown_field": 1}}), encoding="utf-8")
    with pytest.raises(ValueError):
        PipelineConfig.load(path)
    path.write_text("{broken", encoding="utf-8")
    with pytest.raises(ValueError):
        PipelineConfig.load(path)
    path.write_text("[]", encoding="utf-8")
    with pytest.raises(ValueError):
        PipelineConfig.load(path)


@pytest.mark.parametrize(
    "raw",
    [
        {"prover": None},
        {"prover": []},
        {"output": ["proof.txt"]},
        {"prover": {"seal_scheme": None}},
        {"prover": {"backend": 1}},
        {"prover": {"sealing_key_hex": 5}},
        {"prover": {"work_dir": 3}},
        {"output": {"proof_txt": 7}},
    ],
)
def test_malformed_sections_are_value_errors(tmp_path: Path, raw):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps(raw), encoding="utf-8")
    with pytest.raises(ValueError):
        PipelineConfig.load(path)


def test_create_pipeline_config_ecdsa(tmp_path: Path):
    path = tmp_path / "healthproof.json"
    cfg = create_pipeline_config(path)
    assert cfg.prover.seal_scheme == "ecdsa-p256"
    assert cfg.prover.sealing_key and cfg.prover.verifying_key
    loaded = PipelineConfig.load(path)
    assert loaded.prover.sealing_key_hex == cfg.prover.sealing_key_hex

    prover = create_prover(loaded.prover)
    receipt = prover.execute(HEALTH_FACTOR_PROGRAM, bytes(32))
    assert create_prover(cfg.prover).verify(receipt, HEALTH_FACTOR_PROGRAM.image_id) == receipt.journal


def test_create_pipeline_config_hmac(tmp_path: Path):
    cfg = create_pipeline_config(tmp_path / "healthproof.json", seal_scheme="hmac")
    assert cfg.prover.seal_scheme == "hmac-sha256"
    assert len(cfg.prover.sealing_key or b"") == 32
    assert cfg.prover.verifying_key is None
    with pytest.raises(ValueError):
        create_pipeline_config(tmp_path / "other.json", seal_scheme="rsa")
