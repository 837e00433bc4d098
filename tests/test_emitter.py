import json
from pathlib import Path

import pytest

from healthproof.emitter import ProofOutput, load_proof_output, load_raw_proof, write_artifacts
from healthproof.errors import SerializationError
from healthproof.inputs import HealthFactorInput
from healthproof.packager import ProofPackager


@pytest.fixture
def output(recording_prover) -> ProofOutput:
    return ProofPackager(recording_prover).produce_proof(HealthFactorInput(total_minted=1000, collateral_value_usd=4000))


def test_json_has_exactly_three_fields(output):
    doc = json.loads(output.to_json())
    assert sorted(doc) == ["image_id", "proof", "pub_inputs"]
    assert ProofOutput.from_json(output.to_json()) == output


@pytest.mark.parametrize(
    "mutate",
    [
        lambda doc: doc.update(extra="0x00"),
        lambda doc: doc.pop("image_id"),
        lambda doc: doc.update(proof=doc["proof"][2:]),
        lambda doc: doc.update(pub_inputs=doc["pub_inputs"].upper().replace("0X", "0x")),
    ],
)
def test_from_json_rejects_malformed_documents(output, mutate):
    doc = output.to_dict()
    mutate(doc)
    with pytest.raises(SerializationError):
        ProofOutput.from_json(json.dumps(doc))


def test_from_json_rejects_non_objects():
    with pytest.raises(SerializationError):
        ProofOutput.from_json("[1, 2, 3]")
    with pytest.raises(SerializationError):
        ProofOutput.from_json("{not json")


def test_write_artifacts(tmp_path: Path, output):
    proof_txt = tmp_path / "out" / "proof.txt"
    proof_json = tmp_path / "out" / "proof.json"
    write_artifacts(output, proof_txt, proof_json)

    assert proof_txt.read_text(encoding="utf-8") == output.raw_proof_hex()
    assert not proof_txt.read_text(encoding="utf-8").startswith("0x")
    assert load_raw_proof(proof_txt) == output.proof_bytes()
    assert load_proof_output(proof_json) == output
    assert sorted(p.name for p in proof_txt.parent.iterdir()) == ["proof.json", "proof.txt"]


def test_write_artifacts_is_all_or_nothing(tmp_path: Path, output):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    proof_txt = tmp_path / "proof.txt"
    with pytest.raises(SerializationError):
        write_artifacts(output, proof_txt, blocker / "proof.json")
    assert not proof_txt.exists()
    assert not list(tmp_path.glob(".proof.txt.*"))


def test_load_proof_output_missing_file(tmp_path: Path):
    with pytest.raises(SerializationError):
        load_proof_output(tmp_path / "missing.json")


def test_failed_rename_restores_previous_artifacts(tmp_path: Path, output):
    proof_txt = tmp_path / "proof.txt"
    proof_txt.write_text("previous proof", encoding="utf-8")
    proof_json = tmp_path / "proof.json"
    proof_json.mkdir()
    with pytest.raises(SerializationError):
        write_artifacts(output, proof_txt, proof_json)
    assert proof_txt.read_text(encoding="utf-8") == "previous proof"
    assert proof_json.is_dir()
    assert sorted(p.name for p in tmp_path.iterdir()) == ["proof.json", "proof.txt"]


def test_failed_rename_leaves_no_new_files(tmp_path: Path, output):
    proof_json = tmp_path / "proof.json"
    proof_json.mkdir()
    with pytest.raises(SerializationError):
        write_artifacts(output, tmp_path / "proof.txt", proof_json)
    assert sorted(p.name for p in tmp_path.iterdir()) == ["proof.json"]


def test_write_artifacts_overwrites_existing_files(tmp_path: Path, output):
    proof_txt = tmp_path / "proof.txt"
    proof_json = tmp_path / "proof.json"
    proof_txt.write_text("old", encoding="utf-8")
    proof_json.write_text("{}", encoding="utf-8")
    write_artifacts(output, proof_txt, proof_json)
    assert proof_txt.read_text(encoding="utf-8") == output.raw_proof_hex()
    assert load_proof_output(proof_json) == output
    assert sorted(p.name for p in tmp_path.iterdir()) == ["proof.json", "proof.txt"]
