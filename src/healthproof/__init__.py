"""healthproof: verifiable health factor computation."""

from .backends import CommandProver, LocalProver, claim_digest, create_prover
from .boundary import Prover, run_guest
from .calculator import (
    LIQUIDATION_PRECISION,
    LIQUIDATION_THRESHOLD,
    PRECISION,
    checked_mul,
    compute_health_factor,
)
from .codec import U128_MAX
from .config import OutputConfig, PipelineConfig, ProverConfig, create_pipeline_config
from .emitter import ProofOutput, load_proof_output, load_raw_proof, write_artifacts
from .errors import (
    ArithmeticOverflowError,
    ExecutionError,
    InputError,
    PipelineError,
    SerializationError,
    VerificationError,
)
from .guest import GuestEnv
from .inputs import HealthFactorInput, parse_u128
from .journal import JournalValues, commit_outputs, decode_journal, encode_journal
from .packager import ProofPackager, produce_proof, verify_proof_output
from .program import HEALTH_FACTOR_PROGRAM, GuestProgram, ImageId
from .receipt import Receipt
from .sealing import ECDSASealer, HMACSealer, create_sealer

__all__ = [
    "ArithmeticOverflowError",
    "CommandProver",
    "ECDSASealer",
    "ExecutionError",
    "GuestEnv",
    "GuestProgram",
    "HEALTH_FACTOR_PROGRAM",
    "HMACSealer",
    "HealthFactorInput",
    "ImageId",
    "InputError",
    "JournalValues",
    "LIQUIDATION_PRECISION",
    "LIQUIDATION_THRESHOLD",
    "LocalProver",
    "OutputConfig",
    "PRECISION",
    "PipelineConfig",
    "PipelineError",
    "ProofOutput",
    "ProofPackager",
    "Prover",
    "ProverConfig",
    "Receipt",
    "SerializationError",
    "U128_MAX",
    "VerificationError",
    "checked_mul",
    "claim_digest",
    "commit_outputs",
    "compute_health_factor",
    "create_pipeline_config",
    "create_prover",
    "create_sealer",
    "decode_journal",
    "encode_journal",
    "load_proof_output",
    "load_raw_proof",
    "parse_u128",
    "produce_proof",
    "run_guest",
    "verify_proof_output",
]
