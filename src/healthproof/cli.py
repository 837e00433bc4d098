from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from .backends import create_prover
from .config import PipelineConfig, create_pipeline_config
from .emitter import load_proof_output, write_artifacts
from .errors import PipelineError
from .inputs import HealthFactorInput
from .journal import JournalValues, decode_journal
from .packager import ProofPackager, verify_proof_output
from .program import HEALTH_FACTOR_PROGRAM

app = typer.Typer(help="Health factor proof pipeline.")


@app.callback()
def main_options(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_config(path: Optional[Path]) -> PipelineConfig:
    if path is None:
        return PipelineConfig()
    return PipelineConfig.load(path)


def _fail(exc: Exception) -> None:
    typer.echo(f"error: {exc}", err=True)
    raise typer.Exit(code=1)


def _echo_journal(values: JournalValues) -> None:
    typer.echo(f"health_factor={values.health_factor}")
    typer.echo(f"collateral_value_usd={values.collateral_value_usd}")
    typer.echo(f"total_minted={values.total_minted}")


@app.command()
def setup(
    out: Path = typer.Option(
        Path("healthproof.json"),
        "--out",
        "-o",
        help="Path where the pipeline configuration JSON will be written.",
    ),
    scheme: str = typer.Option("ecdsa-p256", "--scheme", help="Seal scheme: ecdsa-p256 or hmac-sha256."),
) -> None:
    """Create a pipeline configuration with fresh sealing keys."""
    try:
        cfg = create_pipeline_config(out, seal_scheme=scheme)
    except (ValueError, OSError) as exc:
        _fail(exc)
    typer.echo(f"Wrote pipeline config to {out} (seal scheme {cfg.prover.seal_scheme})")


@app.command()
def prove(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Pipeline config JSON."),
    total_minted: Optional[str] = typer.Option(None, "--total-minted", help="Total minted, decimal."),
    collateral_usd: Optional[str] = typer.Option(None, "--collateral-usd", help="Collateral value in USD, decimal."),
    out_dir: Optional[Path] = typer.Option(None, "--out-dir", "-o", help="Directory for proof.txt/proof.json."),
) -> None:
    """Compute the health factor inside the prover and write the proof artifacts."""
    if total_minted is None:
        total_minted = typer.prompt("Enter total minted")
    if collateral_usd is None:
        collateral_usd = typer.prompt("Enter collateral value in USD")
    try:
        request = HealthFactorInput.from_text(total_minted, collateral_usd)
        cfg = _load_config(config)
        proof_txt, proof_json = cfg.output.proof_txt, cfg.output.proof_json
        if out_dir is not None:
            proof_txt, proof_json = out_dir / proof_txt.name, out_dir / proof_json.name
        packager = ProofPackager(create_prover(cfg.prover))
        output = packager.produce_proof(request)
        write_artifacts(output, proof_txt, proof_json)
        values = decode_journal(output.journal_bytes())
    except (PipelineError, ValueError, OSError) as exc:
        _fail(exc)
    _echo_journal(values)
    typer.echo(f"Proof generated: {proof_txt}, {proof_json}")


@app.command()
def verify(
    proof_json: Path = typer.Option(Path("proof.json"), "--proof-json", "-p", help="Proof document to check."),
    config: Path = typer.Option(..., "--config", "-c", help="Pipeline config JSON holding the verifying key."),
) -> None:
    """Verify a proof document against the local program's image id."""
    try:
        cfg = PipelineConfig.load(config)
        output = load_proof_output(proof_json)
        values = verify_proof_output(output, create_prover(cfg.prover))
    except (PipelineError, ValueError, OSError) as exc:
        _fail(exc)
    _echo_journal(values)
    typer.echo("Verification: ok")


@app.command("image-id")
def image_id() -> None:
    """Print the image id of the health factor program."""
    typer.echo(HEALTH_FACTOR_PROGRAM.image_id.hex(prefixed=True))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
