"""Console entry point: replay a transactions CSV and print client balances."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError

from .amount import AmountError
from .config import EngineConfig, get_config
from .csv_io import read_rows, write_snapshots
from .engine import PaymentEngine
from .logging_config import setup_logging
from .records import RecordFormatError

app = typer.Typer(
    add_completion=False,
    help="Replay deposits, withdrawals and disputes from a CSV and print final client balances.",
)


@app.command()
def run(
    input_path: Annotated[Path, typer.Argument(help="Transactions CSV (type,client,tx,amount).")],
    strict: Annotated[
        bool, typer.Option("--strict", help="Abort on the first malformed row.")
    ] = False,
    log_level: Annotated[
        Optional[str], typer.Option(help="Override PAYMENT_ENGINE_LOG_LEVEL.")
    ] = None,
) -> None:
    """Process INPUT_PATH and write the balance report to stdout."""
    try:
        settings = get_config()
        if log_level is not None:
            settings = EngineConfig(**{**settings.model_dump(), "log_level": log_level})
    except ValidationError as e:
        error = e.errors()[0]
        name = ".".join(str(part) for part in error["loc"])
        typer.echo(f"Error: Invalid {name}: {error['msg']}", err=True)
        raise typer.Exit(1)
    
    setup_logging(
        level=settings.log_level,
        fmt=settings.log_format,
        log_file=settings.log_file,
    )
    strict_mode = strict or settings.strict
    
    engine = PaymentEngine(strict=strict_mode)
    try:
        with open(input_path, encoding="utf-8", newline="") as f:
            snapshots = engine.process(read_rows(f, strict=strict_mode))
    except FileNotFoundError:
        typer.echo(f"Error: File not found: {input_path}", err=True)
        raise typer.Exit(1)
    except PermissionError:
        typer.echo(f"Error: Permission denied: {input_path}", err=True)
        raise typer.Exit(1)
    except (RecordFormatError, AmountError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    
    if not settings.sort_output:
        snapshots = engine.snapshots(sort=False)
    write_snapshots(snapshots.values(), sys.stdout)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
