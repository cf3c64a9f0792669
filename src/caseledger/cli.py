from __future__ import annotations

from pathlib import Path

import typer

app = typer.Typer(name="caseledger", help="Run declared test cases and summarize them")


@app.command()
def run(
    test_file: str = typer.Argument(help="Python file declaring test cases"),
    case: list[str] | None = typer.Option(
        None, "--case", "-c", help="Run only this case (repeatable)"
    ),
    config: str | None = typer.Option(None, help="Path to harness YAML config"),
    fail_on_error: bool = typer.Option(
        False,
        "--fail-on-error",
        help="Exit with status 1 when any assertion failed",
    ),
    log_dir: str = typer.Option(".caseledger", help="Directory for debug.log"),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output to terminal"
    ),
):
    """Run the cases declared in TEST_FILE."""
    from caseledger.config import HarnessConfig, load_config
    from caseledger.errors import CaseledgerError
    from caseledger.registry import load_cases
    from caseledger.runner import run_tests
    from caseledger.verbose import setup_logger

    harness_config = HarnessConfig()
    if config is not None:
        config_path = Path(config)
        if not config_path.exists():
            typer.echo(f"Error: config file not found: {config}", err=True)
            raise typer.Exit(1)
        try:
            harness_config = load_config(config_path)
        except ValueError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)

    overrides: dict = {}
    if case:
        overrides["cases"] = case
    if fail_on_error:
        overrides["fail_on_error"] = True
    if verbose:
        overrides["verbose"] = True
    if overrides:
        harness_config = harness_config.model_copy(update=overrides)

    try:
        registry = load_cases(Path(test_file))
    except (FileNotFoundError, ImportError, CaseledgerError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    debug_file = Path(log_dir) / "debug.log"
    logger = setup_logger(
        debug_file,
        verbose=harness_config.verbose,
        logger_name=f"caseledger_run_{Path(test_file).stem}",
    )

    try:
        result = run_tests(registry, config=harness_config, logger=logger)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

    status = "ABORTED" if result.aborted else "DONE"
    typer.echo(
        f"\n{status}: {result.case_count} case(s), {result.error_count} error(s)"
    )
    stats = result.duration_stats
    if stats.avg is not None:
        typer.echo(
            f"Body time (ns): avg={stats.avg:.0f} min={stats.min:.0f} "
            f"max={stats.max:.0f} stddev={stats.stddev:.0f}"
        )
    if not verbose:
        typer.echo(f"Debug log: {debug_file}")

    if result.exit_code:
        raise typer.Exit(result.exit_code)


@app.command(name="list")
def list_cases(
    test_file: str = typer.Argument(help="Python file declaring test cases"),
):
    """List the cases declared in TEST_FILE with their declaration sites."""
    from caseledger.errors import CaseledgerError
    from caseledger.registry import load_cases

    try:
        registry = load_cases(Path(test_file))
    except (FileNotFoundError, ImportError, CaseledgerError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if not len(registry):
        typer.echo("No test cases declared.")
        return

    for descriptor in registry:
        loc = descriptor.location
        extra = f" (+{len(descriptor.functions)} function/s)" if descriptor.functions else ""
        typer.echo(f"{descriptor.name}  {loc.file_name}:{loc.line}{extra}")
