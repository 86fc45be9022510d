"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys

import click

from catalog_e2e_tester.configuration import (
    DEFAULT_CONFIG_FILENAME,
    write_placeholder_configuration,
)
from catalog_e2e_tester.run_execution import (
    RunExecutionError,
    RunRequest,
    execute_catalog_test_run,
)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class CliError(Exception):
    """Custom CLI error."""


class TestsFailedError(CliError):
    """Raised when the run completed but at least one test manifest did not pass."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="catalog-e2e-tester")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
    help="Logging verbosity written to stderr",
)
def cli(log_level: str) -> None:
    """Integration test harness for Tekton catalog StepActions."""
    logging.basicConfig(level=log_level.upper(), format=_LOG_FORMAT, stream=sys.stderr)


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML harness configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML harness configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="run")
@click.option(
    "--step-action-dir",
    "step_action_dir",
    required=True,
    type=click.Path(path_type=str),
    help="Catalog directory holding one StepAction YAML and a tests/ folder",
)
@click.option(
    "--config",
    "config_path",
    required=False,
    type=click.Path(path_type=str),
    help="Path to YAML/JSON harness configuration file; defaults apply when omitted",
)
@click.option(
    "--work-dir",
    "work_dir",
    required=False,
    type=click.Path(path_type=str),
    help="Directory receiving per-scope manifest copies (temporary directory by default)",
)
@click.option(
    "--output-dir",
    "output_dir",
    required=False,
    type=click.Path(path_type=str),
    help="Directory for the results workbook (current directory by default)",
)
@click.option(
    "--require-field",
    "required_fields",
    multiple=True,
    help="yq expression that must be non-empty on every successful run; repeatable",
)
def run_tests(
    step_action_dir: str,
    config_path: str | None,
    work_dir: str | None,
    output_dir: str | None,
    required_fields: tuple[str, ...],
) -> None:
    """Run every test manifest of a StepAction in its own isolated scope."""
    try:
        outcome = execute_catalog_test_run(
            RunRequest(
                step_action_dir=step_action_dir,
                config_path=config_path,
                work_dir=work_dir,
                output_dir=output_dir,
                required_fields=tuple(required_fields),
            )
        )
    except RunExecutionError as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(outcome.output_path))
    click.echo(f"{outcome.passed} passed, {outcome.failed} failed")
    if not outcome.all_passed:
        raise TestsFailedError(f"{outcome.failed} of {len(outcome.results)} test manifests failed")


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
