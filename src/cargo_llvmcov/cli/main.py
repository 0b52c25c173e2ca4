"""cargo-llvmcov CLI - ``cargo llvmcov`` subcommand.

cargo runs ``cargo-llvmcov llvmcov [OPTIONS]`` for ``cargo llvmcov
[OPTIONS]``, so the group below only exists to swallow that first argument.
"""

from pathlib import Path

import click

from cargo_llvmcov.config import load_config
from cargo_llvmcov.core.errors import LlvmcovError
from cargo_llvmcov.core.logging import configure_logging, level_for_verbosity
from cargo_llvmcov.pipeline.driver import CoverageRequest, ReportMode, run_coverage


@click.group()
@click.version_option(version="0.1.0", prog_name="cargo-llvmcov")
def cli() -> None:
    """Source-based coverage reports for cargo projects."""


@cli.command("llvmcov")
@click.option("-l", "--lcov", is_flag=True, help="Write an LCOV report to <target>/cov/cov.info")
@click.option(
    "-L",
    "--lcov-output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write an LCOV report to this file",
)
@click.option("-h", "--html", is_flag=True, help="Write an HTML report to <target>/cov/html")
@click.option("-o", "--open", "open_report", is_flag=True, help="Open the HTML report (needs --html)")
@click.option("-k", "--keep", is_flag=True, help="Keep raw profiles and the merged profile")
@click.option("-v", "--verbose", count=True, help="More logging; repeat for more detail")
def llvmcov_command(
    lcov: bool,
    lcov_output: Path | None,
    html: bool,
    open_report: bool,
    keep: bool,
    verbose: int,
) -> None:
    """Build tests with coverage instrumentation, run them, and report.

    Without a mode flag the report is printed to stdout as text.
    """
    selected = [
        flag
        for flag, on in (("--lcov", lcov), ("--lcov-output", lcov_output is not None), ("--html", html))
        if on
    ]
    if len(selected) > 1:
        raise click.UsageError(f"{selected[0]} cannot be used with {selected[1]}")
    if open_report and not html:
        raise click.UsageError("--open requires --html")

    try:
        config = load_config()
    except LlvmcovError as e:
        raise click.ClickException(e.message) from e

    if verbose:
        logging_config = config.logging.model_copy(update={"level": level_for_verbosity(verbose)})
        config = config.model_copy(update={"logging": logging_config})
    configure_logging(config=config.logging)

    mode: ReportMode = "text"
    if lcov or lcov_output is not None:
        mode = "lcov"
    elif html:
        mode = "html"

    request = CoverageRequest(mode=mode, lcov_output=lcov_output, keep=keep)
    try:
        location = run_coverage(request, config)
    except LlvmcovError as e:
        raise click.ClickException(e.message) from e

    if open_report and location is not None:
        click.launch(str(location / "index.html"))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
