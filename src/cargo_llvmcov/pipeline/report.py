"""Rendering coverage reports with ``llvm-cov``.

Shared arguments for both modes::

    -Xdemangler=<rustfilt> <exe> [-object <exe>]... -instr-profile=<profdata>

``show`` renders text to stdout, or an HTML tree when given an output
directory. ``export`` always renders LCOV into a file.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from cargo_llvmcov.core.errors import ReportError
from cargo_llvmcov.process import Command

OBJECT_FLAG = "-object"


def object_args(executables: Sequence[Path]) -> list[str]:
    """First executable bare, every later one behind ``-object``.

    llvm-cov takes one primary binary and any number of auxiliary objects
    that share the same profile.
    """
    args: list[str] = []
    for index, executable in enumerate(executables):
        if index:
            args.append(OBJECT_FLAG)
        args.append(str(executable))
    return args


def _base_command(
    llvm_cov: Path,
    mode: str,
    demangler: Path,
    profile: Path,
    executables: Sequence[Path],
) -> Command:
    return (
        Command(llvm_cov)
        .arg(mode)
        .arg(f"-Xdemangler={demangler}")
        .args(object_args(executables))
        .arg(f"-instr-profile={profile}")
    )


def show(
    llvm_cov: Path,
    demangler: Path,
    profile: Path,
    executables: Sequence[Path],
    ignore_regex: str,
    html_dir: Path | None = None,
) -> None:
    """Text report on stdout, or an HTML tree in ``html_dir`` when given."""
    command = _base_command(llvm_cov, "show", demangler, profile, executables)
    if html_dir is not None:
        command.arg("-format=html").arg(f"-output-dir={html_dir}")
    else:
        command.arg("-format=text")
    command.arg(f"-ignore-filename-regex={ignore_regex}").arg("-show-instantiations=false")
    if not command.status():
        raise ReportError.failed("show")


def export(
    llvm_cov: Path,
    demangler: Path,
    profile: Path,
    executables: Sequence[Path],
    ignore_regex: str,
    output: Path,
) -> None:
    """LCOV report written to ``output``, created or truncated.

    Raises:
        ReportError: ``output`` cannot be opened for writing, or llvm-cov failed.
    """
    try:
        sink = output.open("wb")
    except OSError as e:
        raise ReportError.output_failed(str(output), str(e)) from e
    with sink:
        ok = (
            _base_command(llvm_cov, "export", demangler, profile, executables)
            .arg("-format=lcov")
            .arg(f"-ignore-filename-regex={ignore_regex}")
            .arg("-show-instantiations=false")
            .stdout(sink)
            .status()
        )
    if not ok:
        raise ReportError.failed("export")
