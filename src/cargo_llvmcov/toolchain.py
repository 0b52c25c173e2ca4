"""Locating the toolchain binaries the pipeline drives.

Lookup order for every tool: explicit config, then the variables cargo
exports to its subcommands, then a default location. All resolution happens
before the first pipeline stage so a missing tool fails fast.
"""

from __future__ import annotations

import os
import re
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path

import structlog

from cargo_llvmcov.config.models import ToolchainConfig
from cargo_llvmcov.core.errors import ToolchainError
from cargo_llvmcov.process import Command

log = structlog.get_logger()

LLVM_TOOLS_HINT = "install it with `rustup component add llvm-tools-preview`"


@dataclass(frozen=True)
class Toolchain:
    """Resolved paths for one run."""

    cargo: Path
    llvm_profdata: Path
    llvm_cov: Path
    rustfilt: Path
    cargo_home: str
    rustup_home: str

    @property
    def ignore_regex(self) -> str:
        return exclusion_regex(self.cargo_home, self.rustup_home)


def cargo(config: ToolchainConfig) -> Path:
    return Path(config.cargo or os.environ.get("CARGO") or "cargo")


def rustc(config: ToolchainConfig) -> Path:
    return Path(config.rustc or os.environ.get("RUSTC") or "rustc")


def cargo_home(config: ToolchainConfig) -> str:
    return config.cargo_home or os.environ.get("CARGO_HOME") or str(Path.home() / ".cargo")


def rustup_home(config: ToolchainConfig) -> str:
    return config.rustup_home or os.environ.get("RUSTUP_HOME") or str(Path.home() / ".rustup")


def exclusion_regex(*homes: str) -> str:
    """Filename filter hiding sources under the toolchain and registry caches.

    Empty entries are dropped: an empty alternative would match every file.
    """
    return "|".join(re.escape(home) for home in homes if home)


def _exe(name: str) -> str:
    return f"{name}.exe" if sys.platform == "win32" else name


def llvm_tools_dir(rustc_path: Path) -> Path:
    """``<sysroot>/lib/rustlib/<host>/bin``, where rustup installs llvm-tools."""
    sysroot = Command(rustc_path).args(["--print", "sysroot"]).output()
    version = Command(rustc_path).arg("-vV").output()
    if not (sysroot.success and version.success):
        raise ToolchainError.not_found("rustc", f"`{rustc_path}` did not report its sysroot")

    host = None
    for line in version.stdout.decode().splitlines():
        if line.startswith("host:"):
            host = line.split(":", 1)[1].strip()
            break
    if not host:
        raise ToolchainError.not_found("rustc host triple")

    return Path(sysroot.stdout.decode().strip()) / "lib" / "rustlib" / host / "bin"


def llvm_tool(name: str, tools_dir: Path) -> Path:
    path = tools_dir / _exe(name)
    if not path.exists():
        raise ToolchainError.not_found(name, LLVM_TOOLS_HINT)
    return path


def rustfilt(config: ToolchainConfig) -> Path:
    if config.rustfilt:
        return Path(config.rustfilt)
    found = shutil.which("rustfilt")
    if found is None:
        raise ToolchainError.not_found("rustfilt", "install it with `cargo install rustfilt`")
    return Path(found)


def resolve_toolchain(config: ToolchainConfig | None = None) -> Toolchain:
    """Resolve every tool, raising ToolchainError for the first one missing."""
    config = config or ToolchainConfig()

    if config.llvm_profdata and config.llvm_cov:
        llvm_profdata = Path(config.llvm_profdata)
        llvm_cov = Path(config.llvm_cov)
    else:
        tools_dir = llvm_tools_dir(rustc(config))
        llvm_profdata = (
            Path(config.llvm_profdata)
            if config.llvm_profdata
            else llvm_tool("llvm-profdata", tools_dir)
        )
        llvm_cov = Path(config.llvm_cov) if config.llvm_cov else llvm_tool("llvm-cov", tools_dir)

    toolchain = Toolchain(
        cargo=cargo(config),
        llvm_profdata=llvm_profdata,
        llvm_cov=llvm_cov,
        rustfilt=rustfilt(config),
        cargo_home=cargo_home(config),
        rustup_home=rustup_home(config),
    )
    log.debug(
        "toolchain resolved",
        cargo=str(toolchain.cargo),
        llvm_profdata=str(toolchain.llvm_profdata),
        llvm_cov=str(toolchain.llvm_cov),
        rustfilt=str(toolchain.rustfilt),
    )
    return toolchain
