"""Cargo build-progress messages (``--message-format json``).

Each stdout line of the build is one JSON object tagged by ``reason``.
Only the fields the pipeline reads are modelled; everything else cargo
emits is ignored. An unknown ``reason`` or malformed JSON is a decode error.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from cargo_llvmcov.core.errors import BuildError


class BuildTarget(BaseModel):
    test: bool


class BuildProfile(BaseModel):
    test: bool


class CompilerMessage(BaseModel):
    """A compiler diagnostic."""

    reason: Literal["compiler-message"]


class CompilerArtifact(BaseModel):
    """A produced artifact: library, binary or test harness."""

    reason: Literal["compiler-artifact"]
    target: BuildTarget
    profile: BuildProfile
    executable: str | None = None

    @property
    def is_test_executable(self) -> bool:
        """True only for a runnable binary built from a test target in a test profile."""
        return self.target.test and self.profile.test and bool(self.executable)


class BuildScriptExecuted(BaseModel):
    reason: Literal["build-script-executed"]


class BuildFinished(BaseModel):
    reason: Literal["build-finished"]
    success: bool


BuildMessage = Annotated[
    CompilerMessage | CompilerArtifact | BuildScriptExecuted | BuildFinished,
    Field(discriminator="reason"),
]

_build_message_adapter: TypeAdapter[BuildMessage] = TypeAdapter(BuildMessage)


def parse_build_message(line: str | bytes) -> BuildMessage:
    """Decode one line of build output.

    Raises:
        BuildError: The line is not JSON or matches no known message shape.
    """
    try:
        return _build_message_adapter.validate_json(line)
    except ValidationError as e:
        text = line.decode(errors="replace") if isinstance(line, bytes) else line
        raise BuildError.decode_failed(text.rstrip("\n"), str(e)) from e
