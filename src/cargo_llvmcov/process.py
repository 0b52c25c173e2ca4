"""Process invocation facade.

A ``Command`` accumulates an ``Invocation`` (argv, environment overrides,
stdout target) and hands it to an ``ExecutionBackend`` exactly once, through
one of three terminal operations:

- ``output()``: run to completion, buffer stdout in memory.
- ``spawn()``: start the process and stream its stdout while it runs.
- ``status()``: run to completion, keep only the success flag.

Every terminal operation logs the assembled command line at debug level
before executing.

The backend is looked up from a context variable so callers never thread it
through. ``SubprocessBackend`` is the default; ``ScriptedBackend`` replays
queued results and records invocations, and is installed with
``use_backend()``::

    backend = ScriptedBackend().push(b'{"target_directory": "/tmp/x"}')
    with use_backend(backend):
        Command("cargo").arg("metadata").output()
    assert backend.invocations[0].argv == ["cargo", "metadata"]
"""

from __future__ import annotations

import io
import os
import subprocess
from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from types import TracebackType
from typing import IO, Protocol

import structlog

from cargo_llvmcov.core.errors import InternalError, ProcessError

log = structlog.get_logger()

StdoutTarget = int | IO[bytes] | None
"""None inherits the parent's stdout; otherwise subprocess.PIPE, subprocess.DEVNULL or a binary file."""

StrPath = str | os.PathLike[str]


@dataclass
class Invocation:
    """Everything needed to start one external process."""

    program: str
    argv: list[str]  # argv[0] is the program
    env: dict[str, str] = field(default_factory=dict)  # overrides on top of os.environ
    stdout: StdoutTarget = None

    @property
    def commandline(self) -> str:
        return " ".join(self.argv)


@dataclass(frozen=True)
class Output:
    """Result of a buffered run."""

    stdout: bytes
    success: bool


class Child(ABC):
    """A started process whose stdout can be consumed while it runs.

    Used as a context manager: on exit the stdout pipe is closed and the
    process reaped, so an error raised while reading never leaks the child.
    """

    def __init__(self, stdout: IO[bytes] | None) -> None:
        self.stdout = stdout

    @abstractmethod
    def wait(self) -> bool:
        """Block until the process exits and return whether it succeeded."""

    def __enter__(self) -> Child:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self.stdout is not None:
            self.stdout.close()
        self.wait()


class ExecutionBackend(Protocol):
    """Capability interface the pipeline depends on."""

    def output(self, invocation: Invocation) -> Output: ...

    def spawn(self, invocation: Invocation) -> Child: ...

    def status(self, invocation: Invocation) -> bool: ...


# =============================================================================
# Real processes
# =============================================================================


class _PopenChild(Child):
    def __init__(self, proc: subprocess.Popen[bytes]) -> None:
        super().__init__(proc.stdout)
        self._proc = proc

    def wait(self) -> bool:
        return self._proc.wait() == 0


def _environ(invocation: Invocation) -> dict[str, str] | None:
    if not invocation.env:
        return None
    return {**os.environ, **invocation.env}


class SubprocessBackend:
    """Runs invocations as real OS processes."""

    def output(self, invocation: Invocation) -> Output:
        try:
            result = subprocess.run(
                invocation.argv,
                stdout=subprocess.PIPE,
                env=_environ(invocation),
                check=False,
            )
        except OSError as e:
            raise ProcessError.spawn_failed(invocation.program, str(e)) from e
        return Output(stdout=result.stdout, success=result.returncode == 0)

    def spawn(self, invocation: Invocation) -> Child:
        try:
            proc = subprocess.Popen(
                invocation.argv,
                stdout=invocation.stdout,
                env=_environ(invocation),
            )
        except OSError as e:
            raise ProcessError.spawn_failed(invocation.program, str(e)) from e
        return _PopenChild(proc)

    def status(self, invocation: Invocation) -> bool:
        try:
            result = subprocess.run(
                invocation.argv,
                stdout=invocation.stdout,
                env=_environ(invocation),
                check=False,
            )
        except OSError as e:
            raise ProcessError.spawn_failed(invocation.program, str(e)) from e
        return result.returncode == 0


# =============================================================================
# Scripted double
# =============================================================================


@dataclass(frozen=True)
class ScriptedResult:
    """Canned stdout and exit status for one invocation."""

    stdout: bytes = b""
    success: bool = True


class _ScriptedChild(Child):
    def __init__(self, result: ScriptedResult) -> None:
        super().__init__(io.BytesIO(result.stdout))
        self._success = result.success

    def wait(self) -> bool:
        return self._success


class ScriptedBackend:
    """Replays queued results in order and records every invocation.

    An invocation with no queued result left is an error, so a test fails
    loudly when the pipeline makes more calls than it scripted.
    """

    def __init__(self, results: Iterable[ScriptedResult] = ()) -> None:
        self._results: deque[ScriptedResult] = deque(results)
        self.invocations: list[Invocation] = []

    def push(self, stdout: bytes = b"", *, success: bool = True) -> ScriptedBackend:
        self._results.append(ScriptedResult(stdout=stdout, success=success))
        return self

    @property
    def pending(self) -> int:
        return len(self._results)

    def _next(self, invocation: Invocation) -> ScriptedResult:
        self.invocations.append(invocation)
        if not self._results:
            raise InternalError.unexpected(
                "no scripted result left", command=invocation.commandline
            )
        return self._results.popleft()

    def output(self, invocation: Invocation) -> Output:
        result = self._next(invocation)
        return Output(stdout=result.stdout, success=result.success)

    def spawn(self, invocation: Invocation) -> Child:
        return _ScriptedChild(self._next(invocation))

    def status(self, invocation: Invocation) -> bool:
        result = self._next(invocation)
        # File sinks receive the scripted stdout, as a real redirect would.
        if invocation.stdout is not None and not isinstance(invocation.stdout, int):
            invocation.stdout.write(result.stdout)
        return result.success


# =============================================================================
# Backend selection
# =============================================================================

_backend: ContextVar[ExecutionBackend] = ContextVar(
    "execution_backend", default=SubprocessBackend()
)


def get_backend() -> ExecutionBackend:
    return _backend.get()


@contextmanager
def use_backend(backend: ExecutionBackend) -> Iterator[ExecutionBackend]:
    """Route every Command created in this context through ``backend``."""
    token = _backend.set(backend)
    try:
        yield backend
    finally:
        _backend.reset(token)


# =============================================================================
# Command builder
# =============================================================================


class Command:
    """Builder for a single external process invocation."""

    def __init__(self, program: StrPath, *, backend: ExecutionBackend | None = None) -> None:
        program = os.fspath(program)
        self._invocation = Invocation(program=program, argv=[program])
        self._backend = backend
        self._consumed = False

    @property
    def invocation(self) -> Invocation:
        return self._invocation

    def arg(self, arg: StrPath) -> Command:
        self._invocation.argv.append(os.fspath(arg))
        return self

    def args(self, args: Iterable[StrPath]) -> Command:
        for arg in args:
            self.arg(arg)
        return self

    def env(self, key: str, value: StrPath) -> Command:
        self._invocation.env[key] = os.fspath(value)
        return self

    def stdout(self, target: StdoutTarget) -> Command:
        self._invocation.stdout = target
        return self

    def output(self) -> Output:
        return self._prepare().output(self._invocation)

    def spawn(self) -> Child:
        return self._prepare().spawn(self._invocation)

    def status(self) -> bool:
        return self._prepare().status(self._invocation)

    def _prepare(self) -> ExecutionBackend:
        if self._consumed:
            raise InternalError.unexpected(
                "command already executed", command=self._invocation.commandline
            )
        self._consumed = True
        log.debug("call", command=self._invocation.commandline, env=self._invocation.env)
        return self._backend or get_backend()
