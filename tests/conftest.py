"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages and
resets process-wide logging state between tests.
"""

import logging
import sys
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

from cargo_llvmcov.pipeline.workspace import CoverageWorkspace  # noqa: E402
from cargo_llvmcov.process import ScriptedBackend, use_backend  # noqa: E402


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Leave structlog and stdlib logging unconfigured around each test."""
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


@pytest.fixture
def backend() -> Generator[ScriptedBackend, None, None]:
    """Scripted execution backend installed for the duration of the test."""
    scripted = ScriptedBackend()
    with use_backend(scripted):
        yield scripted


@pytest.fixture
def workspace(tmp_path: Path) -> CoverageWorkspace:
    """A freshly acquired workspace under tmp_path."""
    return CoverageWorkspace.acquire(tmp_path)
