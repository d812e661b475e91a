from __future__ import annotations

import io
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent

# `tests.support` and an uninstalled `rinha_ref` both resolve from the checkout
for entry in (ROOT, ROOT / "src"):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))

from rinha_ref.types import Environment  # noqa: E402


@pytest.fixture
def out() -> io.StringIO:
    """Sink standing in for stdout; `print` output lands here."""
    return io.StringIO()


@pytest.fixture
def env(out: io.StringIO) -> Environment:
    """Root environment writing to the `out` fixture with no print terminator."""
    return Environment(out=out)


@pytest.fixture
def session_env(out: io.StringIO) -> Environment:
    """Environment configured like a REPL session: newline after each print."""
    return Environment(out=out, print_end="\n")
