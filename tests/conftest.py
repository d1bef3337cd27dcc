import sys
from pathlib import Path
import importlib
import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture()
def m():
    """Lazily import the main module for tests to avoid module-level import."""
    return importlib.import_module("main")


@pytest.fixture()
def text_file(tmp_path: Path):
    """Write a small text file with repeated symbols and newlines."""
    path = tmp_path / "input.txt"
    path.write_bytes(b"abracadabra\nsimsalabim\n" * 3)
    return path


SAMPLES = [
    b"",
    b"a",
    b"zzzzzzzz",
    b"\n\n\n",
    b"aab",
    b"aaab",
    b"key:value\nother:thing\n",
    b"\\n is not a newline\n",
    b"\r\n\r\n windows lines\r\n",
    bytes(range(256)),
    b"The quick brown fox jumps over the lazy dog. " * 5,
]


@pytest.fixture(params=SAMPLES, ids=lambda s: repr(s[:12]))
def sample(request):
    """Representative inputs, including degenerate ones."""
    return request.param
