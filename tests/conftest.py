import os
import sys

import pytest

# Enable the add cross-check in tests unless explicitly overridden.
os.environ.setdefault("CHUNKINT_TEST_GUARDS", "1")
os.environ.setdefault("XLA_PYTHON_CLIENT_PREALLOCATE", "false")

import jax

# Ensure repo root and src/ are importable when pytest uses importlib mode.
ROOT = os.path.dirname(os.path.dirname(__file__))
SRC = os.path.join(ROOT, "src")
for path in (SRC, ROOT):
    if path not in sys.path:
        sys.path.insert(0, path)

LAYER_MARKERS = {
    "m1": "chunk pool primitive",
    "m2": "number container, cursor, serializer",
    "m3": "arithmetic engine and reference kernel",
    "m4": "host facade and shell",
}


def pytest_configure(config):
    for name, desc in LAYER_MARKERS.items():
        config.addinivalue_line("markers", f"{name}: {desc}")


@pytest.fixture(autouse=True)
def _set_default_device():
    with jax.default_device(jax.devices("cpu")[0]):
        yield


@pytest.fixture
def pool():
    from chunkint_core.chunk import init_chunk_pool
    from chunkint_core.config import PoolConfig

    return init_chunk_pool(PoolConfig(capacity=64, chunk_words=4))


@pytest.fixture
def tiny_pool():
    """Two-word chunks in a pool small enough to exhaust."""
    from chunkint_core.chunk import init_chunk_pool
    from chunkint_core.config import PoolConfig

    return init_chunk_pool(PoolConfig(capacity=4, chunk_words=2))
