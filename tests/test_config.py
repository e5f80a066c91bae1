import pytest

from chunkint_core import constants
from chunkint_core.config import PoolConfig
from chunkint_core.errors import ChunkIntConfigError
from chunkint_core.status import Status, coerce_status, raise_if_bad
from chunkint_core.errors import ChunkIntAllocationError, ChunkIntNullArgumentError

pytestmark = pytest.mark.m1


def test_hex_width_matches_word_bits():
    assert constants.HEX_CHARS_PER_WORD == 8
    assert constants.WORD_MASK == 0xFFFFFFFF


def test_env_positive_int(monkeypatch):
    monkeypatch.setenv("CHUNKINT_TEST_VALUE", "12")
    assert constants._env_positive_int("CHUNKINT_TEST_VALUE", 3) == 12
    monkeypatch.setenv("CHUNKINT_TEST_VALUE", "")
    assert constants._env_positive_int("CHUNKINT_TEST_VALUE", 3) == 3
    monkeypatch.setenv("CHUNKINT_TEST_VALUE", "zero")
    with pytest.raises(ChunkIntConfigError):
        constants._env_positive_int("CHUNKINT_TEST_VALUE", 3)


def test_env_flag(monkeypatch):
    monkeypatch.setenv("CHUNKINT_TEST_FLAG", " Yes ")
    assert constants._env_flag("CHUNKINT_TEST_FLAG")
    monkeypatch.setenv("CHUNKINT_TEST_FLAG", "0")
    assert not constants._env_flag("CHUNKINT_TEST_FLAG")


def test_pool_config_rejects_nonpositive():
    with pytest.raises(ChunkIntConfigError):
        PoolConfig(capacity=0)
    with pytest.raises(ChunkIntConfigError):
        PoolConfig(chunk_words=0)


def test_status_coercion_and_raise():
    assert coerce_status(True) == Status.OK
    assert coerce_status(False) == Status.ALLOCATION_FAILURE
    raise_if_bad(Status.OK)
    with pytest.raises(ChunkIntNullArgumentError):
        raise_if_bad(Status.NULL_ARGUMENT, "ctx")
    with pytest.raises(ChunkIntAllocationError):
        raise_if_bad(False, "ctx")
