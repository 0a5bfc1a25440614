from __future__ import annotations

import pytest

from runloop import Err, Ok, RuntimeResult


def test_ok_accessors() -> None:
    result = Ok(3)

    assert result.is_ok() and not result.is_err()
    assert result.ok() == 3
    assert result.err() is None


def test_err_accessors() -> None:
    error = ValueError("bad")
    result = Err(error)

    assert result.is_err()
    assert result.err() is error
    with pytest.raises(ValueError, match="bad"):
        result.unwrap()


def test_unwrap_err_on_ok_raises() -> None:
    with pytest.raises(RuntimeError, match="unwrap_err on Ok"):
        Ok(1).unwrap_err()


def test_runtime_result_display() -> None:
    assert RuntimeResult(Ok(None)).display() == "Ok(None)"
    assert RuntimeResult(Err(KeyError("k"))).display() == "Err(KeyError('k'))"


def test_runtime_result_flags_follow_result() -> None:
    ok = RuntimeResult(Ok(1))
    failed = RuntimeResult(Err(ValueError("bad")))

    assert ok.is_ok and not ok.is_err
    assert failed.is_err and not failed.is_ok
