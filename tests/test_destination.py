from concurrent.futures import TimeoutError as FutureTimeout
from pathlib import Path

import pytest

from services.export.destination import DestinationRequest


def test_resolve_returns_path():
    request = DestinationRequest()

    assert request.resolve("/tmp/out")
    assert request.done
    assert request.wait() == Path("/tmp/out")


def test_none_means_cancel():
    request = DestinationRequest()

    request.resolve(None)

    assert request.wait() is None


def test_first_resolution_wins():
    request = DestinationRequest()
    request.resolve("/first")

    assert not request.resolve("/second")
    assert not request.cancel()
    assert request.wait() == Path("/first")


def test_resolve_after_cancel_is_ignored():
    request = DestinationRequest()
    request.cancel()

    assert not request.resolve("/late")
    assert request.wait() is None


def test_wait_times_out():
    with pytest.raises(FutureTimeout):
        DestinationRequest().wait(timeout=0.01)
