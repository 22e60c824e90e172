"""Tests for logging context propagation."""

import contextvars
import threading

from bridge_aid.logging.context import (
    clear_log_context,
    get_log_context,
    log_context,
    pop_log_context,
    push_log_context,
)


def test_empty_context():
    """Test that context starts empty."""
    assert get_log_context() == {}


def test_push_and_pop():
    """Test pushing fields and restoring with the token."""
    token = push_log_context(request_id="abc123", primary_need="food")
    assert get_log_context() == {"request_id": "abc123", "primary_need": "food"}

    pop_log_context(token)
    assert get_log_context() == {}


def test_nested_context():
    """Test nested pushes and pops."""
    token1 = push_log_context(request_id="abc123")
    token2 = push_log_context(resource_id="101")
    assert get_log_context() == {"request_id": "abc123", "resource_id": "101"}

    pop_log_context(token2)
    assert get_log_context() == {"request_id": "abc123"}

    pop_log_context(token1)
    assert get_log_context() == {}


def test_context_override():
    """Test that pushing the same key overwrites previous value."""
    token1 = push_log_context(request_id="abc123")
    token2 = push_log_context(request_id="xyz789")
    assert get_log_context() == {"request_id": "xyz789"}

    pop_log_context(token2)
    assert get_log_context() == {"request_id": "abc123"}

    pop_log_context(token1)


def test_context_manager_nested():
    """Test nested context managers."""
    with log_context(request_id="abc123"):
        with log_context(resource_id="101"):
            assert get_log_context() == {"request_id": "abc123", "resource_id": "101"}

        assert get_log_context() == {"request_id": "abc123"}

    assert get_log_context() == {}


def test_context_manager_exception():
    """Test that context is restored even when exception occurs."""
    try:
        with log_context(request_id="abc123"):
            raise ValueError("Test exception")
    except ValueError:
        pass

    assert get_log_context() == {}


def test_clear_context():
    """Test clearing all context."""
    push_log_context(request_id="abc123")

    clear_log_context()

    assert get_log_context() == {}


def test_context_isolation():
    """Test that get_log_context returns a copy, not the actual dict."""
    with log_context(request_id="abc123"):
        context = get_log_context()
        context["resource_id"] = "modified"

        assert get_log_context() == {"request_id": "abc123"}


def test_threads_do_not_share_context():
    """Test a plain thread starts without the caller's fields."""
    seen = {}

    def worker():
        seen["context"] = get_log_context()

    with log_context(request_id="abc123"):
        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()

    assert seen["context"] == {}


def test_copied_context_follows_into_thread():
    """Test running in a copied context carries the fields across threads."""
    seen = {}

    def worker():
        seen["context"] = get_log_context()

    with log_context(request_id="abc123"):
        ctx = contextvars.copy_context()

    thread = threading.Thread(target=ctx.run, args=(worker,))
    thread.start()
    thread.join()

    assert seen["context"] == {"request_id": "abc123"}
