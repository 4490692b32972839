import threading
import time

from tapntrack.bulk.coordinator import BulkMutationCoordinator
from tapntrack.core.exceptions import StoreError


def test_empty_list_makes_no_calls(coordinator):
    calls = []

    result = coordinator.apply([], calls.append, refresh=lambda: calls.append("refresh"))

    assert result.total == 0
    assert result.ok
    assert calls == []


def test_partial_failure_reports_each_failed_item(coordinator):
    errors = []
    refreshed = []

    def mutate(record_id):
        if record_id == "b":
            raise StoreError("permission denied")

    result = coordinator.apply(
        ["a", "b", "c"],
        mutate,
        on_item_error=lambda rid, msg: errors.append((rid, msg)),
        refresh=lambda: refreshed.append(True),
    )

    assert result.total == 3
    assert set(result.succeeded) == {"a", "c"}
    assert [(f.record_id, f.message, f.retryable) for f in result.failed] == [("b", "permission denied", False)]
    assert errors == [("b", "permission denied")]
    assert refreshed == [True]
    assert not result.ok


def test_refresh_skipped_when_nothing_succeeded(coordinator):
    refreshed = []

    def mutate(record_id):
        raise StoreError("offline")

    result = coordinator.apply(["a", "b"], mutate, refresh=lambda: refreshed.append(True))

    assert len(result.failed) == 2
    assert refreshed == []


def test_duplicate_ids_are_applied_once(coordinator):
    seen = []
    lock = threading.Lock()

    def mutate(record_id):
        with lock:
            seen.append(record_id)

    result = coordinator.apply(["a", "a", "b"], mutate)

    assert result.total == 2
    assert sorted(seen) == ["a", "b"]


def test_slow_call_times_out_as_retryable_failure():
    coordinator = BulkMutationCoordinator(timeout_seconds=0.05, max_workers=2)
    release = threading.Event()

    def mutate(record_id):
        if record_id == "slow":
            release.wait(1.0)

    try:
        result = coordinator.apply(["fast", "slow"], mutate)
    finally:
        release.set()
        coordinator.close()

    assert result.succeeded == ("fast",)
    assert result.retryable_ids == ["slow"]


def test_calls_run_concurrently(coordinator):
    started = time.monotonic()

    coordinator.apply(["a", "b", "c", "d"], lambda rid: time.sleep(0.2))

    assert time.monotonic() - started < 0.6


def test_to_dict_shape(coordinator):
    def mutate(record_id):
        raise StoreError("nope")

    data = coordinator.apply(["x"], mutate).to_dict()

    assert data == {
        "total": 1,
        "ok": False,
        "succeeded": [],
        "failed": [{"id": "x", "message": "nope", "retryable": False}],
        "retryableIds": [],
    }


def test_unexpected_error_is_reported_and_others_still_run():
    coordinator = BulkMutationCoordinator(timeout_seconds=2.0, max_workers=1)
    calls = []
    errors = []

    def mutate(record_id):
        calls.append(record_id)
        if record_id == "a":
            raise RuntimeError("boom")
        if record_id == "b":
            raise KeyError("missing")

    try:
        result = coordinator.apply(
            ["a", "b", "c"], mutate, on_item_error=lambda rid, msg: errors.append(rid)
        )
    finally:
        coordinator.close()

    assert sorted(calls) == ["a", "b", "c"]
    assert result.succeeded == ("c",)
    assert [(f.record_id, f.retryable) for f in result.failed] == [("a", False), ("b", False)]
    assert result.failed[0].message == "boom"
    assert sorted(errors) == ["a", "b"]
