"""ChunkChannel handoff semantics and SSE line helpers."""
from __future__ import annotations

import threading
from typing import List

from lingyi_providers.base.streaming import (
    ChunkChannel,
    DONE_SENTINEL,
    extract_data_payload,
    is_done,
)


def test_items_arrive_in_order_and_close_ends_iteration():
    channel: ChunkChannel[int] = ChunkChannel()
    got: List[int] = []

    def _produce() -> None:
        for i in range(20):
            assert channel.send(i)  # nosec B101
        channel.close()

    t = threading.Thread(target=_produce)
    t.start()
    got.extend(channel)
    t.join(timeout=2)

    assert got == list(range(20))  # nosec B101
    assert not t.is_alive()  # nosec B101


def test_abandon_releases_blocked_sender():
    channel: ChunkChannel[str] = ChunkChannel()
    results: List[bool] = []

    def _produce() -> None:
        results.append(channel.send("first"))
        # capacity is one, so this blocks until abandoned
        results.append(channel.send("second"))
        channel.close()

    t = threading.Thread(target=_produce)
    t.start()
    it = iter(channel)
    assert next(it) == "first"  # nosec B101
    channel.abandon()
    t.join(timeout=2)

    assert not t.is_alive()  # nosec B101
    assert channel.abandoned  # nosec B101
    assert results[0] is True  # nosec B101
    # second send either slipped into the freed slot or observed the abandon
    assert len(results) == 2  # nosec B101


def test_send_after_abandon_returns_false():
    channel: ChunkChannel[int] = ChunkChannel()
    channel.abandon()
    assert channel.send(1) is False  # nosec B101


def test_extract_data_payload_variants():
    assert extract_data_payload("") is None  # nosec B101
    assert extract_data_payload("   \t") is None  # nosec B101
    assert extract_data_payload('data: {"a":1}') == '{"a":1}'  # nosec B101
    assert extract_data_payload('data:{"a":1}') == '{"a":1}'  # nosec B101
    assert extract_data_payload(b"data: [DONE]\r") == DONE_SENTINEL  # nosec B101
    assert extract_data_payload('  {"a":1}  ') == '{"a":1}'  # nosec B101


def test_is_done_matches_exact_sentinel():
    assert is_done("[DONE]")  # nosec B101
    assert not is_done("[done]")  # nosec B101
    assert not is_done('{"done": true}')  # nosec B101
