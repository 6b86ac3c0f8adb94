# -*- encoding: utf-8 -*-
"""
Tests for BlockCounter - monotonic registration-time source.
"""

import threading

import pytest

from nestnode_attest import BlockCounter


class TestBlockCounter:

    def test_starts_at_zero(self):
        assert BlockCounter().current == 0

    def test_advance(self):
        blocks = BlockCounter(start=10)
        assert blocks.advance() == 11
        assert blocks.advance(5) == 16
        assert blocks.current == 16

    def test_advance_zero_keeps_height(self):
        blocks = BlockCounter(start=3)
        assert blocks.advance(0) == 3

    def test_never_moves_backward(self):
        with pytest.raises(ValueError):
            BlockCounter().advance(-1)

    def test_rejects_bad_start(self):
        with pytest.raises(ValueError):
            BlockCounter(start=-5)

    def test_concurrent_advance(self):
        blocks = BlockCounter()
        heights = []
        lock = threading.Lock()

        def run():
            for _ in range(100):
                h = blocks.advance()
                with lock:
                    heights.append(h)

        threads = [threading.Thread(target=run) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert blocks.current == 1000
        assert sorted(heights) == list(range(1, 1001))
