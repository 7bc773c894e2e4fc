"""
Inbox / outbox tests: batch and interactive scheduling.
"""

import threading

import pytest

from hrm_vm.cpu.values import EMPTY, Value
from hrm_vm.periph.inbox import BatchInbox, InteractiveInbox
from hrm_vm.periph.outbox import Outbox


class TestBatchInbox:
    def test_front_to_back_then_exhausted(self):
        inbox = BatchInbox([Value.number(1), Value.char("B")])
        assert inbox.get() == Value.number(1)
        assert inbox.get() == Value.char("B")
        assert inbox.get() is None
        assert inbox.get() is None
        assert inbox.consumed == 2

    def test_inject(self):
        inbox = BatchInbox()
        assert len(inbox) == 0
        inbox.inject([Value.number(3)])
        assert inbox.remaining() == [Value.number(3)]

    def test_rejects_empty_values(self):
        with pytest.raises(ValueError):
            BatchInbox([EMPTY])
        with pytest.raises(ValueError):
            BatchInbox([Value.prog_addr(1)])

    def test_rejects_raw_payloads(self):
        with pytest.raises(ValueError):
            BatchInbox([5000])
        with pytest.raises(ValueError):
            InteractiveInbox().put("a")


class TestInteractiveInbox:
    def test_queued_values_survive_close(self):
        inbox = InteractiveInbox()
        inbox.put(Value.number(4))
        inbox.close()
        assert inbox.closed
        assert inbox.get() == Value.number(4)
        assert inbox.get() is None
        assert inbox.get() is None

    def test_get_blocks_until_put(self):
        inbox = InteractiveInbox()
        timer = threading.Timer(0.05, inbox.put, args=(Value.number(8),))
        timer.start()
        try:
            assert inbox.get() == Value.number(8)
        finally:
            timer.cancel()

    def test_get_unblocks_on_close(self):
        inbox = InteractiveInbox()
        timer = threading.Timer(0.05, inbox.close)
        timer.start()
        assert inbox.get() is None

    def test_put_after_close(self):
        inbox = InteractiveInbox()
        inbox.close()
        with pytest.raises(RuntimeError):
            inbox.put(Value.number(1))


class TestOutbox:
    def test_append_order_and_listener(self):
        seen = []
        out = Outbox(listener=seen.append)
        out.append(Value.number(1))
        out.append(Value.char("X"))
        assert out.payloads() == [1, "X"]
        assert seen == [Value.number(1), Value.char("X")]
        assert len(out) == 2

    def test_values_is_a_copy(self):
        out = Outbox()
        out.append(Value.number(1))
        out.values.append(Value.number(2))
        assert len(out) == 1

    def test_reset(self):
        out = Outbox()
        out.append(Value.number(1))
        out.reset()
        assert list(out) == []
