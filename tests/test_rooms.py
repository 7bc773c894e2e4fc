"""
Preset room tests: every sample inbox runs to its expected outbox.
"""

import pytest

from hrm_vm.cpu.alu import CharPolicy
from hrm_vm.cpu.values import Value
from hrm_vm.emu import EmulatorConfig, StopReason
from hrm_vm.errors import FaultKind
from hrm_vm.rooms import ROOMS, assemble, get_room, room_names


def _run(slug, **kwargs):
    return get_room(slug).build(**kwargs).run()


def _payloads(result):
    return [v.payload for v in result.outbox]


class TestSampleInboxes:
    def test_mail_room(self):
        result = _run("mail-room")
        assert result.reason is StopReason.END
        assert _payloads(result) == [3, 9, 1]

    def test_busy_mail_room(self):
        result = _run("busy-mail-room")
        assert result.reason is StopReason.HALT
        assert "".join(_payloads(result)) == "BUSYMAIL"

    def test_equalization_room(self):
        assert _payloads(_run("equalization-room")) == [5, -1]

    def test_zero_preservation_initiative(self):
        result = _run("zero-preservation-initiative")
        assert result.reason is StopReason.HALT
        assert _payloads(result) == [0, 0, 0, 0, 0]

    def test_zero_preservation_initiative_strict(self):
        """Under the strict policy the letter in the sample inbox faults."""
        result = _run("zero-preservation-initiative", config=EmulatorConfig())
        assert result.fault_kind is FaultKind.BAD_PARAM_TYPE
        assert _payloads(result) == [0]

    def test_countdown(self):
        assert _payloads(_run("countdown")) == [3, 2, 1, 0, -2, -1, 0, 0]

    def test_vowel_incinerator(self):
        result = _run("vowel-incinerator")
        assert result.reason is StopReason.HALT
        assert _payloads(result) == ["B", "X", "Y"]

    @pytest.mark.parametrize("slug", sorted(ROOMS))
    def test_every_room_finishes_cleanly(self, slug):
        assert _run(slug).ok


class TestRoomApi:
    def test_custom_inbox(self):
        result = _run("equalization-room", inbox=[Value.number(2), Value.number(2)])
        assert _payloads(result) == [2]

    def test_build_gives_fresh_floor(self):
        room = get_room("countdown")
        first = room.build()
        first.run()
        assert not first.mem.read(0).is_empty
        assert room.build().mem.read(0).is_empty

    def test_room_policy(self):
        assert get_room("vowel-incinerator").char_policy is CharPolicy.GAME
        assert get_room("mail-room").char_policy is CharPolicy.STRICT

    def test_unknown_room(self):
        with pytest.raises(KeyError) as exc:
            get_room("nope")
        assert "mail-room" in str(exc.value)

    def test_room_names_sorted(self):
        assert room_names() == sorted(ROOMS)

    def test_assemble_rejects_unknown_opcode(self):
        with pytest.raises(KeyError):
            assemble([("HALT",)])
