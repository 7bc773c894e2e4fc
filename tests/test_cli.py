"""
Command-line host tests (hrmvm).
"""

import io
import logging
import threading

import pytest

from hrm_vm.cli import main
from hrm_vm.errors import FaultKind
from hrm_vm.log_setup import setup_logging, teardown_logging


class TestRun:
    def test_sample_inbox(self, capsys):
        assert main(["mail-room"]) == 0
        assert capsys.readouterr().out.split() == ["3", "9", "1"]

    def test_inbox_override(self, capsys):
        assert main(["equalization-room", "--inbox", "4", "4", "1", "2"]) == 0
        assert capsys.readouterr().out.split() == ["4"]

    def test_fault_exit_code(self, capsys):
        code = main(["zero-preservation-initiative", "--policy", "strict"])
        captured = capsys.readouterr()
        assert code == FaultKind.BAD_PARAM_TYPE.code
        assert captured.out.split() == ["0"]
        assert "BAD_PARAM_TYPE" in captured.err

    def test_step_ceiling_is_not_a_fault(self, capsys):
        assert main(["busy-mail-room", "--max-steps", "5"]) == 0
        assert capsys.readouterr().out.split() == ["B", "U"]

    def test_bad_inbox_value(self, capsys):
        assert main(["mail-room", "--inbox", "xyz"]) == 2
        assert "xyz" in capsys.readouterr().err

    def test_interactive(self, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("0\n5\n\nbogus!\n0\n"))
        assert main(["zero-preservation-initiative", "--interactive"]) == 0
        assert capsys.readouterr().out.split() == ["0", "0"]

    def test_interactive_reader_is_joined(self, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("0\n"))
        assert main(["zero-preservation-initiative", "--interactive"]) == 0
        assert "hrmvm-inbox-reader" not in [t.name for t in threading.enumerate()]

    def test_trace_and_floor(self, capsys):
        assert main(["countdown", "--inbox", "1", "--trace", "--floor"]) == 0
        err = capsys.readouterr().err
        assert "BUMP_MINUS" in err
        assert " 0:   0" in err


class TestInfo:
    def test_list(self, capsys):
        assert main(["--list"]) == 0
        out = capsys.readouterr().out
        assert "mail-room" in out
        assert "Vowel Incinerator" in out

    def test_listing(self, capsys):
        assert main(["zero-preservation-initiative", "--listing"]) == 0
        out = capsys.readouterr().out.splitlines()
        assert out[0] == "1: INBOX"
        assert len(out) == 5

    def test_unknown_room(self):
        with pytest.raises(SystemExit) as exc:
            main(["nope"])
        assert exc.value.code == 2

    def test_room_required(self):
        with pytest.raises(SystemExit):
            main([])

    def test_inbox_and_interactive_conflict(self):
        with pytest.raises(SystemExit):
            main(["mail-room", "--inbox", "1", "--interactive"])


class TestLogSetup:
    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        name = "hrm_vm.test_file_handler"
        logger = setup_logging(name=name, log_file=log_file, rich_console=False)
        try:
            logger.info("hello from the test")
            for handler in logger.handlers:
                handler.flush()
            text = log_file.read_text(encoding="utf-8")
            assert "hello from the test" in text
            assert "| INFO    |" in text
        finally:
            teardown_logging(name)

    def test_idempotent(self):
        name = "hrm_vm.test_idempotent"
        try:
            first = setup_logging(name=name, console_level=logging.ERROR)
            count = len(first.handlers)
            assert setup_logging(name=name) is first
            assert len(first.handlers) == count
        finally:
            teardown_logging(name)
