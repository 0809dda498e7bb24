import json
import logging

from amaze import logging_utils
from amaze.server import _configure_logging


def test_key_value_lines(monkeypatch, capsys):
    monkeypatch.setattr(logging_utils, "CURRENT_LEVEL", 20)
    monkeypatch.setattr(logging_utils, "JSON_MODE", False)
    log = logging_utils.get_logger("t")
    log.debug(event="hidden")
    log.info(event="shown", a=1, b="two words", c=None)
    out = capsys.readouterr().out
    assert "hidden" not in out
    assert "level=info" in out
    assert "event=shown a=1 b=two_words logger=t" in out
    assert "c=" not in out


def test_json_lines_and_errors_on_stderr(monkeypatch, capsys):
    monkeypatch.setattr(logging_utils, "JSON_MODE", True)
    logging_utils.get_logger("t").error(event="bad", code=3)
    captured = capsys.readouterr()
    rec = json.loads(captured.err.strip().splitlines()[-1])
    assert rec["event"] == "bad" and rec["code"] == 3 and rec["level"] == "error" and rec["logger"] == "t"


def test_get_logger_is_cached():
    assert logging_utils.get_logger("x") is logging_utils.get_logger("x")


def test_configure_logging_writes_file(tmp_path):
    root = logging.getLogger()
    saved = list(root.handlers), root.level
    try:
        path = _configure_logging(str(tmp_path))
        # twice: handlers are replaced, not stacked
        _configure_logging(str(tmp_path))
        assert len(root.handlers) == 2
        logging.getLogger("amaze.test").info("hello")
        for h in root.handlers:
            h.flush()
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved[0]:
            root.addHandler(h)
        root.setLevel(saved[1])
    assert path == str(tmp_path / "amaze.log")
    assert "hello" in (tmp_path / "amaze.log").read_text()
