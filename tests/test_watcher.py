import logging

import pytest

from tophat2d import FilterWatcher, ball, white_top_hat


def test_watcher_logs_start_and_end(caplog, dot_image):
    caplog.set_level(logging.DEBUG, logger="tophat2d")
    with FilterWatcher("white_top_hat") as watcher:
        white_top_hat(dot_image, ball(1), progress=watcher.progress)

    messages = [record.getMessage() for record in caplog.records]
    assert "white_top_hat: start" in messages
    assert any(m.startswith("white_top_hat: end, took") for m in messages)
    assert any("progress 100%" in m for m in messages)
    assert watcher.elapsed is not None and watcher.elapsed >= 0
    assert watcher.last_progress == 1.0
    assert watcher.steps == 3


def test_progress_is_clamped():
    watcher = FilterWatcher("f")
    watcher.progress(1.7)
    assert watcher.last_progress == 1.0
    watcher.progress(-0.2)
    assert watcher.last_progress == 0.0


def test_watcher_reports_abort(caplog):
    caplog.set_level(logging.INFO, logger="tophat2d")
    with pytest.raises(RuntimeError):
        with FilterWatcher("closing"):
            raise RuntimeError("boom")
    assert any("closing: aborted after" in r.getMessage() for r in caplog.records)
