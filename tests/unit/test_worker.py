"""Tests for the Celery housekeeping schedule."""

from app.tasks import purge_stale_sessions
from app.worker import celery_app


def test_session_purge_is_scheduled_daily():
    entry = celery_app.conf.beat_schedule["purge-stale-sessions"]
    assert entry["task"] == purge_stale_sessions.name == "app.tasks.purge_stale_sessions"
    assert entry["schedule"].hour == {3}
    assert entry["schedule"].minute == {0}
