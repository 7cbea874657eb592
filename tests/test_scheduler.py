"""Tests for the repeating scheduler mode."""

from nexus_prune import scheduler
from nexus_prune.config import JobSettings

from .conftest import EndlessClient, FakeClient


def job(**overrides):
    values = dict(name="snapshots", repository="maven-snapshots", keep_items=1, path_depth=2, every=3600)
    values.update(overrides)
    return JobSettings(**values)


def test_runs_due_jobs_and_sleeps(monkeypatch, scenario_entries):
    sleeps = []
    monkeypatch.setattr(scheduler.time, "sleep", sleeps.append)
    client = FakeClient([{"items": scenario_entries}])

    scheduler.schedule_loop([job()], client, dry_run=False, tick=10, max_ticks=2)

    assert client.deleted == ["c-12", "c-10"]
    assert len(client.list_calls) == 1
    assert sleeps == [10, 10]


def test_job_errors_do_not_stop_the_loop(monkeypatch, caplog):
    monkeypatch.setattr(scheduler.time, "sleep", lambda seconds: None)

    scheduler.schedule_loop([job()], EndlessClient(), dry_run=True, max_ticks=1)

    assert "Job 'snapshots' failed" in caplog.text


def test_without_intervals_returns_immediately(monkeypatch):
    def fail(seconds):
        raise AssertionError("should not sleep")

    monkeypatch.setattr(scheduler.time, "sleep", fail)

    scheduler.schedule_loop([job(every=None)], FakeClient(), dry_run=True)


def test_malformed_listing_does_not_stop_the_loop(monkeypatch, scenario_entries):
    monkeypatch.setattr(scheduler.time, "sleep", lambda seconds: None)
    items = [{"id": "x", "version": "1", "assets": [None]}] + scenario_entries
    client = FakeClient([{"items": items}])

    scheduler.schedule_loop([job()], client, dry_run=False, max_ticks=1)

    assert client.deleted == ["c-12", "c-10"]


def test_unexpected_errors_are_logged_and_the_loop_continues(monkeypatch, caplog):
    monkeypatch.setattr(scheduler.time, "sleep", lambda seconds: None)
    calls = []

    def explode(job, client, dry_run):
        calls.append(job.name)
        raise KeyError("items")

    monkeypatch.setattr(scheduler, "run_job", explode)
    jobs = [job(name="first"), job(name="second")]

    scheduler.schedule_loop(jobs, FakeClient(), dry_run=True, max_ticks=1)

    assert calls == ["first", "second"]
    assert "Job 'first' failed" in caplog.text
    assert "Job 'second' failed" in caplog.text
