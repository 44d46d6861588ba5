"""Tests for the stats document models."""

from uwsgi_stats.models import AppStats, StatsSnapshot, WorkerStats


class TestStatsSnapshot:
    def test_from_full_document(self, sample_stats):
        snapshot = StatsSnapshot.from_dict(sample_stats)

        assert snapshot.listen_queue == 3
        assert snapshot.listen_queue_errors == 1
        assert snapshot.load == 7
        assert snapshot.pid == 74133
        assert snapshot.version == "2.0.21"
        assert snapshot.cwd == "/var/www/frontend"
        assert [w.worker_id for w in snapshot.workers] == [1, 2]
        assert [a.mountpoint for a in snapshot.workers[1].apps] == ["/api", "/admin"]

    def test_payload_url_is_ignored(self, sample_stats):
        assert StatsSnapshot.from_dict(sample_stats).url == ""

    def test_empty_document_is_all_zero(self):
        snapshot = StatsSnapshot.from_dict({})
        assert snapshot == StatsSnapshot()
        assert snapshot.workers == []

    def test_wrong_types_fall_back_to_zero_values(self):
        snapshot = StatsSnapshot.from_dict(
            {"pid": "abc", "version": 2, "load": "high", "workers": {"id": 1}, "uid": 5}
        )
        assert snapshot.pid == 0
        assert snapshot.version == ""
        assert snapshot.load == 0
        assert snapshot.workers == []
        assert snapshot.uid == 5


class TestWorkerStats:
    def test_missing_fields_default(self):
        worker = WorkerStats.from_dict({"id": 4})
        assert worker.worker_id == 4
        assert worker.pid == 0
        assert worker.status == ""
        assert worker.avg_rt == 0
        assert worker.apps == []

    def test_float_avg_rt_is_kept(self):
        assert WorkerStats.from_dict({"avg_rt": 12.5}).avg_rt == 12.5

    def test_boolean_in_numeric_field_is_zero(self):
        worker = WorkerStats.from_dict({"accepting": True, "avg_rt": False, "requests": 4})
        assert worker.accepting == 0
        assert worker.avg_rt == 0
        assert worker.requests == 4

    def test_non_object_apps_are_skipped(self):
        worker = WorkerStats.from_dict({"apps": [1, "x", {"id": 3}]})
        assert [a.app_id for a in worker.apps] == [3]


class TestAppStats:
    def test_from_dict(self):
        app = AppStats.from_dict(
            {"id": 2, "modifier1": 30, "requests": 9, "startup_time": 1,
             "exceptions": 0, "mountpoint": "/app", "chdir": "/srv"}
        )
        assert app == AppStats(
            app_id=2, modifier1=30, requests=9, startup_time=1,
            exceptions=0, mountpoint="/app", chdir="/srv",
        )
