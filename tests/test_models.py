"""Unit tests for Evergreen resource models and body decoders."""

import json

import pytest
from mocks.evg_api_mock import build_payload, task_payload, version_payload
from pydantic import ValidationError

from evg_client.errors import DecodeError
from evg_client.models import (
    BuildStatusCounts,
    EvgBuild,
    EvgProject,
    EvgTask,
    EvgTaskStats,
    EvgTaskStatsRequest,
    EvgTestStatsRequest,
    EvgVersion,
    decode_batch,
    decode_one,
)


def _body(payload) -> bytes:
    return json.dumps(payload).encode()


class TestDecoders:
    def test_decode_one(self):
        task = decode_one(EvgTask, _body(task_payload("t1")))
        assert task.task_id == "t1"
        assert task.logs["task_log"].endswith("?type=T")

    def test_decode_one_not_json(self):
        with pytest.raises(DecodeError, match="EvgTask"):
            decode_one(EvgTask, b"<html>502 Bad Gateway</html>")

    def test_decode_one_missing_field(self):
        payload = task_payload()
        del payload["status_details"]
        with pytest.raises(DecodeError):
            decode_one(EvgTask, _body(payload))

    def test_decode_batch_preserves_order(self):
        body = _body([version_payload("v3"), version_payload("v1"), version_payload("v2")])
        assert [v.version_id for v in decode_batch(EvgVersion, body)] == ["v3", "v1", "v2"]

    def test_decode_batch_empty(self):
        assert decode_batch(EvgVersion, b"[]") == []

    def test_decode_batch_rejects_object(self):
        with pytest.raises(DecodeError, match="list of EvgVersion"):
            decode_batch(EvgVersion, _body(version_payload()))

    def test_unknown_fields_ignored(self):
        task = decode_one(EvgTask, _body(task_payload(brand_new_field={"x": 1})))
        assert not hasattr(task, "brand_new_field")

    def test_records_are_frozen(self):
        task = decode_one(EvgTask, _body(task_payload()))
        with pytest.raises(ValidationError):
            task.status = "failed"


class TestTask:
    def test_status_details_type_alias(self):
        task = EvgTask.model_validate(task_payload())
        assert task.status_details.status_type == "test"

    def test_timestamps_parsed(self):
        task = EvgTask.model_validate(task_payload())
        assert task.start_time.year == 2024
        assert task.finish_time is None


class TestBuild:
    def test_underscore_id_alias(self):
        build = EvgBuild.model_validate(build_payload("build_7"))
        assert build.id == "build_7"

    def test_plain_id_accepted(self):
        payload = build_payload()
        payload["id"] = payload.pop("_id")
        assert EvgBuild.model_validate(payload).id == "build_1"

    def test_status_counts(self):
        counts = EvgBuild.model_validate(build_payload()).status_counts
        assert counts.total_task_count() == 10
        assert counts.finished_task_count() == 4
        assert counts.completed_task_count() == 4
        assert counts.pending_task_count() == 6
        assert counts.percent_complete() == 0.4

    def test_percent_complete_without_tasks(self):
        assert BuildStatusCounts().percent_complete() == 0.0

    def test_status_counts_add(self):
        total = BuildStatusCounts()
        for build_id in ("b1", "b2"):
            total.add(EvgBuild.model_validate(build_payload(build_id)).status_counts)
        assert total.succeeded == 6
        assert total.total_task_count() == 20


class TestProject:
    def test_only_identifier_required(self):
        project = EvgProject.model_validate({"identifier": "mongo-tools"})
        assert project.admins == []
        assert project.commit_queue is None


class TestStats:
    def test_test_stats_params(self):
        query = EvgTestStatsRequest(
            after_date="2024-03-01",
            before_date="2024-03-08",
            group_by_test=True,
            variant="linux",
            task_name="jsCore",
        )
        assert query.to_params() == {
            "after_date": "2024-03-01",
            "before_date": "2024-03-08",
            "group_days": "false",
            "group_by_test": "true",
            "variant": "linux",
            "task_name": "jsCore",
            "presto": "false",
        }

    def test_test_name_included_when_set(self):
        query = EvgTestStatsRequest(test_name="jstests/core/a.js")
        assert query.to_params()["test_name"] == "jstests/core/a.js"

    def test_task_stats_params(self):
        params = EvgTaskStatsRequest(tasks="jsCore").to_params()
        assert params["group_num_days"] == "1"
        assert params["tasks"] == "jsCore"

    def test_unknown_query_field_rejected(self):
        with pytest.raises(ValidationError):
            EvgTaskStatsRequest(bogus="x")

    @pytest.mark.parametrize(
        ("success", "total", "expected"),
        [(8, 10, 0.8), (0, 5, 0.0), (0, 0, 0.0)],
    )
    def test_pass_rate(self, success, total, expected):
        stats = EvgTaskStats(
            task_name="jsCore",
            variant="linux",
            date="2024-03-01",
            num_success=success,
            num_failed=total - success,
            num_total=total,
            num_timeout=0,
            num_test_failed=0,
            num_system_failed=0,
            num_setup_failed=0,
            avg_duration_success=1.0,
        )
        assert stats.pass_rate() == expected
