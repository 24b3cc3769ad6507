# =============================================================================
# tests/test_cron_tasks.py - Cron Trigger & Task Status Tests
# =============================================================================
# Celery is never contacted: the task objects and AsyncResult are patched.
# =============================================================================

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from kombu.exceptions import OperationalError

CRON_HEADERS = {"Authorization": "Bearer test-cron-secret"}


class TestCronAuth:

    @pytest.mark.parametrize("headers", [
        {},
        {"Authorization": "Bearer wrong"},
        {"Authorization": "test-cron-secret"},
        {"Authorization": "Basic test-cron-secret"},
        {"Authorization": "Bearer clav\u00e9".encode()},
    ])
    def test_rejected(self, client, headers):
        response = client.get("/api/cron/update-dollar", headers=headers)
        assert response.status_code == 401

    def test_unset_secret_rejects_everything(self, client, monkeypatch):
        from app.config import settings

        monkeypatch.setattr(settings, "CRON_SECRET_KEY", "")
        response = client.get("/api/cron/update-dollar", headers={"Authorization": "Bearer "})
        assert response.status_code == 401


class TestCronTriggers:

    def test_dollar_refresh_is_queued(self, client):
        task = MagicMock(**{"delay.return_value": SimpleNamespace(id="task-1")})
        with patch("workers.tasks.refresh_dollar_task", task):
            response = client.get("/api/cron/update-dollar", headers=CRON_HEADERS)

        assert response.status_code == 200
        assert response.json()["task_id"] == "task-1"
        assert response.json()["status"] == "PENDING"
        task.delay.assert_called_once_with()

    def test_risk_country_refresh_is_queued(self, client):
        task = MagicMock(**{"delay.return_value": SimpleNamespace(id="task-2")})
        with patch("workers.tasks.refresh_risk_country_task", task):
            response = client.get("/api/cron/update-riesgo-pais", headers=CRON_HEADERS)

        assert response.status_code == 200
        assert response.json()["task_id"] == "task-2"
        task.delay.assert_called_once_with()

    def test_broker_down_is_503(self, client):
        task = MagicMock(**{"delay.side_effect": OperationalError("redis down")})
        with patch("workers.tasks.refresh_dollar_task", task):
            response = client.get("/api/cron/update-dollar", headers=CRON_HEADERS)

        assert response.status_code == 503
        assert response.json()["code"] == "QUEUE_UNAVAILABLE"


class TestTaskStatus:

    def test_success(self, client):
        result = MagicMock(status="SUCCESS", result={"source": "dollar", "records_saved": 7})
        with patch("workers.celery_app.celery_app.AsyncResult", return_value=result):
            body = client.get("/api/tasks/task-1").json()

        assert body["status"] == "SUCCESS"
        assert body["message"] == "Complete"
        assert body["result"]["records_saved"] == 7

    def test_failure(self, client):
        result = MagicMock(status="FAILURE", result=RuntimeError("upstream 500"))
        with patch("workers.celery_app.celery_app.AsyncResult", return_value=result):
            body = client.get("/api/tasks/task-1").json()

        assert body["error"] == "upstream 500"

    def test_pending(self, client):
        result = MagicMock(status="PENDING", result=None)
        with patch("workers.celery_app.celery_app.AsyncResult", return_value=result):
            body = client.get("/api/tasks/unknown").json()

        assert body["message"] == "Waiting in queue..."
        assert body["result"] is None
