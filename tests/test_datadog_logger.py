import json
import logging
from unittest import TestCase
from unittest.mock import patch

from work_taxonomy.settings import datadog_logger
from work_taxonomy.settings.datadog_logger import DatadogLogger


def _record(name="work_taxonomy.services.reconciliation", msg="pass complete", **extra):
    record = logging.LogRecord(name, logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestDatadogLogger(TestCase):
    def setUp(self):
        self.handler = DatadogLogger(service="work-taxonomy")
        patcher = patch.object(datadog_logger, "INCLUDE_LOGGERS", None)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_payload_carries_reconciliation_fields(self):
        record = _record(**{"reconciliation.scope": "focus_area:design", "reconciliation.dry_run": True})
        payload = self.handler.build_payload(record)

        self.assertEqual(payload["service"], "work-taxonomy")
        self.assertEqual(payload["status"], "info")
        self.assertEqual(payload["reconciliation.scope"], "focus_area:design")
        self.assertIn("reconciliation.scope:focus_area:design", payload["ddtags"])
        self.assertIn("reconciliation.dry_run:true", payload["ddtags"])

    def test_environment_tag(self):
        handler = DatadogLogger(service="work-taxonomy", env="production")
        self.assertIn("env:production", handler.build_payload(_record())["ddtags"])

    def test_excluded_loggers_are_skipped(self):
        self.assertFalse(self.handler.should_log(_record(name="sqlalchemy.engine.Engine")))
        self.assertTrue(self.handler.should_log(_record()))

    def test_no_api_key_sends_nothing(self):
        with patch.object(datadog_logger, "DATADOG_API_KEY", None), \
                patch.object(datadog_logger.requests, "post") as post:
            self.handler.emit(_record())
        post.assert_not_called()

    def test_emit_posts_json(self):
        with patch.object(datadog_logger, "DATADOG_API_KEY", "test-key"), \
                patch.object(datadog_logger.requests, "post") as post:
            self.handler.emit(_record(**{"reconciliation.scope": "all"}))

        post.assert_called_once()
        kwargs = post.call_args.kwargs
        self.assertEqual(kwargs["headers"]["DD-API-KEY"], "test-key")
        self.assertEqual(json.loads(kwargs["data"])["reconciliation.scope"], "all")

    def test_shipping_failure_does_not_raise(self):
        with patch.object(datadog_logger, "DATADOG_API_KEY", "test-key"), \
                patch.object(datadog_logger.requests, "post", side_effect=ConnectionError("down")), \
                patch.object(self.handler, "handleError") as handle_error:
            self.handler.emit(_record())
        handle_error.assert_called_once()
