import logging
import unittest

from utils import logging_utils
from utils.logging_utils import (
    ExtraFieldsFormatter,
    RecordContextFilter,
    build_logging_config,
    get_tagged_logger,
)


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record: logging.LogRecord) -> None:  # type: ignore[override]
        self.records.append(record)


def _record(name="pooltime.engine", msg="msg", **extra):
    record = logging.LogRecord(name, logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestLoggingUtils(unittest.TestCase):
    def _capture(self, logger):
        handler = _ListHandler()
        base_logger = logger.logger
        base_logger.setLevel(logging.DEBUG)
        base_logger.addHandler(handler)
        base_logger.propagate = False

        def _restore():
            base_logger.removeHandler(handler)
            base_logger.propagate = True

        self.addCleanup(_restore)
        return handler

    def test_build_logging_config_has_one_console_handler(self):
        cfg = build_logging_config(job_name="jobtest")
        self.assertEqual(list(cfg["handlers"]), ["console"])
        self.assertEqual(cfg["filters"]["context"]["job_name"], "jobtest")
        self.assertIs(cfg["formatters"]["pooltime"]["()"], ExtraFieldsFormatter)

    def test_default_job_name(self):
        cfg = build_logging_config()
        self.assertEqual(cfg["filters"]["context"]["job_name"], "pooltime")

    def test_get_tagged_logger_injects_tag(self):
        logger = get_tagged_logger("pooltime.tests.sample", tag="custom_tag")
        handler = self._capture(logger)
        logger.info("hello pool")
        self.assertEqual(handler.records[-1].tag, "custom_tag")

    def test_caller_extra_fields_are_kept(self):
        logger = get_tagged_logger("pooltime.tests.extra", tag="engine")
        handler = self._capture(logger)
        logger.info("Selected best pool hour", extra={"best_hour": 10, "score": 100})
        record = handler.records[-1]
        self.assertEqual(record.tag, "engine")
        self.assertEqual(record.best_hour, 10)
        self.assertEqual(record.score, 100)

    def test_tag_defaults_to_last_name_segment(self):
        logger = get_tagged_logger("pooltime.data_sources.open_meteo_client")
        self.assertEqual(logger.extra["tag"], "open_meteo_client")

    def test_context_filter_fills_missing_fields(self):
        record = _record(name="uvicorn.access")
        self.assertTrue(RecordContextFilter("jobtest").filter(record))
        self.assertEqual(record.job_name, "jobtest")
        self.assertEqual(record.tag, "access")

        tagged = _record(tag="engine")
        RecordContextFilter().filter(tagged)
        self.assertEqual(tagged.tag, "engine")
        self.assertEqual(tagged.job_name, "-")

    def test_formatter_appends_sorted_extras(self):
        formatter = ExtraFieldsFormatter("[%(job_name)s:%(tag)s] %(message)s")
        record = _record(msg="Selected best pool hour", tag="engine", job_name="api", score=100, best_hour=10)
        self.assertEqual(formatter.format(record), "[api:engine] Selected best pool hour best_hour=10 score=100")

    def test_formatter_without_extras_is_unchanged(self):
        formatter = ExtraFieldsFormatter("[%(job_name)s:%(tag)s] %(message)s")
        record = _record(msg="plain", tag="engine", job_name="api")
        self.assertEqual(formatter.format(record), "[api:engine] plain")

    def test_setup_logging_override_applies_filters(self):
        root = logging.getLogger()
        orig_handlers = root.handlers[:]
        orig_level = root.level
        try:
            logging_utils.setup_logging(level="INFO", job_name="jobtest", override_existing=True)
            self.assertTrue(
                any(
                    any(isinstance(f, RecordContextFilter) for f in h.filters)
                    for h in root.handlers
                )
            )
        finally:
            root.handlers = orig_handlers
            root.setLevel(orig_level)
            logging_utils._CONFIGURED = False


if __name__ == "__main__":
    unittest.main()
