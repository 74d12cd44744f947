import json
import logging
import unittest

from config.logging_config import JsonFormatter


class TestJsonFormatter(unittest.TestCase):
    def _record(self, **extra):
        record = logging.LogRecord("services.import_service", logging.INFO, __file__, 1,
                                   "position_import_done rows=%d", (3,), None)
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_extra_fields_become_top_level_keys(self):
        line = JsonFormatter().format(self._record(rows=3, rows_created=1, file="book.xlsx"))
        payload = json.loads(line)
        self.assertEqual(payload["message"], "position_import_done rows=3")
        self.assertEqual(payload["level"], "INFO")
        self.assertEqual(payload["rows"], 3)
        self.assertEqual(payload["rows_created"], 1)
        self.assertEqual(payload["file"], "book.xlsx")

    def test_standard_record_attributes_are_not_dumped(self):
        payload = json.loads(JsonFormatter().format(self._record()))
        self.assertNotIn("pathname", payload)
        self.assertNotIn("args", payload)

    def test_non_ascii_kept_readable(self):
        payload = JsonFormatter().format(self._record(label="其他"))
        self.assertIn("其他", payload)


if __name__ == "__main__":
    unittest.main()
