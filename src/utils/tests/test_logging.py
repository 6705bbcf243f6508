"""Unit tests for structured JSON logging."""

import json
import logging
import unittest
from datetime import datetime, timezone

from utils.logging import JSONFormatter, setup_structured_logging


class TestJSONFormatter(unittest.TestCase):

    def _record(self, **extra):
        record = logging.LogRecord('services.content_linker', logging.INFO, __file__, 1, "Reconciled %s", ('t1',), None)
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_core_fields(self):
        data = json.loads(JSONFormatter().format(self._record()))
        self.assertEqual(data['level'], 'INFO')
        self.assertEqual(data['logger'], 'services.content_linker')
        self.assertEqual(data['message'], 'Reconciled t1')
        self.assertTrue(data['timestamp'].endswith('Z'))

    def test_extra_fields_included(self):
        data = json.loads(JSONFormatter().format(self._record(learnerId='l1', added=2)))
        self.assertEqual(data['learnerId'], 'l1')
        self.assertEqual(data['added'], 2)

    def test_non_json_values_are_stringified(self):
        when = datetime(2026, 1, 1, tzinfo=timezone.utc)
        data = json.loads(JSONFormatter().format(self._record(savedFrom=when)))
        self.assertEqual(data['savedFrom'], str(when))


class TestSetupStructuredLogging(unittest.TestCase):

    def setUp(self):
        self.root = logging.getLogger()
        self._handlers, self._level = self.root.handlers[:], self.root.level

    def tearDown(self):
        self.root.handlers, self.root.level = self._handlers, self._level

    def test_installs_json_handler_and_quiets_drivers(self):
        setup_structured_logging('DEBUG')

        self.assertEqual(len(self.root.handlers), 1)
        self.assertIsInstance(self.root.handlers[0].formatter, JSONFormatter)
        self.assertEqual(self.root.level, logging.DEBUG)
        self.assertEqual(logging.getLogger('pymongo').level, logging.WARNING)
        self.assertEqual(logging.getLogger('jieba').level, logging.WARNING)


if __name__ == '__main__':
    unittest.main()
