# Copyright 2023-present MongoDB, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
from __future__ import annotations

import datetime
import os
import unittest
from unittest.mock import patch

from bson import json_util

from mongocursor.common import DEFAULT_LOG_DOCUMENT_LENGTH, LOG_DOCUMENT_LENGTH_ENV
from mongocursor.errors import TransportError
from mongocursor.logger import LogMessage

from test import MockTransportTest


class TestLogMessage(unittest.TestCase):
    def test_fields_rendered_as_json(self):
        message = LogMessage(
            message="Request started",
            commandName="find",
            cursorId=None,
            serverAddress=("a", 27017),
            durationMS=datetime.timedelta(milliseconds=5),
        )
        doc = json_util.loads(str(message))
        self.assertEqual("Request started", doc["message"])
        self.assertEqual("find", doc["commandName"])
        self.assertIsNone(doc["cursorId"])
        self.assertEqual(["a", 27017], doc["serverAddress"])
        self.assertEqual(5.0, doc["durationMS"])

    def test_failure_rendered_with_repr(self):
        doc = json_util.loads(str(LogMessage(failure=TransportError("boom"))))
        self.assertIn("boom", doc["failure"])

    def test_default_truncation(self):
        filter = {"x": "a" * (DEFAULT_LOG_DOCUMENT_LENGTH * 2)}
        doc = json_util.loads(str(LogMessage(filter=filter)))
        self.assertEqual(DEFAULT_LOG_DOCUMENT_LENGTH + 3, len(doc["filter"]))
        self.assertTrue(doc["filter"].endswith("..."))

    def test_configured_truncation(self):
        with patch.dict(os.environ, {LOG_DOCUMENT_LENGTH_ENV: "5"}):
            doc = json_util.loads(str(LogMessage(filter={"abc": 1})))
        self.assertEqual('{"abc...', doc["filter"])

    def test_short_filter_not_truncated(self):
        doc = json_util.loads(str(LogMessage(filter={"a": 1})))
        self.assertEqual('{"a": 1}', doc["filter"])


class TestCursorLogging(MockTransportTest):
    def test_query_and_get_more_logged(self):
        with self.assertLogs("mongocursor.cursor", level="DEBUG") as cm:
            self.coll.find({"x": 1}, batch_size=10).to_list()
        messages = [json_util.loads(r.getMessage()) for r in cm.records]
        names = [(m["message"], m.get("commandName")) for m in messages]
        self.assertEqual(("Request started", "find"), names[0])
        self.assertEqual(("Request succeeded", "find"), names[1])
        self.assertIn(("Request started", "getMore"), names)
        self.assertEqual('{"x": 1}', messages[0]["filter"])
        self.assertEqual(10, messages[0]["batchSize"])
        self.assertEqual(42, messages[1]["cursorId"])

    def test_failure_logged(self):
        self.transport.get_more_errors.append(TransportError("connection reset"))
        cursor = self.coll.find(batch_size=10)
        cursor.to_list(10)
        with self.assertLogs("mongocursor.cursor", level="DEBUG") as cm:
            self.assertRaises(TransportError, cursor.next)
        doc = json_util.loads(cm.records[-1].getMessage())
        self.assertEqual("Request failed", doc["message"])
        self.assertEqual("getMore", doc["commandName"])
        self.assertIn("connection reset", doc["failure"])
        cursor.close()

    def test_cleanup_failure_logged_as_warning(self):
        self.transport.kill_cursors_errors.append(TransportError("gone"))
        cursor = self.coll.find(batch_size=10)
        cursor.next()
        with self.assertLogs("mongocursor.cursor", level="WARNING") as cm:
            cursor.close()
        self.assertEqual(1, len(cm.records))
        doc = json_util.loads(cm.records[0].getMessage())
        self.assertEqual("Cursor cleanup failed", doc["message"])
        self.assertEqual(42, doc["cursorId"])


if __name__ == "__main__":
    unittest.main()
