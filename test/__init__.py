# Copyright 2010-present MongoDB, Inc.
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

"""Test suite for mongocursor."""
from __future__ import annotations

import gc
import unittest

from mongocursor.collection import Collection

from test.mocks import MockTransport


class MockTransportTest(unittest.TestCase):
    """Base class for TestCases that run against a MockTransport.

    No server is needed: the transport serves ``self.docs`` from memory
    and records every request it receives.
    """

    num_docs = 100

    def setUp(self):
        super().setUp()
        self.docs = [{"_id": i, "x": i % 7} for i in range(self.num_docs)]
        self.transport = self.make_transport()
        self.coll = Collection(self.transport, "mongocursor_test", "test")

    def make_transport(self, **kwargs):
        kwargs.setdefault("documents", self.docs)
        return MockTransport(**kwargs)

    def collect_garbage(self):
        gc.collect()
