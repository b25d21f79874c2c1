# Copyright 2013-present MongoDB, Inc.
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

"""Tools for mocking the transport to test the cursor."""
from __future__ import annotations

from mongocursor.message import _GetMore, _KillCursors, _Query
from mongocursor.transport import Response, Transport

# What a server sends for a query with no batch size.
DEFAULT_SERVER_BATCH = 101


class MockTransport(Transport):
    """A Transport backed by an in-memory result set.

    Every request is appended to ``requests`` as ``(kind, address,
    request)``. Errors queued in ``query_errors``, ``get_more_errors`` or
    ``kill_cursors_errors`` are raised, in order, instead of answering.

    :param documents: the documents every query returns, before `skip`.
    :param cursor_id: the id of the server cursor opened by a query.
    :param address: the server that answers queries.
    :param mongos: pretend to be connected to a mongos.
    :param server_batch_size: if set, answer every request with this many
        documents, whatever was asked for.
    """

    def __init__(
        self,
        documents=(),
        cursor_id=42,
        address=("a", 27017),
        mongos=False,
        server_batch_size=None,
        max_tries=3,
    ):
        super().__init__(max_tries=max_tries)
        self.documents = list(documents)
        self.mock_cursor_id = cursor_id
        self.mock_address = address
        self.mock_mongos = mongos
        self.server_batch_size = server_batch_size

        self.requests = []
        self.query_errors = []
        self.get_more_errors = []
        self.kill_cursors_errors = []
        self._results = []
        self._position = 0

    @property
    def is_mongos(self):
        return self.mock_mongos

    def requests_of(self, kind):
        return [request for k, _, request in self.requests if k == kind]

    @property
    def queries(self):
        return self.requests_of("query")

    @property
    def get_mores(self):
        return self.requests_of("getMore")

    @property
    def kill_cursors(self):
        return self.requests_of("killCursors")

    def _next_batch(self, ntoreturn):
        n = self.server_batch_size or ntoreturn or DEFAULT_SERVER_BATCH
        batch = self._results[self._position : self._position + n]
        self._position += len(batch)
        if self._position >= len(self._results):
            cursor_id = 0
        else:
            cursor_id = self.mock_cursor_id
        return Response(cursor_id, len(batch), batch, self.mock_address)

    def _send_query(self, read_preference, request):
        assert isinstance(request, _Query)
        self.requests.append(("query", None, request))
        if self.query_errors:
            raise self.query_errors.pop(0)
        self._results = self.documents[request.ntoskip :]
        self._position = 0
        return self._next_batch(request.ntoreturn)

    def _send_get_more(self, address, request):
        assert isinstance(request, _GetMore)
        assert address == self.mock_address, "getMore sent to %r" % (address,)
        self.requests.append(("getMore", address, request))
        if self.get_more_errors:
            raise self.get_more_errors.pop(0)
        return self._next_batch(request.ntoreturn)

    def _send_message(self, address, request):
        assert isinstance(request, _KillCursors)
        self.requests.append(("killCursors", address, request))
        if self.kill_cursors_errors:
            raise self.kill_cursors_errors.pop(0)
