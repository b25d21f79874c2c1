# Copyright 2009-present MongoDB, Inc.
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

"""Cursor class to iterate over Mongo query results."""
from __future__ import annotations

import datetime
from collections import deque
from typing import Any, Callable, Mapping, Optional, Union

from bson.son import SON

from mongocursor.errors import (
    CleanupError,
    InvalidStateError,
    OperationFailure,
    TransportError,
)
from mongocursor.logger import _CURSOR_LOGGER, _CursorStatusMessage, _debug_log, _warning_log
from mongocursor.message import _QUERY_OPTIONS, _GetMore, _KillCursors, _Query
from mongocursor.query import Query
from mongocursor.read_preferences import needs_read_preference
from mongocursor.transport import Response, Transport, _Address


def _batch_to_return(limit: int, batch_size: int, returned: int) -> int:
    """The number of documents to ask for in the next request.

    A `batch_size` of ``0`` defers to `limit`, and a `limit` of ``0``
    means no limit. A result of ``0`` lets the server pick the batch size.
    """
    batch = batch_size if batch_size > 0 else limit
    if limit > 0:
        return min(batch, limit - returned)
    return batch


def _needs_read_preference(query: Query, transport: Transport) -> bool:
    read_preference = query.read_preference
    return needs_read_preference(
        transport.is_mongos,
        transport.is_primary(read_preference),
        transport.is_secondary_preferred(read_preference),
        transport.has_tag_sets(read_preference),
    )


def _query_spec(query: Query, transport: Transport) -> Mapping[str, Any]:
    """Get the spec to use for a query.

    Just the query filter, unless the query needs modifiers like $orderby
    or, when routed through mongos, $readPreference.
    """
    operators: SON = SON()
    if _needs_read_preference(query, transport):
        operators["$readPreference"] = query.read_preference.document
    if query.sort:
        operators["$orderby"] = query.sort
    if query.hint:
        operators["$hint"] = query.hint
    if query.comment is not None:
        operators["$comment"] = query.comment
    if query.snapshot:
        operators["$snapshot"] = True
    if query.max_scan:
        operators["$maxScan"] = query.max_scan
    if query.show_disk_loc:
        operators["$showDiskLoc"] = True

    spec = query.filter
    if not operators:
        return spec

    if "$query" in spec:
        # Already wrapped by the caller. Copy so the query stays untouched.
        spec = SON(spec)
    else:
        spec = SON([("$query", spec)])
    spec.update(operators)
    return spec


class Cursor:
    """A cursor / iterator over Mongo query results.

    Documents are fetched lazily, one batch per round trip, and handed out
    in the order the server sent them. A cursor is not thread safe and can
    be iterated only once.

    When iteration stops early, call :meth:`close` (or use the cursor in a
    ``with`` statement) to free the cursor on the server. Abandoned cursors
    are also closed when they are garbage collected.

    Should not be called directly by application developers - see
    :meth:`~mongocursor.collection.Collection.find` instead.

    :param transport: the :class:`~mongocursor.transport.Transport` used to
        reach the server.
    :param query: the :class:`~mongocursor.query.Query` to run.
    """

    def __init__(self, transport: Transport, query: Query) -> None:
        if not isinstance(query, Query):
            raise TypeError("query must be an instance of mongocursor.query.Query")
        self.__transport = transport
        self.__query = query

        self.__id: Optional[int] = None
        self.__address: Optional[_Address] = None
        self.__data: deque = deque()
        self.__retrieved = 0
        self.__killed = False
        self.__cleanup_error: Optional[CleanupError] = None

    def __del__(self) -> None:
        try:
            address = self.__address
        except AttributeError:
            # __init__ did not run to completion (or at all).
            return
        if address is not None and self.__id:
            self.close()

    def __repr__(self) -> str:
        return "<Cursor ns=%r id=%r at 0x%x>" % (self.__query.namespace, self.__id, id(self))

    @property
    def query(self) -> Query:
        """The :class:`~mongocursor.query.Query` this cursor runs."""
        return self.__query

    @property
    def cursor_id(self) -> Optional[int]:
        """The server cursor id.

        ``None`` before the query is sent, ``0`` once the cursor is closed.
        """
        return self.__id

    @property
    def address(self) -> Optional[_Address]:
        """The (host, port) of the server this cursor reads from, or None."""
        return self.__address

    @property
    def retrieved(self) -> int:
        """The number of documents received from the server so far."""
        return self.__retrieved

    @property
    def alive(self) -> bool:
        """Does this cursor have the potential to return more data?"""
        return bool(len(self.__data) or not self.__finished())

    @property
    def cleanup_error(self) -> Optional[CleanupError]:
        """The error raised sending killCursors, if any."""
        return self.__cleanup_error

    def __finished(self) -> bool:
        """Will the server never return more data for this cursor?

        A limited query is finished once the limit is reached, even if the
        server cursor is still open. Otherwise only the server can tell,
        by returning a cursor id of ``0``.
        """
        if self.__killed or self.__id == 0:
            return True
        limit = self.__query.limit
        if limit > 0:
            return self.__retrieved >= limit
        return False

    def __query_flags(self) -> int:
        """Get the query options flags to use for this query."""
        flags = 0
        if self.__transport.is_secondary(self.__query.read_preference):
            flags |= _QUERY_OPTIONS["secondary_okay"]
        if self.__query.no_cursor_timeout:
            flags |= _QUERY_OPTIONS["no_timeout"]
        return flags

    def __batch_size(self) -> int:
        return _batch_to_return(self.__query.limit, self.__query.batch_size, self.__retrieved)

    def __send(
        self,
        send: Callable[[], Response],
        request: Union[_Query, _GetMore],
        address: Optional[_Address],
    ) -> Response:
        """Send a query or getMore and log how it went."""
        _debug_log(
            _CURSOR_LOGGER,
            message=_CursorStatusMessage.STARTED,
            commandName=request.name,
            namespace=request.namespace(),
            cursorId=self.__id,
            batchSize=request.ntoreturn,
            serverAddress=address,
            filter=getattr(request, "spec", None),
        )
        start = datetime.datetime.now()
        try:
            response = send()
        except (TransportError, OperationFailure) as exc:
            _debug_log(
                _CURSOR_LOGGER,
                message=_CursorStatusMessage.FAILED,
                commandName=request.name,
                namespace=request.namespace(),
                cursorId=self.__id,
                durationMS=datetime.datetime.now() - start,
                failure=exc,
            )
            raise
        _debug_log(
            _CURSOR_LOGGER,
            message=_CursorStatusMessage.SUCCEEDED,
            commandName=request.name,
            namespace=request.namespace(),
            cursorId=response.cursor_id,
            numberReturned=response.number_returned,
            durationMS=datetime.datetime.now() - start,
            serverAddress=response.address,
        )
        return response

    def __store(self, response: Response) -> None:
        data = response.data
        limit = self.__query.limit
        if limit > 0:
            # Never hand out more than the limit, whatever the server sent.
            data = data[: max(limit - self.__retrieved, 0)]
        self.__id = response.cursor_id
        self.__retrieved += response.number_returned
        self.__data.extend(data)

    def __send_initial_query(self) -> None:
        query = self.__query
        request = _Query(
            self.__query_flags(),
            query.database,
            query.collection,
            query.skip,
            _query_spec(query, self.__transport),
            query.projection,
            self.__batch_size(),
        )
        transport = self.__transport
        response = self.__send(
            lambda: transport.send_query(query.read_preference, request), request, None
        )
        self.__address = response.address
        self.__store(response)

    def __send_get_more(self) -> None:
        address = self.__address
        if address is None or self.__id is None:
            raise InvalidStateError("cannot send getMore: cursor is not bound to a server")
        request = _GetMore(
            self.__query.database,
            self.__query.collection,
            self.__batch_size(),
            self.__id,
        )
        transport = self.__transport
        response = self.__send(lambda: transport.send_get_more(address, request), request, address)
        self.__store(response)

    def _refresh(self) -> int:
        """Refreshes the cursor with more data from the server.

        Returns the length of the buffer after refresh. Will exit early if
        the buffer is already non-empty, and sends nothing once the cursor
        is finished.
        """
        if len(self.__data) or self.__finished():
            return len(self.__data)

        if self.__address is None:
            self.__send_initial_query()
        else:
            self.__send_get_more()
        return len(self.__data)

    def advance(self) -> Mapping[str, Any]:
        """Return the next document, fetching a new batch if needed.

        Raises :exc:`StopIteration` once there are no more documents, after
        freeing the server cursor if it is still open.
        """
        while not self.__data:
            if self.__finished():
                self.close()
                raise StopIteration
            self._refresh()
        return self.__data.popleft()

    def next(self) -> Mapping[str, Any]:
        """Advance the cursor."""
        return self.advance()

    __next__ = next

    def __iter__(self) -> Cursor:
        return self

    def to_list(self, length: Optional[int] = None) -> list[Mapping[str, Any]]:
        """Converts the contents of this cursor to a list.

        :param length: the maximum number of documents to return, or
            ``None`` to exhaust the cursor.
        """
        if length is not None and length < 0:
            raise ValueError("to_list() length must be greater than or equal to 0")
        res: list[Mapping[str, Any]] = []
        while length is None or len(res) < length:
            try:
                res.append(self.advance())
            except StopIteration:
                break
        return res

    def close(self) -> None:
        """Explicitly close / kill this cursor.

        Sends killCursors if the server still holds the cursor open. A
        failure to send it is logged and kept in :attr:`cleanup_error`, but
        the cursor is closed either way. Documents already buffered are
        dropped. Calling close more than once has no further effect.
        """
        self.__killed = True
        self.__data.clear()
        address = self.__address
        cursor_id = self.__id
        if address is None or not cursor_id:
            return
        try:
            self.__transport.send_message(address, _KillCursors([cursor_id]))
        except (TransportError, OperationFailure) as exc:
            self.__cleanup_error = CleanupError(
                "failed to kill cursor %d on %s" % (cursor_id, address), cursor_id, exc
            )
            _warning_log(
                _CURSOR_LOGGER,
                message=_CursorStatusMessage.CLEANUP_FAILED,
                namespace=self.__query.namespace,
                cursorId=cursor_id,
                serverAddress=address,
                failure=exc,
            )
        else:
            _debug_log(
                _CURSOR_LOGGER,
                message=_CursorStatusMessage.SUCCEEDED,
                commandName=_KillCursors.name,
                namespace=self.__query.namespace,
                cursorId=cursor_id,
                serverAddress=address,
            )
        finally:
            self.__id = 0

    def __enter__(self) -> Cursor:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
