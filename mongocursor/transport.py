# Copyright 2015-present MongoDB, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License"); you
# may not use this file except in compliance with the License.  You
# may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or
# implied.  See the License for the specific language governing
# permissions and limitations under the License.

"""The interface between a cursor and the servers it reads from.

A :class:`Transport` chooses a server for a read preference, exchanges
requests and replies with it over a pooled connection, and parses each
reply into a :class:`Response`. Cursors never hold a connection between
two requests.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping, NamedTuple, Optional, Sequence

from mongocursor import common, read_preferences
from mongocursor.errors import ConfigurationError, TransportError
from mongocursor.message import _GetMore, _KillCursors, _Query
from mongocursor.read_preferences import _ServerMode

_LOGGER = logging.getLogger("mongocursor.transport")

_Address = tuple[str, Optional[int]]


class Response(NamedTuple):
    """A parsed reply to a query or getMore."""

    cursor_id: int
    """The server cursor id, ``0`` once the server has closed the cursor."""
    number_returned: int
    """The number of documents in this batch."""
    data: Sequence[Mapping[str, Any]]
    """The documents in this batch."""
    address: _Address
    """The (host, port) of the server that sent this reply."""


class Transport(ABC):
    """Sends cursor requests to MongoDB.

    Subclasses implement the three ``_send_*`` methods. Connection
    checkout, server selection and error translation belong there; a
    subclass raises :exc:`~mongocursor.errors.TransportError` for failures
    that may be retried and
    :exc:`~mongocursor.errors.OperationFailure` for error replies.

    :param max_tries: the number of times to attempt an initial query.
    """

    def __init__(self, max_tries: int = common.MAX_QUERY_TRIES) -> None:
        if not isinstance(max_tries, int) or max_tries < 1:
            raise ConfigurationError("max_tries must be a positive integer, not %r" % (max_tries,))
        self.__max_tries = max_tries

    @property
    def max_tries(self) -> int:
        return self.__max_tries

    @property
    def is_mongos(self) -> bool:
        """Is this transport connected to a mongos router?"""
        return False

    def is_primary(self, read_preference: _ServerMode) -> bool:
        return read_preferences.is_primary(read_preference)

    def is_secondary(self, read_preference: _ServerMode) -> bool:
        return read_preferences.is_secondary(read_preference)

    def is_secondary_preferred(self, read_preference: _ServerMode) -> bool:
        return read_preferences.is_secondary_preferred(read_preference)

    def has_tag_sets(self, read_preference: _ServerMode) -> bool:
        return read_preferences.has_tag_sets(read_preference)

    @abstractmethod
    def _send_query(self, read_preference: _ServerMode, request: _Query) -> Response:
        """Select a server for `read_preference` and run `request` on it."""

    @abstractmethod
    def _send_get_more(self, address: _Address, request: _GetMore) -> Response:
        """Run `request` on the server at `address`."""

    @abstractmethod
    def _send_message(self, address: _Address, request: _KillCursors) -> None:
        """Send `request` to the server at `address` without waiting for a reply."""

    def send_query(self, read_preference: _ServerMode, request: _Query) -> Response:
        """Run the initial query, retrying on transport errors.

        Nothing is recorded about a failed attempt, so a retried query
        cannot be counted twice by the cursor.
        """
        attempt = 1
        while True:
            try:
                return self._send_query(read_preference, request)
            except TransportError as exc:
                if attempt >= self.__max_tries:
                    raise
                _LOGGER.debug(
                    "Retrying query on %s after attempt %d of %d failed: %s",
                    request.namespace(),
                    attempt,
                    self.__max_tries,
                    exc,
                )
                attempt += 1

    def send_get_more(self, address: _Address, request: _GetMore) -> Response:
        """Run a getMore on the server that owns the cursor.

        Never retried: a getMore that failed may still have advanced the
        server cursor.
        """
        return self._send_get_more(address, request)

    def send_message(self, address: _Address, request: _KillCursors) -> None:
        """Send a request that expects no reply."""
        self._send_message(address, request)
