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

"""Exceptions raised by mongocursor."""
from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Sequence, Union


class MongoCursorError(Exception):
    """Base class for all mongocursor exceptions."""

    def __init__(self, message: str = "", error_labels: Optional[Iterable[str]] = None) -> None:
        super().__init__(message)
        self._message = message
        self._error_labels = set(error_labels or [])

    def has_error_label(self, label: str) -> bool:
        """Return True if this error contains the given label."""
        return label in self._error_labels

    def _add_error_label(self, label):
        """Add the given label to this error."""
        self._error_labels.add(label)

    def _remove_error_label(self, label):
        """Remove the given label from this error."""
        self._error_labels.discard(label)

    @property
    def timeout(self) -> bool:
        """True if this error was caused by a timeout."""
        return False


class ConfigurationError(MongoCursorError):
    """Raised when something is incorrectly configured."""


class InvalidOperation(MongoCursorError):
    """Raised when a client attempts to perform an invalid operation."""


class InvalidStateError(InvalidOperation):
    """Raised when the cursor's own bookkeeping is inconsistent.

    For example, a getMore is about to be sent but the initial query never
    bound the cursor to a server. This indicates a defect in the cursor,
    not a condition the caller can recover from by retrying.

    Subclass of :exc:`~mongocursor.errors.InvalidOperation`.
    """


class TransportError(MongoCursorError):
    """Raised when a request could not be completed by the transport.

    The transport has already spent its own retry budget by the time this
    is raised. The state of the server-side cursor is unknown, so a cursor
    that sees this error is left as-is rather than being marked closed.
    """

    errors: Union[Mapping[str, Any], Sequence]
    details: Union[Mapping[str, Any], Sequence]

    def __init__(
        self, message: str = "", errors: Optional[Union[Mapping[str, Any], Sequence]] = None
    ) -> None:
        error_labels = None
        if errors is not None:
            if isinstance(errors, dict):
                error_labels = errors.get("errorLabels")
        super().__init__(message, error_labels)
        self.errors = self.details = errors or []


class NetworkTimeout(TransportError):
    """An operation on an open connection exceeded its socket timeout.

    Subclass of :exc:`~mongocursor.errors.TransportError`.
    """

    @property
    def timeout(self) -> bool:
        return True


def _format_detailed_error(message, details):
    if details is not None:
        message = "%s, full error: %s" % (message, details)
    return message


class OperationFailure(MongoCursorError):
    """Raised when the server answers a request with an error document."""

    def __init__(
        self,
        error: str,
        code: Optional[int] = None,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        error_labels = None
        if details is not None:
            error_labels = details.get("errorLabels")
        super().__init__(_format_detailed_error(error, details), error_labels=error_labels)
        self.__code = code
        self.__details = details

    @property
    def code(self) -> Optional[int]:
        """The error code returned by the server, if any."""
        return self.__code

    @property
    def details(self) -> Optional[Mapping[str, Any]]:
        """The complete error document returned by the server."""
        return self.__details

    @property
    def timeout(self) -> bool:
        return self.__code in (50,)


class CursorNotFound(OperationFailure):
    """Raised while iterating query results if the cursor is
    invalidated on the server.
    """


class CleanupError(MongoCursorError):
    """Raised internally when a killCursors request could not be sent.

    Never propagated out of :meth:`~mongocursor.cursor.Cursor.close`: the
    failure is logged and kept on the cursor as
    :attr:`~mongocursor.cursor.Cursor.cleanup_error`. The cursor stays closed.
    """

    def __init__(self, message: str, cursor_id: int, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cursor_id = cursor_id
        self.cause = cause
