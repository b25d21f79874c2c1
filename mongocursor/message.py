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

"""The requests a cursor sends to the server.

These describe *what* is being asked. Encoding them as wire protocol
messages is the job of the :class:`~mongocursor.transport.Transport`.

.. note:: This module is for internal use and is generally not needed by
   application developers.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

_QUERY_OPTIONS = {
    "tailable_cursor": 2,
    "secondary_okay": 4,
    "oplog_replay": 8,
    "no_timeout": 16,
    "await_data": 32,
    "exhaust": 64,
    "partial": 128,
}


class _Query:
    """A query operation."""

    __slots__ = ("flags", "db", "coll", "ntoskip", "spec", "fields", "ntoreturn")

    name = "find"

    def __init__(
        self,
        flags: int,
        db: str,
        coll: str,
        ntoskip: int,
        spec: Mapping[str, Any],
        fields: Optional[Mapping[str, Any]],
        ntoreturn: int,
    ):
        self.flags = flags
        self.db = db
        self.coll = coll
        self.ntoskip = ntoskip
        self.spec = spec
        self.fields = fields
        self.ntoreturn = ntoreturn

    def namespace(self) -> str:
        return f"{self.db}.{self.coll}"

    def __repr__(self) -> str:
        return "_Query(%r, flags=%d, ntoskip=%d, ntoreturn=%d, spec=%r, fields=%r)" % (
            self.namespace(),
            self.flags,
            self.ntoskip,
            self.ntoreturn,
            self.spec,
            self.fields,
        )


class _GetMore:
    """A getmore operation."""

    __slots__ = ("db", "coll", "ntoreturn", "cursor_id")

    name = "getMore"

    def __init__(self, db: str, coll: str, ntoreturn: int, cursor_id: int):
        self.db = db
        self.coll = coll
        self.ntoreturn = ntoreturn
        self.cursor_id = cursor_id

    def namespace(self) -> str:
        return f"{self.db}.{self.coll}"

    def __repr__(self) -> str:
        return "_GetMore(%r, ntoreturn=%d, cursor_id=%d)" % (
            self.namespace(),
            self.ntoreturn,
            self.cursor_id,
        )


class _KillCursors:
    """A killCursors operation. The server sends no reply."""

    __slots__ = ("cursor_ids",)

    name = "killCursors"

    def __init__(self, cursor_ids: Sequence[int]):
        self.cursor_ids = list(cursor_ids)

    def __repr__(self) -> str:
        return "_KillCursors(%r)" % (self.cursor_ids,)
