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

"""The description of a query: what to match, and how to return it."""
from __future__ import annotations

from typing import Any, Mapping, Optional

from mongocursor import common
from mongocursor.read_preferences import ReadPreference, _ServerMode

_OPTIONS = (
    "database",
    "collection",
    "filter",
    "projection",
    "skip",
    "limit",
    "batch_size",
    "sort",
    "hint",
    "comment",
    "snapshot",
    "max_scan",
    "show_disk_loc",
    "read_preference",
    "no_cursor_timeout",
)


class Query:
    """An immutable query specification.

    Instances are normally created by
    :meth:`~mongocursor.collection.Collection.find`. Every option is
    validated once here; a :class:`~mongocursor.cursor.Cursor` only ever
    reads from its query.

    :param database: name of the database to query.
    :param collection: name of the collection to query.
    :param filter: a document the results must match, or ``None`` to match
        every document.
    :param projection: a document, or a list of field names, selecting the
        fields to return.
    :param skip: the number of documents to skip.
    :param limit: the maximum number of documents to return, ``0`` for no
        limit.
    :param batch_size: the number of documents to request per round trip,
        ``0`` to let the limit (or the server) decide.
    :param sort: a key, or a list of (key, direction) pairs, to sort on.
    :param hint: an index name, or index specifier, for the server to use.
    :param comment: attached to the query to help trace it in server logs.
    :param snapshot: isolate the query from concurrent writes.
    :param max_scan: the maximum number of documents to scan.
    :param show_disk_loc: add the on-disk location of each document.
    :param read_preference: which members may answer the query.
    :param no_cursor_timeout: ask the server not to time the cursor out.
    """

    __slots__ = tuple("_Query__" + name for name in _OPTIONS)

    def __init__(
        self,
        database: str,
        collection: str,
        filter: Optional[Mapping[str, Any]] = None,
        projection: Any = None,
        skip: int = 0,
        limit: int = 0,
        batch_size: int = 0,
        sort: Any = None,
        hint: Any = None,
        comment: Any = None,
        snapshot: bool = False,
        max_scan: Optional[int] = None,
        show_disk_loc: bool = False,
        read_preference: _ServerMode = ReadPreference.PRIMARY,
        no_cursor_timeout: bool = False,
    ) -> None:
        values = locals()
        for name in _OPTIONS:
            _, value = common.validate(name, values[name])
            object.__setattr__(self, "_Query__" + name, value)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Query instances are immutable")

    @property
    def database(self) -> str:
        return self.__database

    @property
    def collection(self) -> str:
        return self.__collection

    @property
    def namespace(self) -> str:
        """The full ``<database>.<collection>`` name queried."""
        return f"{self.__database}.{self.__collection}"

    @property
    def filter(self) -> Mapping[str, Any]:
        return self.__filter

    @property
    def projection(self) -> Optional[Mapping[str, Any]]:
        return self.__projection

    @property
    def skip(self) -> int:
        return self.__skip

    @property
    def limit(self) -> int:
        return self.__limit

    @property
    def batch_size(self) -> int:
        return self.__batch_size

    @property
    def sort(self) -> Optional[Mapping[str, Any]]:
        return self.__sort

    @property
    def hint(self) -> Any:
        return self.__hint

    @property
    def comment(self) -> Any:
        return self.__comment

    @property
    def snapshot(self) -> bool:
        return self.__snapshot

    @property
    def max_scan(self) -> Optional[int]:
        return self.__max_scan

    @property
    def show_disk_loc(self) -> bool:
        return self.__show_disk_loc

    @property
    def read_preference(self) -> _ServerMode:
        return self.__read_preference

    @property
    def no_cursor_timeout(self) -> bool:
        return self.__no_cursor_timeout

    def has_modifiers(self) -> bool:
        """Does this query set any option that must be sent as a
        ``$``-prefixed query modifier?
        """
        return bool(
            self.__sort
            or self.__hint
            or self.__comment is not None
            or self.__snapshot
            or self.__max_scan
            or self.__show_disk_loc
        )

    def options(self) -> dict[str, Any]:
        """Every option of this query, by keyword."""
        return {name: getattr(self, name) for name in _OPTIONS}

    def with_options(self, **kwargs: Any) -> Query:
        """Get a copy of this query with some options changed.

        >>> query.with_options(limit=10, batch_size=2)
        """
        options = self.options()
        options.update(kwargs)
        return Query(**options)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Query):
            return self.options() == other.options()
        return NotImplemented

    def __ne__(self, other: Any) -> bool:
        return not self == other

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return "Query(%s)" % (
            ", ".join(f"{name}={getattr(self, name)!r}" for name in _OPTIONS),
        )
