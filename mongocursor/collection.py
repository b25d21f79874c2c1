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

"""Collection level query operations."""
from __future__ import annotations

from typing import Any, Mapping, Optional

from mongocursor import common
from mongocursor.cursor import Cursor
from mongocursor.query import Query
from mongocursor.read_preferences import ReadPreference, _ServerMode
from mongocursor.transport import Transport


class Collection:
    """A Mongo collection, as seen by a reader.

    :param transport: the :class:`~mongocursor.transport.Transport` to
        send queries with.
    :param database: the name of the database.
    :param name: the name of the collection.
    :param read_preference: the default read preference for queries on
        this collection.
    """

    def __init__(
        self,
        transport: Transport,
        database: str,
        name: str,
        read_preference: _ServerMode = ReadPreference.PRIMARY,
    ) -> None:
        if not isinstance(transport, Transport):
            raise TypeError("transport must be an instance of mongocursor.transport.Transport")
        common.validate_string("database", database)
        common.validate_string("name", name)
        if not name or ".." in name or name.startswith(".") or name.endswith("."):
            raise ValueError("collection name %r is not valid" % (name,))
        self.__transport = transport
        self.__database = database
        self.__name = name
        self.__read_preference = common.validate_read_preference("read_preference", read_preference)

    @property
    def name(self) -> str:
        """The name of this collection."""
        return self.__name

    @property
    def database(self) -> str:
        """The name of the database this collection belongs to."""
        return self.__database

    @property
    def full_name(self) -> str:
        """The full name of this collection, ``<database>.<collection>``."""
        return f"{self.__database}.{self.__name}"

    @property
    def read_preference(self) -> _ServerMode:
        return self.__read_preference

    def __repr__(self) -> str:
        return "Collection(%r, %r)" % (self.__database, self.__name)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Collection):
            return self.full_name == other.full_name
        return NotImplemented

    def __ne__(self, other: Any) -> bool:
        return not self == other

    def __hash__(self) -> int:
        return hash(self.full_name)

    def find(self, filter: Optional[Mapping[str, Any]] = None, *args: Any, **kwargs: Any) -> Cursor:
        """Query the database.

        Takes the options of :class:`~mongocursor.query.Query` as keyword
        arguments; `projection` may also be passed positionally. The read
        preference defaults to this collection's.

        Returns an unevaluated :class:`~mongocursor.cursor.Cursor`::

          >>> for doc in collection.find({"x": 1}, batch_size=100):
          ...     print(doc)
        """
        if args:
            if len(args) > 1 or "projection" in kwargs:
                raise TypeError("find() takes at most one positional option, projection")
            kwargs["projection"] = args[0]
        kwargs.setdefault("read_preference", self.__read_preference)
        query = Query(self.__database, self.__name, filter, **kwargs)
        return Cursor(self.__transport, query)

    def find_one(
        self, filter: Optional[Mapping[str, Any]] = None, *args: Any, **kwargs: Any
    ) -> Optional[Mapping[str, Any]]:
        """Get a single document from the database.

        All arguments to :meth:`find` are also valid arguments for
        :meth:`find_one`, although any `limit` argument will be ignored.
        Returns a single document, or ``None`` if no matching document is
        found.
        """
        kwargs["limit"] = 1
        with self.find(filter, *args, **kwargs) as cursor:
            for result in cursor:
                return result
        return None
