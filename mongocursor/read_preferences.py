# Copyright 2012-present MongoDB, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License",
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

"""Utilities for choosing which member of a replica set to read from."""
from __future__ import annotations

from collections import abc
from typing import Any, Mapping, Optional, Sequence

from mongocursor.errors import ConfigurationError

_PRIMARY = 0
_PRIMARY_PREFERRED = 1
_SECONDARY = 2
_SECONDARY_PREFERRED = 3
_NEAREST = 4


_MONGOS_MODES = (
    "primary",
    "primaryPreferred",
    "secondary",
    "secondaryPreferred",
    "nearest",
)

_TagSets = Sequence[Mapping[str, Any]]


def _validate_tag_sets(tag_sets: Optional[_TagSets]) -> Optional[_TagSets]:
    """Validate tag sets for a read preference."""
    if tag_sets is None:
        return tag_sets

    if not isinstance(tag_sets, (list, tuple)):
        raise TypeError(f"Tag sets {tag_sets!r} invalid, must be a sequence")
    if len(tag_sets) == 0:
        raise ValueError(
            f"Tag sets {tag_sets!r} invalid, must be None or contain at least one set of tags"
        )

    for tags in tag_sets:
        if not isinstance(tags, abc.Mapping):
            raise TypeError(
                f"Tag set {tags!r} invalid, must be an instance of dict, "
                "bson.son.SON or other type that inherits from "
                "collection.Mapping"
            )

    return list(tag_sets)


class _ServerMode:
    """Base class for all read preferences."""

    __slots__ = ("__mongos_mode", "__mode", "__tag_sets")

    def __init__(self, mode: int, tag_sets: Optional[_TagSets] = None) -> None:
        self.__mongos_mode = _MONGOS_MODES[mode]
        self.__mode = mode
        self.__tag_sets = _validate_tag_sets(tag_sets)

    @property
    def name(self) -> str:
        """The name of this read preference."""
        return self.__class__.__name__

    @property
    def mongos_mode(self) -> str:
        """The mongos mode of this read preference."""
        return self.__mongos_mode

    @property
    def document(self) -> dict[str, Any]:
        """Read preference as a document, as sent to mongos in
        ``$readPreference``.
        """
        doc: dict[str, Any] = {"mode": self.__mongos_mode}
        if self.__tag_sets not in (None, [{}]):
            doc["tags"] = self.__tag_sets
        return doc

    @property
    def mode(self) -> int:
        """The mode of this read preference instance."""
        return self.__mode

    @property
    def tag_sets(self) -> _TagSets:
        """Set ``tag_sets`` to a list of dictionaries like [{'dc': 'ny'}] to
        read only from members whose ``dc`` tag has the value ``"ny"``.
        To specify a priority-order for tag sets, provide a list of
        tag sets: ``[{'dc': 'ny'}, {'dc': 'la'}, {}]``. A final, empty tag
        set, ``{}``, means "read from any member that matches the mode,
        ignoring tags."
        """
        if self.__tag_sets:
            return list(self.__tag_sets)
        return [{}]

    def __repr__(self) -> str:
        return f"{self.name}(tag_sets={self.__tag_sets!r})"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, _ServerMode):
            return self.mode == other.mode and self.tag_sets == other.tag_sets
        return NotImplemented

    def __ne__(self, other: Any) -> bool:
        return not self == other

    def __hash__(self) -> int:
        return hash(self.__mode)

    def __getstate__(self) -> dict[str, Any]:
        """Return value of object for pickling.

        Needed explicitly because __slots__() defined.
        """
        return {"mode": self.__mode, "tag_sets": self.__tag_sets}

    def __setstate__(self, value: Mapping[str, Any]) -> None:
        """Restore from pickling."""
        self.__mode = value["mode"]
        self.__mongos_mode = _MONGOS_MODES[self.__mode]
        self.__tag_sets = _validate_tag_sets(value["tag_sets"])


class Primary(_ServerMode):
    """Primary read preference.

    * When connected to a mongos queries are sent to the primary of a shard.
    * When connected to a replica set queries are sent to the primary of
      the replica set.
    """

    __slots__ = ()

    def __init__(self) -> None:
        super().__init__(_PRIMARY)

    def __repr__(self) -> str:
        return "Primary()"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, _ServerMode):
            return other.mode == _PRIMARY
        return NotImplemented

    def __hash__(self) -> int:
        return hash(_PRIMARY)


class PrimaryPreferred(_ServerMode):
    """PrimaryPreferred read preference.

    Queries are sent to the primary if available, otherwise a secondary.

    :param tag_sets: The :attr:`~tag_sets` to use if the primary is not
        available.
    """

    __slots__ = ()

    def __init__(self, tag_sets: Optional[_TagSets] = None) -> None:
        super().__init__(_PRIMARY_PREFERRED, tag_sets)


class Secondary(_ServerMode):
    """Secondary read preference.

    Queries are distributed among secondaries. An error is raised if no
    secondaries are available.

    :param tag_sets: The :attr:`~tag_sets` for this read preference.
    """

    __slots__ = ()

    def __init__(self, tag_sets: Optional[_TagSets] = None) -> None:
        super().__init__(_SECONDARY, tag_sets)


class SecondaryPreferred(_ServerMode):
    """SecondaryPreferred read preference.

    Queries are distributed among secondaries, or the primary if no
    secondary is available. A mongos already routes queries flagged
    ``secondaryOk`` this way, so this mode only needs an explicit
    ``$readPreference`` when tag sets are given.

    :param tag_sets: The :attr:`~tag_sets` for this read preference.
    """

    __slots__ = ()

    def __init__(self, tag_sets: Optional[_TagSets] = None) -> None:
        super().__init__(_SECONDARY_PREFERRED, tag_sets)


class Nearest(_ServerMode):
    """Nearest read preference.

    Queries are distributed among all members.

    :param tag_sets: The :attr:`~tag_sets` for this read preference.
    """

    __slots__ = ()

    def __init__(self, tag_sets: Optional[_TagSets] = None) -> None:
        super().__init__(_NEAREST, tag_sets)


_ALL_READ_PREFERENCES = (Primary, PrimaryPreferred, Secondary, SecondaryPreferred, Nearest)


def make_read_preference(mode: int, tag_sets: Optional[_TagSets] = None) -> _ServerMode:
    if mode == _PRIMARY:
        if tag_sets not in (None, [{}]):
            raise ConfigurationError("Read preference primary cannot be combined with tags")
        return Primary()
    return _ALL_READ_PREFERENCES[mode](tag_sets)  # type: ignore


def read_pref_mode_from_name(name: str) -> int:
    """Get the read preference mode from mongos/uri name."""
    try:
        return _MONGOS_MODES.index(name)
    except ValueError:
        raise ConfigurationError("Not a valid read preference: %r" % (name,)) from None


class ReadPreference:
    """An enum that defines some commonly used read preference modes.

    * `PRIMARY`: Queries are sent to the primary of the replica set, or
      of a shard when connected to a mongos.
    * `PRIMARY_PREFERRED`: Queries are sent to the primary if available,
      otherwise a secondary.
    * `SECONDARY`: Queries are distributed among secondaries. An error
      is raised if no secondaries are available.
    * `SECONDARY_PREFERRED`: Queries are distributed among secondaries,
      or the primary if no secondary is available.
    * `NEAREST`: Queries are distributed among all members.
    """

    PRIMARY = Primary()
    PRIMARY_PREFERRED = PrimaryPreferred()
    SECONDARY = Secondary()
    SECONDARY_PREFERRED = SecondaryPreferred()
    NEAREST = Nearest()


def is_primary(read_preference: _ServerMode) -> bool:
    return read_preference.mode == _PRIMARY


def is_secondary(read_preference: _ServerMode) -> bool:
    """True if a query with this preference may be answered by a secondary.

    Such queries carry the ``secondaryOk`` flag.
    """
    return read_preference.mode != _PRIMARY


def is_secondary_preferred(read_preference: _ServerMode) -> bool:
    return read_preference.mode == _SECONDARY_PREFERRED


def has_tag_sets(read_preference: _ServerMode) -> bool:
    return read_preference.tag_sets != [{}]


def needs_read_preference(
    is_mongos: bool,
    primary: bool,
    secondary_preferred: bool,
    tagged: bool,
) -> bool:
    """Does a query routed through mongos need an explicit ``$readPreference``?

    Only a mongos reads ``$readPreference``, and it never needs one for
    primary reads. For secondaryPreferred without tags the ``secondaryOk``
    flag already gives mongos the same behavior.
    """
    return is_mongos and not primary and (not secondary_preferred or tagged)
