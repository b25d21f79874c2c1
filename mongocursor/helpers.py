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

"""Bits and pieces used by the cursor that don't really fit elsewhere."""
from __future__ import annotations

from collections import abc
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from bson.son import SON

import mongocursor


def _index_list(
    key_or_list: Union[str, Sequence, Mapping[str, Any]], direction: Optional[Union[int, str]] = None
) -> list[tuple[str, Any]]:
    """Helper to generate a list of (key, direction) pairs.

    Takes such a list, or a single key, or a single key and direction.
    """
    if direction is not None:
        if not isinstance(key_or_list, str):
            raise TypeError("Expected a string and a direction")
        return [(key_or_list, direction)]
    else:
        if isinstance(key_or_list, str):
            return [(key_or_list, mongocursor.ASCENDING)]
        elif isinstance(key_or_list, abc.ItemsView):
            return list(key_or_list)
        elif isinstance(key_or_list, abc.Mapping):
            return list(key_or_list.items())
        elif not isinstance(key_or_list, (list, tuple)):
            raise TypeError(
                "if no direction is specified, key_or_list must be an instance of list"
            )
        values: list[tuple[str, Any]] = []
        for item in key_or_list:
            if isinstance(item, str):
                item = (item, mongocursor.ASCENDING)  # noqa: PLW2901
            values.append(item)
        return values


def _index_document(index_list: Sequence[tuple[str, Any]]) -> SON:
    """Helper to generate an index specifying document.

    Takes a list of (key, direction) pairs.
    """
    if not isinstance(index_list, (list, tuple)):
        raise TypeError("must use a list of (key, direction) pairs, not: " + repr(index_list))
    if not len(index_list):
        raise ValueError("key_or_list must not be empty")

    index: SON = SON()
    for item in index_list:
        if not isinstance(item, (list, tuple)) or len(item) != 2:
            raise TypeError("each item must be a (key, direction) pair, not: %r" % (item,))
        key, value = item
        if not isinstance(key, str):
            raise TypeError("first item in each key pair must be an instance of str")
        if not isinstance(value, (str, int, abc.Mapping)):
            raise TypeError(
                "second item in each key pair must be 1, -1, "
                "'2d', or another valid MongoDB index specifier."
            )
        index[key] = value
    return index


def _fields_list_to_dict(fields: Iterable[str], option_name: str) -> dict[str, Any]:
    """Takes a sequence of field names and returns a matching dictionary.

    ["a", "b"] becomes {"a": 1, "b": 1}

    and

    ["a.b.c", "d", "a.c"] becomes {"a.b.c": 1, "d": 1, "a.c": 1}
    """
    as_dict = {}
    for field in fields:
        if not isinstance(field, str):
            raise TypeError("%s must be a list of key names, each an instance of str" % (option_name,))
        as_dict[field] = 1
    return as_dict
