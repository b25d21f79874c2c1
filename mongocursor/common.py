# Copyright 2011-present MongoDB, Inc.
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


"""Functions and classes common to multiple mongocursor modules."""
from __future__ import annotations

from collections import abc
from typing import Any, Callable, Mapping, Optional

from mongocursor import helpers
from mongocursor.errors import ConfigurationError
from mongocursor.read_preferences import _ServerMode

# Number of times the initial query is attempted before the transport
# gives up and raises TransportError.
MAX_QUERY_TRIES = 3

# Default maximum length of a document rendered in a log message.
DEFAULT_LOG_DOCUMENT_LENGTH = 1000

# Environment variable overriding DEFAULT_LOG_DOCUMENT_LENGTH.
LOG_DOCUMENT_LENGTH_ENV = "MONGOCURSOR_LOG_MAX_DOCUMENT_LENGTH"


def raise_config_error(key: str, dummy: Any) -> None:
    """Raise ConfigurationError with the given key name."""
    raise ConfigurationError("Unknown option %s" % (key,))


def validate_boolean(option: str, value: Any) -> bool:
    """Validates that 'value' is True or False."""
    if isinstance(value, bool):
        return value
    raise TypeError("%s must be True or False, was: %s=%s" % (option, option, value))


def validate_integer(option: str, value: Any) -> int:
    """Validates that 'value' is an integer."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    raise TypeError("Wrong type for %s, value must be an integer, not %s" % (option, type(value)))


def validate_non_negative_integer(option: str, value: Any) -> int:
    """Validate that 'value' is a positive integer or 0."""
    val = validate_integer(option, value)
    if val < 0:
        raise ValueError("The value of %s must be a non negative integer" % (option,))
    return val


def validate_positive_integer_or_none(option: str, value: Any) -> Optional[int]:
    """Validate that 'value' is a positive integer or None."""
    if value is None:
        return value
    val = validate_integer(option, value)
    if val <= 0:
        raise ValueError("The value of %s must be a positive integer" % (option,))
    return val


def validate_string(option: str, value: Any) -> str:
    """Validates that 'value' is an instance of `str`."""
    if isinstance(value, str):
        return value
    raise TypeError("Wrong type for %s, value must be an instance of str" % (option,))


def validate_is_mapping(option: str, value: Any) -> Mapping:
    """Validate the type of method arguments that expect a document."""
    if not isinstance(value, abc.Mapping):
        raise TypeError(
            "%s must be an instance of dict, bson.son.SON, or "
            "any other type that inherits from "
            "collections.Mapping" % (option,)
        )
    return value


def validate_filter(option: str, value: Any) -> Mapping:
    """A query filter: any mapping, None meaning match everything."""
    if value is None:
        return {}
    return validate_is_mapping(option, value)


def validate_projection(option: str, value: Any) -> Optional[Mapping]:
    """A projection: None, a mapping, or a list of field names."""
    if value is None:
        return None
    if isinstance(value, abc.Mapping):
        return value
    if isinstance(value, (list, tuple)):
        if not value:
            return {"_id": 1}
        return helpers._fields_list_to_dict(value, option)
    raise TypeError("%s must be a mapping or list of key names" % (option,))


def validate_sort(option: str, value: Any) -> Optional[Mapping]:
    """A sort specification, normalized to an ordered document."""
    if value is None:
        return None
    return helpers._index_document(helpers._index_list(value))


def validate_hint(option: str, value: Any) -> Any:
    """An index hint: an index name or a key specification."""
    if value is None or isinstance(value, str):
        return value
    return helpers._index_document(helpers._index_list(value))


def validate_read_preference(dummy: Any, value: Any) -> _ServerMode:
    """Validate a read preference."""
    if not isinstance(value, _ServerMode):
        raise TypeError("%r is not a read preference." % (value,))
    return value


def validate_any(dummy: Any, value: Any) -> Any:
    return value


VALIDATORS: dict[str, Callable[[Any, Any], Any]] = {
    "database": validate_string,
    "collection": validate_string,
    "filter": validate_filter,
    "projection": validate_projection,
    "skip": validate_non_negative_integer,
    "limit": validate_non_negative_integer,
    "batch_size": validate_non_negative_integer,
    "sort": validate_sort,
    "hint": validate_hint,
    "comment": validate_any,
    "snapshot": validate_boolean,
    "max_scan": validate_positive_integer_or_none,
    "show_disk_loc": validate_boolean,
    "read_preference": validate_read_preference,
    "no_cursor_timeout": validate_boolean,
}


def validate(option: str, value: Any) -> tuple[str, Any]:
    """Generic validation function."""
    lower = option.lower()
    validator = VALIDATORS.get(lower, raise_config_error)
    value = validator(option, value)
    return lower, value
