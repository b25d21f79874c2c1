# Copyright 2023-present MongoDB, Inc.
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
from __future__ import annotations

import enum
import logging
import os
from typing import Any

from bson import UuidRepresentation, json_util
from bson.json_util import JSONOptions

from mongocursor import common


class _CursorStatusMessage(str, enum.Enum):
    STARTED = "Request started"
    SUCCEEDED = "Request succeeded"
    FAILED = "Request failed"
    CLEANUP_FAILED = "Cursor cleanup failed"


_DOCUMENT_NAMES = ["filter", "failure"]
_JSON_OPTIONS = JSONOptions(uuid_representation=UuidRepresentation.STANDARD)
_CURSOR_LOGGER = logging.getLogger("mongocursor.cursor")


def _debug_log(logger: logging.Logger, **fields: Any) -> None:
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(LogMessage(**fields))


def _warning_log(logger: logging.Logger, **fields: Any) -> None:
    if logger.isEnabledFor(logging.WARNING):
        logger.warning(LogMessage(**fields))


def _max_document_length() -> int:
    document_length = int(
        os.getenv(common.LOG_DOCUMENT_LENGTH_ENV, common.DEFAULT_LOG_DOCUMENT_LENGTH)
    )
    if document_length < 0:
        document_length = common.DEFAULT_LOG_DOCUMENT_LENGTH
    return document_length


class LogMessage:
    """A structured log message, rendered as relaxed extended JSON.

    Rendering is deferred until a handler formats the record.
    """

    __slots__ = ["_kwargs"]

    def __init__(self, **kwargs: Any):
        self._kwargs = kwargs

        if "durationMS" in self._kwargs:
            self._kwargs["durationMS"] = self._kwargs["durationMS"].total_seconds() * 1000
        if "failure" in self._kwargs and isinstance(self._kwargs["failure"], BaseException):
            self._kwargs["failure"] = repr(self._kwargs["failure"])

    def __str__(self) -> str:
        self._truncate()
        return "%s" % (
            json_util.dumps(
                self._kwargs, json_options=_JSON_OPTIONS, default=lambda o: o.__repr__()
            )
        )

    def _truncate(self) -> None:
        document_length = _max_document_length()
        for doc_name in _DOCUMENT_NAMES:
            doc = self._kwargs.get(doc_name)
            if doc is None:
                continue
            if not isinstance(doc, str):
                doc = json_util.dumps(
                    doc, json_options=_JSON_OPTIONS, default=lambda o: o.__repr__()
                )
            if len(doc) > document_length:
                doc = doc[:document_length] + "..."
            self._kwargs[doc_name] = doc
