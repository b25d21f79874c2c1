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

"""Client-side cursors over MongoDB query results."""
from __future__ import annotations

ASCENDING = 1
"""Ascending sort order."""
DESCENDING = -1
"""Descending sort order."""

from mongocursor._version import __version__, get_version_string, version_tuple  # noqa: F401,E402
from mongocursor.collection import Collection  # noqa: F401,E402
from mongocursor.cursor import Cursor  # noqa: F401,E402
from mongocursor.query import Query  # noqa: F401,E402
from mongocursor.read_preferences import ReadPreference  # noqa: F401,E402

version = __version__
