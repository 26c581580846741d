# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Header normalization."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def create_headers(headers: Any) -> dict[str, Any]:
    """Return a copy of *headers* keyed by lower-cased name.

    When several keys lower-case to the same name, the first one in iteration
    order wins. Anything that is not a mapping yields an empty dict.
    """
    if not isinstance(headers, Mapping):
        return {}
    out: dict[str, Any] = {}
    for key, value in headers.items():
        out.setdefault(str(key).lower(), value)
    return out
