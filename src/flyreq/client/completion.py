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
"""One-shot completion guard for request callbacks."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, NamedTuple

from flyreq.kernel.exceptions import CompletionAlreadyDeliveredException


class Outcome(NamedTuple):
    """What a completion delivered to its callback."""

    error: BaseException | None
    response: Any = None
    body: Any = None


class Completion:
    """Delivers a request's result to its callback exactly once.

    ``fail`` passes the error alone; ``resolve`` passes
    ``(error, response, body)``. Any delivery after the first raises
    CompletionAlreadyDeliveredException.
    """

    def __init__(self, callback: Callable[..., Any]) -> None:
        self._callback = callback
        self._outcome: Outcome | None = None

    @property
    def done(self) -> bool:
        return self._outcome is not None

    @property
    def outcome(self) -> Outcome | None:
        return self._outcome

    def fail(self, error: BaseException) -> Outcome:
        self._claim(Outcome(error))
        self._callback(error)
        return self._outcome  # type: ignore[return-value]

    def resolve(self, error: BaseException | None, response: Any, body: Any) -> Outcome:
        self._claim(Outcome(error, response, body))
        self._callback(error, response, body)
        return self._outcome  # type: ignore[return-value]

    def _claim(self, outcome: Outcome) -> None:
        if self._outcome is not None:
            raise CompletionAlreadyDeliveredException(
                "Request callback already invoked",
                code="COMPLETION_DELIVERED",
                context={"first_error": repr(self._outcome.error)},
            )
        self._outcome = outcome
