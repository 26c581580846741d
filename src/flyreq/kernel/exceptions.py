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
"""Unified exception hierarchy for flyreq.

All package exceptions inherit from FlyReqException, so callers can catch one
base type or target a specific failure.

Categories:
- ValidationException: bad arguments detected before any network I/O
- InvalidStateException: misuse of a one-shot completion
- InfrastructureException: failures reported by the remote side
"""

from __future__ import annotations

from typing import Any


# =============================================================================
# Base Exception
# =============================================================================


class FlyReqException(Exception):
    """Base exception for all flyreq errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "INVALID_METHOD").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Validation Exceptions
# =============================================================================


class ValidationException(FlyReqException):
    """Input validation failures."""


class MissingEndpointException(ValidationException):
    """No target endpoint was given. Raised synchronously."""


class MissingCallbackException(ValidationException):
    """No completion callback could be resolved. Raised synchronously."""


class InvalidUriException(ValidationException):
    """The endpoint is neither a string nor an ``httpx.URL``."""


class InvalidMethodException(ValidationException):
    """The HTTP method is not one of HEAD, GET, POST, PUT, DELETE."""


class InvalidProtocolException(ValidationException):
    """The endpoint scheme is neither http nor https."""


class InvalidProxyException(ValidationException):
    """The configured proxy URI has no usable scheme."""


# =============================================================================
# State Exceptions
# =============================================================================


class InvalidStateException(FlyReqException):
    """Operation is not valid in the object's current state."""


class CompletionAlreadyDeliveredException(InvalidStateException):
    """A request completion was delivered more than once."""


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(FlyReqException):
    """Failures outside the caller's control: network, remote services."""


class ExternalServiceException(InfrastructureException):
    """Failure communicating with an external service."""


class HttpStatusException(ExternalServiceException):
    """The remote service answered with a status code of 400 or above.

    The message is the response's reason phrase. The response and its raw
    body travel with the exception as well as alongside it in the callback.
    """

    def __init__(
        self,
        message: str,
        response: Any = None,
        body: str | None = None,
        status_code: int | None = None,
    ) -> None:
        if status_code is None and response is not None:
            status_code = getattr(response, "status_code", None)
        super().__init__(
            message,
            code=f"HTTP_{status_code}" if status_code is not None else None,
            context={"status_code": status_code} if status_code is not None else None,
        )
        self.status_code = status_code
        self.response = response
        self.body = body
