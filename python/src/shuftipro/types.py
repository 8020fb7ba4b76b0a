# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""Shared value types for the shuftipro Python SDK."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, AsyncIterator, ClassVar

import httpx


@dataclass(frozen=True)
class FieldRule:
    """Declarative constraint on one attribute of a request payload.

    Interpreted by :func:`~validation.validate_request`. Rules other than
    ``required`` are skipped when the attribute is ``None``.
    """

    name: str
    required: bool = False
    # Permitted values; enum members are compared by their ``value``.
    allowed: frozenset[str] | None = None
    max_length: int | None = None
    # Regular expression the whole string value must match.
    pattern: str | None = None
    # Keys a mapping value must not contain.
    reserved_keys: frozenset[str] | None = None


class VerificationMode(str, Enum):
    """Which capture channels the end user may use."""

    ANY = "any"
    IMAGE_ONLY = "image_only"
    VIDEO_ONLY = "video_only"


class ShuftiProEvent(str, Enum):
    """Event names reported by the service in feedback and status responses."""

    REQUEST_PENDING = "request.pending"
    REQUEST_INVALID = "request.invalid"
    REQUEST_TIMEOUT = "request.timeout"
    REQUEST_UNAUTHORIZED = "request.unauthorized"
    REQUEST_DELETED = "request.deleted"
    REQUEST_RECEIVED = "request.received"
    VERIFICATION_CANCELLED = "verification.cancelled"
    VERIFICATION_ACCEPTED = "verification.accepted"
    VERIFICATION_DECLINED = "verification.declined"
    VERIFICATION_STATUS_CHANGED = "verification.status.changed"


@dataclass(frozen=True)
class ShuftiProCredentials:
    """Client identifier and secret key issued by the service."""

    client_id: str
    # Never rendered by repr().
    secret_key: str = field(repr=False)


# ------------------------------------------------------------------
# Request payloads
# ------------------------------------------------------------------

# Top-level request fields modelled by ShuftiProVerification.
_VERIFICATION_FIELDS = (
    "reference",
    "callback_url",
    "redirect_url",
    "email",
    "country",
    "language",
    "verification_mode",
    "allow_offline",
    "allow_online",
    "show_privacy_policy",
    "show_results",
    "show_consent",
    "show_feedback_form",
    "decline_on_single_step",
)


@dataclass(frozen=True)
class ShuftiProVerification:
    """Verification request sent to ``POST /``.

    ``services`` holds the service sections (``document``, ``face``,
    ``address``, ``consent``, ``background_checks``, ...) and is sent
    verbatim alongside the top-level fields. It must not repeat a top-level
    field name.
    """

    reference: str | None
    callback_url: str | None = None
    redirect_url: str | None = None
    email: str | None = None
    country: str | None = None
    language: str | None = None
    verification_mode: VerificationMode | str | None = None
    allow_offline: bool | None = None
    allow_online: bool | None = None
    show_privacy_policy: bool | None = None
    show_results: bool | None = None
    show_consent: bool | None = None
    show_feedback_form: bool | None = None
    decline_on_single_step: bool | None = None
    services: dict[str, Any] = field(default_factory=dict)

    rules: ClassVar[tuple[FieldRule, ...]] = (
        FieldRule("reference", required=True, max_length=250),
        FieldRule("email", max_length=128),
        FieldRule("country", pattern=r"[A-Za-z]{2}"),
        FieldRule("language", pattern=r"[A-Za-z]{2}"),
        FieldRule(
            "verification_mode",
            allowed=frozenset(mode.value for mode in VerificationMode),
        ),
        FieldRule("services", reserved_keys=frozenset(_VERIFICATION_FIELDS)),
    )

    def to_payload(self) -> dict[str, Any]:
        # Modelled fields are written last so they always win.
        payload: dict[str, Any] = dict(self.services)
        for name in _VERIFICATION_FIELDS:
            value = getattr(self, name)
            if value is not None:
                payload[name] = value
        if self.verification_mode is not None:
            payload["verification_mode"] = VerificationMode(self.verification_mode).value
        return payload


@dataclass(frozen=True)
class ShuftiProReference:
    """Reference of an earlier verification, sent to ``POST /status``."""

    reference: str | None

    rules: ClassVar[tuple[FieldRule, ...]] = (
        FieldRule("reference", required=True, max_length=250),
    )

    def to_payload(self) -> dict[str, Any]:
        return {"reference": self.reference}


@dataclass(frozen=True)
class ShuftiProProofAccess:
    """Access token that unlocks a proof file URL returned in a status response."""

    access_token: str | None

    rules: ClassVar[tuple[FieldRule, ...]] = (
        FieldRule("access_token", required=True),
    )

    def to_payload(self) -> dict[str, Any]:
        return {"access_token": self.access_token}


# ------------------------------------------------------------------
# Response payloads
# ------------------------------------------------------------------


@dataclass(frozen=True)
class ShuftiProFeedback:
    """Response to a verification request."""

    reference: str | None
    event: ShuftiProEvent | str | None
    verification_url: str | None = None
    verification_result: dict[str, Any] | None = None
    verification_data: dict[str, Any] | None = None
    declined_reason: str | None = None
    error: dict[str, Any] | None = None
    http_status: int | None = None
    # Full decoded body, including fields not modelled above.
    raw: dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass(frozen=True)
class ShuftiProStatus:
    """Response to a status lookup."""

    reference: str | None
    event: ShuftiProEvent | str | None
    verification_result: dict[str, Any] | None = None
    verification_data: dict[str, Any] | None = None
    proofs: dict[str, Any] | None = None
    declined_reason: str | None = None
    error: dict[str, Any] | None = None
    http_status: int | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)


class ProofFileData:
    """Binary proof file returned by :meth:`~client.ShuftiProClient.get_proof`.

    ``content`` is backed by the still-open transport response and can be
    consumed once, either by iterating :meth:`aiter_bytes` or by calling
    :meth:`aread`. The caller owns it and must consume or close it; using the
    object as an async context manager closes it on exit.
    """

    def __init__(self, response: httpx.Response, content_type: str) -> None:
        self._response = response
        self.content_type = content_type

    @property
    def content(self) -> AsyncIterator[bytes]:
        """The proof bytes as an async stream."""
        return self.aiter_bytes()

    async def aiter_bytes(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self._response.aiter_bytes():
                yield chunk
        finally:
            await self._response.aclose()

    async def aread(self) -> bytes:
        try:
            return await self._response.aread()
        finally:
            await self._response.aclose()

    async def aclose(self) -> None:
        await self._response.aclose()

    async def __aenter__(self) -> "ProofFileData":
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"ProofFileData(content_type={self.content_type!r})"


# ------------------------------------------------------------------
# Errors
# ------------------------------------------------------------------


class ShuftiProError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(ShuftiProError, ValueError):
    """Raised when a request payload violates one of its field rules.

    Only the first violation is reported.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class CredentialsError(ShuftiProError, ValueError):
    """Raised when a credential pair is missing or incomplete."""


class ClientError(ShuftiProError):
    """Raised when a call fails on the network, serialization or decoding path.

    The original exception is available as ``__cause__``.
    """

    def __init__(self, message: str, endpoint: str | None = None) -> None:
        self.endpoint = endpoint
        super().__init__(message)


class IntegrityError(ClientError):
    """Raised when a response ``Signature`` header does not match its body."""
