# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""ShuftiProClient: async HTTP client for the Shufti Pro verification API.

Every call follows the same pipeline:

1. **Pre-flight**: the payload is checked against its field rules and the
   credentials are checked for blanks. Failures raise
   :class:`~types.ValidationError` or :class:`~types.CredentialsError` and
   no request is sent.
2. **Exchange**: the payload is sent as UTF-8 JSON with an HTTP Basic
   ``Authorization`` header (proof downloads are sent without one).
3. **Integrity**: ``Signature`` response headers are checked against the
   raw body (see :mod:`verification`).
4. **Decode**: the body is parsed into a typed response.

Failures in steps 2-4 surface as :class:`~types.ClientError` (or its
subclass :class:`~types.IntegrityError`) with the original exception
chained as ``__cause__``.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, TypeVar

import httpx

from .credential import build_authorization_header, ensure_credentials_valid
from .types import (
    ClientError,
    IntegrityError,
    ProofFileData,
    ShuftiProCredentials,
    ShuftiProEvent,
    ShuftiProFeedback,
    ShuftiProProofAccess,
    ShuftiProReference,
    ShuftiProStatus,
    ShuftiProVerification,
)
from .validation import validate_request
from .verification import verify_response_signature

log = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.shuftipro.com"

_JSON_CONTENT_TYPE = "application/json; charset=utf-8"

TResponse = TypeVar("TResponse")


class ShuftiProClient:
    """Async client for the Shufti Pro REST API.

    All API methods are coroutines and must be awaited. Cancelling the task
    that awaits one of them cancels the underlying HTTP request; the
    resulting :class:`asyncio.CancelledError` is never wrapped.

    Parameters
    ----------
    credentials:
        Default credentials for :meth:`verify` and :meth:`get_status`, and the
        secret used to check response signatures. May be omitted when every
        call passes its own credentials.
    base_url:
        Origin of the API. Defaults to :data:`DEFAULT_BASE_URL`. A trailing
        slash is stripped automatically.
    timeout:
        Per-request timeout in seconds for the internally created HTTP
        client. Defaults to 10.
    http_client:
        Optional pre-configured :class:`httpx.AsyncClient`. Useful for
        injecting test transports or custom SSL contexts. It is not closed
        by :meth:`aclose`.
    verify_with_request_credentials:
        By default response signatures are always checked with the
        credentials given here, even when a call was authorized with
        different per-call credentials. Set to ``True`` to check them with
        the credentials the call was authorized with instead.

    Raises
    ------
    CredentialsError
        If *credentials* is given but has a blank field.

    Examples
    --------
    >>> client = ShuftiProClient(ShuftiProCredentials("client-id", "secret"))
    >>> feedback = await client.verify(ShuftiProVerification(reference="ref-1"))
    >>> status = await client.get_status(ShuftiProReference("ref-1"))
    """

    def __init__(
        self,
        credentials: ShuftiProCredentials | None = None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
        verify_with_request_credentials: bool = False,
    ) -> None:
        if credentials is not None:
            ensure_credentials_valid(credentials)
        self._credentials = credentials
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._verify_with_request_credentials = verify_with_request_credentials
        self._owned_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    # ------------------------------------------------------------------
    # Context manager support
    # ------------------------------------------------------------------

    async def __aenter__(self) -> "ShuftiProClient":
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if it was created internally."""
        if self._owned_client:
            await self._http.aclose()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def verify(
        self,
        verification: ShuftiProVerification,
        credentials: ShuftiProCredentials | None = None,
        *,
        timeout: float | None = None,
    ) -> ShuftiProFeedback:
        """Submit a verification request (``POST /``).

        Parameters
        ----------
        verification:
            The request. ``reference`` is mandatory.
        credentials:
            Authorize this call with these credentials instead of the ones
            bound to the client.
        timeout:
            Override the client-level timeout for this call only (seconds).

        Returns
        -------
        ShuftiProFeedback

        Raises
        ------
        ValidationError
            If *verification* violates a field rule. No request is sent.
        CredentialsError
            If no usable credentials are available. No request is sent.
        IntegrityError
            If the response signature does not match the body.
        ClientError
            On transport, encoding or decoding failures.
        """
        return await self._call(
            None, verification, self._resolve(credentials), _parse_feedback, timeout
        )

    async def get_status(
        self,
        reference: ShuftiProReference,
        credentials: ShuftiProCredentials | None = None,
        *,
        timeout: float | None = None,
    ) -> ShuftiProStatus:
        """Look up the status of an earlier verification (``POST /status``).

        Arguments and errors are as for :meth:`verify`.
        """
        return await self._call(
            "/status", reference, self._resolve(credentials), _parse_status, timeout
        )

    async def get_proof(
        self,
        access_token: ShuftiProProofAccess,
        uri: str | httpx.URL,
        *,
        timeout: float | None = None,
    ) -> ProofFileData:
        """Download a proof file (image, video or document).

        The request is sent without an ``Authorization`` header; the access
        token in the body grants access. The response signature is not
        checked.

        Parameters
        ----------
        access_token:
            Access token from the status response.
        uri:
            Proof URL from the status response. Relative URLs are resolved
            against the base URL.
        timeout:
            Override the client-level timeout for this call only (seconds).

        Returns
        -------
        ProofFileData
            Backed by the open response; consume or close it.

        Raises
        ------
        ValidationError
            If *access_token* has no token. No request is sent.
        ClientError
            On transport failures or a response without ``Content-Type``.
        """
        return await self._proof_call(uri, access_token, timeout)

    # ------------------------------------------------------------------
    # Private HTTP helpers
    # ------------------------------------------------------------------

    def _resolve(
        self, credentials: ShuftiProCredentials | None
    ) -> ShuftiProCredentials | None:
        return credentials if credentials is not None else self._credentials

    async def _call(
        self,
        path: str | None,
        payload: Any,
        credentials: ShuftiProCredentials | None,
        parse: Callable[[Any, int], TResponse],
        timeout: float | None,
    ) -> TResponse:
        validate_request(payload)
        authorization = build_authorization_header(credentials)
        signing_credentials = (
            credentials if self._verify_with_request_credentials else self._credentials
        )
        url = f"{self._base_url}{path or ''}"

        try:
            response = await self._http.post(
                url,
                content=_encode_json(payload),
                headers={
                    "Accept": "application/json",
                    "Authorization": authorization,
                    "Content-Type": _JSON_CONTENT_TYPE,
                },
                timeout=_timeout_or_default(timeout),
            )
            body = response.text
            log.debug("POST %s -> %d (%d bytes)", url, response.status_code, len(body))

            verify_response_signature(
                body,
                response.headers.get_list("Signature"),
                signing_credentials.secret_key if signing_credentials else None,
            )
            return parse(json.loads(body), response.status_code)
        except IntegrityError as exc:
            exc.endpoint = url
            raise
        except Exception as exc:
            log.warning("POST %s failed: %s", url, exc)
            raise ClientError(str(exc), endpoint=url) from exc

    async def _proof_call(
        self,
        uri: str | httpx.URL,
        access_token: ShuftiProProofAccess,
        timeout: float | None,
    ) -> ProofFileData:
        validate_request(access_token)

        url = str(uri)
        response: httpx.Response | None = None
        try:
            url = str(httpx.URL(f"{self._base_url}/").join(uri))
            request = self._http.build_request(
                "POST",
                url,
                content=_encode_json(access_token),
                headers={"Content-Type": _JSON_CONTENT_TYPE},
                timeout=_timeout_or_default(timeout),
            )
            response = await self._http.send(request, stream=True)
            log.debug("POST %s -> %d (streamed)", url, response.status_code)

            content_type = response.headers.get("Content-Type")
            if not content_type:
                raise ValueError("proof response has no Content-Type header")
            return ProofFileData(response, content_type)
        except Exception as exc:
            if response is not None:
                await response.aclose()
            log.warning("POST %s failed: %s", url, exc)
            raise ClientError(str(exc), endpoint=url) from exc


# ------------------------------------------------------------------
# Module-level encoding and parsing helpers
# ------------------------------------------------------------------


def _timeout_or_default(timeout: float | None) -> Any:
    return timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT


def _encode_json(payload: Any) -> bytes:
    """Serialize a request payload to UTF-8 JSON bytes."""
    return json.dumps(payload.to_payload(), ensure_ascii=False).encode("utf-8")


def _parse_event(raw: Any) -> ShuftiProEvent | str | None:
    if raw is None:
        return None
    try:
        return ShuftiProEvent(raw)
    except ValueError:
        # Newer event names are kept as plain strings.
        return str(raw)


def _optional_dict(raw: dict[str, Any], key: str) -> dict[str, Any] | None:
    value = raw.get(key)
    if isinstance(value, dict):
        return value
    # The service sends "" or [] in place of an absent object.
    if value is None or value == "" or value == []:
        return None
    raise ValueError(f"field {key!r} must be an object, got {type(value).__name__}")


def _optional_str(raw: dict[str, Any], key: str) -> str | None:
    value = raw.get(key)
    return None if value is None else str(value)


def _parse_feedback(raw: Any, http_status: int) -> ShuftiProFeedback:
    """Parse a JSON-decoded body into a :class:`~types.ShuftiProFeedback`.

    Raises
    ------
    ValueError
        If the body is not an object or a nested field has the wrong type.
    """
    if not isinstance(raw, dict):
        raise ValueError(f"_parse_feedback: expected dict, got {type(raw).__name__}")

    return ShuftiProFeedback(
        reference=_optional_str(raw, "reference"),
        event=_parse_event(raw.get("event")),
        verification_url=_optional_str(raw, "verification_url"),
        verification_result=_optional_dict(raw, "verification_result"),
        verification_data=_optional_dict(raw, "verification_data"),
        declined_reason=_optional_str(raw, "declined_reason"),
        error=_optional_dict(raw, "error"),
        http_status=http_status,
        raw=raw,
    )


def _parse_status(raw: Any, http_status: int) -> ShuftiProStatus:
    """Parse a JSON-decoded body into a :class:`~types.ShuftiProStatus`."""
    if not isinstance(raw, dict):
        raise ValueError(f"_parse_status: expected dict, got {type(raw).__name__}")

    return ShuftiProStatus(
        reference=_optional_str(raw, "reference"),
        event=_parse_event(raw.get("event")),
        verification_result=_optional_dict(raw, "verification_result"),
        verification_data=_optional_dict(raw, "verification_data"),
        proofs=_optional_dict(raw, "proofs"),
        declined_reason=_optional_str(raw, "declined_reason"),
        error=_optional_dict(raw, "error"),
        http_status=http_status,
        raw=raw,
    )
