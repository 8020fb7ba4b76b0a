# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""Response signature checking.

The service may sign each JSON response by sending one or more ``Signature``
headers holding::

    sha256_hex(utf8(raw_response_body + secret_key))

``verify_response_signature``
    Recomputes that digest and requires every header value to match it.

``compute_response_signature``
    The digest alone; useful for building fixtures and webhook checks.

When no ``Signature`` header is present the response is accepted as-is:
absence of the header means the check does not apply, not that it failed.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
from typing import Iterable

from .types import IntegrityError

log = logging.getLogger(__name__)


def compute_response_signature(body: str, secret_key: str) -> str:
    """Return the hex-encoded SHA-256 digest of ``body + secret_key``."""
    return hashlib.sha256((body + secret_key).encode("utf-8")).hexdigest()


def verify_response_signature(
    body: str,
    signatures: Iterable[str] | None,
    secret_key: str | None,
) -> None:
    """Check the ``Signature`` header values of a response against its body.

    Parameters
    ----------
    body:
        The raw response body, decoded as text, exactly as received.
    signatures:
        Every ``Signature`` header value on the response. ``None`` or an
        empty sequence skips verification.
    secret_key:
        The secret the service signed with.

    Raises
    ------
    IntegrityError
        If any header value differs from the computed digest, or if a
        signature is present but there is no secret to check it with.
    """
    values = list(signatures or ())
    if not values:
        log.debug("response carries no Signature header; skipping verification")
        return

    if not secret_key:
        raise IntegrityError("Invalid response signature: no secret key to verify with")

    expected = compute_response_signature(body, secret_key).encode("ascii")
    for value in values:
        if not hmac.compare_digest(value.encode("utf-8"), expected):
            log.warning("response signature mismatch (%d header value(s))", len(values))
            raise IntegrityError("Invalid response signature")
