# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""Credential checks and ``Authorization`` header construction.

The same :class:`~types.ShuftiProCredentials` pair authorizes requests
(HTTP Basic, see :func:`build_authorization_header`) and supplies the secret
used to check response signatures (see :mod:`verification`).
"""

from __future__ import annotations

import base64

from .types import CredentialsError, ShuftiProCredentials


def ensure_credentials_valid(
    credentials: ShuftiProCredentials | None,
) -> ShuftiProCredentials:
    """Reject a missing credential pair or one with a blank field.

    Returns
    -------
    ShuftiProCredentials
        *credentials*, unchanged.

    Raises
    ------
    CredentialsError
        If *credentials* is ``None`` or either field is empty or whitespace.
    """
    if (
        credentials is None
        or _is_blank(credentials.client_id)
        or _is_blank(credentials.secret_key)
    ):
        raise CredentialsError("Empty credentials not allowed")
    return credentials


def build_authorization_header(credentials: ShuftiProCredentials | None) -> str:
    """Return the ``Authorization`` header value for *credentials*.

    Encoding: ``"Basic " + base64(utf8(client_id + ":" + secret_key))``

    >>> build_authorization_header(ShuftiProCredentials("abc", "xyz"))
    'Basic YWJjOnh5eg=='
    """
    checked = ensure_credentials_valid(credentials)
    token = f"{checked.client_id}:{checked.secret_key}".encode("utf-8")
    return "Basic " + base64.b64encode(token).decode("ascii")


def _is_blank(value: object) -> bool:
    return not isinstance(value, str) or not value.strip()
