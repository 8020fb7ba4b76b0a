# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""shuftipro: async client for the Shufti Pro identity-verification API.

Quickstart
----------
>>> from shuftipro import ShuftiProClient, ShuftiProCredentials, ShuftiProReference
>>> async with ShuftiProClient(ShuftiProCredentials("client-id", "secret-key")) as client:
...     status = await client.get_status(ShuftiProReference("ref-1"))

Checking a response signature without a client:

>>> from shuftipro.verification import verify_response_signature
>>> verify_response_signature(body, [signature_header], "secret-key")
"""

from .client import DEFAULT_BASE_URL, ShuftiProClient
from .credential import build_authorization_header, ensure_credentials_valid
from .types import (
    ClientError,
    CredentialsError,
    FieldRule,
    IntegrityError,
    ProofFileData,
    ShuftiProCredentials,
    ShuftiProError,
    ShuftiProEvent,
    ShuftiProFeedback,
    ShuftiProProofAccess,
    ShuftiProReference,
    ShuftiProStatus,
    ShuftiProVerification,
    ValidationError,
    VerificationMode,
)
from .validation import validate_request
from .verification import compute_response_signature, verify_response_signature

__all__ = [
    # Primary client
    "ShuftiProClient",
    "DEFAULT_BASE_URL",
    # Core types
    "ShuftiProCredentials",
    "ShuftiProVerification",
    "ShuftiProReference",
    "ShuftiProProofAccess",
    "ShuftiProFeedback",
    "ShuftiProStatus",
    "ShuftiProEvent",
    "ProofFileData",
    "VerificationMode",
    "FieldRule",
    # Standalone helpers
    "ensure_credentials_valid",
    "build_authorization_header",
    "validate_request",
    "compute_response_signature",
    "verify_response_signature",
    # Exceptions
    "ShuftiProError",
    "ValidationError",
    "CredentialsError",
    "ClientError",
    "IntegrityError",
]
