# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""Pre-flight validation of outbound request payloads.

Each payload type declares its constraints as a ``rules`` tuple of
:class:`~types.FieldRule` entries. :func:`validate_request` walks those rules
in declaration order and raises on the first violation, so callers always see
a single, specific message.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from enum import Enum
from typing import Any

from .types import FieldRule, ValidationError


def validate_request(payload: Any) -> None:
    """Check *payload* against the field rules declared on its type.

    Parameters
    ----------
    payload:
        A request payload such as :class:`~types.ShuftiProVerification`.
        Objects without a ``rules`` attribute have no constraints.

    Raises
    ------
    ValidationError
        For the first violated rule. :attr:`~types.ValidationError.field`
        names the offending attribute.
    """
    if payload is None:
        raise ValidationError("request payload must not be None")

    for rule in getattr(payload, "rules", ()):
        message = check_rule(rule, getattr(payload, rule.name, None))
        if message is not None:
            raise ValidationError(message, field=rule.name)


def check_rule(rule: FieldRule, value: Any) -> str | None:
    """Return the violation message for *value*, or ``None`` if it passes."""
    if value is None or (isinstance(value, str) and not value.strip()):
        if rule.required:
            return f"The {rule.name} field is required."
        if value is None:
            return None

    if isinstance(value, Enum):
        value = value.value

    if rule.allowed is not None and (
        not isinstance(value, str) or value not in rule.allowed
    ):
        return (
            f"The {rule.name} field must be one of {sorted(rule.allowed)}, "
            f"got {value!r}."
        )

    if rule.max_length is not None and isinstance(value, str):
        if len(value) > rule.max_length:
            return (
                f"The field {rule.name} must be a string with a maximum "
                f"length of {rule.max_length}."
            )

    if rule.pattern is not None and isinstance(value, str):
        if re.fullmatch(rule.pattern, value) is None:
            return f"The field {rule.name} must match the regular expression '{rule.pattern}'."

    if rule.reserved_keys is not None:
        if not isinstance(value, Mapping):
            return f"The {rule.name} field must be an object."
        clashes = sorted(rule.reserved_keys.intersection(value))
        if clashes:
            return f"The {rule.name} field must not contain the keys {clashes}."

    return None
