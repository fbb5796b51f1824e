# -*- coding: utf-8 -*-
"""Profile — read a typed ProfileData out of a loosely-shaped profile record.

Profile rows have been written by several client versions: `data` may be a
JSON string, a nested object, missing, or the fields may sit flat on the
record itself. The ambiguity is resolved here, once, and everything
downstream works with `ProfileData`.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping

from .models import ProfileData

logger = logging.getLogger(__name__)

# Row-level keys that are never part of the profile data blob.
_RECORD_KEYS = {"id", "username", "data", "created_at", "updated_at"}


def _payload_from(value: Any) -> Dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, ProfileData):
        return value.model_dump(by_alias=True, exclude_none=True)
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8", errors="ignore")
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return {}
        try:
            parsed = json.loads(text)
        except ValueError:
            logger.warning("profile data is not valid JSON; reading as empty")
            return {}
        return _payload_from(parsed) if not isinstance(parsed, str) else {}
    if isinstance(value, Mapping):
        return dict(value)
    return {}


def read_profile_data(record: Any) -> ProfileData:
    """Return the ProfileData held by `record`.

    Accepts a ProfileData, a JSON string, a profile row (`{"id", "data", ...}`)
    or a flat mapping of profile fields. Nested `data` values win over flat
    ones when both are present.
    """
    if isinstance(record, ProfileData):
        return record

    payload = _payload_from(record)
    nested = _payload_from(payload.get("data"))
    flat = {k: v for k, v in payload.items() if k not in _RECORD_KEYS}
    payload = {**flat, **nested}

    return ProfileData.model_validate(payload)
