# -*- coding: utf-8 -*-
"""Profile — resolve the four stored height encodings into one canonical height.

Priority (first match wins):
    1) heightDecimalFt             e.g. 5.9167
    2) heightFt + heightIn         e.g. 5, 11
    3) legacy single heightFt      e.g. 5.11 meaning 5'11" (or true decimal feet)
    4) heightCm                    e.g. 180

Rule 3 is ambiguous for genuine decimal feet in the 0.00-0.11 range (5.10 ft
reads as 5'10"). Historical rows depend on it, so it is kept as is.
"""

from __future__ import annotations

import math
from typing import Any, Optional, Tuple

from .models import ProfileData, ResolvedHeight
from .reader import read_profile_data

CM_PER_INCH = 2.54
# Fallback used by the metrics when no height is stored (5.5 ft).
DEFAULT_HEIGHT_CM = 5.5 * 12 * CM_PER_INCH


def round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; stored display values were produced half-up.
    return int(math.floor(value + 0.5))


def _rollover(feet: int, inches: int) -> Tuple[int, int]:
    if inches == 12:
        return feet + 1, 0
    return feet, inches


def decimal_feet_to_feet_inches(decimal_feet: float) -> Tuple[int, int]:
    feet = int(math.floor(decimal_feet))
    inches = round_half_up((decimal_feet - feet) * 12)
    return _rollover(feet, inches)


def cm_to_feet_inches(cm: float) -> Tuple[int, int]:
    total_inches = cm / CM_PER_INCH
    feet = int(math.floor(total_inches / 12))
    inches = round_half_up(total_inches % 12)
    return _rollover(feet, inches)


def feet_inches_to_cm(feet: float, inches: float) -> int:
    return round_half_up((feet * 12 + inches) * CM_PER_INCH)


def parse_legacy_height(single: float) -> Tuple[int, int]:
    """Read a lone heightFt that may be feet.inches notation (5.11 -> 5'11")."""
    feet = int(math.floor(single))
    decimal_part = single - feet
    suspected_inches = round_half_up(decimal_part * 100)
    if 0 <= suspected_inches <= 11 and abs(decimal_part * 100 - suspected_inches) < 0.01:
        return feet, suspected_inches
    return decimal_feet_to_feet_inches(single)


def _carry_inches(feet: float, inches: float) -> Tuple[int, int]:
    whole_feet = int(math.floor(feet))
    whole_inches = max(0, round_half_up(inches))
    return whole_feet + whole_inches // 12, whole_inches % 12


def resolve_height(data: Any) -> ResolvedHeight:
    profile: Optional[ProfileData] = data if isinstance(data, ProfileData) else (
        read_profile_data(data) if data is not None else None
    )
    if profile is None:
        return ResolvedHeight(feet=0, inches=0, centimeters=None)

    if profile.height_decimal_ft is not None:
        feet, inches = decimal_feet_to_feet_inches(profile.height_decimal_ft)
        cm = round_half_up(profile.height_decimal_ft * 12 * CM_PER_INCH)
        return ResolvedHeight(feet=feet, inches=inches, centimeters=cm)

    if profile.height_ft is not None and profile.height_in is not None:
        feet, inches = _carry_inches(profile.height_ft, profile.height_in)
        cm = feet_inches_to_cm(profile.height_ft, profile.height_in)
        return ResolvedHeight(feet=feet, inches=inches, centimeters=cm)

    if profile.height_ft is not None:
        feet, inches = parse_legacy_height(profile.height_ft)
        return ResolvedHeight(feet=feet, inches=inches, centimeters=feet_inches_to_cm(feet, inches))

    if profile.height_cm is not None:
        feet, inches = cm_to_feet_inches(profile.height_cm)
        return ResolvedHeight(feet=feet, inches=inches, centimeters=round_half_up(profile.height_cm))

    return ResolvedHeight(feet=0, inches=0, centimeters=None)
