# -*- coding: utf-8 -*-
"""Profile — Pydantic models."""

from __future__ import annotations

import math
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def to_number_safe(value: Any) -> Optional[float]:
    """Loose numeric read: numbers and numeric strings; blanks, booleans and non-finite values are absent."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        num = float(value)
    elif isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        try:
            num = float(s)
        except ValueError:
            return None
    else:
        return None
    return num if math.isfinite(num) else None


class ProfileData(BaseModel):
    """The loosely-typed `data` blob of a profile row.

    Keys are stored camelCase (the shape clients send); unknown keys such as
    `email`, `phone` or `createdAt` are kept as extras.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    age: Optional[float] = None
    sex: Optional[str] = None
    weight_kg: Optional[float] = Field(None, alias="weightKg")
    target_weight: Optional[float] = Field(None, alias="targetWeight")
    diet_type: Optional[str] = Field(None, alias="dietType")
    fitness_goal: Optional[str] = Field(None, alias="fitnessGoal")
    food_allergies: Optional[str] = Field(None, alias="foodAllergies")
    daily_activity: Optional[str] = Field(None, alias="dailyActivity")

    height_ft: Optional[float] = Field(None, alias="heightFt")
    height_in: Optional[float] = Field(None, alias="heightIn")
    height_decimal_ft: Optional[float] = Field(None, alias="heightDecimalFt")
    height_cm: Optional[float] = Field(None, alias="heightCm")

    @field_validator(
        "age",
        "weight_kg",
        "target_weight",
        "height_ft",
        "height_in",
        "height_decimal_ft",
        "height_cm",
        mode="before",
    )
    @classmethod
    def _coerce_number(cls, value: object) -> Optional[float]:
        return to_number_safe(value)

    @field_validator(
        "sex",
        "diet_type",
        "fitness_goal",
        "food_allergies",
        "daily_activity",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value: object) -> Optional[str]:
        if value is None:
            return None
        if isinstance(value, (list, tuple)):
            value = ", ".join(str(v).strip() for v in value if v is not None and str(v).strip())
        s = str(value).strip()
        return s or None


class ResolvedHeight(BaseModel):
    feet: int = 0
    inches: int = Field(0, ge=0, le=11)
    centimeters: Optional[int] = None

    def describe(self) -> str:
        if not self.centimeters:
            return "Not specified"
        return f"{self.centimeters} cm ({self.feet}'{self.inches}\")"


class ProfileUpdateRequest(BaseModel):
    username: Optional[str] = Field(None, max_length=80)
    data: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("username")
    @classmethod
    def _username_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        s = value.strip()
        if not s:
            raise ValueError("Please enter your name.")
        return s

    @field_validator("data")
    @classmethod
    def _check_ranges(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        if "weightKg" in value and value["weightKg"] is not None:
            weight = to_number_safe(value["weightKg"])
            if weight is None or weight <= 0:
                raise ValueError("Please enter a valid weight.")
            if weight > 500:
                raise ValueError("Please enter a realistic weight value.")
        if "heightIn" in value and value["heightIn"] is not None:
            inches = to_number_safe(value["heightIn"])
            if inches is None or inches < 0 or inches >= 12:
                raise ValueError("Inches must be between 0 and 11.")
        return value


class ProfileResponse(BaseModel):
    id: str
    username: Optional[str] = None
    email: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)
    height: ResolvedHeight
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
