# -*- coding: utf-8 -*-
"""Diet — 7-day plan generation via the Gemini generateContent API."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

import httpx

from ..config import settings
from ..profile.height import resolve_height
from ..profile.models import ProfileData
from ..profile.reader import read_profile_data
from .models import WEEKDAYS, NormalizedPlan
from .normalizer import extract_json_payload, normalize_diet_plan

logger = logging.getLogger(__name__)

MAX_RETRIES = 4

SYSTEM_PROMPT = (
    "You are a JSON-only assistant (nutritionist). "
    "Return functionCall results conforming exactly to schema."
)


class ProfileInputError(ValueError):
    """The profile cannot be turned into a generation request."""


class DietPlanGenerationError(RuntimeError):
    """Every attempt to obtain a plan from the model failed."""


class GeminiAPIError(RuntimeError):
    def __init__(self, code: Any, message: str) -> None:
        super().__init__(f"Gemini API error: {message}")
        self.code = code

    @property
    def transient(self) -> bool:
        return isinstance(self.code, int) and (self.code == 429 or self.code >= 500)


@dataclass(frozen=True)
class GeneratorSettings:
    api_key: Optional[str]
    base_url: str
    model: str
    timeout: float
    temperature: float
    max_output_tokens: int
    max_retries: int = MAX_RETRIES

    @property
    def endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}/models/{self.model}:generateContent"


def resolve_generator_settings() -> GeneratorSettings:
    return GeneratorSettings(
        api_key=settings.gemini_api_key,
        base_url=settings.gemini_base_url,
        model=settings.gemini_model,
        timeout=settings.gemini_timeout,
        temperature=settings.gemini_temperature,
        max_output_tokens=settings.gemini_max_output_tokens,
    )


def _fmt(value: Any, default: str) -> str:
    if value is None:
        return default
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_prompt(*, username: Optional[str], data: ProfileData, weight_kg: float) -> str:
    height = resolve_height(data)
    lines = [
        "You are an expert clinical nutritionist. Produce a JSON-only response (no markdown, no extra text).",
        "Return exactly one object matching the function schema 'dietPlan' with keys: "
        "schedule (7-element array) and physiological_impact (string).",
        "Schedule MUST contain seven elements labeled exactly (in order): " + ", ".join(WEEKDAYS) + ".",
        "Do NOT use Day 1 / Day 2 / 1 / 2 or arbitrary labels. Do NOT reorder the days.",
        "Each schedule element must contain: day (one of the weekdays above), "
        "breakfast, lunch, snack, dinner (all strings).",
        "Do NOT include any keys outside the schema.",
        "If allergies exist, avoid those ingredients explicitly in the meals.",
        "",
        "USER PROFILE:",
        f"Name: {username or 'User'}",
        f"Age: {_fmt(data.age, 'Unknown')}",
        f"Sex: {_fmt(data.sex, 'Unknown')}",
        f"WeightKg: {_fmt(weight_kg, 'Unknown')}",
        f"TargetWeight: {_fmt(data.target_weight, 'Not provided')}",
        f"Height: {height.describe()}",
        f"FitnessGoal: {_fmt(data.fitness_goal, 'Weight Loss')}",
        f"DietType: {_fmt(data.diet_type, 'Balanced')}",
        f"Allergies: {_fmt(data.food_allergies, 'None')}",
        f"ActivityLevel: {_fmt(data.daily_activity, 'Moderate')}",
        "",
        "Return a 7-day schedule with balanced macro portions suited to the user's goal, Monday through Sunday.",
    ]
    return "\n".join(lines)


def _function_declaration() -> Dict[str, Any]:
    day_schema = {
        "type": "object",
        "properties": {
            "day": {"type": "string", "enum": list(WEEKDAYS)},
            "breakfast": {"type": "string"},
            "lunch": {"type": "string"},
            "snack": {"type": "string"},
            "dinner": {"type": "string"},
        },
        "required": ["day", "breakfast", "lunch", "snack", "dinner"],
    }
    return {
        "name": "dietPlan",
        "description": "Return a structured 7-day diet plan (Monday..Sunday).",
        "parameters": {
            "type": "object",
            "properties": {
                "schedule": {"type": "array", "items": day_schema, "minItems": 7, "maxItems": 7},
                "physiological_impact": {"type": "string"},
            },
            "required": ["schedule", "physiological_impact"],
        },
    }


def build_payload(prompt: str, cfg: GeneratorSettings) -> Dict[str, Any]:
    return {
        "systemInstruction": {"role": "system", "parts": [{"text": SYSTEM_PROMPT}]},
        "tools": [{"functionDeclarations": [_function_declaration()]}],
        "toolConfig": {"functionCallingConfig": {"mode": "ANY"}},
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        "generationConfig": {"temperature": cfg.temperature, "maxOutputTokens": cfg.max_output_tokens},
    }


def _check_profile(profile: Any) -> tuple[ProfileData, float]:
    if not isinstance(profile, Mapping) or not profile.get("id"):
        raise ProfileInputError("Profile must include an id.")
    data = read_profile_data(profile)
    if data.weight_kg is None:
        raise ProfileInputError("Profile missing numeric weightKg (required).")
    return data, data.weight_kg


def _request_once(client: httpx.Client, cfg: GeneratorSettings, payload: Dict[str, Any]) -> Any:
    resp = client.post(
        cfg.endpoint,
        json=payload,
        headers={"Content-Type": "application/json", "x-goog-api-key": cfg.api_key or ""},
        timeout=cfg.timeout,
    )
    try:
        body = resp.json()
    except ValueError as exc:
        if resp.status_code >= 400:
            raise GeminiAPIError(resp.status_code, f"HTTP {resp.status_code}") from exc
        raise RuntimeError("Gemini response parse failed.") from exc

    error = body.get("error") if isinstance(body, dict) else None
    if error or resp.status_code >= 400:
        err = error if isinstance(error, dict) else {}
        code = err.get("code") or resp.status_code
        message = err.get("message") or (str(error) if error else f"HTTP {resp.status_code}")
        raise GeminiAPIError(code, message)

    return extract_json_payload(body)


def generate_diet_plan(
    profile: Any,
    *,
    cfg: Optional[GeneratorSettings] = None,
    client: Optional[httpx.Client] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> NormalizedPlan:
    """Ask the model for a week of meals for `profile` and normalize the answer.

    Profile problems raise ProfileInputError before any request is made.
    Failed attempts are retried with exponential backoff (1, 2, 4, 8 s);
    when all of them fail DietPlanGenerationError carries the last message.
    """
    data, weight_kg = _check_profile(profile)
    cfg = cfg or resolve_generator_settings()
    if not cfg.api_key:
        raise DietPlanGenerationError("GEMINI_API_KEY is not configured; cannot generate a diet plan.")

    prompt = build_prompt(username=profile.get("username"), data=data, weight_kg=weight_kg)
    payload = build_payload(prompt, cfg)
    attempts = cfg.max_retries + 1

    owns_client = client is None
    http = client or httpx.Client(timeout=cfg.timeout, follow_redirects=True)
    try:
        for attempt in range(attempts):
            logger.debug("diet plan attempt %d/%d for %s", attempt + 1, attempts, profile.get("id"))
            try:
                parsed = _request_once(http, cfg, payload)
            except Exception as exc:
                message = str(exc) or exc.__class__.__name__
                transient = isinstance(exc, GeminiAPIError) and exc.transient
                logger.error(
                    "diet plan attempt %d failed (%s): %s",
                    attempt + 1,
                    "transient" if transient else "error",
                    message,
                )
                if attempt == attempts - 1:
                    raise DietPlanGenerationError(
                        f"Failed to generate diet plan after {attempts} attempts: {message}"
                    ) from exc
                delay = 2**attempt
                logger.debug("retrying diet plan in %ss", delay)
                sleep(delay)
                continue
            return normalize_diet_plan(parsed)
    finally:
        if owns_client:
            http.close()

    raise DietPlanGenerationError("Diet plan generation exceeded retries.")
