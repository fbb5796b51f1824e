# -*- coding: utf-8 -*-
"""Diet — coerce whatever the model returned into a 7-day Monday..Sunday plan.

`normalize_diet_plan` is total: every input yields a valid DietPlan. The
result is tagged PlanOk when the input already was a clean week, PlanFallback
(with a reason) when it had to be repaired.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Mapping, Optional

from .models import PLACEHOLDER, WEEKDAYS, DaySchedule, DietPlan, NormalizedPlan, PlanFallback, PlanOk

logger = logging.getLogger(__name__)

MEALS = ("breakfast", "lunch", "snack", "dinner")
NO_PLAN_IMPACT = "No plan available."


def _lookup(raw: Mapping[str, Any], key: str) -> Any:
    if key in raw:
        return raw[key]
    for k, v in raw.items():
        if isinstance(k, str) and k.strip().lower() == key:
            return v
    return None


def _meal_text(value: Any) -> str:
    if value is None:
        return PLACEHOLDER
    if isinstance(value, (list, tuple)):
        value = ", ".join(str(v).strip() for v in value if v is not None and str(v).strip())
    s = str(value).strip()
    return s or PLACEHOLDER


def _day_label(raw: Mapping[str, Any]) -> str:
    value = _lookup(raw, "day")
    if value is None:
        value = _lookup(raw, "day_name") or _lookup(raw, "label")
    return str(value).strip() if value is not None else ""


def _is_blank_day(day: Dict[str, str]) -> bool:
    return all(day[m] == PLACEHOLDER for m in MEALS)


def normalize_day(raw: Mapping[str, Any]) -> Dict[str, str]:
    """One day entry with its four meals cleaned; the day label is kept as given."""
    day = {m: _meal_text(_lookup(raw, m)) for m in MEALS}
    day["day"] = _day_label(raw)
    return day


def _fill_week(days: List[Dict[str, str]]) -> List[DaySchedule]:
    filled = list(days)
    while len(filled) < len(WEEKDAYS):
        source = filled[-1] if filled else {m: PLACEHOLDER for m in MEALS}
        filled.append(dict(source))
    return [
        DaySchedule(day=WEEKDAYS[i], **{m: d[m] for m in MEALS})
        for i, d in enumerate(filled[: len(WEEKDAYS)])
    ]


def _impact_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _schedule_entries(value: Any) -> Optional[List[Mapping[str, Any]]]:
    """Entries of a `{schedule, physiological_impact}` object, or None when it is not one."""
    if not isinstance(value, Mapping):
        return None
    schedule = _lookup(value, "schedule")
    if not isinstance(schedule, list) or not schedule:
        return None
    if not all(isinstance(entry, Mapping) for entry in schedule):
        return None
    if not isinstance(_lookup(value, "physiological_impact"), str):
        return None
    return schedule


def _has_meal(value: Mapping[str, Any]) -> bool:
    return any(_meal_text(_lookup(value, m)) != PLACEHOLDER for m in MEALS)


def _is_meal_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _schedule_problem(entries: List[Mapping[str, Any]], days: List[Dict[str, str]]) -> Optional[str]:
    if len(entries) < len(WEEKDAYS):
        return f"schedule had {len(entries)} day(s); padded to 7"
    if len(entries) > len(WEEKDAYS):
        return f"schedule had {len(entries)} days; truncated to 7"
    if [d["day"] for d in days] != list(WEEKDAYS):
        return "day labels were not Monday..Sunday in order; relabelled"
    if any(not _is_meal_string(_lookup(e, m)) for e in entries for m in MEALS):
        return "blank meals replaced with placeholders"
    return None


def _fallback(plan: DietPlan, reason: str) -> PlanFallback:
    logger.warning("diet plan normalized with fallback: %s", reason)
    return PlanFallback(plan=plan, reason=reason)


def normalize_diet_plan(value: Any) -> NormalizedPlan:
    entries = _schedule_entries(value)
    if entries is not None:
        days = [normalize_day(entry) for entry in entries]
        impact = _lookup(value, "physiological_impact")
        plan = DietPlan(schedule=_fill_week(days), physiological_impact=_impact_text(impact))
        problem = _schedule_problem(entries, days)
        if problem is None:
            return PlanOk(plan=plan)
        return _fallback(plan, problem)

    if isinstance(value, Mapping) and _has_meal(value):
        day = normalize_day(value)
        plan = DietPlan(
            schedule=_fill_week([day] * len(WEEKDAYS)),
            physiological_impact=_impact_text(_lookup(value, "physiological_impact")),
        )
        return _fallback(plan, "single day replicated across the week")

    if isinstance(value, list):
        days = [normalize_day(item) for item in value if isinstance(item, Mapping)]
        days = [d for d in days if not _is_blank_day(d)]
        if days:
            plan = DietPlan(schedule=_fill_week(days), physiological_impact="")
            return _fallback(plan, f"bare list of {len(days)} day(s) normalized to a week")

    plan = DietPlan(schedule=_fill_week([]), physiological_impact=NO_PLAN_IMPACT)
    return _fallback(plan, "no usable plan in response; placeholder week returned")


def is_diet_plan(value: Any) -> bool:
    """Strict check of the stored-plan invariant."""
    if not isinstance(value, Mapping):
        return False
    schedule = value.get("schedule")
    if not isinstance(schedule, list) or len(schedule) != len(WEEKDAYS):
        return False
    for expected, entry in zip(WEEKDAYS, schedule):
        if not isinstance(entry, Mapping) or entry.get("day") != expected:
            return False
        for meal in MEALS:
            text = entry.get(meal)
            if not isinstance(text, str) or not text.strip():
                return False
    return isinstance(value.get("physiological_impact"), str)


# ---- Response extraction ----


def _strip_fences(text: str) -> str:
    cleaned = text.strip()
    cleaned = re.sub(r"^```(?:json)?\s*", "", cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r"\s*```$", "", cleaned)
    return cleaned


def _extract_json_substring(text: str) -> Optional[str]:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end <= start:
        return None
    return text[start : end + 1]


def _try_json(text: Optional[str]) -> Any:
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None


def parse_part_payload(part: Any) -> Any:
    """Pull the JSON payload out of one `candidates[0].content.parts[0]` entry.

    Raises ValueError when nothing parseable is found.
    """
    if not isinstance(part, Mapping):
        raise ValueError("Gemini returned no usable parts.")

    parsed: Any = None
    call = part.get("functionCall")
    if isinstance(call, Mapping) and call.get("args") is not None:
        args = call.get("args")
        parsed = _try_json(args) if isinstance(args, str) else args

    text = part.get("text")
    if parsed is None and isinstance(text, str):
        parsed = _try_json(text.strip())
        if parsed is None:
            parsed = _try_json(_strip_fences(text))
        if parsed is None:
            parsed = _try_json(_extract_json_substring(text))

    if parsed is None:
        raise ValueError("Gemini returned an unparsable response format.")

    if isinstance(parsed, Mapping) and parsed.get("name") == "dietPlan" and parsed.get("arguments"):
        arguments = parsed.get("arguments")
        parsed = _try_json(arguments) if isinstance(arguments, str) else arguments
        if parsed is None:
            raise ValueError("Gemini function-call wrapper had unparsable arguments.")
    return parsed


def extract_json_payload(response: Any) -> Any:
    """Return the parsed payload of a `generateContent` response body."""
    part = None
    if isinstance(response, Mapping):
        candidates = response.get("candidates")
        if isinstance(candidates, list) and candidates and isinstance(candidates[0], Mapping):
            content = candidates[0].get("content")
            if isinstance(content, Mapping):
                parts = content.get("parts")
                if isinstance(parts, list) and parts:
                    part = parts[0]
    if part is None:
        raise ValueError("Gemini returned no usable parts.")
    return parse_part_payload(part)
