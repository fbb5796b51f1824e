# -*- coding: utf-8 -*-

from __future__ import annotations

import json
import unittest

from fittrack.diet.models import PLACEHOLDER, WEEKDAYS, PlanFallback, PlanOk
from fittrack.diet.normalizer import MEALS, NO_PLAN_IMPACT, extract_json_payload, is_diet_plan, normalize_diet_plan


def _week(**overrides):
    schedule = [
        {"day": day, "breakfast": f"Oats {i}", "lunch": f"Rice {i}", "snack": f"Fruit {i}", "dinner": f"Fish {i}"}
        for i, day in enumerate(WEEKDAYS)
    ]
    plan = {"schedule": schedule, "physiological_impact": "Steady deficit."}
    plan.update(overrides)
    return plan


def _dump(result):
    return result.plan.model_dump(mode="json")


class TestNormalizeDietPlan(unittest.TestCase):
    def test_clean_week_is_ok(self) -> None:
        result = normalize_diet_plan(_week())
        self.assertIsInstance(result, PlanOk)
        self.assertFalse(result.is_fallback)
        self.assertEqual(_dump(result), _week())

    def test_single_entry_schedule_is_cloned_across_week(self) -> None:
        raw = {
            "schedule": [{"day": "Day 1", "breakfast": "Eggs", "lunch": "Salad", "snack": "Nuts", "dinner": "Soup"}],
            "physiological_impact": "x",
        }
        result = normalize_diet_plan(raw)
        self.assertIsInstance(result, PlanFallback)
        plan = _dump(result)
        self.assertEqual(len(plan["schedule"]), 7)
        self.assertEqual(
            plan["schedule"][0],
            {"day": "Monday", "breakfast": "Eggs", "lunch": "Salad", "snack": "Nuts", "dinner": "Soup"},
        )
        for i, day in enumerate(plan["schedule"][1:], start=1):
            self.assertEqual(day, {**plan["schedule"][0], "day": WEEKDAYS[i]})
        self.assertEqual(plan["physiological_impact"], "x")

    def test_empty_object_gives_placeholder_week(self) -> None:
        result = normalize_diet_plan({})
        self.assertIsInstance(result, PlanFallback)
        plan = _dump(result)
        self.assertEqual([d["day"] for d in plan["schedule"]], list(WEEKDAYS))
        for day in plan["schedule"]:
            self.assertEqual({day[m] for m in ("breakfast", "lunch", "snack", "dinner")}, {PLACEHOLDER})
        self.assertEqual(plan["physiological_impact"], "No plan available.")

    def test_every_input_yields_seven_weekdays(self) -> None:
        inputs = [
            None,
            42,
            "text",
            [],
            {},
            {"schedule": []},
            {"schedule": "nope"},
            {"schedule": [{"breakfast": "A"}] * 9, "physiological_impact": "p"},
            [{"breakfast": "A"}, "junk", {"lunch": ""}, {"dinner": "B"}],
            {"breakfast": "Toast"},
        ]
        for raw in inputs:
            with self.subTest(raw=raw):
                plan = _dump(normalize_diet_plan(raw))
                self.assertTrue(is_diet_plan(plan))
                self.assertEqual([d["day"] for d in plan["schedule"]], list(WEEKDAYS))

    def test_normalizing_twice_is_stable(self) -> None:
        for raw in ({}, _week(), {"breakfast": "Toast"}, {"schedule": [{"day": "x", "lunch": ["Rice", "Beans"]}]}):
            with self.subTest(raw=raw):
                first = normalize_diet_plan(raw)
                second = normalize_diet_plan(_dump(first))
                self.assertIsInstance(second, PlanOk)
                self.assertEqual(_dump(second), _dump(first))

    def test_long_schedule_is_truncated(self) -> None:
        raw = _week()
        raw["schedule"] = raw["schedule"] + raw["schedule"][:2]
        result = normalize_diet_plan(raw)
        self.assertIsInstance(result, PlanFallback)
        self.assertEqual(_dump(result)["schedule"][6]["breakfast"], "Oats 6")

    def test_wrong_labels_are_relabelled(self) -> None:
        raw = _week()
        raw["schedule"] = list(reversed(raw["schedule"]))
        result = normalize_diet_plan(raw)
        self.assertIsInstance(result, PlanFallback)
        plan = _dump(result)
        self.assertEqual(plan["schedule"][0], {"day": "Monday", "breakfast": "Oats 6", "lunch": "Rice 6", "snack": "Fruit 6", "dinner": "Fish 6"})

    def test_meal_keys_are_case_insensitive_and_lists_joined(self) -> None:
        raw = _week()
        raw["schedule"][2] = {"Day": "Wednesday", "BREAKFAST": "Yogurt", "Lunch": ["Wrap", "Soup"], "snack": " ", "dinner": None}
        plan = _dump(normalize_diet_plan(raw))
        self.assertEqual(
            plan["schedule"][2],
            {"day": "Wednesday", "breakfast": "Yogurt", "lunch": "Wrap, Soup", "snack": PLACEHOLDER, "dinner": PLACEHOLDER},
        )

    def test_schedule_without_string_impact_yields_placeholder(self) -> None:
        for impact in (None, 42, ["a"]):
            raw = _week()
            if impact is None:
                del raw["physiological_impact"]
            else:
                raw["physiological_impact"] = impact
            result = normalize_diet_plan(raw)
            self.assertIsInstance(result, PlanFallback)
            plan = _dump(result)
            self.assertEqual(plan["physiological_impact"], NO_PLAN_IMPACT)
            self.assertEqual({d[m] for d in plan["schedule"] for m in MEALS}, {PLACEHOLDER})

    def test_single_day_object_is_replicated(self) -> None:
        result = normalize_diet_plan({"breakfast": "Toast", "dinner": "Curry", "physiological_impact": "ok"})
        self.assertIsInstance(result, PlanFallback)
        plan = _dump(result)
        self.assertEqual({d["breakfast"] for d in plan["schedule"]}, {"Toast"})
        self.assertEqual(plan["schedule"][3]["lunch"], PLACEHOLDER)
        self.assertEqual(plan["physiological_impact"], "ok")

    def test_bare_list_drops_blank_days_and_pads(self) -> None:
        result = normalize_diet_plan([{"breakfast": "A"}, "junk", {"lunch": "—"}, {"dinner": "B"}])
        plan = _dump(result)
        self.assertEqual(plan["schedule"][0]["breakfast"], "A")
        self.assertEqual(plan["schedule"][1]["dinner"], "B")
        self.assertEqual(plan["schedule"][6]["dinner"], "B")
        self.assertEqual(plan["physiological_impact"], "")


class TestIsDietPlan(unittest.TestCase):
    def test_accepts_clean_week(self) -> None:
        self.assertTrue(is_diet_plan(_week()))

    def test_rejects_broken_plans(self) -> None:
        short = _week()
        short["schedule"] = short["schedule"][:3]
        swapped = _week()
        swapped["schedule"][0], swapped["schedule"][1] = swapped["schedule"][1], swapped["schedule"][0]
        blank_meal = _week()
        blank_meal["schedule"][4]["dinner"] = "  "
        for value in (None, "x", [], short, swapped, blank_meal, _week(physiological_impact=None)):
            with self.subTest(value=value):
                self.assertFalse(is_diet_plan(value))


def _response(part):
    return {"candidates": [{"content": {"parts": [part]}}]}


class TestExtractJsonPayload(unittest.TestCase):
    def test_function_call_args_object(self) -> None:
        self.assertEqual(extract_json_payload(_response({"functionCall": {"name": "dietPlan", "args": _week()}})), _week())

    def test_function_call_args_string(self) -> None:
        part = {"functionCall": {"name": "dietPlan", "args": json.dumps(_week())}}
        self.assertEqual(extract_json_payload(_response(part)), _week())

    def test_text_with_fences(self) -> None:
        text = "```json\n" + json.dumps(_week()) + "\n```"
        self.assertEqual(extract_json_payload(_response({"text": text})), _week())

    def test_text_with_prose_around_object(self) -> None:
        text = "Here is your plan: " + json.dumps(_week()) + " Enjoy!"
        self.assertEqual(extract_json_payload(_response({"text": text})), _week())

    def test_function_call_wrapper_is_unwrapped(self) -> None:
        text = json.dumps({"name": "dietPlan", "arguments": _week()})
        self.assertEqual(extract_json_payload(_response({"text": text})), _week())

    def test_no_parts_or_unparsable_text_raise(self) -> None:
        with self.assertRaises(ValueError):
            extract_json_payload({"candidates": []})
        with self.assertRaises(ValueError):
            extract_json_payload(_response({"text": "sorry, no plan today"}))


if __name__ == "__main__":
    unittest.main()
