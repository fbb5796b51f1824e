# -*- coding: utf-8 -*-

from __future__ import annotations

import json
import unittest

import httpx

from fittrack.diet.generator import (
    DietPlanGenerationError,
    GeneratorSettings,
    ProfileInputError,
    generate_diet_plan,
)
from fittrack.diet.models import WEEKDAYS, PlanFallback, PlanOk


def _week():
    return {
        "schedule": [
            {"day": day, "breakfast": "Oats", "lunch": "Dal", "snack": "Apple", "dinner": "Paneer"}
            for day in WEEKDAYS
        ],
        "physiological_impact": "Gradual fat loss.",
    }


def _reply(status_code, **kwargs):
    return lambda: httpx.Response(status_code, **kwargs)


def _ok(payload):
    part = {"functionCall": {"name": "dietPlan", "args": payload}}
    return _reply(200, json={"candidates": [{"content": {"parts": [part]}}]})


PROFILE = {
    "id": "user-1",
    "username": "Sam",
    "data": json.dumps({"weightKg": 82, "age": 34, "heightFt": 5, "heightIn": 11, "foodAllergies": "peanuts"}),
}


class TestGenerateDietPlan(unittest.TestCase):
    def setUp(self) -> None:
        self.cfg = GeneratorSettings(
            api_key="test-key",
            base_url="https://gemini.test/v1beta",
            model="gemini-test",
            timeout=5.0,
            temperature=0.35,
            max_output_tokens=2000,
        )
        self.requests = []
        self.sleeps = []

    def _client(self, responses) -> httpx.Client:
        queue = list(responses)

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            item = queue.pop(0) if len(queue) > 1 else queue[0]
            if isinstance(item, Exception):
                raise item
            return item()

        return httpx.Client(transport=httpx.MockTransport(handler))

    def _generate(self, responses, profile=PROFILE):
        with self._client(responses) as client:
            return generate_diet_plan(profile, cfg=self.cfg, client=client, sleep=self.sleeps.append)

    def test_success_first_try(self) -> None:
        result = self._generate([_ok(_week())])
        self.assertIsInstance(result, PlanOk)
        self.assertEqual(result.plan.model_dump(mode="json"), _week())
        self.assertEqual(self.sleeps, [])

    def test_request_shape(self) -> None:
        self._generate([_ok(_week())])
        request = self.requests[0]
        self.assertEqual(request.method, "POST")
        self.assertEqual(request.url.path, "/v1beta/models/gemini-test:generateContent")
        self.assertEqual(request.headers["x-goog-api-key"], "test-key")

        body = json.loads(request.content)
        self.assertEqual(body["toolConfig"], {"functionCallingConfig": {"mode": "ANY"}})
        decl = body["tools"][0]["functionDeclarations"][0]
        self.assertEqual(decl["name"], "dietPlan")
        schedule = decl["parameters"]["properties"]["schedule"]
        self.assertEqual((schedule["minItems"], schedule["maxItems"]), (7, 7))
        self.assertEqual(schedule["items"]["properties"]["day"]["enum"], list(WEEKDAYS))
        self.assertEqual(body["generationConfig"], {"temperature": 0.35, "maxOutputTokens": 2000})

        prompt = body["contents"][0]["parts"][0]["text"]
        self.assertIn("Name: Sam", prompt)
        self.assertIn("Age: 34", prompt)
        self.assertIn("WeightKg: 82", prompt)
        self.assertIn("Height: 180 cm (5'11\")", prompt)
        self.assertIn("Allergies: peanuts", prompt)
        self.assertIn("FitnessGoal: Weight Loss", prompt)
        self.assertIn("Monday, Tuesday, Wednesday, Thursday, Friday, Saturday, Sunday", prompt)

    def test_transient_failures_back_off_then_succeed(self) -> None:
        responses = [
            _reply(503, json={"error": {"code": 503, "message": "overloaded"}}),
            _reply(200, json={"error": {"code": 429, "message": "quota"}}),
            _reply(500, text="upstream exploded"),
            _ok(_week()),
        ]
        result = self._generate(responses)
        self.assertIsInstance(result, PlanOk)
        self.assertEqual(len(self.requests), 4)
        self.assertEqual(self.sleeps, [1, 2, 4])

    def test_unparsable_attempt_is_retried(self) -> None:
        garbage = _reply(200, json={"candidates": [{"content": {"parts": [{"text": "no json here"}]}}]})
        result = self._generate([garbage, _ok(_week())])
        self.assertIsInstance(result, PlanOk)
        self.assertEqual(self.sleeps, [1])

    def test_network_error_is_retried(self) -> None:
        result = self._generate([httpx.ConnectError("refused"), _ok(_week())])
        self.assertIsInstance(result, PlanOk)
        self.assertEqual(self.sleeps, [1])

    def test_exhaustion_raises_with_last_message(self) -> None:
        failing = _reply(500, json={"error": {"code": 500, "message": "internal"}})
        with self.assertRaises(DietPlanGenerationError) as ctx:
            self._generate([failing])
        self.assertEqual(
            str(ctx.exception),
            "Failed to generate diet plan after 5 attempts: Gemini API error: internal",
        )
        self.assertEqual(len(self.requests), 5)
        self.assertEqual(self.sleeps, [1, 2, 4, 8])

    def test_single_day_answer_is_a_fallback(self) -> None:
        result = self._generate([_ok({"breakfast": "Idli", "lunch": "Rajma", "snack": "Chana", "dinner": "Khichdi"})])
        self.assertIsInstance(result, PlanFallback)
        self.assertEqual([d.day for d in result.plan.schedule], list(WEEKDAYS))
        self.assertEqual({d.dinner for d in result.plan.schedule}, {"Khichdi"})

    def test_profile_without_id_fails_before_any_request(self) -> None:
        with self.assertRaises(ProfileInputError) as ctx:
            self._generate([_ok(_week())], profile={"data": {"weightKg": 70}})
        self.assertEqual(str(ctx.exception), "Profile must include an id.")
        self.assertEqual(self.requests, [])

    def test_profile_without_weight_fails_before_any_request(self) -> None:
        for data in ({}, {"weightKg": ""}, {"weightKg": "heavy"}, "{broken"):
            with self.subTest(data=data):
                with self.assertRaises(ProfileInputError) as ctx:
                    self._generate([_ok(_week())], profile={"id": "u", "data": data})
                self.assertEqual(str(ctx.exception), "Profile missing numeric weightKg (required).")
        self.assertEqual(self.requests, [])

    def test_missing_api_key_fails_at_call_time(self) -> None:
        self.cfg = GeneratorSettings(
            api_key=None,
            base_url="https://gemini.test/v1beta",
            model="gemini-test",
            timeout=5.0,
            temperature=0.35,
            max_output_tokens=2000,
        )
        with self.assertRaises(DietPlanGenerationError):
            self._generate([_ok(_week())])
        self.assertEqual(self.requests, [])


if __name__ == "__main__":
    unittest.main()
