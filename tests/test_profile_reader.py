# -*- coding: utf-8 -*-

from __future__ import annotations

import math
import unittest

from pydantic import ValidationError

from fittrack.profile.models import ProfileData, ProfileUpdateRequest, to_number_safe
from fittrack.profile.reader import read_profile_data


class TestNumberCoercion(unittest.TestCase):
    def test_numbers_and_numeric_strings(self) -> None:
        self.assertEqual(to_number_safe(72), 72.0)
        self.assertEqual(to_number_safe("72.5"), 72.5)
        self.assertEqual(to_number_safe(" 60 "), 60.0)

    def test_absent_values(self) -> None:
        for value in (None, "", "   ", "abc", True, False, math.nan, math.inf, [], {}):
            with self.subTest(value=value):
                self.assertIsNone(to_number_safe(value))


class TestReadProfileData(unittest.TestCase):
    def test_data_as_json_string(self) -> None:
        data = read_profile_data({"id": "u1", "data": '{"weightKg": "72.5", "sex": "Female"}'})
        self.assertEqual(data.weight_kg, 72.5)
        self.assertEqual(data.sex, "Female")

    def test_data_as_object(self) -> None:
        data = read_profile_data({"id": "u1", "data": {"weightKg": 80, "dailyActivity": "Light"}})
        self.assertEqual(data.weight_kg, 80.0)
        self.assertEqual(data.daily_activity, "Light")

    def test_flat_record(self) -> None:
        data = read_profile_data({"id": "u1", "username": "Sam", "weightKg": 65, "heightCm": 170})
        self.assertEqual(data.weight_kg, 65.0)
        self.assertEqual(data.height_cm, 170.0)
        self.assertNotIn("username", data.model_extra or {})

    def test_nested_values_win_over_flat(self) -> None:
        data = read_profile_data({"id": "u1", "weightKg": 60, "data": {"weightKg": 70}})
        self.assertEqual(data.weight_kg, 70.0)

    def test_unparsable_string_reads_as_empty(self) -> None:
        data = read_profile_data({"id": "u1", "data": "{not json"})
        self.assertIsNone(data.weight_kg)
        self.assertEqual(read_profile_data("garbage").model_dump(exclude_none=True), {})

    def test_missing_data(self) -> None:
        self.assertIsNone(read_profile_data({"id": "u1", "data": None}).weight_kg)
        self.assertIsNone(read_profile_data(None).weight_kg)

    def test_extra_keys_and_text_coercion(self) -> None:
        data = read_profile_data({"data": {"phone": "555", "foodAllergies": ["peanuts", " shellfish "], "sex": "  "}})
        self.assertEqual(data.food_allergies, "peanuts, shellfish")
        self.assertIsNone(data.sex)
        self.assertEqual(data.model_dump(by_alias=True)["phone"], "555")

    def test_profile_data_passes_through(self) -> None:
        original = ProfileData(weightKg=70)
        self.assertIs(read_profile_data(original), original)


class TestProfileUpdateRequest(unittest.TestCase):
    def test_rejects_blank_name(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            ProfileUpdateRequest(username="   ")
        self.assertIn("Please enter your name.", str(ctx.exception))

    def test_weight_rules(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            ProfileUpdateRequest(data={"weightKg": "abc"})
        self.assertIn("Please enter a valid weight.", str(ctx.exception))
        with self.assertRaises(ValidationError) as ctx:
            ProfileUpdateRequest(data={"weightKg": 501})
        self.assertIn("Please enter a realistic weight value.", str(ctx.exception))
        self.assertEqual(ProfileUpdateRequest(data={"weightKg": "72"}).data["weightKg"], "72")

    def test_inches_range(self) -> None:
        with self.assertRaises(ValidationError):
            ProfileUpdateRequest(data={"heightFt": 5, "heightIn": 12})
        ProfileUpdateRequest(data={"heightFt": 5, "heightIn": 11})


if __name__ == "__main__":
    unittest.main()
