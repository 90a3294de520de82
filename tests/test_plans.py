"""Tests for loading the subscription plan table from YAML."""

import sys
import tempfile
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

import helpers  # noqa: F401,E402  sets DATABASE_URL before src is imported

from pydantic import ValidationError as PydanticValidationError

from src.subscriptions.plans import load_plan_catalog

PROJECT_PLANS = Path(__file__).resolve().parent.parent / "config" / "plans.yaml"


class TestLoadPlanCatalog(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def write(self, text: str) -> Path:
        path = self.dir / "plans.yaml"
        path.write_text(text, encoding="utf-8")
        return path

    def test_shipped_plans(self):
        catalog = load_plan_catalog(PROJECT_PLANS)
        self.assertEqual(sorted(catalog.ids()), ["basic", "premium"])
        basic = catalog.get("basic")
        self.assertEqual((basic.price, basic.currency, basic.duration_days), (500, "KES", 30))
        self.assertFalse(basic.limits.can_access_telemedicine)
        premium = catalog.get("premium")
        self.assertEqual(premium.price, 1000)
        self.assertTrue(premium.limits.priority_support)
        self.assertIn("premium", catalog)
        self.assertEqual(len(catalog), 2)

    def test_currency_defaults_and_snake_case_keys(self):
        catalog = load_plan_catalog(self.write("plans:\n  trial:\n    name: Trial\n    price: 10\n    duration_days: 7\n"))
        trial = catalog.get("trial")
        self.assertEqual(trial.id, "trial")
        self.assertEqual(trial.currency, "KES")
        self.assertEqual(trial.duration_days, 7)
        self.assertEqual(trial.features, ())

    def test_catalog_is_read_only(self):
        catalog = load_plan_catalog(PROJECT_PLANS)
        with self.assertRaises(PydanticValidationError):
            catalog.get("basic").price = 1
        self.assertEqual(catalog.as_dict()["basic"]["durationDays"], 30)

    def test_missing_file(self):
        with self.assertRaises(ValueError) as ctx:
            load_plan_catalog(self.dir / "absent.yaml")
        self.assertIn("absent.yaml", str(ctx.exception))

    def test_invalid_files(self):
        cases = {
            "bad yaml": "plans: [unclosed\n",
            "not a mapping": "- basic\n- premium\n",
            "no plans": "plans: {}\n",
            "plan not a mapping": "plans:\n  basic: 500\n",
            "zero price": "plans:\n  basic:\n    name: Basic\n    price: 0\n    durationDays: 30\n",
            "unknown key": "plans:\n  basic:\n    name: Basic\n    price: 5\n    durationDays: 30\n    colour: red\n",
        }
        for label, text in cases.items():
            with self.subTest(label):
                path = self.write(text)
                with self.assertRaises(ValueError) as ctx:
                    load_plan_catalog(path)
                self.assertIn(str(path), str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
