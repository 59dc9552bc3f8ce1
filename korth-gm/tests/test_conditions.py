import sys
from pathlib import Path
import unittest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from engine.character import novice_player  # noqa: E402
from script.conditions import ConditionRegistry  # noqa: E402


class TestRequirements(unittest.TestCase):
    def setUp(self):
        self.registry = ConditionRegistry()
        self.player = novice_player()

    def test_no_requirement_is_met(self):
        self.assertTrue(self.registry.evaluate(None, self.player))

    def test_stat_threshold_is_inclusive(self):
        req = {"type": "stat", "stat": "dex", "value": 12}
        self.assertFalse(self.registry.evaluate(req, self.player))
        self.player["stats"]["dex"] = 12
        self.assertTrue(self.registry.evaluate(req, self.player))

    def test_item(self):
        req = {"type": "item", "item": "amulet"}
        self.assertFalse(self.registry.evaluate(req, self.player))
        self.player["inventory"].append({"id": "amulet", "name": "Bone Totem", "type": "KEY"})
        self.assertTrue(self.registry.evaluate(req, self.player))

    def test_ability(self):
        req = {"type": "ability", "ability": "Darkvision"}
        self.assertFalse(self.registry.evaluate(req, self.player))
        self.player["passiveAbilities"].append("Darkvision")
        self.assertTrue(self.registry.evaluate(req, self.player))

    def test_unknown_type(self):
        with self.assertRaises(KeyError):
            self.registry.evaluate({"type": "moon_phase"}, self.player)
        with self.assertRaises(ValueError):
            self.registry.evaluate({"stat": "str"}, self.player)

    def test_duplicate_registration(self):
        with self.assertRaises(ValueError):
            self.registry.register("stat", lambda req, player: True)

    def test_labels(self):
        self.assertEqual(ConditionRegistry.label({"type": "stat", "stat": "int", "value": 12}), "Req: INT 12")
        self.assertEqual(ConditionRegistry.label({"type": "item", "item": "amulet"}), "Req: amulet")
        self.assertEqual(ConditionRegistry.label(None), "")


if __name__ == "__main__":
    unittest.main()
