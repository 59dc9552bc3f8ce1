import sys
import tempfile
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from script.scene_loader import ContentCatalog  # noqa: E402


class TestContentCatalog(unittest.TestCase):
    def test_lookups(self):
        catalog = ContentCatalog()
        self.assertEqual(catalog.item("potion")["effectValue"], 15)
        self.assertEqual(catalog.skill("heroic_strike")["damage"], [10, 18])
        self.assertEqual(catalog.enemy("hobgoblin_boss")["tier"], "boss")
        self.assertEqual(catalog.node("AMBUSH")["enemyId"], "goblin_scout")
        self.assertEqual(catalog.story()["deathNode"], "ENDING_DEATH")
        self.assertNotIn("nodes", catalog.story())

    def test_unknown_id(self):
        with self.assertRaises(KeyError):
            ContentCatalog().enemy("dragon")
        with self.assertRaises(KeyError):
            ContentCatalog().ids("spells")

    def test_copies_are_returned(self):
        catalog = ContentCatalog()
        enemy = catalog.enemy("goblin_scout")
        enemy["hp"] = 0
        self.assertEqual(catalog.enemy("goblin_scout")["hp"], 12)

    def test_missing_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(FileNotFoundError):
                ContentCatalog(tmp).item("potion")

    def test_in_memory_tables(self):
        catalog = ContentCatalog(data={"items": {"items": [{"id": "rope", "name": "Rope", "type": "KEY"}]}})
        self.assertEqual(catalog.item("rope")["name"], "Rope")
        self.assertEqual(catalog.ids("items"), ["rope"])
        # tables not supplied still come from disk
        self.assertEqual(catalog.enemy("goblin_scout")["ac"], 9)


if __name__ == "__main__":
    unittest.main()
