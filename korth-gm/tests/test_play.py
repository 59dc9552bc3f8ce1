import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import play  # noqa: E402
from engine.dice import Dice  # noqa: E402
from game_session import GameSession  # noqa: E402
from script.scene_loader import ContentCatalog  # noqa: E402
from ui.provider import UIProvider  # noqa: E402

CATALOG = ContentCatalog()


class ScriptedUI(UIProvider):
    def __init__(self, picks):
        self.picks = list(picks)
        self.menus = []
        self.errors = []
        self.lines = []

    def log(self, entry, data=None):
        self.lines.append(entry["text"])

    def error(self, text, data=None):
        self.errors.append(text)

    def choice(self, prompt, options, data=None):
        self.menus.append(options)
        return self.picks.pop(0)

    def text_input(self, prompt, data=None):
        return ""


class TestCliMenu(unittest.TestCase):
    def test_locked_choices_are_listed_but_not_selectable(self):
        session = GameSession(CATALOG, dice=Dice.seeded(1))
        session.start()
        session.choose_story_option(2)  # Mage, str 8
        menu = play.build_menu(session)
        self.assertIsNone(menu[1][1])
        self.assertIn("[LOCKED: Req: STR 12]", menu[1][0])
        self.assertEqual(menu[0][1], {"action": "choose", "choice": 0})

    def test_combat_menu_shows_cooldowns(self):
        session = GameSession(CATALOG, dice=Dice.seeded(1))
        session.start()
        session.choose_story_option(2)  # Mage
        session.choose_story_option(0)  # ambush
        payloads = [p for _, p in play.build_menu(session)]
        self.assertIn({"action": "skill", "skill": "fireball"}, payloads)
        self.assertIn({"action": "heal"}, payloads)

        session.player["cooldowns"]["fireball"] = 2
        labels = [label for label, _ in play.build_menu(session)]
        self.assertIn("Fireball [cooldown 2]", labels)

    def test_run_until_quit(self):
        session = GameSession(CATALOG, dice=Dice.seeded(1))
        session.node_id = "CRYPT_DISCOVERY"
        ui = ScriptedUI([0, 1])
        play.run(session, ui)
        self.assertEqual(session.node_id, "CLIFFHANGER")
        self.assertEqual(ui.menus[-1], ["Restart", "Quit"])


if __name__ == "__main__":
    unittest.main()
