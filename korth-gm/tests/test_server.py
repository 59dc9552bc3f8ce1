import sys
import unittest
from pathlib import Path
from unittest.mock import patch

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fastapi import HTTPException  # noqa: E402

import game_context  # noqa: E402
import server  # noqa: E402


class TestServer(unittest.TestCase):
    def setUp(self):
        patcher = patch.object(game_context, "NARRATION", None)
        patcher.start()
        self.addCleanup(patcher.stop)
        server.sessions.clear()

    def create(self, **overrides):
        fields = {
            "session_id": "s1",
            "name": "Wren",
            "className": "Rogue",
            "race": "Elf",
            "background": "Urchin",
            "personality": "Cunning",
        }
        fields.update(overrides)
        return server.create_character(server.CharacterCreateRequest(**fields))

    def test_options(self):
        options = server.get_options()
        self.assertEqual(options["classes"], ["Warrior", "Rogue", "Mage"])
        self.assertIn("Elf", [r["id"] for r in options["races"]])

    def test_create_starts_at_the_mine(self):
        body = self.create()
        self.assertEqual(body["session_id"], "s1")
        self.assertEqual(body["state"]["nodeId"], "ENTRANCE")
        self.assertEqual(body["state"]["player"]["name"], "Wren")
        self.assertEqual(body["events"][0]["category"], "narrative")

    def test_unknown_race_is_404(self):
        with self.assertRaises(HTTPException) as ctx:
            self.create(race="Gnome")
        self.assertEqual(ctx.exception.status_code, 404)

    def test_step_and_contract_errors(self):
        self.create(className="Warrior", race="Human", background="Soldier", personality="Stoic")
        body = server.step(server.StepRequest(session_id="s1", action="choose", choice=0))
        self.assertEqual(body["state"]["nodeId"], "AMBUSH")
        self.assertTrue(body["state"]["combat"]["active"])

        with self.assertRaises(HTTPException) as ctx:
            server.step(server.StepRequest(session_id="s1", action="choose", choice=0))
        self.assertEqual(ctx.exception.status_code, 409)

        body = server.step(server.StepRequest(session_id="s1", action="defend"))
        self.assertTrue(any(e["text"].startswith("TACTICAL DEFENSE") for e in body["events"]))

    def test_start_on_a_running_session_is_409(self):
        self.create(className="Warrior", race="Human", background="Soldier", personality="Stoic")
        with self.assertRaises(HTTPException) as ctx:
            server.step(server.StepRequest(session_id="s1", action="start"))
        self.assertEqual(ctx.exception.status_code, 409)

        server.step(server.StepRequest(session_id="s1", action="choose", choice=0))
        with self.assertRaises(HTTPException) as ctx:
            server.step(server.StepRequest(session_id="s1", action="start"))
        self.assertEqual(ctx.exception.status_code, 409)
        self.assertTrue(server.state(server.SessionRequest(session_id="s1"))["state"]["combat"]["active"])

    def test_start_opens_a_novice_run(self):
        body = server.step(server.StepRequest(session_id="fresh", action="start"))
        self.assertEqual(body["state"]["nodeId"], "START")
        with self.assertRaises(HTTPException) as ctx:
            server.step(server.StepRequest(session_id="ghost", action="attack"))
        self.assertEqual(ctx.exception.status_code, 404)

    def test_restart_and_state(self):
        self.create()
        server.step(server.StepRequest(session_id="s1", action="choose", choice=0))
        body = server.restart(server.SessionRequest(session_id="s1"))
        self.assertEqual(body["state"]["nodeId"], "ENTRANCE")
        self.assertEqual(server.state(server.SessionRequest(session_id="s1"))["events"], [])


if __name__ == "__main__":
    unittest.main()
