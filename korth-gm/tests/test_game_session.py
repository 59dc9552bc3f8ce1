import random
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from engine.character import build_character  # noqa: E402
from engine.dice import Dice  # noqa: E402
from engine.validator import ContractError  # noqa: E402
from game_session import GameSession  # noqa: E402
from script.scene_loader import ContentCatalog  # noqa: E402
from ui.events import texts  # noqa: E402

CATALOG = ContentCatalog()


def warrior_in_ambush():
    session = GameSession(CATALOG)
    session.start()
    session.choose_story_option(0)  # Warrior
    session.choose_story_option(0)  # mud tunnel
    return session


class TestSessionStart(unittest.TestCase):
    def test_novice_starts_at_the_opening(self):
        session = GameSession(CATALOG)
        events = session.start()
        self.assertEqual(session.node_id, "START")
        self.assertEqual(texts(events), [CATALOG.node("START")["text"]])
        self.assertEqual(session.player["className"], "Novice")

    def test_start_is_accepted_once_per_run(self):
        session = GameSession(CATALOG)
        session.step({"action": "start"})
        with self.assertRaises(ContractError):
            session.step({"action": "start"})
        self.assertEqual(session.node_id, "START")

        session.restart()
        with self.assertRaises(ContractError):
            session.start()

    def test_start_rejected_mid_combat(self):
        session = warrior_in_ambush()
        hp = session.combat.enemy["hp"]
        with self.assertRaises(ContractError):
            session.step({"action": "start"})
        self.assertTrue(session.in_combat)
        self.assertEqual(session.combat.enemy["hp"], hp)

    def test_start_rejected_after_a_choice(self):
        session = GameSession(CATALOG)
        session.choose_story_option(0)
        with self.assertRaises(ContractError):
            session.start()

    def test_node_without_choices_reports_end(self):
        session = GameSession(CATALOG)
        session.node_id = "ENDING_PEACE"
        snap = session.snapshot()
        self.assertTrue(snap["node"]["isEnd"])
        self.assertEqual(snap["choices"], [])

    def test_built_character_starts_at_the_mine(self):
        player = build_character(CATALOG, "Rogue", "Elf", "Urchin", "Cunning", name="Wren")
        session = GameSession(CATALOG, player=player)
        session.start()
        self.assertEqual(session.node_id, "ENTRANCE")
        choices = session.snapshot()["choices"]
        # dex 16 + 2 + 2, Darkvision
        self.assertTrue(choices[3]["available"])
        self.assertTrue(choices[4]["available"])


class TestSessionCombat(unittest.TestCase):
    def test_ambush_starts_combat(self):
        session = GameSession(CATALOG)
        session.start()
        session.choose_story_option(0)  # Warrior
        events = session.choose_story_option(0)  # mud tunnel
        self.assertEqual(
            texts(events),
            ["COMBAT! Tunnel Skulker lunges at you!", CATALOG.node("AMBUSH")["text"]],
        )
        self.assertTrue(session.in_combat)
        self.assertEqual(session.node_id, "AMBUSH")
        snap = session.snapshot()
        self.assertEqual(snap["choices"], [])
        self.assertEqual(snap["combat"]["enemy"]["name"], "Tunnel Skulker")
        self.assertEqual(snap["potions"], 1)
        with self.assertRaises(ContractError):
            session.choose_story_option(0)

    def test_victory_routes_by_enemy(self):
        session = warrior_in_ambush()
        session.combat.enemy["hp"] = 1
        with patch("random.randint", side_effect=[15, 3]):
            events = session.perform_combat_action("attack")
        self.assertEqual(session.node_id, "POST_FIGHT_1")
        self.assertNotEqual(session.node_id, "ENDING_WIN")
        self.assertFalse(session.in_combat)
        self.assertEqual(session.player["xp"], 25)
        self.assertEqual(session.last_victory, "goblin_scout")
        self.assertIn(CATALOG.node("POST_FIGHT_1")["text"], texts(events))

    def test_lethal_enemy_turn_routes_to_death(self):
        session = warrior_in_ambush()
        session.player["stats"]["currentHp"] = 4
        # player 1 + 3 misses AC 9; goblin 15 + 2 hits AC 15 for 9
        with patch("random.randint", side_effect=[1, 15, 9]):
            events = session.perform_combat_action("attack")
        lines = texts(events)
        self.assertEqual(session.player["stats"]["currentHp"], 0)
        self.assertEqual(session.node_id, "ENDING_DEATH")
        self.assertTrue(session.is_dead)
        self.assertTrue(lines[-2].startswith("FATAL BLOW!"))
        self.assertEqual(lines[-1], CATALOG.node("ENDING_DEATH")["text"])

        with self.assertRaises(ContractError):
            session.perform_combat_action("attack")
        with self.assertRaises(ContractError):
            session.step({"action": "choose", "choice": 0})

        session.step({"action": "restart"})
        self.assertEqual(session.node_id, "START")
        self.assertEqual(session.player["stats"]["currentHp"], 10)

    def test_sneak_attack_starts_one_wounded_encounter(self):
        session = GameSession(CATALOG)
        session.node_id = "BOSS_SNEAK_ATTACK"
        events = session.choose_story_option(0)
        self.assertEqual(session.node_id, "BOSS_FIGHT_HONOR")
        self.assertEqual(session.combat.enemy["hp"], 35)
        self.assertEqual(sum(1 for t in texts(events) if t.startswith("COMBAT!")), 1)

    def test_combat_action_outside_combat(self):
        session = GameSession(CATALOG)
        session.start()
        with self.assertRaises(ContractError):
            session.perform_combat_action("attack")
        with self.assertRaises(ContractError):
            session.step({"action": "dance"})


class TestSessionInvariants(unittest.TestCase):
    def test_health_stays_in_bounds(self):
        for seed in range(25):
            session = GameSession(CATALOG, dice=Dice.seeded(seed))
            picker = random.Random(seed)
            session.start()
            for _ in range(120):
                snap = session.snapshot()
                if snap["isDead"] or snap["node"]["isEnd"]:
                    break
                if snap["combat"]["active"]:
                    action = picker.choice(snap["combat"]["actions"])
                    if action.startswith("skill:"):
                        session.step({"action": "skill", "skill": action.split(":", 1)[1]})
                    else:
                        session.step({"action": action})
                else:
                    open_choices = [c["index"] for c in snap["choices"] if c["available"]]
                    session.step({"action": "choose", "choice": picker.choice(open_choices)})

                stats = session.player["stats"]
                self.assertTrue(0 <= stats["currentHp"] <= stats["maxHp"], seed)
                enemy = session.combat.enemy
                if enemy:
                    self.assertTrue(0 <= enemy["hp"] <= enemy["maxHp"], seed)


class FakeNarration:
    def combat_round(self, events):
        return "The stone drinks the noise."

    def story_step(self, events):
        return None


class TestSessionNarration(unittest.TestCase):
    def test_narration_is_appended_only(self):
        session = GameSession(CATALOG, dice=Dice.seeded(4), narration=FakeNarration())
        session.start()
        story_events = session.choose_story_option(0)
        self.assertNotIn("The stone drinks the noise.", texts(story_events))
        session.choose_story_option(0)
        events = session.perform_combat_action("defend")
        self.assertEqual(events[-1]["text"], "The stone drinks the noise.")
        self.assertEqual(events[-1]["category"], "narrative")


if __name__ == "__main__":
    unittest.main()
