import copy
import logging
from typing import Any, Dict, List, Optional

from combat import Combat, CombatResult
from engine.action_resolution import POTION_ID
from engine.apply import is_dead
from engine.character import count_items, novice_player
from engine.combat_state import DEFEAT, VICTORY, new_combat_state
from engine.dice import Dice
from engine.phases import allowed_actions, list_usable_skills
from engine.validator import validate
from script.scene_loader import ContentCatalog
from script.script_controller import StoryNavigator
from ui.events import NARRATIVE, build_character_update, build_combat_state, emit_log

logger = logging.getLogger(__name__)

COMBAT_INPUTS = ("attack", "skill", "heal", "defend")


class GameSession:
    """
    One playthrough: the player, the current story node and the combat state.

    Every public call resolves to completion and returns the ordered log
    entries it produced. Renderers only read those entries and `snapshot()`.
    """

    def __init__(self, catalog=None, player=None, dice=None, narration=None):
        """
        catalog: ContentCatalog (default: the bundled game-data)
        player: a built character; None starts as the novice at the story start
        dice: Dice (default: the `random` module)
        narration: optional NarrationManager
        """
        self.catalog = catalog or ContentCatalog()
        self.dice = dice or Dice()
        self.narration = narration
        self.navigator = StoryNavigator(self.catalog)

        self._initial_player = copy.deepcopy(player) if player else None
        self.player: Dict[str, Any] = {}
        self.node_id: Optional[str] = None
        self.combat = Combat(self.catalog, self.dice, new_combat_state())
        self.last_victory: Optional[str] = None
        self._started = False
        self._reset()

    # ──────────────────────────────────────────────
    # Lifecycle
    # ──────────────────────────────────────────────

    def _reset(self):
        if self._initial_player:
            self.player = copy.deepcopy(self._initial_player)
            self.node_id = self.navigator.created_start_node
        else:
            self.player = novice_player()
            self.node_id = self.navigator.start_node
        self.combat.state.clear()
        self.combat.state.update(new_combat_state())
        self.last_victory = None
        self._started = False

    def start(self) -> List[Dict[str, Any]]:
        """
        Emit the opening node. Starts combat if the opening node holds an enemy.
        Only valid once per run, before any other input.
        """
        validate(not self._started and not self.in_combat, "The run has already started.")
        self._started = True
        events: List[Dict[str, Any]] = []
        self._route(self.node_id, events)
        logger.info("Session started at %s (%s)", self.node_id, self.player.get("className"))
        return events

    def restart(self) -> List[Dict[str, Any]]:
        self._reset()
        return self.start()

    # ──────────────────────────────────────────────
    # Player input
    # ──────────────────────────────────────────────

    @property
    def is_dead(self) -> bool:
        return is_dead(self.player)

    @property
    def in_combat(self) -> bool:
        return self.combat.active

    def choose_story_option(self, choice_index: int) -> List[Dict[str, Any]]:
        validate(not self.is_dead, "You are dead. Only restart is possible.")
        validate(not self.in_combat, "Finish the fight first.")

        outcome = self.navigator.advance(self.player, self.node_id, choice_index)
        self._started = True
        self.node_id = outcome["nextNodeId"]
        events = outcome["events"]

        if outcome["encounter"]:
            events.extend(self.combat.start(self.player, enemy=outcome["encounter"]))
        elif outcome["startsCombat"]:
            events.extend(self.combat.start(self.player, enemy_id=outcome["startsCombat"]))
        events.extend(outcome["nodeEvents"])

        self._narrate(events, self.narration.story_step if self.narration else None)
        return events

    def perform_combat_action(self, action: str, skill_id: Optional[str] = None) -> List[Dict[str, Any]]:
        validate(not self.is_dead, "You are dead. Only restart is possible.")
        result: CombatResult = self.combat.step(self.player, action, skill_id)
        events = result.events

        if result.status == VICTORY:
            self.last_victory = result.enemy_id
            self._route(self.navigator.victory_route(result.enemy_id), events)
        elif result.status == DEFEAT:
            self.node_id = self.navigator.death_node
            events.extend(self.navigator.enter(self.node_id, announce_end=False)["events"])
            logger.info("Player died; session at %s", self.node_id)

        self._narrate(events, self.narration.combat_round if self.narration else None)
        return events

    def step(self, player_input: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Dict dispatch used by the adapters:
          {"action": "start" | "restart"}
          {"action": "choose", "choice": 0}
          {"action": "attack" | "heal" | "defend"}
          {"action": "skill", "skill": "fireball"}
        """
        action = (player_input or {}).get("action")
        if action == "restart":
            return self.restart()
        validate(not self.is_dead, "You are dead. Only restart is possible.")
        if action == "start":
            return self.start()
        if action == "choose":
            return self.choose_story_option(player_input.get("choice"))
        validate(action in COMBAT_INPUTS, f"Unknown action: {action}")
        return self.perform_combat_action(action, player_input.get("skill"))

    # ──────────────────────────────────────────────
    # Views
    # ──────────────────────────────────────────────

    def snapshot(self) -> Dict[str, Any]:
        node = self.catalog.node(self.node_id)
        locked = self.in_combat or self.is_dead
        combat_view = build_combat_state(self.combat.state)
        combat_view["actions"] = allowed_actions(self.player, self.combat.state)
        return {
            "player": build_character_update(self.player),
            "nodeId": self.node_id,
            "node": {"id": node["id"], "text": node["text"], "isEnd": self.navigator.is_terminal(self.node_id)},
            "choices": [] if locked else self.navigator.available_choices(self.player, self.node_id),
            "combat": combat_view,
            "usableSkills": list_usable_skills(self.player),
            "potions": count_items(self.player, POTION_ID),
            "isDead": self.is_dead,
            "lastVictory": self.last_victory,
        }

    # ──────────────────────────────────────────────
    # Internals
    # ──────────────────────────────────────────────

    def _route(self, node_id: str, events: List[Dict[str, Any]]):
        self.node_id = node_id
        entered = self.navigator.enter(node_id)
        # The encounter announces itself before the room is described.
        if entered["enemyId"]:
            events.extend(self.combat.start(self.player, enemy_id=entered["enemyId"]))
        events.extend(entered["events"])

    def _narrate(self, events, narrate_fn):
        if not narrate_fn:
            return
        text = narrate_fn(events)
        if text:
            emit_log(events, text, NARRATIVE)
