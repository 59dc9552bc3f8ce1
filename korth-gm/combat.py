import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from engine import action_resolution as ar
from engine.apply import instantiate_enemy, is_dead
from engine.character import count_items
from engine.combat_state import (
    DEFEAT,
    ENEMY_TURN,
    PLAYER_TURN,
    VICTORY,
    begin_encounter,
    end_encounter,
    is_active,
    new_combat_state,
    set_phase,
)
from engine.phases import COMBAT_ACTIONS, reset_cooldowns, set_cooldown, start_player_action
from engine.validator import validate
from ui.events import DANGER, LOOT, SUCCESS, emit_log

logger = logging.getLogger(__name__)

ONGOING = "ongoing"


@dataclass
class CombatResult:
    status: str = ONGOING  # ongoing | victory | defeat
    enemy_id: Optional[str] = None
    xp: int = 0
    events: List[Dict[str, Any]] = field(default_factory=list)
    player_action: Dict[str, Any] = field(default_factory=dict)
    enemy_action: Dict[str, Any] = field(default_factory=dict)


class Combat:
    """
    Turn-synchronous encounter resolver.

    One `step` call is one full round: the player's action and, unless the
    enemy fell, the enemy's reply. The state dict is owned by the caller
    (the session) so it can be inspected and served as-is.
    """

    def __init__(self, catalog, dice, state: Optional[Dict[str, Any]] = None):
        self.catalog = catalog
        self.dice = dice
        self.state = state if state is not None else new_combat_state()

    @property
    def active(self) -> bool:
        return is_active(self.state)

    @property
    def enemy(self) -> Optional[Dict[str, Any]]:
        return self.state.get("enemy")

    def start(self, player, enemy_id: Optional[str] = None, enemy: Optional[Dict[str, Any]] = None):
        """
        Copy the template for `enemy_id` into a live instance, or adopt an
        already built live `enemy`. Returns the opening events.
        """
        if (enemy_id is None) == (enemy is None):
            raise ValueError("Pass exactly one of enemy_id or enemy")
        if enemy is None:
            enemy = instantiate_enemy(self.catalog, enemy_id)
        player["isDefending"] = False
        begin_encounter(self.state, enemy)
        logger.info("Encounter started: %s (%s/%s hp)", enemy["id"], enemy["hp"], enemy["maxHp"])

        events: List[Dict[str, Any]] = []
        emit_log(events, f"COMBAT! {enemy['name']} lunges at you!", DANGER)
        return events

    def validate_action(self, player, action: str, skill_id: Optional[str] = None):
        validate(self.active, "No active encounter.")
        validate(not is_dead(player), "The dead cannot fight.")
        validate(action in COMBAT_ACTIONS, f"Unknown combat action: {action}")
        if action == "skill":
            skill = self._owned_skill(player, skill_id)
            validate(skill is not None, f"Skill not owned: {skill_id}")
            remaining = player.get("cooldowns", {}).get(skill_id, 0)
            validate(remaining == 0, f"{skill['name']} is cooling down ({remaining} turns).")
            return skill
        if action == "heal":
            validate(count_items(player, ar.POTION_ID) > 0, "No potions left.")
        return None

    def step(self, player, action: str, skill_id: Optional[str] = None) -> CombatResult:
        skill = self.validate_action(player, action, skill_id)
        enemy = self.enemy
        result = CombatResult(enemy_id=enemy["id"])
        events = result.events

        self.state["round"] = self.state.get("round", 0) + 1
        start_player_action(player)

        if action == "attack":
            result.player_action = ar.resolve_attack(player, enemy, self.dice, events)
        elif action == "skill":
            set_cooldown(player, skill)
            result.player_action = ar.resolve_skill(player, enemy, skill, self.dice, events)
        elif action == "heal":
            result.player_action = ar.resolve_heal(player, events)
        else:
            result.player_action = ar.resolve_defend(player, self.dice, events)

        if enemy["hp"] <= 0:
            self._victory(player, result)
            return result

        set_phase(self.state, ENEMY_TURN)
        result.enemy_action = ar.enemy_turn(player, enemy, self.dice, events)
        if result.enemy_action["lethal"]:
            end_encounter(self.state, DEFEAT)
            result.status = DEFEAT
            logger.info("Encounter lost: %s", enemy["id"])
            return result

        set_phase(self.state, PLAYER_TURN)
        return result

    def _victory(self, player, result: CombatResult):
        enemy = end_encounter(self.state, VICTORY)
        reset_cooldowns(player)
        player["isDefending"] = False
        xp = int(enemy.get("xpValue", 0) or 0)
        player["xp"] = int(player.get("xp", 0) or 0) + xp

        result.status = VICTORY
        result.xp = xp
        emit_log(result.events, f"SILENCE. {enemy['name']} falls dead.", SUCCESS)
        emit_log(result.events, f"Experience Gained: {xp} XP.", LOOT)
        logger.info("Encounter won: %s (+%s xp)", enemy["id"], xp)

    @staticmethod
    def _owned_skill(player, skill_id):
        return next((s for s in player.get("skills", []) if s.get("id") == skill_id), None)
