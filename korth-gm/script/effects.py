import logging
from typing import Dict, Any, Callable, Optional

from engine.action_resolution import heal_with_flavor
from engine.apply import add_item, instantiate_enemy, wound_enemy
from engine.character import grant_loadout
from ui.events import COMBAT_HIT, DANGER, LOOT, SUCCESS, emit_log

logger = logging.getLogger(__name__)

EffectFn = Callable[[Dict[str, Any], Dict[str, Any]], Optional[Dict[str, Any]]]


class EffectRegistry:
    """
    Executes the effect attached to a story choice.

    Effects are commands, not logic. They may:
      - mutate the player (loadout, hp, inventory)
      - append log entries to ctx["events"]
      - hand back a live encounter the story navigator must start

    ctx = { "catalog": ContentCatalog, "player": dict, "events": list }
    """

    def __init__(self):
        self._effects: Dict[str, EffectFn] = {}

        # register built-ins
        self.register("grant_loadout", self._grant_loadout)
        self.register("heal", self._heal)
        self.register("add_item", self._add_item)
        self.register("sneak_attack_bonus", self._sneak_attack_bonus)

    # ──────────────────────────────────────────────
    # Public API
    # ──────────────────────────────────────────────

    def register(self, name: str, fn: EffectFn):
        if name in self._effects:
            raise ValueError(f"Effect already registered: {name}")
        self._effects[name] = fn

    def execute(self, effect: Dict[str, Any], ctx: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        effect = { "type": "...", ... }
        Returns a live enemy instance when the effect opens an encounter.
        """
        etype = effect.get("type")
        if not etype:
            raise ValueError("Effect missing 'type'")

        if etype not in self._effects:
            raise KeyError(f"Unknown effect type: {etype}")

        logger.debug("Effect %s", etype)
        return self._effects[etype](effect, ctx)

    # ──────────────────────────────────────────────
    # Built-in Effects
    # ──────────────────────────────────────────────

    def _grant_loadout(self, effect, ctx):
        """
        effect:
          { "type": "grant_loadout", "className": "Warrior" }
        """
        class_name = effect["className"]
        grant_loadout(ctx["catalog"], ctx["player"], class_name)
        emit_log(ctx["events"], f"You grip your weapon. You are ready. (Class: {class_name})", SUCCESS)
        return None

    def _heal(self, effect, ctx):
        """
        effect:
          { "type": "heal", "amount": 15 }
        """
        heal_with_flavor(ctx["player"], int(effect.get("amount", 0)), "You bind your wounds.", ctx["events"], phase=None)
        return None

    def _add_item(self, effect, ctx):
        """
        effect:
          { "type": "add_item", "item": "amulet" }
        """
        item = add_item(ctx["player"], ctx["catalog"].item(effect["item"]))
        emit_log(ctx["events"], f"You picked up: {item['name']}", LOOT)
        return None

    def _sneak_attack_bonus(self, effect, ctx):
        """
        Opens the encounter with the enemy already bleeding.

        effect:
          { "type": "sneak_attack_bonus", "enemyId": "hobgoblin_boss", "damage": 10 }
        """
        enemy = instantiate_enemy(ctx["catalog"], effect["enemyId"])
        wound_enemy(enemy, effect.get("damage", 0))
        events = ctx["events"]
        emit_log(events, f"SNEAK ATTACK! You drive your blade into {enemy['name']}'s back before they can turn!", COMBAT_HIT)
        emit_log(events, f"{enemy['taunter']} roars in fury, bleeding heavily.", DANGER)
        return enemy
