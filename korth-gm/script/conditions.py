from typing import Dict, Any, Callable


ConditionFn = Callable[[Dict[str, Any], Dict[str, Any]], bool]


class ConditionRegistry:
    """
    Central registry for choice requirements.
    Requirements must be:
      - pure (no side effects)
      - deterministic
      - evaluated against the player only
    """

    def __init__(self):
        self._conditions: Dict[str, ConditionFn] = {}

        # register built-ins
        self.register("stat", self._stat_at_least)
        self.register("item", self._has_item)
        self.register("ability", self._has_ability)

    # ──────────────────────────────────────────────
    # Public API
    # ──────────────────────────────────────────────

    def register(self, name: str, fn: ConditionFn):
        if name in self._conditions:
            raise ValueError(f"Condition already registered: {name}")
        self._conditions[name] = fn

    def evaluate(self, requirement: Dict[str, Any], player: Dict[str, Any]) -> bool:
        """
        requirement = { "type": "...", ... } or None (always met)
        """
        if not requirement:
            return True

        rtype = requirement.get("type")
        if not rtype:
            raise ValueError("Requirement missing 'type'")

        if rtype not in self._conditions:
            raise KeyError(f"Unknown requirement type: {rtype}")

        return self._conditions[rtype](requirement, player)

    @staticmethod
    def label(requirement: Dict[str, Any]) -> str:
        """Short human text for a locked choice, e.g. 'Req: DEX 12'."""
        if not requirement:
            return ""
        rtype = requirement.get("type")
        if rtype == "stat":
            return f"Req: {requirement['stat'].upper()} {requirement['value']}"
        if rtype == "item":
            return f"Req: {requirement['item']}"
        if rtype == "ability":
            return f"Req: {requirement['ability']}"
        return f"Req: {rtype}"

    # ──────────────────────────────────────────────
    # Built-in Requirements
    # ──────────────────────────────────────────────

    def _stat_at_least(self, req, player) -> bool:
        """
        req: { "type": "stat", "stat": "dex", "value": 12 }
        """
        stat = req.get("stat")
        value = req.get("value", 0)
        return player.get("stats", {}).get(stat, 0) >= value

    def _has_item(self, req, player) -> bool:
        """
        req: { "type": "item", "item": "amulet" }
        """
        item_id = req.get("item")
        if not item_id:
            return False
        return any(i.get("id") == item_id for i in player.get("inventory", []))

    def _has_ability(self, req, player) -> bool:
        """
        req: { "type": "ability", "ability": "Darkvision" }
        """
        ability = req.get("ability")
        if not ability:
            return False
        return ability in player.get("passiveAbilities", [])
