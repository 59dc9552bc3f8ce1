import logging
from typing import Any, Dict, List, Optional

from engine.validator import validate
from script.conditions import ConditionRegistry
from script.effects import EffectRegistry
from ui.events import LOOT, NARRATIVE, SUCCESS, emit_log

logger = logging.getLogger(__name__)

END_MARKER = "--- TO BE CONTINUED ---"


class StoryNavigator:
    """
    Walks the story graph.
    Checks choice requirements, dispatches choice effects and reports whether
    the destination node opens an encounter. Never runs combat itself.
    """

    def __init__(
        self,
        catalog,
        conditions: Optional[ConditionRegistry] = None,
        effects: Optional[EffectRegistry] = None,
    ):
        """
        catalog: ContentCatalog holding story nodes + story metadata
        conditions / effects: optional registries (injected for tests)
        """
        self.catalog = catalog
        self.conditions = conditions or ConditionRegistry()
        self.effects = effects or EffectRegistry()
        self.meta = catalog.story()

    # ──────────────────────────────────────────────
    # Graph metadata
    # ──────────────────────────────────────────────

    @property
    def start_node(self) -> str:
        return self.meta["startNode"]

    @property
    def created_start_node(self) -> str:
        return self.meta.get("createdStartNode", self.meta["startNode"])

    @property
    def death_node(self) -> str:
        return self.meta["deathNode"]

    def victory_route(self, enemy_id: str) -> str:
        routes = self.meta.get("victoryRoutes", {})
        if enemy_id not in routes:
            raise KeyError(f"No victory route for enemy: {enemy_id}")
        return routes[enemy_id]

    # ──────────────────────────────────────────────
    # Choices
    # ──────────────────────────────────────────────

    def available_choices(self, player: Dict[str, Any], node_id: str) -> List[Dict[str, Any]]:
        node = self.catalog.node(node_id)
        choices = []
        for idx, choice in enumerate(node.get("choices", [])):
            requirement = choice.get("requirement")
            choices.append({
                "index": idx,
                "text": choice["text"],
                "nextId": choice["nextId"],
                "available": self.conditions.evaluate(requirement, player),
                "requirement": self.conditions.label(requirement),
            })
        return choices

    def advance(self, player: Dict[str, Any], current_node_id: str, choice_index: int) -> Dict[str, Any]:
        """
        Resolve one choice on `current_node_id`. Nothing is mutated when the
        choice is rejected.

        Returns:
          {
            "nextNodeId": str,
            "startsCombat": enemy id to instantiate, or None,
            "encounter": live enemy produced by the choice's effect, or None,
            "isEnd": bool,
            "events": [effect and skill-check entries],
            "nodeEvents": [destination text, end marker],
          }
        """
        node = self.catalog.node(current_node_id)
        choices = node.get("choices", [])
        validate(
            isinstance(choice_index, int) and 0 <= choice_index < len(choices),
            f"No choice {choice_index} on {current_node_id}",
        )
        choice = choices[choice_index]
        requirement = choice.get("requirement")
        validate(
            self.conditions.evaluate(requirement, player),
            f"Requirement not met: {self.conditions.label(requirement)}",
        )

        events: List[Dict[str, Any]] = []
        encounter = None
        if choice.get("effect"):
            ctx = {"catalog": self.catalog, "player": player, "events": events}
            encounter = self.effects.execute(choice["effect"], ctx)

        if requirement and requirement.get("type") == "stat":
            emit_log(events, f"[Skill Check: {requirement['stat'].upper()}] Passed.", SUCCESS)

        next_id = choice["nextId"]
        entered = self.enter(next_id)

        # An effect-built encounter replaces the node's own trigger.
        enemy_id = None if encounter else entered["enemyId"]
        assert not (encounter and enemy_id), "encounter started twice"

        logger.info("Story: %s -> %s", current_node_id, next_id)
        return {
            "nextNodeId": next_id,
            "startsCombat": enemy_id,
            "encounter": encounter,
            "isEnd": entered["isEnd"],
            "events": events,
            "nodeEvents": entered["events"],
        }

    def is_terminal(self, node_id: str) -> bool:
        node = self.catalog.node(node_id)
        return bool(node.get("isEnd")) or not node.get("choices")

    def enter(self, node_id: str, announce_end: bool = True) -> Dict[str, Any]:
        """
        Emit a node's text without taking a choice (start, post-combat routing).
        """
        node = self.catalog.node(node_id)
        events: List[Dict[str, Any]] = []
        emit_log(events, node["text"], NARRATIVE)
        is_end = self.is_terminal(node_id)
        if is_end and announce_end:
            emit_log(events, END_MARKER, LOOT)
        return {
            "nodeId": node_id,
            "enemyId": node.get("enemyId"),
            "isEnd": is_end,
            "events": events,
        }
