from __future__ import annotations

from typing import Any, Dict, Optional


IDLE = "idle"
PLAYER_TURN = "player_turn"
ENEMY_TURN = "enemy_turn"
VICTORY = "victory"
DEFEAT = "defeat"

TRANSITIONS = {
    IDLE: {PLAYER_TURN},
    PLAYER_TURN: {ENEMY_TURN, VICTORY},
    ENEMY_TURN: {PLAYER_TURN, DEFEAT},
    VICTORY: {IDLE},
    DEFEAT: {IDLE},
}


def new_combat_state() -> Dict[str, Any]:
    return {"active": False, "enemy": None, "phase": IDLE, "round": 0}


def is_active(state: Optional[Dict[str, Any]]) -> bool:
    return bool(state and state.get("active") and state.get("enemy"))


def set_phase(state: Dict[str, Any], phase: str) -> None:
    current = state.get("phase", IDLE)
    if phase not in TRANSITIONS.get(current, set()):
        raise RuntimeError(f"Illegal combat transition: {current} -> {phase}")
    state["phase"] = phase


def begin_encounter(state: Dict[str, Any], enemy: Dict[str, Any]) -> None:
    if state.get("phase", IDLE) != IDLE:
        raise RuntimeError(f"Encounter already in progress ({state.get('phase')})")
    state["active"] = True
    state["enemy"] = enemy
    state["round"] = 0
    set_phase(state, PLAYER_TURN)


def end_encounter(state: Dict[str, Any], outcome: str) -> Optional[Dict[str, Any]]:
    """
    outcome: VICTORY or DEFEAT. Returns the finished enemy instance and
    drops the state back to idle.
    """
    set_phase(state, outcome)
    enemy = state.get("enemy")
    state["active"] = False
    state["enemy"] = None
    set_phase(state, IDLE)
    return enemy
