"""
Narration events shared by the engine and every renderer.

The engine appends log entries to a plain list; the CLI prints them and the
HTTP adapter returns them as JSON. Categories only pick a display style.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional


NARRATIVE = "narrative"
COMBAT_HIT = "combat-hit"
COMBAT_MISS = "combat-miss"
COMBAT_INFO = "combat-info"
HEAL = "heal"
LOOT = "loot"
DANGER = "danger"
SUCCESS = "success"
SKILL_USE = "skill-use"

LOG_CATEGORIES = frozenset({
    NARRATIVE,
    COMBAT_HIT,
    COMBAT_MISS,
    COMBAT_INFO,
    HEAL,
    LOOT,
    DANGER,
    SUCCESS,
    SKILL_USE,
})

# Pacing markers: renderers may pause between the two halves of a combat round.
PLAYER_TURN = "player_turn"
ENEMY_TURN = "enemy_turn"


def build_log_entry(text: str, category: str = NARRATIVE, phase: Optional[str] = None) -> Dict[str, Any]:
    if category not in LOG_CATEGORIES:
        raise KeyError(f"Unknown log category: {category}")
    entry = {"id": uuid.uuid4().hex, "text": text, "category": category}
    if phase:
        entry["phase"] = phase
    return entry


def emit_log(events: List[Dict[str, Any]], text: str, category: str = NARRATIVE, phase: Optional[str] = None) -> Dict[str, Any]:
    entry = build_log_entry(text, category, phase)
    events.append(entry)
    return entry


def texts(events: List[Dict[str, Any]]) -> List[str]:
    return [e.get("text", "") for e in events]


def build_combat_state(combat_state: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    combat_state = combat_state or {}
    enemy = combat_state.get("enemy")
    payload: Dict[str, Any] = {"active": bool(combat_state.get("active"))}
    if enemy:
        payload["enemy"] = {
            "id": enemy.get("id"),
            "name": enemy.get("name"),
            "hp": {"current": enemy.get("hp"), "max": enemy.get("maxHp")},
            "ac": enemy.get("ac"),
        }
    return payload


def build_character_update(character: Dict[str, Any]) -> Dict[str, Any]:
    if not isinstance(character, dict):
        character = {}

    stats = character.get("stats", {}) if isinstance(character.get("stats"), dict) else {}
    cooldowns = character.get("cooldowns", {}) or {}

    # Compact skill payload: id + remaining cooldown only.
    skills = []
    for skill in character.get("skills") or []:
        if not isinstance(skill, dict):
            continue
        skills.append({
            "id": skill.get("id"),
            "name": skill.get("name"),
            "cooldown": int(cooldowns.get(skill.get("id"), 0) or 0),
            "cooldownMax": skill.get("cooldownMax", 0),
        })
    return {
        "name": character.get("name"),
        "className": character.get("className"),
        "race": character.get("race"),
        "background": character.get("background"),
        "personality": character.get("personality"),
        "visuals": character.get("visuals"),
        "level": character.get("level", 1),
        "xp": character.get("xp", 0),
        "hp": {"current": stats.get("currentHp"), "max": stats.get("maxHp")},
        "stats": dict(stats),
        "passiveAbilities": list(character.get("passiveAbilities") or []),
        "inventory": [
            {"id": i.get("id"), "name": i.get("name"), "type": i.get("type")}
            for i in character.get("inventory") or []
            if isinstance(i, dict)
        ],
        "skills": skills,
        "isDefending": bool(character.get("isDefending")),
    }
