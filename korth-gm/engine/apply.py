import logging

from engine.stats import clamp_hp

logger = logging.getLogger(__name__)

BOSS_TIER = "boss"


def instantiate_enemy(catalog, enemy_id):
    """
    Build a live encounter instance: an owned copy of the template whose hp
    may change. The catalog template itself is never touched.
    """
    enemy_def = catalog.enemy(enemy_id)
    max_hp = int(enemy_def.get("maxHp") or enemy_def.get("hp") or 1)
    hp = int(enemy_def.get("hp") or max_hp)
    return {
        "id": enemy_def.get("id", enemy_id),
        "name": enemy_def.get("name", "Enemy"),
        "hp": clamp_hp(hp, max_hp),
        "maxHp": max_hp,
        "ac": int(enemy_def.get("ac", 10)),
        "damageMin": int(enemy_def.get("damageMin", 1)),
        "damageMax": int(enemy_def.get("damageMax", 1)),
        "xpValue": int(enemy_def.get("xpValue", 0) or 0),
        "tier": enemy_def.get("tier", "regular"),
        "taunter": enemy_def.get("taunter") or enemy_def.get("name", "Enemy"),
        "taunts": list(enemy_def.get("taunts", [])),
    }


def is_boss(enemy):
    return enemy.get("tier") == BOSS_TIER


def damage_enemy(enemy, amount):
    """
    Returns the hp actually removed. hp never drops below 0.
    """
    amount = max(0, int(amount))
    before = enemy["hp"]
    enemy["hp"] = clamp_hp(before - amount, enemy["maxHp"])
    return before - enemy["hp"]


def wound_enemy(enemy, amount):
    """
    Opening damage dealt outside combat; always leaves the enemy standing.
    """
    amount = max(0, int(amount))
    enemy["hp"] = max(1, enemy["hp"] - amount)
    return enemy


def damage_player(player, amount):
    stats = player["stats"]
    amount = max(0, int(amount))
    before = stats["currentHp"]
    stats["currentHp"] = clamp_hp(before - amount, stats["maxHp"])
    return before - stats["currentHp"]


def heal_player(player, amount):
    """
    Returns the player's new current hp (bounded by max hp).
    """
    stats = player["stats"]
    stats["currentHp"] = clamp_hp(stats["currentHp"] + max(0, int(amount)), stats["maxHp"])
    return stats["currentHp"]


def add_item(player, item):
    player.setdefault("inventory", []).append(item)
    return item


def consume_item(player, item_id):
    """
    Removes the first matching item. Returns it, or None if absent.
    """
    inventory = player.get("inventory", [])
    for idx, item in enumerate(inventory):
        if item.get("id") == item_id:
            return inventory.pop(idx)
    return None


def is_dead(player):
    return player["stats"]["currentHp"] <= 0
