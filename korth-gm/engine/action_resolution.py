import logging

from engine.apply import consume_item, damage_enemy, damage_player, heal_player, is_boss
from engine.character import first_weapon
from engine.dice import damage_range
from engine.stats import DEFEND_AC_BONUS, effective_ac, stat_mod
from ui.events import (
    COMBAT_HIT,
    COMBAT_INFO,
    COMBAT_MISS,
    DANGER,
    ENEMY_TURN,
    HEAL,
    PLAYER_TURN,
    SKILL_USE,
    SUCCESS,
    emit_log,
)

logger = logging.getLogger(__name__)

CRIT_ROLL = 20
UNARMED_DAMAGE = 2
WEAPON_DEFAULT_DAMAGE = 4

POTION_ID = "potion"
POTION_HEAL = 15
DEFEND_HEAL = (1, 3)

ENEMY_HIT_MOD = 2
BOSS_HIT_MOD = 5
BOSS_TAUNT_CHANCE = 0.3


def weapon_damage_die(player):
    weapon = first_weapon(player)
    if weapon is None:
        return UNARMED_DAMAGE
    return int(weapon.get("effectValue") or WEAPON_DEFAULT_DAMAGE)


def attack_roll(player, dice, penalty=0):
    """
    d20 + STR modifier (- penalty). Returns (total, d20_roll, modifier).
    """
    d20 = dice.d20()
    modifier = stat_mod(player["stats"]["str"]) - int(penalty or 0)
    return d20 + modifier, d20, modifier


def heal_with_flavor(player, amount, flavor, events, phase=PLAYER_TURN):
    new_hp = heal_player(player, amount)
    emit_log(
        events,
        f"{flavor} (+{amount} HP). Current: {new_hp}/{player['stats']['maxHp']}",
        HEAL,
        phase,
    )
    return new_hp


# ──────────────────────────────────────────────
# Player actions
# ──────────────────────────────────────────────

def resolve_attack(player, enemy, dice, events):
    total, d20, modifier = attack_roll(player, dice)
    crit = d20 == CRIT_ROLL
    roll_log = f"You rolled [{d20}] + {modifier} = {total} (vs AC {enemy['ac']})"
    result = {"action": "attack", "roll": d20, "total": total, "hit": False, "crit": crit, "damage": 0}

    if not (crit or total >= enemy["ac"]):
        emit_log(events, roll_log + " ...MISS", COMBAT_INFO, PLAYER_TURN)
        emit_log(events, f"Your attack glances off the {enemy['name']}.", COMBAT_MISS, PLAYER_TURN)
        return result

    dmg = max(0, dice.between(1, weapon_damage_die(player)) + modifier)
    if crit:
        dmg *= 2
        emit_log(events, roll_log + " ...CRITICAL HIT!", SUCCESS, PLAYER_TURN)
        hit_text = f"CRITICAL! Your strike finds a weak point for DOUBLE DAMAGE ({dmg})!"
    else:
        emit_log(events, roll_log + " ...HIT!", SUCCESS, PLAYER_TURN)
        hit_text = f"You strike the {enemy['name']} for {dmg} damage."

    result["hit"] = True
    result["damage"] = damage_enemy(enemy, dmg)
    emit_log(events, hit_text, COMBAT_HIT, PLAYER_TURN)
    return result


def _heavy_skill(player, enemy, skill, dice, events):
    """Low accuracy, big damage. Nothing on a miss."""
    total, _, _ = attack_roll(player, dice, penalty=skill.get("accuracyPenalty", 0))
    if total < enemy["ac"]:
        emit_log(events, f"You swing with all your might but miss! (Rolled {total})", COMBAT_MISS, PLAYER_TURN)
        return {"hit": False, "damage": 0, "total": total}
    dmg = dice.between(*damage_range(skill["damage"]))
    dealt = damage_enemy(enemy, dmg)
    emit_log(events, f"{skill['name'].upper()}! You crush the enemy for {dmg} massive damage!", COMBAT_HIT, PLAYER_TURN)
    return {"hit": True, "damage": dealt, "total": total}


def _stealth_skill(player, enemy, skill, dice, events):
    """Always connects; armor class is never consulted."""
    dmg = dice.between(*damage_range(skill["damage"]))
    dealt = damage_enemy(enemy, dmg)
    emit_log(events, f"{skill['name'].upper()}! You slip past defenses for {dmg} piercing damage.", COMBAT_HIT, PLAYER_TURN)
    return {"hit": True, "damage": dealt}


def _area_skill(player, enemy, skill, dice, events):
    """Always connects, biggest range; armor class is never consulted."""
    dmg = dice.between(*damage_range(skill["damage"]))
    dealt = damage_enemy(enemy, dmg)
    emit_log(events, f"{skill['name'].upper()}! The room explodes in flame! {dmg} damage!", COMBAT_HIT, PLAYER_TURN)
    return {"hit": True, "damage": dealt}


SKILL_RESOLVERS = {
    "heavy": _heavy_skill,
    "stealth": _stealth_skill,
    "area": _area_skill,
}


def resolve_skill(player, enemy, skill, dice, events):
    archetype = skill.get("archetype")
    if archetype not in SKILL_RESOLVERS:
        raise KeyError(f"Unknown skill archetype: {archetype}")
    emit_log(events, f"USING SKILL: {skill['name']}", SKILL_USE, PLAYER_TURN)
    result = SKILL_RESOLVERS[archetype](player, enemy, skill, dice, events)
    result.update({"action": "skill", "skill": skill["id"]})
    return result


def resolve_heal(player, events):
    potion = consume_item(player, POTION_ID)
    amount = int((potion or {}).get("effectValue") or POTION_HEAL)
    heal_with_flavor(player, amount, "You down the bitter crimson liquid.", events)
    return {"action": "heal", "amount": amount}


def resolve_defend(player, dice, events):
    amount = dice.between(*DEFEND_HEAL)
    emit_log(
        events,
        f"TACTICAL DEFENSE: You raise your guard (+{DEFEND_AC_BONUS} AC) and catch your breath.",
        COMBAT_INFO,
        PLAYER_TURN,
    )
    heal_with_flavor(player, amount, "You bind your wounds.", events)
    player["isDefending"] = True
    return {"action": "defend", "amount": amount}


# ──────────────────────────────────────────────
# Enemy reply
# ──────────────────────────────────────────────

def enemy_turn(player, enemy, dice, events):
    """
    One retaliation. Returns a summary; `lethal` is True when the player drops to 0.
    """
    result = {"hit": False, "damage": 0, "lethal": False, "taunt": None}
    if player["stats"]["currentHp"] <= 0:
        return result

    base_ac = player["stats"]["ac"]
    target_ac = effective_ac(player)
    defending = bool(player.get("isDefending"))
    if defending:
        emit_log(events, f"(Defense Active: AC {base_ac} -> {target_ac})", COMBAT_INFO, ENEMY_TURN)

    d20 = dice.d20()
    hit_mod = BOSS_HIT_MOD if is_boss(enemy) else ENEMY_HIT_MOD
    total = d20 + hit_mod
    result.update({"roll": d20, "total": total, "targetAc": target_ac})

    if is_boss(enemy) and enemy.get("taunts") and dice.chance(BOSS_TAUNT_CHANCE):
        taunt = dice.pick(enemy["taunts"])
        result["taunt"] = taunt
        emit_log(events, f"{enemy.get('taunter', enemy['name'])} shouts: {taunt}", DANGER, ENEMY_TURN)

    roll_log = f"{enemy['name']} rolled [{d20}] + {hit_mod} = {total}"
    if total < target_ac:
        emit_log(events, roll_log + " ...MISS", COMBAT_INFO, ENEMY_TURN)
        if defending:
            emit_log(events, "CLANG! Your defensive stance blocks the attack!", SUCCESS, ENEMY_TURN)
        else:
            emit_log(events, f"The {enemy['name']} swings wide!", SUCCESS, ENEMY_TURN)
        return result

    dmg = dice.between(enemy["damageMin"], enemy["damageMax"])
    result["hit"] = True
    result["damage"] = damage_player(player, dmg)
    emit_log(events, roll_log + " ...HIT!", DANGER, ENEMY_TURN)
    if player["stats"]["currentHp"] <= 0:
        result["lethal"] = True
        emit_log(events, f"FATAL BLOW! The {enemy['name']} ends your journey.", COMBAT_HIT, ENEMY_TURN)
        logger.info("Player slain by %s", enemy["id"])
    else:
        emit_log(events, f"The {enemy['name']} strikes you for {dmg} damage.", COMBAT_HIT, ENEMY_TURN)
    return result
