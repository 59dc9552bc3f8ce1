COMBAT_ACTIONS = ("attack", "skill", "heal", "defend")


def list_usable_skills(player):
    usable = []
    cooldowns = player.get("cooldowns", {})
    for skill in player.get("skills", []):
        if cooldowns.get(skill.get("id"), 0) == 0:
            usable.append(skill.get("id"))
    return usable


def allowed_actions(player, combat_state):
    if not combat_state.get("active"):
        return []
    actions = ["attack", "defend"]
    actions += [f"skill:{s}" for s in list_usable_skills(player)]
    if any(i.get("id") == "potion" for i in player.get("inventory", [])):
        actions.append("heal")
    return actions


def tick_cooldowns(player):
    """
    Runs once per player action, never per round.
    """
    cooldowns = player.setdefault("cooldowns", {})
    for skill_id, cd in list(cooldowns.items()):
        if cd > 0:
            cooldowns[skill_id] = max(0, cd - 1)


def start_player_action(player):
    tick_cooldowns(player)
    # Defense only covers the enemy turn right after it was raised.
    player["isDefending"] = False


def set_cooldown(player, skill):
    player.setdefault("cooldowns", {})[skill["id"]] = int(skill.get("cooldownMax", 0) or 0)


def reset_cooldowns(player):
    cooldowns = player.setdefault("cooldowns", {})
    for skill_id in set(cooldowns) | {s["id"] for s in player.get("skills", [])}:
        cooldowns[skill_id] = 0
