import copy
import logging

from engine.stats import sum_stats

logger = logging.getLogger(__name__)

DEFAULT_NAME = "Adventurer"
PLAYABLE_CLASSES = ("Warrior", "Rogue", "Mage")

DEFAULT_VISUALS = {
    "skinColor": "#fca5a5",
    "hairColor": "#334155",
    "hairStyle": 1,
    "accessory": 0,
}


def list_classes(catalog):
    return [c for c in catalog.ids("classes") if c in PLAYABLE_CLASSES]


def list_races(catalog):
    return catalog.ids("races")


def list_backgrounds(catalog):
    return catalog.ids("backgrounds")


def list_personalities(catalog):
    return catalog.ids("personalities")


def build_runtime_skill(skill):
    return {
        "id": skill["id"],
        "name": skill.get("name", skill["id"]),
        "description": skill.get("description", ""),
        "type": skill.get("type", "ATTACK"),
        "archetype": skill.get("archetype"),
        "cooldownMax": int(skill.get("cooldownMax", 0) or 0),
        "damage": list(skill.get("damage", [0, 0])),
        "accuracyPenalty": int(skill.get("accuracyPenalty", 0) or 0),
    }


def _loadout(catalog, class_name):
    preset = catalog.class_preset(class_name)
    items = [catalog.item(item_id) for item_id in preset.get("items", [])]
    skills = [build_runtime_skill(catalog.skill(skill_id)) for skill_id in preset.get("skills", [])]
    return preset, items, skills


def novice_player(name=DEFAULT_NAME):
    """
    The placeholder hero before a class is chosen.
    """
    return {
        "name": name,
        "race": None,
        "background": None,
        "personality": None,
        "className": "Novice",
        "visuals": dict(DEFAULT_VISUALS),
        "passiveAbilities": [],
        "stats": {"str": 10, "dex": 10, "int": 10, "maxHp": 10, "currentHp": 10, "ac": 10},
        "xp": 0,
        "level": 1,
        "inventory": [],
        "skills": [],
        "cooldowns": {},
        "isDefending": False,
    }


def build_character(
    catalog,
    class_name,
    race,
    background,
    personality,
    visuals=None,
    name=None,
):
    """
    Merge class preset + race modifiers + background modifiers into a fresh player.
    Unknown keys raise KeyError from the catalog.
    """
    preset, class_items, skills = _loadout(catalog, class_name)
    race_info = catalog.race(race)
    bg_info = catalog.background(background)
    catalog.personality(personality)

    stats = sum_stats(preset.get("stats"), race_info.get("stats"), bg_info.get("stats"))
    bg_items = [catalog.item(item_id) for item_id in bg_info.get("items", [])]

    player = {
        "name": (name or "").strip() or DEFAULT_NAME,
        "race": race,
        "background": background,
        "personality": personality,
        "className": class_name,
        "visuals": dict(visuals) if visuals else dict(DEFAULT_VISUALS),
        "passiveAbilities": list(race_info.get("abilities", [])),
        "stats": stats,
        "xp": 0,
        "level": 1,
        "inventory": class_items + bg_items,
        "skills": skills,
        "cooldowns": {s["id"]: 0 for s in skills},
        "isDefending": False,
    }
    logger.info("Built %s %s %s (%s)", race, background, class_name, player["name"])
    return player


def grant_loadout(catalog, player, class_name):
    """
    Overwrite stats, inventory and skills with a class preset.
    Only used by the opening choice of the story.
    """
    preset, items, skills = _loadout(catalog, class_name)
    player["className"] = class_name
    player["stats"] = copy.deepcopy(preset["stats"])
    player["stats"]["currentHp"] = player["stats"]["maxHp"]
    player["inventory"] = items
    player["skills"] = skills
    player["cooldowns"] = {s["id"]: 0 for s in skills}
    return player


def count_items(player, item_id):
    return sum(1 for item in player.get("inventory", []) if item.get("id") == item_id)


def first_weapon(player):
    return next((i for i in player.get("inventory", []) if i.get("type") == "WEAPON"), None)
