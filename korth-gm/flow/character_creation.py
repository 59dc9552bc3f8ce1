from engine.character import (
    DEFAULT_NAME,
    build_character,
    list_backgrounds,
    list_classes,
    list_personalities,
    list_races,
)

CLASS_SUMMARIES = {
    "Warrior": "Sword and nerve. Heroic Slash hits hard but can miss.",
    "Rogue": "Dagger and patience. Shadow Shiv never misses.",
    "Mage": "Staff and fire. Fireball ignores armor; two potions.",
}


def _describe_mods(entry):
    mods = [f"{k} {v:+d}" for k, v in (entry.get("stats") or {}).items() if v]
    extras = list(entry.get("abilities", [])) + [f"item: {i}" for i in entry.get("items", [])]
    return ", ".join(mods + extras)


def prompt_option(ui, prompt, options, show_desc=None):
    labels = []
    for opt in options:
        desc = show_desc.get(opt) if show_desc else None
        labels.append(f"{opt} - {desc}" if desc else opt)
    return options[ui.choice(prompt, labels)]


def run_character_creation(catalog, ui):
    """
    Prompt for name, class, race, background and personality, then build.
    """
    name = ui.text_input(f"What is your name? (blank for {DEFAULT_NAME})")

    class_name = prompt_option(ui, "Choose your Class:", list_classes(catalog), CLASS_SUMMARIES)

    races = list_races(catalog)
    race = prompt_option(
        ui, "Choose your Race:", races, {r: _describe_mods(catalog.race(r)) for r in races}
    )

    backgrounds = list_backgrounds(catalog)
    background = prompt_option(
        ui, "Choose your Background:", backgrounds, {b: _describe_mods(catalog.background(b)) for b in backgrounds}
    )

    personalities = list_personalities(catalog)
    personality = prompt_option(
        ui,
        "Choose your Personality:",
        personalities,
        {p: catalog.personality(p).get("description", "") for p in personalities},
    )

    character = build_character(catalog, class_name, race, background, personality, name=name)

    return character
