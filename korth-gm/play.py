import argparse
import logging

import game_context
from engine.dice import Dice
from engine.validator import ContractError
from flow.character_creation import run_character_creation
from game_session import GameSession
from script.scene_loader import ContentCatalog
from ui.cli_provider import CLIProvider

logger = logging.getLogger(__name__)

ACTION_LABELS = {
    "attack": "Attack",
    "defend": "Defend (+5 AC, bind wounds)",
    "heal": "Drink a potion",
}


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="The Mines of Korth")
    parser.add_argument("--quick", action="store_true", help="Skip character creation and start as a novice.")
    parser.add_argument("--narrate", dest="narrate", action="store_true", help="Enable narration (off by default).")
    parser.add_argument("--nonarrate", dest="narrate", action="store_false", help="Disable narration (default).")
    parser.set_defaults(narrate=False)
    parser.add_argument("--seed", type=int, default=game_context.SEED, help="Seed the dice for a reproducible run.")
    parser.add_argument("--delay", type=float, default=game_context.TURN_DELAY, help="Pause before the enemy's turn.")
    args, _ = parser.parse_known_args(argv)
    return args


def build_menu(session):
    """
    Returns [(label, payload or None)] for the current state; None = unselectable.
    """
    snap = session.snapshot()
    if snap["isDead"] or snap["node"]["isEnd"]:
        return [("Restart", {"action": "restart"}), ("Quit", {"action": "quit"})]

    if snap["combat"]["active"]:
        player = session.player
        menu = []
        for action in snap["combat"]["actions"]:
            if action.startswith("skill:"):
                skill_id = action.split(":", 1)[1]
                skill = next(s for s in player["skills"] if s["id"] == skill_id)
                menu.append((f"{skill['name']} ({skill['description']})", {"action": "skill", "skill": skill_id}))
            elif action == "heal":
                menu.append((f"{ACTION_LABELS['heal']} (x{snap['potions']})", {"action": "heal"}))
            else:
                menu.append((ACTION_LABELS[action], {"action": action}))
        for skill in player["skills"]:
            remaining = player["cooldowns"].get(skill["id"], 0)
            if remaining:
                menu.append((f"{skill['name']} [cooldown {remaining}]", None))
        return menu

    menu = []
    for choice in snap["choices"]:
        if choice["available"]:
            menu.append((choice["text"], {"action": "choose", "choice": choice["index"]}))
        else:
            menu.append((f"{choice['text']} [LOCKED: {choice['requirement']}]", None))
    return menu


def status_line(session):
    snap = session.snapshot()
    hp = snap["player"]["hp"]
    line = f"{snap['player']['name']} ({snap['player']['className']}) HP {hp['current']}/{hp['max']}"
    enemy = snap["combat"].get("enemy")
    if enemy:
        line += f" | {enemy['name']} HP {enemy['hp']['current']}/{enemy['hp']['max']}"
    return line


def run(session, ui, delay=0.0):
    ui.render(session.start(), delay)
    while True:
        menu = build_menu(session)
        idx = ui.choice(status_line(session), [label for label, _ in menu])
        payload = menu[idx][1]
        if payload is None:
            ui.error("That path is closed to you.")
            continue
        if payload["action"] == "quit":
            return
        try:
            events = session.step(payload)
        except ContractError as e:
            ui.error(str(e))
            continue
        ui.render(events, delay)


def main(argv=None):
    logging.basicConfig(
        level=getattr(logging, game_context.LOG_LEVEL, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args = parse_args(argv)
    ui = CLIProvider()
    catalog = ContentCatalog(game_context.DATA_DIR)

    narration = game_context.NARRATION if args.narrate else None
    if args.narrate and not narration:
        ui.error("Narration requested but no API key is configured.")

    player = None if args.quick else run_character_creation(catalog, ui)
    logger.info("Starting run (seed=%s, narrate=%s)", args.seed, bool(narration))
    session = GameSession(catalog, player=player, dice=Dice.seeded(args.seed), narration=narration)
    run(session, ui, delay=args.delay)


if __name__ == "__main__":
    main()
