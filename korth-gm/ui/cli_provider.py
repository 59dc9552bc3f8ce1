from __future__ import annotations

import time
from typing import Any, Dict, List, Optional

from ui.events import (
    COMBAT_HIT,
    COMBAT_INFO,
    COMBAT_MISS,
    DANGER,
    HEAL,
    LOOT,
    NARRATIVE,
    SKILL_USE,
    SUCCESS,
)
from ui.provider import UIProvider

PREFIXES = {
    COMBAT_HIT: "[HIT] ",
    COMBAT_MISS: "[MISS] ",
    COMBAT_INFO: "  ",
    HEAL: "[+] ",
    LOOT: "[*] ",
    DANGER: "[!] ",
    SUCCESS: "[OK] ",
    SKILL_USE: "[SKILL] ",
}


class CLIProvider(UIProvider):
    def log(self, entry: Dict[str, Any]) -> None:
        category = entry.get("category", NARRATIVE)
        text = entry.get("text", "")
        if category == NARRATIVE:
            print()
            print(text)
            print()
            return
        print(f"{PREFIXES.get(category, '')}{text}")

    def error(self, text: str, data: Optional[Dict[str, Any]] = None) -> None:
        print(f"[ERROR] {text}")

    def choice(self, prompt: str, options: List[str], data: Optional[Dict[str, Any]] = None) -> int:
        print()
        if prompt:
            print(prompt)
        for i, opt in enumerate(options, start=1):
            print(f"{i}. {opt}")

        while True:
            raw = input("> ").strip()
            try:
                sel = int(raw)
                if 1 <= sel <= len(options):
                    return sel - 1
            except ValueError:
                pass
            self.error(f"Enter a number from 1 to {len(options)}.")

    def text_input(self, prompt: str, data: Optional[Dict[str, Any]] = None) -> str:
        print()
        return input(f"{prompt}\n> ").strip()

    def pause(self, seconds: float) -> None:
        time.sleep(seconds)
