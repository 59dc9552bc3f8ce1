from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ui.events import ENEMY_TURN


class UIProvider(ABC):
    """
    UI abstraction. The engine returns log entries; the provider renders them.
    Providers never call back into the engine.
    """

    @abstractmethod
    def log(self, entry: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    def error(self, text: str, data: Optional[Dict[str, Any]] = None) -> None:
        pass

    @abstractmethod
    def choice(
        self,
        prompt: str,
        options: List[str],
        data: Optional[Dict[str, Any]] = None,
    ) -> int:
        """
        Returns the 0-based index of the selected option.
        """
        pass

    @abstractmethod
    def text_input(
        self,
        prompt: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Returns raw string input (names only; prefer choice()).
        """
        pass

    def pause(self, seconds: float) -> None:
        pass

    def render(self, events: List[Dict[str, Any]], delay: float = 0.0) -> None:
        """
        Render entries in order, pausing once where the enemy's half of a
        combat round begins.
        """
        previous = None
        for entry in events:
            phase = entry.get("phase")
            if delay and phase == ENEMY_TURN and previous != ENEMY_TURN:
                self.pause(delay)
            previous = phase
            self.log(entry)
