"""
Narration Manager
-----------------
Decides when the optional narrator is asked for prose.
Consumes engine log entries.
Never alters game state.
"""

import logging
from typing import Any, Dict, List, Optional

from openai import OpenAIError

logger = logging.getLogger(__name__)


class NarrationManager:
    def __init__(self, narrator):
        """
        narrator: KorthNarrator instance
        """
        self.narrator = narrator
        self.enabled = True

    # =========================
    # COMBAT ROUND
    # =========================

    def combat_round(self, events: List[Dict[str, Any]]) -> Optional[str]:
        if not self.enabled or not events:
            return None
        return self._safe(self.narrator.narrate_round, events)

    # =========================
    # STORY STEP
    # =========================

    def story_step(self, events: List[Dict[str, Any]]) -> Optional[str]:
        if not self.enabled or not events:
            return None
        return self._safe(self.narrator.narrate_story, events)

    # =========================
    # CONTROL
    # =========================

    def disable(self):
        self.enabled = False

    def enable(self):
        self.enabled = True

    def _safe(self, fn, events) -> Optional[str]:
        try:
            text = fn(events)
        except OpenAIError as e:
            logger.error("Narration failed: %s", e)
            return None
        return text or None
