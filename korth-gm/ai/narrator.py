"""
Korth Narrator
--------------
Optional prose layer.
Consumes the structured log of one combat round or one story step and
returns a few sentences of restrained prose. Never touches game state.
"""

import json
import os
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"

# =========================
# VOICE CANON
# =========================

VOICE_CANON = """
You are narrating THE MINES OF KORTH, a revenge story.

Identity:
- You are the mine itself: old stone, wet dark, patient hunger.
- You watch a wounded hunter chase the thief Silas into your depths.

Tone:
- Grim. Terse. Unimpressed.
- No hero worship. No encouragement.

Truth discipline (mandatory):
- Describe only what is present in the log entries.
- Never change a number, a hit, a miss or an outcome.
- If data is missing, do not fill it in.

Style:
- Second person, present tense.
- Concrete sensory detail (steel, mud, torchlight, breath).
- Short sentences.

Output:
- 2 to 5 sentences.
- At most 80 words.
"""


ROUND_RULES = """
Round rules:
- Keep the order of events.
- A miss is a miss. A critical hit is a critical hit.
- If the enemy falls, end on the silence.
- If the hero falls, end on the fall.
"""


STORY_RULES = """
Story rules:
- Retell only the passage you are given.
- Do not reveal or suggest what lies ahead.
"""


def load_api_key() -> Optional[str]:
    # Environment first
    key = os.environ.get("OPENAI_API_KEY")
    if key:
        return key
    # fallback to korth-gm/apiKey file
    key_path = Path(__file__).resolve().parent.parent / "apiKey"
    if key_path.exists():
        val = key_path.read_text(encoding="utf-8").strip()
        if val:
            return val
    return None


def round_payload(events: List[Dict[str, Any]], scene_tag: str) -> Dict[str, Any]:
    """
    Strip log entries down to what the model may see.
    """
    return {
        "scene": scene_tag,
        "log": [{"text": e.get("text"), "category": e.get("category")} for e in events],
    }


# =========================
# NARRATOR
# =========================

class KorthNarrator:
    def __init__(self, openai_client, model: str = DEFAULT_MODEL):
        """
        openai_client: already-authenticated OpenAI client
        model: e.g. "gpt-4o-mini"
        """
        self.client = openai_client
        self.model = model

    def narrate(self, payload: Dict[str, Any], *, rules: str, scene_tag: Optional[str] = None) -> str:
        logger.debug("Narrating %s (%d entries)", scene_tag, len(payload.get("log", [])))
        user_prompt = f"""
{rules.strip()}

Scene: {scene_tag or "unspecified"}

Log entries:
{json.dumps(payload, indent=2)}

Narrate these events.
""".strip()

        response = self.client.responses.create(
            model=self.model,
            input=[
                {"role": "system", "content": VOICE_CANON.strip()},
                {"role": "user", "content": user_prompt},
            ],
            max_output_tokens=200,
        )
        return self._extract_text(response)

    def narrate_round(self, events: List[Dict[str, Any]]) -> str:
        """One combat round (player action + enemy reply)."""
        return self.narrate(round_payload(events, "combat"), rules=ROUND_RULES, scene_tag="combat")

    def narrate_story(self, events: List[Dict[str, Any]]) -> str:
        """One story transition."""
        return self.narrate(round_payload(events, "story"), rules=STORY_RULES, scene_tag="story")

    # =========================
    # INTERNALS
    # =========================

    def _extract_text(self, response) -> str:
        """
        Pull the text parts out of a Responses API result.
        """
        parts = []
        for item in response.output:
            if getattr(item, "type", None) == "message":
                for c in item.content:
                    if getattr(c, "type", None) == "output_text":
                        parts.append(c.text)

        return " ".join(parts).strip()
