"""
Central place to host process-wide configuration and singletons
(content directory, dice seed, CLI pacing, narration manager).
"""
import logging
import os
from pathlib import Path

from openai import OpenAI, OpenAIError

from ai.narrator import DEFAULT_MODEL, KorthNarrator, load_api_key
from engine.narration_manager import NarrationManager
from script.scene_loader import DEFAULT_DATA_ROOT

logger = logging.getLogger(__name__)


def _env_int(name, default=None):
    raw = os.environ.get(name)
    if raw in (None, ""):
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", name, raw)
        return default


def _env_float(name, default):
    raw = os.environ.get(name)
    if raw in (None, ""):
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r", name, raw)
        return default


DATA_DIR = Path(os.environ.get("KORTH_DATA_DIR") or DEFAULT_DATA_ROOT)
SEED = _env_int("KORTH_SEED")
TURN_DELAY = max(0.0, _env_float("KORTH_TURN_DELAY", 0.8))
NARRATOR_MODEL = os.environ.get("KORTH_NARRATOR_MODEL") or DEFAULT_MODEL
LOG_LEVEL = (os.environ.get("KORTH_LOG_LEVEL") or "WARNING").upper()


def build_narration():
    """
    Returns a NarrationManager, or None when no key is configured.
    """
    api_key = load_api_key()
    if not api_key:
        logger.warning("No API key found in env or apiKey file; narration disabled.")
        return None
    try:
        client = OpenAI(api_key=api_key)
    except OpenAIError as e:
        logger.error("Failed to initialize narrator: %s", e)
        return None
    return NarrationManager(KorthNarrator(client, model=NARRATOR_MODEL))


NARRATION = build_narration()
