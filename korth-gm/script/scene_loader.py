from typing import Dict, Any, List, Optional
import copy
import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


DEFAULT_DATA_ROOT = Path(__file__).resolve().parents[1] / "game-data"

# kind -> (file name, list key inside the file)
CONTENT_FILES = {
    "items": ("items.json", "items"),
    "skills": ("skills.json", "skills"),
    "classes": ("classes.json", "classes"),
    "enemies": ("enemies.json", "enemies"),
    "races": ("races.json", "races"),
    "backgrounds": ("backgrounds.json", "backgrounds"),
    "personalities": ("personalities.json", "personalities"),
    "nodes": ("story.json", "nodes"),
}


class ContentCatalog:
    """
    Read-only lookup of every static content table, keyed by string id:
    - items, skills, class presets
    - enemies (templates, never live instances)
    - story nodes + story graph metadata
    - races, backgrounds, personalities

    No game logic here. Pure data wiring. Every accessor returns a copy,
    so nothing the engine does can write back into the tables.
    """

    def __init__(self, data_root: Optional[str | Path] = None, data: Optional[Dict[str, Any]] = None):
        """
        data_root: directory holding the JSON files (default: game-data/)
        data: optional in-memory tables, same shape as the files (used by tests);
              any table present here is not read from disk
        """
        self.data_root = Path(data_root) if data_root else DEFAULT_DATA_ROOT
        self._data = data or {}

        self._cache: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._story_meta: Optional[Dict[str, Any]] = None

    # ──────────────────────────────────────────────
    # Public API
    # ──────────────────────────────────────────────

    def item(self, item_id: str) -> Dict[str, Any]:
        return self._get("items", item_id)

    def skill(self, skill_id: str) -> Dict[str, Any]:
        return self._get("skills", skill_id)

    def class_preset(self, class_name: str) -> Dict[str, Any]:
        return self._get("classes", class_name)

    def enemy(self, enemy_id: str) -> Dict[str, Any]:
        return self._get("enemies", enemy_id)

    def race(self, race_id: str) -> Dict[str, Any]:
        return self._get("races", race_id)

    def background(self, background_id: str) -> Dict[str, Any]:
        return self._get("backgrounds", background_id)

    def personality(self, personality_id: str) -> Dict[str, Any]:
        return self._get("personalities", personality_id)

    def node(self, node_id: str) -> Dict[str, Any]:
        return self._get("nodes", node_id)

    def ids(self, kind: str) -> List[str]:
        return list(self._table(kind).keys())

    def story(self) -> Dict[str, Any]:
        """
        Story graph metadata: start node, death node, victory routes.
        """
        if self._story_meta is None:
            raw = self._read("nodes")
            self._story_meta = {k: v for k, v in raw.items() if k != "nodes"}
        return copy.deepcopy(self._story_meta)

    # ──────────────────────────────────────────────
    # Lookup + caching
    # ──────────────────────────────────────────────

    def _get(self, kind: str, key: str) -> Dict[str, Any]:
        table = self._table(kind)
        if key not in table:
            raise KeyError(f"Unknown {kind} id: {key}")
        return copy.deepcopy(table[key])

    def _table(self, kind: str) -> Dict[str, Dict[str, Any]]:
        if kind in self._cache:
            return self._cache[kind]

        if kind not in CONTENT_FILES:
            raise KeyError(f"Unknown content kind: {kind}")

        _, list_key = CONTENT_FILES[kind]
        raw = self._read(kind)
        lookup = {entry.get("id"): entry for entry in raw.get(list_key, [])}
        self._cache[kind] = lookup
        logger.debug("Loaded %d %s", len(lookup), kind)
        return lookup

    def _read(self, kind: str) -> Dict[str, Any]:
        """
        In-memory tables win over files; files are <data_root>/<name>.json
        """
        filename, _ = CONTENT_FILES[kind]
        source_key = filename[: -len(".json")]
        if source_key in self._data:
            return self._data[source_key]

        path = self.data_root / filename
        if not path.exists():
            raise FileNotFoundError(f"Missing content file: {path}")

        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
