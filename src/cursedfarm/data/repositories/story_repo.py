"""Narrative store backed by the block-delimited story text file."""
from __future__ import annotations

import logging
import re
from typing import Dict, Mapping

from cursedfarm.data.json_loader import load_text
from cursedfarm.data.repositories.base import RepositoryBase
from cursedfarm.domain.state import GameState

logger = logging.getLogger(__name__)

_BLOCK_PATTERN = re.compile(r"\[([^\]]+)\]([\s\S]*?)\[END\]")
DEFAULT_PLAYER_NAME = "Adventurer"
CRITICAL_BLOCKS = ("game_intro", "game_over", "game_win")


def parse_story_text(text: str) -> Dict[str, str]:
    """Split ``[key] ... [END]`` blocks into a key to text mapping."""
    blocks: Dict[str, str] = {}
    for match in _BLOCK_PATTERN.finditer(text):
        blocks[match.group(1).strip()] = match.group(2).strip()
    return blocks


class StoryRepository(RepositoryBase[str]):
    """Resolves story keys to display text, never failing on a missing key."""

    def __init__(self, base_path=None, *, filename: str = "story.txt") -> None:
        super().__init__(filename, base_path)

    def _load_raw(self) -> dict[str, object]:
        blocks = parse_story_text(load_text(self._get_file_path()))
        missing = [key for key in CRITICAL_BLOCKS if key not in blocks]
        if missing:
            logger.warning("Story file is missing critical blocks: %s", missing)
        return dict(blocks)

    def _build(self, raw: dict[str, object]) -> Dict[str, str]:
        return {key: str(value) for key, value in raw.items()}

    def has_story_text(self, key: str) -> bool:
        return self.find(key) is not None

    def get_story_text(self, key: str) -> str:
        """Return the block text, or a visible placeholder when it is missing."""
        text = self.find(key)
        if text is None:
            logger.warning("Story block not found: %s", key)
            return f'[Story block "{key}" not found. This might be a bug.]'
        return text

    def render(self, key: str, state: GameState, context: Mapping[str, str] | None = None) -> str:
        """Return the block text with ``{playerName}`` and context placeholders filled in."""
        full_name = state.character_name.strip() or DEFAULT_PLAYER_NAME
        text = self.get_story_text(key).replace("{playerName}", full_name.split(" ")[0])
        for name, value in (context or {}).items():
            text = text.replace(f"{{{name}}}", value)
        return text
