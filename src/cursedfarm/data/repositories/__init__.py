"""Repository exports."""

from .curses_repo import CursesRepository
from .items_repo import ItemsRepository
from .rooms_repo import RoomsRepository
from .story_repo import StoryRepository

__all__ = [
    "CursesRepository",
    "ItemsRepository",
    "RoomsRepository",
    "StoryRepository",
]
