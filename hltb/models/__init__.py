"""Data models for the HowLongToBeat scraper."""

from .config import AppConfig
from .game import GameRecord

__all__ = [
    "AppConfig",
    "GameRecord",
]
