"""Game-related data models."""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class GameRecord:
    """Play-time data for one game as listed by the catalog."""
    game_id: str  # Opaque catalog id, digits in practice
    name: str
    image_url: str
    main_hours: float = 0.0  # 0 when unknown
    completionist_hours: float = 0.0  # 0 when unknown
    similarity: float = 1.0  # 0-1 scale, 1.0 for detail pages

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready mapping of the record."""
        return asdict(self)
