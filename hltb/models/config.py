"""Configuration data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AppConfig:
    """Application configuration settings."""
    base_url: str = "https://howlongtobeat.com"
    detail_path: str = "game.php?id="
    search_path: str = "search_main.php"
    request_delay: float = 1.0
    timeout: float = 30.0
    max_retries: int = 3
    log_level: str = "INFO"

    def detail_url(self, game_id: str) -> str:
        """Build the detail page URL for a catalog id."""
        return f"{self.base_url.rstrip('/')}/{self.detail_path}{game_id}"

    @property
    def search_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.search_path}"
