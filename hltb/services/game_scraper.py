"""Game scraping service tying the HTTP client to the page parser."""

import structlog
from bs4 import BeautifulSoup

from ..models.config import AppConfig
from ..models.game import GameRecord
from .errors import StructuralMismatchError, ValidationError
from .game_parser import GameParser
from .http_client import HttpClientService

log = structlog.stdlib.get_logger()


class GameScraperService:
    """Service for looking up play times on HowLongToBeat."""

    def __init__(
        self,
        http_client: HttpClientService,
        config: AppConfig | None = None,
    ) -> None:
        """Initialize the game scraper service.

        Args:
            http_client: HTTP client service for making requests
            config: Application configuration holding the catalog URLs
        """
        self.http_client: HttpClientService = http_client
        self.config: AppConfig = config or AppConfig()
        self.parser: GameParser = GameParser(self.config.base_url)

        log.debug("Game scraper service initialized", base_url=self.config.base_url)

    async def detail(self, game_id: str) -> GameRecord:
        """Fetch and parse the detail page of a game.

        Args:
            game_id: The catalog's internal game id

        Returns:
            GameRecord for the game

        Raises:
            ValidationError: If the game id is empty
            StructuralMismatchError: If the page does not look like a detail page
            httpx.HTTPError: If the page cannot be fetched
        """
        game_id = game_id.strip()
        if not game_id:
            raise ValidationError("Game id must not be empty", field="game_id", value=game_id)

        url = self.config.detail_url(game_id)
        log.debug("Fetching game details", game_id=game_id, url=url)

        response = await self.http_client.get(url)
        soup = BeautifulSoup(response.text, "html.parser")

        try:
            record = self.parser.parse_detail(soup, game_id)
        except StructuralMismatchError as e:
            log.error("Detail page did not match expected layout", url=url, field=e.field)
            raise e.with_url(url) from e

        log.info(
            "Game details scraped successfully",
            game_id=game_id,
            name=record.name,
            main_hours=record.main_hours,
            completionist_hours=record.completionist_hours,
        )
        return record

    async def search(self, query: str) -> list[GameRecord]:
        """Search the catalog and parse the results page.

        Args:
            query: Free-text search term

        Returns:
            Records in the order the catalog lists them

        Raises:
            ValidationError: If the query is blank
            StructuralMismatchError: If a result item cannot be read
            httpx.HTTPError: If the search request fails
        """
        if not query.strip():
            raise ValidationError("Search query must not be empty", field="query", value=query)

        url = self.config.search_url
        log.debug("Searching catalog", query=query, url=url)

        response = await self.http_client.post(url, data=self._search_form(query))
        soup = BeautifulSoup(response.text, "html.parser")

        try:
            records = self.parser.parse_search(soup, query)
        except StructuralMismatchError as e:
            log.error("Search page did not match expected layout", url=url, field=e.field)
            raise e.with_url(url) from e

        log.info("Search completed", query=query, results=len(records))
        return records

    @staticmethod
    def _search_form(query: str) -> dict[str, str]:
        """Form fields the catalog's search endpoint expects."""
        return {
            "queryString": query,
            "t": "games",
            "sorthead": "popular",
            "sortd": "Normal Order",
            "plat": "",
            "length_type": "main",
            "length_min": "",
            "length_max": "",
            "detail": "0",
        }
