"""Extraction of game records from HowLongToBeat pages.

The parser works on documents that were already fetched and parsed into a
BeautifulSoup tree. It performs no I/O and keeps no state between calls, so
one instance can be shared freely.
"""

from enum import Enum
from urllib.parse import parse_qs, urlparse

import structlog
from bs4 import BeautifulSoup, Comment, Tag

from ..models.game import GameRecord
from .durations import parse_time
from .errors import MalformedFieldError, StructuralMismatchError
from .similarity import calc_similarity

log = structlog.stdlib.get_logger()


class TimeCategory(Enum):
    """Play-time categories the record keeps."""
    MAIN = "main"
    COMPLETIONIST = "completionist"


MAIN_LABEL_PREFIXES = ("Main Story", "Single-Player", "Solo")
COMPLETIONIST_LABEL_PREFIXES = ("Completionist",)


def classify_label(label: str) -> TimeCategory | None:
    """Map a game time label to the category it fills, if any.

    Args:
        label: Label text such as ``"Main Story"`` or ``"Main + Extras"``

    Returns:
        The matching category, or None for labels that are not tracked
    """
    if label.startswith(MAIN_LABEL_PREFIXES):
        return TimeCategory.MAIN
    if label.startswith(COMPLETIONIST_LABEL_PREFIXES):
        return TimeCategory.COMPLETIONIST
    return None


def _attr(tag: Tag, name: str) -> str | None:
    value = tag.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    return value


class GameParser:
    """Parser for detail and search result pages of the catalog."""

    def __init__(self, base_url: str) -> None:
        """Initialize the parser.

        Args:
            base_url: Catalog base URL used to absolutize image paths
        """
        self.base_url: str = base_url

    def parse_detail(self, soup: BeautifulSoup, game_id: str) -> GameRecord:
        """Build a game record from a detail page.

        Args:
            soup: Parsed detail page
            game_id: The catalog id the page was requested for

        Returns:
            GameRecord with a similarity of 1.0

        Raises:
            StructuralMismatchError: If the header or cover image is missing
        """
        header = soup.select_one(".profile_header")
        if header is None:
            raise StructuralMismatchError(
                "Game header not found on detail page",
                field="profile_header",
                operation="parse_detail",
            )

        name = self._own_text(header)
        if not name:
            raise StructuralMismatchError(
                "Game header has no title text",
                field="profile_header",
                operation="parse_detail",
            )

        image = soup.select_one(".game_image img")
        image_src = _attr(image, "src") if image is not None else None
        if not image_src:
            raise StructuralMismatchError(
                "Cover image not found on detail page",
                field="game_image",
                operation="parse_detail",
            )

        main_hours = 0.0
        completionist_hours = 0.0

        # Later rows overwrite earlier ones of the same category
        for entry in soup.select(".game_times li"):
            label_node = entry.select_one("h5")
            value_node = entry.select_one("div")
            if label_node is None or value_node is None:
                log.debug("Skipping incomplete game time entry", game_id=game_id)
                continue

            label = label_node.get_text().strip()
            category = classify_label(label)
            if category is None:
                continue

            try:
                hours = parse_time(value_node.get_text())
            except MalformedFieldError as e:
                log.debug(
                    "Skipping malformed game time entry",
                    game_id=game_id,
                    label=label,
                    error=str(e),
                )
                continue

            if category is TimeCategory.MAIN:
                main_hours = hours
            else:
                completionist_hours = hours

        record = GameRecord(
            game_id=game_id,
            name=name,
            image_url=self.absolute_url(image_src),
            main_hours=main_hours,
            completionist_hours=completionist_hours,
            similarity=1.0,
        )
        log.debug("Detail page parsed", game_id=game_id, name=name)
        return record

    def parse_search(self, soup: BeautifulSoup, query: str) -> list[GameRecord]:
        """Build game records from a search results page.

        Args:
            soup: Parsed search results page
            query: The search term, used for the similarity of each result

        Returns:
            Records in the order the page lists them, empty when the page
            holds no results

        Raises:
            StructuralMismatchError: If a result item lacks its title anchor
                or thumbnail
        """
        if not soup.select("h3"):
            log.debug("No results heading found", query=query)
            return []

        records = [
            self._parse_search_item(item, query, position)
            for position, item in enumerate(soup.select("li"))
        ]

        log.debug("Search page parsed", query=query, results=len(records))
        return records

    def absolute_url(self, path: str) -> str:
        """Resolve an image path from the page against the base URL."""
        if path.startswith(("http://", "https://")):
            return path
        if path.startswith("//"):
            return f"https:{path}"
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    def _parse_search_item(self, item: Tag, query: str, position: int) -> GameRecord:
        """Build one record from a search result ``li`` element."""
        anchor = item.select_one("a")
        if anchor is None:
            raise StructuralMismatchError(
                f"Search result {position} has no title anchor",
                field="title_anchor",
                operation="parse_search",
            )

        name = (_attr(anchor, "title") or "").strip()
        href = _attr(anchor, "href")
        if not name or not href:
            raise StructuralMismatchError(
                f"Search result {position} anchor lacks title or href",
                field="title_anchor",
                operation="parse_search",
            )

        game_id = parse_qs(urlparse(href).query).get("id", [""])[0]
        if not game_id:
            raise StructuralMismatchError(
                f"Search result {position} link has no id parameter",
                field="href",
                operation="parse_search",
            )

        image = anchor.select_one("img")
        image_src = _attr(image, "src") if image is not None else None
        if not image_src:
            raise StructuralMismatchError(
                f"Search result {position} has no thumbnail",
                field="thumbnail",
                operation="parse_search",
            )

        try:
            main_hours, completionist_hours = self._parse_search_times(item)
        except MalformedFieldError as e:
            # Many catalog entries carry partial time blocks
            log.debug("Ignoring time block", game_id=game_id, error=str(e))
            main_hours, completionist_hours = 0.0, 0.0

        return GameRecord(
            game_id=game_id,
            name=name,
            image_url=self.absolute_url(image_src),
            main_hours=main_hours,
            completionist_hours=completionist_hours,
            similarity=calc_similarity(name, query),
        )

    @staticmethod
    def _parse_search_times(item: Tag) -> tuple[float, float]:
        """Read main and completionist hours from a result's details block.

        The block wraps one container whose children alternate between a
        label cell and its value cell.

        Raises:
            MalformedFieldError: If the block is missing or cannot be read
        """
        block = item.select_one(".search_list_details_block")
        if block is None:
            raise MalformedFieldError("Details block not found", field="search_list_details_block")

        container = block.find(True, recursive=False)
        if container is None:
            raise MalformedFieldError("Details block is empty", field="search_list_details_block")

        cells = container.find_all(True, recursive=False)
        main_hours = 0.0
        completionist_hours = 0.0

        for index in range(0, len(cells), 2):
            label = cells[index].get_text().strip()
            category = classify_label(label)
            if category is None:
                continue
            if index + 1 >= len(cells):
                raise MalformedFieldError("Time label without value", field=label)

            hours = parse_time(cells[index + 1].get_text())
            if category is TimeCategory.MAIN:
                main_hours = hours
            else:
                completionist_hours = hours

        return main_hours, completionist_hours

    @staticmethod
    def _own_text(tag: Tag) -> str:
        """Return the first non-blank text node directly inside the tag."""
        for node in tag.find_all(string=True, recursive=False):
            if isinstance(node, Comment):
                continue
            text = node.strip()
            if text:
                return text
        return ""
