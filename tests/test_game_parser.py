"""Tests for detail and search page parsing."""

import pytest
from bs4 import BeautifulSoup
from hypothesis import given, strategies as st

from hltb.models.game import GameRecord
from hltb.services.errors import StructuralMismatchError
from hltb.services.game_parser import GameParser, TimeCategory, classify_label


BASE_URL = "https://catalog.example"


def soup_of(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def create_detail_page_html(
    name: str | None = "Celeste",
    image_src: str | None = "/games/celeste.jpg",
    times: list[tuple[str, str]] | None = None,
) -> str:
    """Create mock HTML for a game detail page."""
    header = f'<div class="profile_header shadow_text">{name}</div>' if name is not None else ""
    image = f'<div class="game_image"><img src="{image_src}" alt="Box Art"></div>' if image_src is not None else ""
    time_list = ""
    if times is not None:
        entries = "".join(f"<li><h5>{label}</h5><div>{value}</div></li>" for label, value in times)
        time_list = f'<div class="game_times"><ul>{entries}</ul></div>'

    return f"""
    <html>
        <body>
            {header}
            {image}
            {time_list}
        </body>
    </html>
    """


def create_search_item_html(
    game_id: str,
    title: str,
    image_src: str = "gameimages/cover.jpg",
    times: list[tuple[str, str]] | None = None,
) -> str:
    """Create mock HTML for one search result item."""
    details = ""
    if times is not None:
        cells = "\n".join(
            f'<div class="search_list_tidbit text_white shadow_text">{label}</div>\n'
            f'<div class="search_list_tidbit center time_100">{value} </div>'
            for label, value in times
        )
        details = f'<div class="search_list_details_block">\n<div>\n{cells}\n</div>\n</div>'

    return f"""
    <li class="back_darkish">
        <div class="search_list_image">
            <a title="{title}" href="game.php?id={game_id}"><img alt="Box Art" src="{image_src}" /></a>
        </div>
        <div class="search_list_details">
            <h3 class="shadow_text"><a class="text_green" title="{title}" href="game.php?id={game_id}">{title}</a></h3>
            {details}
        </div>
    </li>
    """


def create_search_page_html(items: list[str]) -> str:
    return f"""
    <h3 class="head_padding shadow_box back_blue center">We Found {len(items)} Games</h3>
    <ul>
        {"".join(items)}
    </ul>
    """


@pytest.fixture
def parser() -> GameParser:
    return GameParser(BASE_URL)


class TestClassifyLabel:
    """Label classification rules shared by both page types."""

    @pytest.mark.parametrize(
        "label",
        ["Main Story", "Single-Player", "Solo", "Main Story (Rushed)", "Solo Polled"],
    )
    def test_main_labels(self, label: str) -> None:
        assert classify_label(label) is TimeCategory.MAIN

    def test_completionist_label(self) -> None:
        assert classify_label("Completionist") is TimeCategory.COMPLETIONIST

    @pytest.mark.parametrize(
        "label",
        ["Main + Extras", "Co-Op", "Vs.", "All PlayStyles", "main story", "completionist"],
    )
    def test_other_labels_are_ignored(self, label: str) -> None:
        assert classify_label(label) is None


class TestParseDetail:
    """Detail page extraction."""

    def test_celeste_example(self, parser: GameParser) -> None:
        html = create_detail_page_html(
            times=[("Main Story", "8 Hours"), ("Completionist", "20½ Hours")],
        )

        record = parser.parse_detail(soup_of(html), "42818")

        assert record == GameRecord(
            game_id="42818",
            name="Celeste",
            image_url=BASE_URL + "/games/celeste.jpg",
            main_hours=8,
            completionist_hours=20.5,
            similarity=1.0,
        )

    def test_name_is_trimmed(self, parser: GameParser) -> None:
        html = create_detail_page_html(name="\n   Hollow Knight  \n")

        record = parser.parse_detail(soup_of(html), "1")

        assert record.name == "Hollow Knight"

    def test_name_ignores_nested_markup(self, parser: GameParser) -> None:
        html = create_detail_page_html(name="Portal 2 <span>(2011)</span>")

        record = parser.parse_detail(soup_of(html), "1")

        assert record.name == "Portal 2"

    def test_missing_time_list_defaults_to_zero(self, parser: GameParser) -> None:
        record = parser.parse_detail(soup_of(create_detail_page_html(times=None)), "1")

        assert record.main_hours == 0
        assert record.completionist_hours == 0

    def test_alternative_main_labels(self, parser: GameParser) -> None:
        html = create_detail_page_html(times=[("Single-Player", "12 Hours"), ("Co-Op", "30 Hours")])

        record = parser.parse_detail(soup_of(html), "1")

        assert record.main_hours == 12
        assert record.completionist_hours == 0

    def test_last_matching_label_wins(self, parser: GameParser) -> None:
        html = create_detail_page_html(
            times=[("Main Story", "10 Hours"), ("Solo", "14½ Hours"), ("Completionist", "--")],
        )

        record = parser.parse_detail(soup_of(html), "1")

        assert record.main_hours == 14.5
        assert record.completionist_hours == 0

    def test_ranges_are_averaged(self, parser: GameParser) -> None:
        html = create_detail_page_html(times=[("Main Story", "5 Hours - 12 Hours")])

        record = parser.parse_detail(soup_of(html), "1")

        assert record.main_hours == 8.5

    def test_malformed_entry_does_not_affect_others(self, parser: GameParser) -> None:
        html = create_detail_page_html(
            times=[("Main Story", "9 Hours"), ("Completionist", "lots"), ("Solo", "not known")],
        )

        record = parser.parse_detail(soup_of(html), "1")

        assert record.main_hours == 9
        assert record.completionist_hours == 0

    def test_ignored_labels_are_not_parsed(self, parser: GameParser) -> None:
        html = create_detail_page_html(
            times=[("Main + Extras", "???"), ("Completionist", "40 Hours")],
        )

        record = parser.parse_detail(soup_of(html), "1")

        assert record.completionist_hours == 40

    def test_incomplete_entry_is_skipped(self, parser: GameParser) -> None:
        html = """
        <div class="profile_header">Celeste</div>
        <div class="game_image"><img src="/games/celeste.jpg"></div>
        <div class="game_times"><ul>
            <li><h5>Main Story</h5></li>
            <li><h5>Completionist</h5><div>20 Hours</div></li>
        </ul></div>
        """

        record = parser.parse_detail(soup_of(html), "1")

        assert record.main_hours == 0
        assert record.completionist_hours == 20

    def test_missing_header_is_structural_mismatch(self, parser: GameParser) -> None:
        html = create_detail_page_html(name=None)

        with pytest.raises(StructuralMismatchError) as exc_info:
            parser.parse_detail(soup_of(html), "1")

        assert exc_info.value.field == "profile_header"
        assert exc_info.value.operation == "parse_detail"

    def test_blank_header_is_structural_mismatch(self, parser: GameParser) -> None:
        with pytest.raises(StructuralMismatchError):
            parser.parse_detail(soup_of(create_detail_page_html(name="   ")), "1")

    def test_missing_image_is_structural_mismatch(self, parser: GameParser) -> None:
        with pytest.raises(StructuralMismatchError) as exc_info:
            parser.parse_detail(soup_of(create_detail_page_html(image_src=None)), "1")

        assert exc_info.value.field == "game_image"

    def test_absolute_image_url_is_kept(self, parser: GameParser) -> None:
        html = create_detail_page_html(image_src="https://cdn.example/celeste.jpg")

        record = parser.parse_detail(soup_of(html), "1")

        assert record.image_url == "https://cdn.example/celeste.jpg"

    def test_protocol_relative_image_url_gets_https(self, parser: GameParser) -> None:
        html = create_detail_page_html(image_src="//cdn.example/celeste.jpg")

        record = parser.parse_detail(soup_of(html), "1")

        assert record.image_url == "https://cdn.example/celeste.jpg"


class TestParseSearch:
    """Search results page extraction."""

    def test_page_without_heading_yields_no_results(self, parser: GameParser) -> None:
        html = "<html><body><p>No results for lorem ipsum</p><ul><li>noise</li></ul></body></html>"

        assert parser.parse_search(soup_of(html), "lorem ipsum") == []

    def test_empty_document_yields_no_results(self, parser: GameParser) -> None:
        assert parser.parse_search(soup_of(""), "anything") == []

    def test_results_keep_document_order(self, parser: GameParser) -> None:
        html = create_search_page_html([
            create_search_item_html("2224", "Dark Souls II", times=[("Main Story", "44 Hours")]),
            create_search_item_html("2223", "Dark Souls", times=[("Main Story", "48½ Hours")]),
        ])

        records = parser.parse_search(soup_of(html), "Dark Souls")

        assert [record.game_id for record in records] == ["2224", "2223"]
        assert records[0].similarity == 0.77
        assert records[1].similarity == 1.0

    def test_item_fields(self, parser: GameParser) -> None:
        html = create_search_page_html([
            create_search_item_html(
                "42818",
                "Celeste",
                image_src="gameimages/42818_Celeste.jpg",
                times=[
                    ("Main Story", "8 Hours"),
                    ("Main + Extra", "13 Hours"),
                    ("Completionist", "37½ Hours"),
                ],
            ),
        ])

        [record] = parser.parse_search(soup_of(html), "celeste")

        assert record == GameRecord(
            game_id="42818",
            name="Celeste",
            image_url=BASE_URL + "/gameimages/42818_Celeste.jpg",
            main_hours=8,
            completionist_hours=37.5,
            similarity=1.0,
        )

    def test_malformed_time_block_only_zeroes_that_item(self, parser: GameParser) -> None:
        html = create_search_page_html([
            create_search_item_html("1", "Celeste", times=[("Main Story", "8 Hours"), ("Completionist", "20 Hours")]),
            create_search_item_html("2", "Celeste Classic", times=[("Main Story", "about an hour")]),
            create_search_item_html("3", "Celeste 64", times=[("Solo", "1½ Hours")]),
        ])

        records = parser.parse_search(soup_of(html), "Celeste")

        assert len(records) == 3
        assert (records[0].main_hours, records[0].completionist_hours) == (8, 20)
        assert (records[1].main_hours, records[1].completionist_hours) == (0, 0)
        assert (records[2].main_hours, records[2].completionist_hours) == (1.5, 0)

    def test_missing_time_block_defaults_to_zero(self, parser: GameParser) -> None:
        html = create_search_page_html([create_search_item_html("7", "Limbo", times=None)])

        [record] = parser.parse_search(soup_of(html), "Limbo")

        assert record.main_hours == 0
        assert record.completionist_hours == 0

    def test_label_without_value_zeroes_item(self, parser: GameParser) -> None:
        item = create_search_item_html("7", "Limbo", times=[("Main Story", "3 Hours")])
        item = item.replace('<div class="search_list_tidbit center time_100">3 Hours </div>', "")
        html = create_search_page_html([item])

        [record] = parser.parse_search(soup_of(html), "Limbo")

        assert record.main_hours == 0

    def test_missing_anchor_is_structural_mismatch(self, parser: GameParser) -> None:
        html = create_search_page_html(["<li><div>Broken entry</div></li>"])

        with pytest.raises(StructuralMismatchError) as exc_info:
            parser.parse_search(soup_of(html), "Broken")

        assert exc_info.value.field == "title_anchor"
        assert exc_info.value.operation == "parse_search"

    def test_blank_title_is_structural_mismatch(self, parser: GameParser) -> None:
        html = create_search_page_html([create_search_item_html("5", "   ")])

        with pytest.raises(StructuralMismatchError) as exc_info:
            parser.parse_search(soup_of(html), "Limbo")

        assert exc_info.value.field == "title_anchor"

    def test_missing_id_is_structural_mismatch(self, parser: GameParser) -> None:
        item = create_search_item_html("", "Limbo")
        html = create_search_page_html([item])

        with pytest.raises(StructuralMismatchError) as exc_info:
            parser.parse_search(soup_of(html), "Limbo")

        assert exc_info.value.field == "href"

    def test_missing_thumbnail_is_structural_mismatch(self, parser: GameParser) -> None:
        item = create_search_item_html("7", "Limbo").replace('<img alt="Box Art" src="gameimages/cover.jpg" />', "")
        html = create_search_page_html([item])

        with pytest.raises(StructuralMismatchError) as exc_info:
            parser.parse_search(soup_of(html), "Limbo")

        assert exc_info.value.field == "thumbnail"

    @given(
        st.lists(
            st.tuples(
                st.integers(min_value=1, max_value=99999),
                st.text(min_size=1, max_size=30, alphabet=st.characters(whitelist_categories=("Lu", "Ll", "Nd"))),
            ),
            max_size=5,
        ),
        st.text(max_size=20, alphabet=st.characters(whitelist_categories=("Lu", "Ll", "Nd", "Zs"))),
    )
    def test_every_item_becomes_a_valid_record(self, items: list[tuple[int, str]], query: str) -> None:
        """For any result list, each item yields one record with bounded values."""
        parser = GameParser(BASE_URL)
        html = create_search_page_html([
            create_search_item_html(str(game_id), title, times=[("Main Story", f"{game_id} Hours")])
            for game_id, title in items
        ])

        records = parser.parse_search(soup_of(html), query)

        assert [record.game_id for record in records] == [str(game_id) for game_id, _ in items]
        for record, (game_id, _) in zip(records, items):
            assert record.main_hours == game_id
            assert record.completionist_hours == 0
            assert 0.0 <= record.similarity <= 1.0
