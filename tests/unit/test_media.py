"""Tests for the catalog media model."""

import pytest

from src.core.media import (
    MOVIE_DETAIL_SCREEN,
    TV_DETAIL_SCREEN,
    MediaKind,
    Movie,
    NavigationTarget,
    TVShow,
    format_rating,
    get_image_url,
    navigation_target,
    parse_media_item,
    parse_media_items,
)


class TestParseMediaItem:
    """Tests for turning catalog payloads into typed items."""

    def test_movie_payload(self) -> None:
        item = parse_media_item(
            {
                "id": 603,
                "title": "The Matrix",
                "vote_average": 8.2,
                "backdrop_path": "/bg.jpg",
                "poster_path": "/poster.jpg",
                "overview": "A hacker learns the truth.",
                "release_date": "1999-03-30",
            }
        )
        assert isinstance(item, Movie)
        assert item.kind is MediaKind.MOVIE
        assert item.title == "The Matrix"
        assert item.release_date == "1999-03-30"
        assert item.backdrop_path == "/bg.jpg"

    def test_tv_payload_uses_name(self) -> None:
        item = parse_media_item({"id": 1399, "name": "Game of Thrones", "first_air_date": "2011-04-17"})
        assert isinstance(item, TVShow)
        assert item.kind is MediaKind.TV
        assert item.title == "Game of Thrones"

    def test_media_type_field_decides(self) -> None:
        item = parse_media_item({"id": 1, "name": "Show", "media_type": "tv"})
        assert isinstance(item, TVShow)

    def test_explicit_kind_overrides_payload(self) -> None:
        item = parse_media_item({"id": 1, "title": "X", "first_air_date": ""}, MediaKind.MOVIE)
        assert isinstance(item, Movie)

    def test_string_kind_accepted(self) -> None:
        assert isinstance(parse_media_item({"id": 1, "name": "X"}, "tv"), TVShow)

    def test_person_is_skipped(self) -> None:
        assert parse_media_item({"id": 31, "name": "Tom Hanks", "media_type": "person"}) is None

    def test_missing_optional_fields_default(self) -> None:
        item = parse_media_item({"id": "42", "title": "Sparse", "vote_average": None})
        assert item == Movie(id=42, title="Sparse")

    def test_items_are_immutable(self) -> None:
        item = Movie(id=1, title="A")
        with pytest.raises(AttributeError):
            item.title = "B"  # type: ignore[misc]


class TestParseMediaItems:
    def test_skips_people_and_duplicates(self) -> None:
        items = parse_media_items(
            [
                {"id": 1, "title": "A", "media_type": "movie"},
                {"id": 2, "name": "Person", "media_type": "person"},
                {"id": 1, "title": "A again", "media_type": "movie"},
                {"id": 1, "name": "Same id, other kind", "media_type": "tv"},
            ]
        )
        assert [(item.kind, item.id) for item in items] == [
            (MediaKind.MOVIE, 1),
            (MediaKind.TV, 1),
        ]
        assert items[0].title == "A"

    def test_forced_kind_applies_to_all(self) -> None:
        items = parse_media_items([{"id": 1, "name": "A"}, {"id": 2, "name": "B"}], MediaKind.TV)
        assert all(isinstance(item, TVShow) for item in items)


class TestGetImageUrl:
    def test_builds_url(self) -> None:
        assert get_image_url("/abc.jpg") == "https://image.tmdb.org/t/p/w780/abc.jpg"

    def test_custom_size_and_base(self) -> None:
        assert get_image_url("abc.jpg", size="w342", base_url="http://img/") == "http://img/w342/abc.jpg"

    @pytest.mark.parametrize("path", [None, ""])
    def test_missing_path(self, path) -> None:
        assert get_image_url(path) is None


class TestFormatRating:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(8.0, "8.0"), (7.25, "7.3"), (8.44, "8.4"), (8.35, "8.4"), (0, "0.0"), (10, "10.0")],
    )
    def test_one_decimal_half_up(self, value, expected) -> None:
        assert format_rating(value) == expected


class TestNavigationTarget:
    def test_movie(self) -> None:
        target = navigation_target(Movie(id=603, title="The Matrix"))
        assert target == NavigationTarget(MOVIE_DETAIL_SCREEN, {"movieId": 603})

    def test_tv_show(self) -> None:
        target = navigation_target(TVShow(id=1399, title="Game of Thrones"))
        assert target.screen == TV_DETAIL_SCREEN
        assert target.params == {"showId": 1399}
