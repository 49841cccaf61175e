"""Unit tests for extracting RECOMMENDATION: {...} picks from chat replies."""

from __future__ import annotations

import pytest

from musicboard.services.recommendation_parser import parse_recommendations


def test_plain_text_passes_through() -> None:
    reply = parse_recommendations("  Tell me what you have been listening to lately.  ")
    assert reply.content == "Tell me what you have been listening to lately."
    assert reply.recommendations == []


def test_single_recommendation_is_removed_from_content() -> None:
    text = (
        'A RECOMMENDATION: {"albumTitle":"Kid A","artist":"Radiohead","cover":"🎸",'
        '"matchPercentage":92,"genres":["rock"],"reasoning":"x"} B'
    )
    reply = parse_recommendations(text)

    assert reply.content == "A  B"
    assert len(reply.recommendations) == 1
    rec = reply.recommendations[0]
    assert rec.albumTitle == "Kid A"
    assert rec.artist == "Radiohead"
    assert rec.matchPercentage == 92
    assert rec.genres == ["rock"]


def test_recommendations_keep_their_order() -> None:
    text = (
        "Try these:\n"
        'RECOMMENDATION: {"albumTitle": "Blue Train", "artist": "John Coltrane"}\n'
        'RECOMMENDATION: {"albumTitle": "Maiden Voyage", "artist": "Herbie Hancock"}\n'
        "Enjoy!"
    )
    reply = parse_recommendations(text)

    assert [r.albumTitle for r in reply.recommendations] == ["Blue Train", "Maiden Voyage"]
    assert "RECOMMENDATION:" not in reply.content
    assert reply.content.startswith("Try these:")
    assert reply.content.endswith("Enjoy!")


def test_missing_fields_get_defaults() -> None:
    reply = parse_recommendations('RECOMMENDATION: {"albumTitle": "Spirit of Eden"}')
    rec = reply.recommendations[0]
    assert rec.artist == ""
    assert rec.cover == "🎵"
    assert rec.matchPercentage == 0
    assert rec.genres == []
    assert rec.reasoning == ""
    assert reply.content == ""


def test_unknown_keys_are_kept() -> None:
    reply = parse_recommendations('RECOMMENDATION: {"albumTitle": "Loveless", "year": 1991}')
    assert reply.recommendations[0].model_dump()["year"] == 1991


def test_fractional_percentage_is_rounded() -> None:
    reply = parse_recommendations('RECOMMENDATION: {"albumTitle": "Low", "matchPercentage": 87.6}')
    assert reply.recommendations[0].matchPercentage == 88


def test_malformed_json_stays_in_content() -> None:
    text = 'Here you go RECOMMENDATION: {"albumTitle": "Unfinished", } done'
    reply = parse_recommendations(text)

    assert reply.recommendations == []
    assert reply.content == text


def test_out_of_range_percentage_is_clamped() -> None:
    reply = parse_recommendations('RECOMMENDATION: {"albumTitle": "Too Good", "matchPercentage": 150}')

    assert reply.content == ""
    assert reply.recommendations[0].albumTitle == "Too Good"
    assert reply.recommendations[0].matchPercentage == 100


def test_percentage_string_is_parsed() -> None:
    text = 'A RECOMMENDATION: {"albumTitle": "X", "artist": "Y", "matchPercentage": "92%"} B'
    reply = parse_recommendations(text)

    assert reply.content == "A  B"
    assert len(reply.recommendations) == 1
    assert reply.recommendations[0].matchPercentage == 92


def test_loosely_typed_fields_are_coerced() -> None:
    text = 'A RECOMMENDATION: {"albumTitle": "X", "artist": "Y", "cover": null, "genres": "rock"} B'
    reply = parse_recommendations(text)

    assert reply.content == "A  B"
    rec = reply.recommendations[0]
    assert rec.cover == "🎵"
    assert rec.genres == ["rock"]


@pytest.mark.parametrize(
    ("percentage", "expected"),
    [("null", 0), ("true", 0), ("\"about eighty\"", 0), ("-5", 0), ("\"87.6 %\"", 88), ("1e999", 0)],
)
def test_percentage_edge_values(percentage: str, expected: int) -> None:
    reply = parse_recommendations('RECOMMENDATION: {"albumTitle": "Low", "matchPercentage": ' + percentage + "}")
    assert reply.recommendations[0].matchPercentage == expected


def test_non_string_values_become_text() -> None:
    reply = parse_recommendations('RECOMMENDATION: {"albumTitle": 1999, "artist": null, "genres": ["idm", 7, null]}')
    rec = reply.recommendations[0]
    assert rec.albumTitle == "1999"
    assert rec.artist == ""
    assert rec.genres == ["idm", "7"]


def test_malformed_does_not_block_valid_neighbours() -> None:
    text = 'RECOMMENDATION: {broken} and RECOMMENDATION: {"albumTitle": "Hex", "artist": "Bark Psychosis"}'
    reply = parse_recommendations(text)

    assert len(reply.recommendations) == 1
    assert reply.content == "RECOMMENDATION: {broken} and"


def test_empty_text() -> None:
    reply = parse_recommendations("")
    assert reply.content == ""
    assert reply.recommendations == []
