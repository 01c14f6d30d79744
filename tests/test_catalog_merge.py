import pytest

from library.merge import (
    DEFAULT_CATALOG_PRICE,
    external_to_library_fields,
    merge_catalog_with_library,
    shape_external_game,
)
from library.models import GameRecord


CATALOG = [
    {'id': 1942, 'name': 'The Witcher 3', 'rating': 93.4, 'genres': [12, 31]},
    {'id': 72, 'genres': []},
]


def make_record(game_id, title):
    return GameRecord(id=game_id, title=title, genre='RPG', price=10, date_added='x')


def test_shape_external_game_defaults():
    shaped = shape_external_game(CATALOG[0])

    assert shaped == {
        'id': 1942,
        'title': 'The Witcher 3',
        'genre': '12, 31',
        'hoursPlayed': 0,
        'price': DEFAULT_CATALOG_PRICE,
        'buyLink': '#',
        'rating': 93.4,
        'source': 'igdb',
    }


def test_shape_external_game_without_name_or_genres():
    shaped = shape_external_game(CATALOG[1])

    assert shaped['title'] == 'Unknown Game'
    assert shaped['genre'] == 'Unknown'
    assert shaped['rating'] is None


def test_external_to_library_fields_uses_named_genres():
    fields = external_to_library_fields(
        {'name': 'Portal 2', 'genres': [{'name': 'Puzzle'}, {'name': 'Shooter'}]}
    )

    assert fields == {
        'title': 'Portal 2',
        'genre': 'Puzzle, Shooter',
        'hours_played': 0,
        'price': 29.99,
        'buy_link': '#',
    }


def test_merge_puts_catalog_first_and_flags_owned_titles():
    records = [make_record(1, 'the witcher 3'), make_record(2, 'Halo')]

    merged = merge_catalog_with_library(CATALOG, records)

    assert [entry['source'] for entry in merged] == ['igdb', 'igdb', 'local', 'local']
    assert merged[0]['inLibrary'] is True
    assert merged[1]['inLibrary'] is False
    assert all(entry['inLibrary'] for entry in merged[2:])
    assert merged[3]['id'] == 2


@pytest.mark.parametrize(
    ('filter_value', 'sources'),
    [('trending', {'igdb'}), ('library', {'local'})],
)
def test_merge_filters(filter_value, sources):
    merged = merge_catalog_with_library(CATALOG, [make_record(1, 'Halo')], filter_value)

    assert {entry['source'] for entry in merged} == sources


def test_merge_rejects_unknown_filter():
    with pytest.raises(ValueError):
        merge_catalog_with_library(CATALOG, [], 'new')


def test_merge_ignores_non_mapping_catalog_entries():
    merged = merge_catalog_with_library([CATALOG[0], 'junk', None], [])

    assert len(merged) == 1
