import pytest

from restora_client import render
from restora_client.__main__ import parse_args


def test_stars():
    assert render.stars(4) == '★★★★☆'
    assert render.stars(4.6) == '★★★★★'
    assert render.stars(None) == '☆☆☆☆☆'


def test_menu_shows_ratings_and_favorites():
    menu = [{'id': 'a', 'name': 'Escargot', 'price': 750, 'category': 'Appetizer'},
            {'id': 'b', 'name': 'Crêpes', 'price': 450}]
    reviews = [{'itemId': 'a', 'rating': 5}, {'itemId': 'a', 'rating': 4}, {'itemId': 'zzz', 'rating': 1}]

    lines = render.render_menu(menu, reviews, favorites=['b']).splitlines()

    assert lines[0].startswith('  Escargot')
    assert '₹750' in lines[0]
    assert '(4.5)' in lines[0]
    assert lines[1].startswith('♥ Crêpes')
    assert 'Specials' in lines[1]
    assert '(' not in lines[1]


def test_reviews_newest_first():
    reviews = [
        {'itemName': 'Escargot', 'rating': 2, 'reviewerName': 'Old', 'text': '', 'timestamp': 1},
        {'rating': 5, 'reviewerName': 'New', 'text': 'Superb', 'timestamp': 2},
    ]

    lines = render.render_reviews(reviews).splitlines()

    assert lines[0].startswith('★★★★★ Unknown by New')
    assert lines[1] == '    Superb'
    assert lines[2].startswith('★★☆☆☆ Escargot by Old')


def test_empty_collections():
    assert render.render_menu([]) == 'The menu is empty.'
    assert render.render_reviews([]) == 'No reviews yet.'
    assert render.render_reservations([]) == 'No reservations.'
    assert render.render_users([]) == 'No users.'
    assert render.render_sales([]) == 'No sales.'


def test_reservations():
    text = render.render_reservations([{'status': 'approved', 'date': '2026-12-24', 'time': '19:30',
                                        'name': 'Jean', 'phone': '123', 'guests': 2, 'occasion': 'Birthday',
                                        'notes': 'Window table'}])

    assert text.splitlines()[0].startswith('[approved] 2026-12-24 19:30  Jean (123) guests: 2')
    assert 'occasion: Birthday' in text
    assert text.splitlines()[1] == '    Window table'


def test_cli_arguments(tmp_path):
    args = parse_args(['--api-base', 'http://example.com', '--storage-dir', str(tmp_path),
                       '--interval', '2.5', 'watch'])

    assert args.api_base == 'http://example.com'
    assert args.storage_dir == str(tmp_path)
    assert args.interval == 2.5
    assert args.command == 'watch'

    with pytest.raises(SystemExit):
        parse_args(['orders'])
