from datetime import datetime
from typing import Dict, Iterable, List

from restora_client import constants

STAR = '★'
EMPTY_STAR = '☆'


def stars(rating) -> str:
    rating = max(0, min(5, int(round(rating or 0))))
    return STAR * rating + EMPTY_STAR * (5 - rating)


def average_ratings(reviews: Iterable[Dict]) -> Dict[str, float]:
    totals: Dict[str, List[int]] = {}
    for review in reviews:
        if isinstance(review.get('rating'), (int, float)):
            totals.setdefault(review.get('itemId'), []).append(review['rating'])
    return {item_id: sum(ratings) / len(ratings) for item_id, ratings in totals.items()}


def format_timestamp(timestamp) -> str:
    if not isinstance(timestamp, (int, float)):
        return ''
    return datetime.fromtimestamp(timestamp / 1000).strftime('%Y-%m-%d %H:%M')


def render_menu(menu: List[Dict], reviews: Iterable[Dict] = (), favorites: Iterable[str] = ()) -> str:
    if not menu:
        return 'The menu is empty.'
    ratings = average_ratings(reviews)
    favorites = set(favorites or ())
    lines = []
    for item in menu:
        line = (f"{'♥' if item.get('id') in favorites else ' '} {item.get('name', ''):<24} "
                f"{item.get('category') or constants.DEFAULT_CATEGORY:<12} ₹{item.get('price')}")
        average = ratings.get(item.get('id'))
        if average:
            line += f'  {stars(average)} ({average:.1f})'
        lines.append(line)
    return '\n'.join(lines)


def render_reviews(reviews: List[Dict]) -> str:
    if not reviews:
        return 'No reviews yet.'
    lines = []
    for review in sorted(reviews, key=lambda r: r.get('timestamp') or 0, reverse=True):
        lines.append(f"{stars(review.get('rating'))} {review.get('itemName') or constants.UNKNOWN_ITEM_NAME}"
                     f" by {review.get('reviewerName', '')} {format_timestamp(review.get('timestamp'))}")
        if review.get('text'):
            lines.append(f"    {review['text']}")
    return '\n'.join(lines)


def render_reservations(reservations: List[Dict]) -> str:
    if not reservations:
        return 'No reservations.'
    lines = []
    for reservation in reservations:
        line = (f"[{reservation.get('status', 'pending'):<8}] {reservation.get('date', '')} "
                f"{reservation.get('time', '')}  {reservation.get('name', '')} ({reservation.get('phone', '')}) "
                f"guests: {reservation.get('guests')}")
        if reservation.get('occasion'):
            line += f"  occasion: {reservation['occasion']}"
        lines.append(line)
        if reservation.get('notes'):
            lines.append(f"    {reservation['notes']}")
    return '\n'.join(lines)


def render_users(users: List[Dict]) -> str:
    if not users:
        return 'No users.'
    return '\n'.join(f"{user.get('name', '')} <{user.get('email', '')}> {user.get('role', 'user')}" for user in users)


def render_sales(sales: List[Dict]) -> str:
    if not sales:
        return 'No sales.'
    return '\n'.join(f"{format_timestamp(sale.get('timestamp'))}  {len(sale.get('items') or [])} items  "
                     f"₹{sale.get('total')}" for sale in sales)
