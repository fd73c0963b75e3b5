"""Open street map related functions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from driveway_review.model.entity import AnyEntity

BASE_URL = 'https://www.openstreetmap.org'


def get_url(entity: AnyEntity) -> str:
    """Get openstreetmap url for given entity."""
    if entity.id <= 0:
        return f'Invalid id for url: {entity.kind.xml_name} {entity.id}'
    return f'{BASE_URL}/{entity.kind.xml_name}/{entity.id}'
