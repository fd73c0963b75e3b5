"""Bounding rectangle of nodes."""

from __future__ import annotations

from math import inf, isfinite
from typing import Iterable, NamedTuple

from driveway_review.model.entity import Node


class Bounds(NamedTuple):
    """Rectangle aligned to latitude and longitude, in degrees."""

    minlat: float
    minlon: float
    maxlat: float
    maxlon: float

    @property
    def is_empty(self) -> bool:
        """Whether the rectangle contains no point at all.

        The bounds of an empty set of nodes are inverted (minimum above
        maximum) and must not be interpreted geometrically.
        """
        return self.minlat > self.maxlat or self.minlon > self.maxlon


EMPTY_BOUNDS = Bounds(inf, inf, -inf, -inf)


def calc_bounds(nodes: Iterable[Node]) -> Bounds:
    """Calculate the smallest rectangle containing all given nodes.

    Returns `EMPTY_BOUNDS` if there are no nodes. Raises ValueError if a node
    has a coordinate that is not finite.
    """
    minlat, minlon, maxlat, maxlon = EMPTY_BOUNDS
    for node in nodes:
        if not (isfinite(node.lat) and isfinite(node.lon)):
            raise ValueError(f'Node {node.id} has invalid coordinates: '
                             f'({node.lat}, {node.lon})')
        minlat, maxlat = min(minlat, node.lat), max(maxlat, node.lat)
        minlon, maxlon = min(minlon, node.lon), max(maxlon, node.lon)
    return Bounds(minlat, minlon, maxlat, maxlon)
