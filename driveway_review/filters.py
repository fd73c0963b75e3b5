"""Selection of reviewable driveways and of the nodes they depend on.

The selection happens in stages, each a pure function over the data set
returned by the entity source:

1. `candidate_predicate` decides which ways the source selects.
2. `find_disqualified` collects the nodes carrying a barrier tag.
3. `dependency_closure` drops every way that goes through a disqualified node
   and keeps exactly the nodes referenced by the remaining ways.
4. `assemble` orders the result for the document.
"""

from __future__ import annotations

import logging as log
from itertools import chain
from typing import (AbstractSet, Collection, FrozenSet, Iterable, List,
                    NamedTuple)

from driveway_review.model.entity import (AnyEntity, DataSet, Kind, Node,
                                          Predicate, Way)
from driveway_review.utils.osm import get_url

SERVICE = ('service', 'driveway')
ACCESS = ('access', 'private')
BARRIER_KEY = 'barrier'


class Closure(NamedTuple):
    """Ways kept for review and the nodes they need."""

    ways: List[Way]
    node_ids: FrozenSet[int]
    nodes: List[Node]


def is_candidate(entity: AnyEntity, editors: Collection[str]) -> bool:
    """Check if entity is a private driveway last edited by an editor."""
    if entity.kind is not Kind.WAY:
        return False
    tags = entity.tags
    return (all(tags.get(k) == v for k, v in (SERVICE, ACCESS))
            and entity.user is not None
            and entity.user in editors)


def candidate_predicate(editors: Collection[str]) -> Predicate:
    """Bind the editor allow-list to `is_candidate`."""
    def _predicate(entity: AnyEntity) -> bool:
        return is_candidate(entity, editors)
    return _predicate


def find_disqualified(data: DataSet) -> FrozenSet[int]:
    """Get ids of all nodes with a barrier tag, whatever its value."""
    return frozenset(e.id for e in data.values()
                     if e.kind is Kind.NODE and BARRIER_KEY in e.tags)


def surviving_ways(data: DataSet, disqualified: AbstractSet[int]) -> List[Way]:
    """Get ways that reference no disqualified node, sorted by id."""
    ways = []
    for key in sorted(data):
        entity = data[key]
        if entity.kind is not Kind.WAY:
            continue
        if disqualified.isdisjoint(entity.nodes):
            ways.append(entity)
        else:
            log.debug('Way dropped for barrier: %s', get_url(entity))
    return ways


def referenced_node_ids(ways: Iterable[Way]) -> FrozenSet[int]:
    """Get the union of the node ids of all given ways."""
    return frozenset(chain.from_iterable(w.nodes for w in ways))


def select_nodes(data: DataSet, node_ids: AbstractSet[int]) -> List[Node]:
    """Get nodes of the data set with id in `node_ids`, sorted by id.

    Ids without a node in the data set are skipped.
    """
    return [data[k] for k in sorted(data)
            if k.kind is Kind.NODE and k.ref in node_ids]


def dependency_closure(data: DataSet,
                       disqualified: AbstractSet[int]) -> Closure:
    """Drop disqualified ways and keep exactly the nodes the rest need.

    Only the node sequence of a way counts: a barrier node reached through a
    relation never disqualifies anything.
    """
    ways = surviving_ways(data, disqualified)
    node_ids = referenced_node_ids(ways)
    nodes = select_nodes(data, node_ids)
    missing = len(node_ids) - len(nodes)
    if missing:
        log.debug('Node references missing from archive: %d', missing)
    return Closure(ways, node_ids, nodes)


def assemble(closure: Closure) -> List[AnyEntity]:
    """Get entities in document order: nodes first, then ways."""
    return [*closure.nodes, *closure.ways]
