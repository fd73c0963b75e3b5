"""Entity source reading osm archives with osmium.

Selecting entities and their dependencies takes several passes over the
archive: the first pass selects the entities satisfying a predicate, each
following pass fetches the entities referenced by the ones already collected
and not yet seen, until nothing is missing.
"""

from __future__ import annotations

import errno
import logging as log
import os
from collections import defaultdict
from typing import AbstractSet, Callable, Dict, Iterable, Optional, Set

import osmium

from driveway_review.model.entity import (AnyEntity, DataSet, EntityId, Info,
                                          Kind, Member, Node, Predicate,
                                          Relation, Way)

MEMBER_KINDS = {'n': Kind.NODE, 'w': Kind.WAY, 'r': Kind.RELATION}


class DecodeError(Exception):
    """Archive could not be decoded."""


def convert_info(obj) -> Info:
    """Get metadata of an osmium object.

    Osmium fills unset metadata with empty or zero values, which are taken as
    absent. Visibility is only meaningful when there is a version.
    """
    timestamp = int(obj.timestamp.timestamp())
    return Info(user=obj.user or None,
                uid=obj.uid or None,
                visible=obj.visible if obj.version else None,
                version=obj.version or None,
                changeset=obj.changeset or None,
                timestamp=timestamp or None)


def convert_tags(obj) -> Dict[str, str]:
    """Get tags of an osmium object as a dict, keeping their order."""
    return {t.k: t.v for t in obj.tags}


def convert_node(obj) -> Node:
    """Create a `Node` from an osmium node.

    Raises DecodeError if the node has no valid location.
    """
    if not obj.location.valid():
        raise DecodeError(f'Node {obj.id} has no valid location')
    return Node(obj.id, obj.location.lat, obj.location.lon,
                convert_tags(obj), convert_info(obj))


def convert_way(obj) -> Way:
    """Create a `Way` from an osmium way."""
    return Way(obj.id, [n.ref for n in obj.nodes],
               convert_tags(obj), convert_info(obj))


def convert_relation(obj) -> Relation:
    """Create a `Relation` from an osmium relation."""
    members = [Member(EntityId(MEMBER_KINDS[m.type], m.ref), m.role)
               for m in obj.members]
    return Relation(obj.id, members, convert_tags(obj), convert_info(obj))


class _Collector(osmium.SimpleHandler):
    """Handler keeping wanted entities and those matching a predicate."""

    def __init__(self, wanted: Dict[Kind, Set[int]],
                 predicate: Optional[Predicate] = None,
                 kinds: AbstractSet[Kind] = frozenset()):
        super().__init__()
        self.wanted = wanted
        self.predicate = predicate
        self.kinds = kinds
        self.collected: DataSet = {}

    def _visit(self, kind: Kind, obj, convert: Callable[..., AnyEntity]):
        if obj.id in self.wanted[kind]:
            entity = convert(obj)
        elif self.predicate is not None and kind in self.kinds:
            entity = convert(obj)
            if not self.predicate(entity):
                return
        else:
            return
        self.collected[entity.osm_id] = entity

    def node(self, obj):
        """Handle osmium node."""
        self._visit(Kind.NODE, obj, convert_node)

    def way(self, obj):
        """Handle osmium way."""
        self._visit(Kind.WAY, obj, convert_way)

    def relation(self, obj):
        """Handle osmium relation."""
        self._visit(Kind.RELATION, obj, convert_relation)


class PbfSource:
    """Entity source backed by an osm archive file.

    Any format osmium reads is accepted, the format being detected from the
    file extension.
    """

    __slots__ = ('path',)

    path: str

    def __init__(self, path):
        self.path = os.fspath(path)

    def select_with_dependencies(
            self, predicate: Predicate,
            kinds: Iterable[Kind] = tuple(Kind)) -> DataSet:
        """Get entities matching predicate and all entities they reference.

        The predicate is only evaluated for entities of the given kinds.
        References are followed recursively through ways and relations.
        References to entities not present in the archive are skipped.

        Raises FileNotFoundError if the archive does not exist and
        DecodeError if it can not be decoded.
        """
        if not os.path.isfile(self.path):
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT),
                                    self.path)

        data = self._apply(defaultdict(set), predicate, frozenset(kinds))
        log.info('Entities selected: %d', len(data))

        attempted = set(data)
        missing = _missing_references(data.values(), attempted)
        while missing:
            wanted = defaultdict(set)
            for key in missing:
                wanted[key.kind].add(key.ref)
            found = self._apply(wanted)
            log.debug('Dependencies fetched: %d of %d', len(found),
                      len(missing))
            attempted.update(missing)
            data.update(found)
            missing = _missing_references(found.values(), attempted)

        log.info('Entities with dependencies: %d', len(data))
        return data

    def _apply(self, wanted: Dict[Kind, Set[int]],
               predicate: Optional[Predicate] = None,
               kinds: AbstractSet[Kind] = frozenset()) -> DataSet:
        collector = _Collector(wanted, predicate, kinds)
        try:
            collector.apply_file(self.path)
        except RuntimeError as error:
            raise DecodeError(f'Failed to decode {self.path}: {error}') \
                from error
        return collector.collected


def _missing_references(entities: Iterable[AnyEntity],
                        known: AbstractSet[EntityId]) -> Set[EntityId]:
    return {r for e in entities for r in e.references if r not in known}
