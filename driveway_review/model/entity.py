"""Map entities read from an osm archive."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import (Callable, ClassVar, Dict, Iterator, List, NamedTuple,
                    Optional, Union)

from dataslots import with_slots


class Kind(IntEnum):
    """Kind of an osm entity, in the order entities are sorted."""

    NODE = 0
    WAY = 1
    RELATION = 2

    @property
    def xml_name(self) -> str:
        """Element name for this kind in osm xml."""
        return self.name.lower()


class EntityId(NamedTuple):
    """Identifier of an entity, unique within an archive.

    Sorting ids puts all nodes before all ways before all relations, each kind
    sorted by numeric id.
    """

    kind: Kind
    ref: int

    @staticmethod
    def node(ref: int) -> EntityId:
        """Create id for a node."""
        return EntityId(Kind.NODE, ref)

    @staticmethod
    def way(ref: int) -> EntityId:
        """Create id for a way."""
        return EntityId(Kind.WAY, ref)

    @staticmethod
    def relation(ref: int) -> EntityId:
        """Create id for a relation."""
        return EntityId(Kind.RELATION, ref)


@with_slots
@dataclass(frozen=True)
class Info:
    """Authorship and version metadata of an entity.

    Every field is optional, with None meaning the archive did not record it.
    """

    user: Optional[str] = None
    uid: Optional[int] = None
    visible: Optional[bool] = None
    version: Optional[int] = None
    changeset: Optional[int] = None
    timestamp: Optional[int] = None


class Entity:
    """Base class for nodes, ways and relations."""

    __slots__ = ()

    kind: ClassVar[Kind]
    id: int
    tags: Dict[str, str]
    info: Info

    @property
    def osm_id(self) -> EntityId:
        """Get the archive-wide identifier of this entity."""
        return EntityId(self.kind, self.id)

    @property
    def user(self) -> Optional[str]:
        """Get name of the last contributor, if recorded."""
        return self.info.user

    @property
    def references(self) -> Iterator[EntityId]:
        """Get ids of the entities this one references, in order."""
        return iter(())


@with_slots
@dataclass
class Node(Entity):
    """A point with coordinates in degrees."""

    kind: ClassVar[Kind] = Kind.NODE

    id: int
    lat: float
    lon: float
    tags: Dict[str, str] = field(default_factory=dict)
    info: Info = field(default_factory=Info)


@with_slots
@dataclass
class Way(Entity):
    """An ordered path through nodes, referenced by node id."""

    kind: ClassVar[Kind] = Kind.WAY

    id: int
    nodes: List[int] = field(default_factory=list)
    tags: Dict[str, str] = field(default_factory=dict)
    info: Info = field(default_factory=Info)

    @property
    def references(self) -> Iterator[EntityId]:
        return map(EntityId.node, self.nodes)


class Member(NamedTuple):
    """A relation member and its role."""

    member: EntityId
    role: str = ''


@with_slots
@dataclass
class Relation(Entity):
    """A named group of nodes, ways and other relations."""

    kind: ClassVar[Kind] = Kind.RELATION

    id: int
    members: List[Member] = field(default_factory=list)
    tags: Dict[str, str] = field(default_factory=dict)
    info: Info = field(default_factory=Info)

    @property
    def references(self) -> Iterator[EntityId]:
        return (m.member for m in self.members)


AnyEntity = Union[Node, Way, Relation]
DataSet = Dict[EntityId, AnyEntity]
Predicate = Callable[[AnyEntity], bool]


def data_set(entities) -> DataSet:
    """Build a data set keyed by the id of each entity.

    The entity source builds its data sets directly, this is a shortcut for
    building them by hand, as tests do.
    """
    return {e.osm_id: e for e in entities}
