"""Writer for osm xml documents."""

from __future__ import annotations

import logging as log
from datetime import datetime, timezone
from decimal import Decimal
from math import isfinite
from os import PathLike
from typing import Callable, Dict, Iterable, Optional, Union
from xml.etree import ElementTree

from driveway_review.model.entity import (AnyEntity, Kind, Node, Relation,
                                          Way)
from driveway_review.model.geometry import Bounds

OSM_VERSION = '0.6'
INDENT = '  '
TIMESTAMP_FORMAT = '%Y-%m-%dT%H:%M:%SZ'


def format_float(value: float) -> str:
    """Format float as positional decimal text in its shortest form.

    Integers are written without decimal point and there is never an
    exponent, so 5e-05 is written as 0.00005.
    """
    value = float(value)
    if value.is_integer():
        return str(int(value))
    if not isfinite(value):
        return repr(value)
    return f'{Decimal(repr(value)):f}'


def format_optional(value: Optional[Union[str, int, bool]]) -> str:
    """Format optional attribute value, None being an empty string."""
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def format_timestamp(timestamp: Optional[int]) -> str:
    """Format seconds since epoch as an UTC osm timestamp."""
    if timestamp is None:
        return ''
    return datetime.fromtimestamp(timestamp, timezone.utc).strftime(
        TIMESTAMP_FORMAT)


def entity_attrib(entity: AnyEntity, **extra: str) -> Dict[str, str]:
    """Get id and metadata attributes common to all entities.

    Extra attributes are placed right after the id.
    """
    info = entity.info
    return {'id': str(entity.id),
            **extra,
            'user': format_optional(info.user),
            'uid': format_optional(info.uid),
            'visible': format_optional(info.visible),
            'version': format_optional(info.version),
            'changeset': format_optional(info.changeset),
            'timestamp': format_timestamp(info.timestamp)}


def add_tags(element: ElementTree.Element, tags: Dict[str, str]):
    """Add a tag child element for each tag."""
    for key, value in tags.items():
        ElementTree.SubElement(element, 'tag', k=key, v=value)


def node_element(parent: ElementTree.Element, node: Node):
    """Add element for a node."""
    attrib = entity_attrib(node, lat=format_float(node.lat),
                           lon=format_float(node.lon))
    element = ElementTree.SubElement(parent, 'node', attrib)
    add_tags(element, node.tags)


def way_element(parent: ElementTree.Element, way: Way):
    """Add element for a way, with node references before tags."""
    element = ElementTree.SubElement(parent, 'way', entity_attrib(way))
    for ref in way.nodes:
        ElementTree.SubElement(element, 'nd', ref=str(ref))
    add_tags(element, way.tags)


def relation_element(parent: ElementTree.Element, relation: Relation):
    """Add element for a relation, with members before tags."""
    element = ElementTree.SubElement(parent, 'relation',
                                     entity_attrib(relation))
    for member, role in relation.members:
        ElementTree.SubElement(element, 'member', type=member.kind.xml_name,
                               ref=str(member.ref), role=role)
    add_tags(element, relation.tags)


ElementWriter = Callable[[ElementTree.Element, AnyEntity], None]

ELEMENT_WRITERS: Dict[Kind, ElementWriter] = {
    Kind.NODE: node_element,
    Kind.WAY: way_element,
    Kind.RELATION: relation_element,
}


def build_document(bounds: Bounds,
                   entities: Iterable[AnyEntity]) -> ElementTree.ElementTree:
    """Build osm document with bounds and entities in the given order."""
    root = ElementTree.Element('osm', version=OSM_VERSION)
    ElementTree.SubElement(root, 'bounds',
                           {k: format_float(v)
                            for k, v in bounds._asdict().items()})
    for entity in entities:
        ELEMENT_WRITERS[entity.kind](root, entity)
    tree = ElementTree.ElementTree(root)
    ElementTree.indent(tree, space=INDENT)
    return tree


def write_document(path: Union[str, PathLike], bounds: Bounds,
                   entities: Iterable[AnyEntity]):
    """Write osm document to file."""
    tree = build_document(bounds, entities)
    tree.write(path, 'UTF-8', xml_declaration=True)
    log.info('Document written to %s', path)
