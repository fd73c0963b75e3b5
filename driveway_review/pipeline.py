"""Extraction of reviewable driveways from an archive into a document."""

from __future__ import annotations

import logging as log
from typing import NamedTuple

from driveway_review.config import Paths
from driveway_review.document import write_document
from driveway_review.editors import load_editors
from driveway_review.filters import (assemble, candidate_predicate,
                                     dependency_closure, find_disqualified)
from driveway_review.model.entity import Kind
from driveway_review.model.geometry import Bounds, calc_bounds
from driveway_review.source import PbfSource


class Summary(NamedTuple):
    """Counts of a finished run.

    `entities` counts the selected ways with all their dependencies,
    `candidates` only the selected ways.
    """

    entities: int
    candidates: int
    disqualified: int
    ways: int
    nodes: int
    bounds: Bounds


def run(paths: Paths = Paths()) -> Summary:
    """Run the whole extraction and write the document.

    The document is only written after everything else succeeded.
    """
    editors = load_editors(paths.editors)
    data = PbfSource(paths.archive).select_with_dependencies(
        candidate_predicate(editors), kinds=(Kind.WAY,))

    disqualified = find_disqualified(data)
    log.info('Nodes with barrier: %d', len(disqualified))

    closure = dependency_closure(data, disqualified)
    candidates = sum(1 for k in data if k.kind is Kind.WAY)
    log.info('Ways kept: %d, dropped: %d', len(closure.ways),
             candidates - len(closure.ways))
    log.info('Nodes kept: %d', len(closure.nodes))

    bounds = calc_bounds(closure.nodes)
    if bounds.is_empty:
        log.warning('No driveway left for review, bounds are empty')

    write_document(paths.output, bounds, assemble(closure))
    return Summary(len(data), candidates, len(disqualified),
                   len(closure.ways), len(closure.nodes), bounds)
