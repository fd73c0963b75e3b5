"""Input and output paths and logging configuration."""

from __future__ import annotations

import logging as log
from pathlib import Path
from typing import NamedTuple, Sequence

EDITORS_PATH = Path('public_data', 'amazon.txt')
ARCHIVE_PATH = Path('private_data', 'new-hampshire-latest-internal.osm.pbf')
OUTPUT_PATH = Path('output.osm')

LOG_FORMAT = '%(levelname)s: %(message)s'


class Paths(NamedTuple):
    """Files used in a run, relative to the working directory."""

    editors: Path = EDITORS_PATH
    archive: Path = ARCHIVE_PATH
    output: Path = OUTPUT_PATH

    @staticmethod
    def from_args(args: Sequence[str]) -> Paths:
        """Create paths overriding the defaults in order with `args`.

        Raises ValueError if there are more arguments than paths.
        """
        if len(args) > len(Paths._fields):
            raise ValueError(f'Too many paths: {" ".join(args)}')
        return Paths(*map(Path, args))


def log_config(verbose: bool = False):
    """Configure logging."""
    log.basicConfig(format=LOG_FORMAT,
                    level=log.DEBUG if verbose else log.INFO)
