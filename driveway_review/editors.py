"""Allow-list of contributor names."""

from __future__ import annotations

import logging as log
from os import PathLike
from typing import Set, Union


def load_editors(path: Union[str, PathLike]) -> Set[str]:
    """Read contributor names from a text file, one name per line.

    Trailing whitespace, including the carriage return of CRLF files, is
    stripped from each line and empty lines are skipped. Leading whitespace is
    kept, since it may be part of a name.
    """
    with open(path, 'r', encoding='utf-8') as file:
        editors = {n for n in (line.rstrip() for line in file) if n}
    log.info('Editors loaded from %s: %d', path, len(editors))
    return editors
