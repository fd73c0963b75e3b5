"""Definition of module main function."""

import sys

from driveway_review.config import Paths, log_config
from driveway_review.pipeline import run

VERBOSE_FLAG = '-v'


def main():
    """Driveway review entry point.

    Usage: driveway-review [editors_file [archive_file [output_file]]] [-v]
    """
    args = [a for a in sys.argv[1:] if not a.startswith('-')]
    log_config(VERBOSE_FLAG in sys.argv[1:])
    run(Paths.from_args(args))
