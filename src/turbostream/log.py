"""Logger helper.

Every logger is namespaced under ``turbostream.`` so applications can tune
the whole package with one ``logging.getLogger("turbostream")`` call. The
library never installs handlers; the command line front end does.
"""

import logging

LOG_FORMAT = "[%(name)s %(asctime)s %(levelname)s]: %(message)s"


def get_logger(name):
    """Return the standard library logger for ``name`` under the package prefix.

    >>> get_logger("turbostream.client").name
    'turbostream.client'
    >>> get_logger("scratch").name
    'turbostream.scratch'
    """
    if not (name == "turbostream" or name.startswith("turbostream.")):
        name = f"turbostream.{name}"
    return logging.getLogger(name)


def set_logger(verbose=False, filename=None):
    logging.basicConfig(
        filename=filename,
        format=LOG_FORMAT,
        level=logging.DEBUG if verbose else logging.INFO,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("asyncio").setLevel(logging.WARNING)
