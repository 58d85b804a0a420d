"""Maps route-group base paths to the controller files that implement them."""

import logging
import os
from typing import Dict, Optional

logger = logging.getLogger(__name__)

CONTROLLERS_DIR = "controllers"
CONTROLLER_SUFFIX = ".controller."
API_PREFIX = "/api"


def controller_key(file_name: str, suffix: str = CONTROLLER_SUFFIX) -> Optional[str]:
    """Return the controller key for a file name like ``auth.controller.js``.

    Only names of the form ``<key><suffix><ext>`` qualify; anything else
    returns None.
    """
    key, sep, ext = file_name.partition(suffix)
    if not sep or not key or not ext or "." in ext:
        return None
    return key


def discover_controllers(
    root_dir: str,
    controllers_dir: str = CONTROLLERS_DIR,
    suffix: str = CONTROLLER_SUFFIX,
    api_prefix: str = API_PREFIX,
) -> Dict[str, str]:
    """
    Build the controller index for a project rooted at root_dir.

    Args:
        root_dir: Project root containing the controllers directory
        controllers_dir: Name of the controllers directory under root_dir
        suffix: Infix that marks a controller file, e.g. ``.controller.``
        api_prefix: Prefix prepended to each controller key

    Returns:
        Mapping of base path (``/api/<key>``) to absolute file path. Empty
        when the directory is missing or unreadable.
    """
    directory = os.path.abspath(os.path.join(root_dir, controllers_dir))
    try:
        entries = sorted(os.listdir(directory))
    except OSError as e:
        logger.debug(f"Controller directory {directory} not readable: {e}")
        return {}

    index: Dict[str, str] = {}
    for entry in entries:
        file_path = os.path.join(directory, entry)
        if not os.path.isfile(file_path):
            continue
        key = controller_key(entry, suffix)
        if key is None:
            continue
        index[f"{api_prefix}/{key}"] = file_path

    logger.debug(f"Discovered {len(index)} controllers in {directory}")
    return index
