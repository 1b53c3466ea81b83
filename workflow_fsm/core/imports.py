"""Resolve ``package.module:attribute`` references from definitions and settings."""

import importlib
from typing import Any


def import_object(path: str) -> Any:
    """
    Import an object from an import string.

    Accepts ``package.module:attr`` and ``package.module.attr``.

    Raises:
        ImportError: If the module or attribute cannot be found
    """
    if ":" in path:
        module_name, _, attr_path = path.partition(":")
    else:
        module_name, _, attr_path = path.rpartition(".")

    if not module_name or not attr_path:
        raise ImportError(f"Invalid import string: {path!r}")

    obj: Any = importlib.import_module(module_name)
    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError:
            raise ImportError(f"{module_name!r} has no attribute {attr_path!r}") from None
    return obj
