"""Discovers and selects validation checkers.

This module scans the `pyquidquid.checkers` package for `BaseChecker`
implementations and resolves a checker by name, either directly or from the
`checker` setting of a `Config`.
"""

import os
import pkgutil
import inspect
import logging
from functools import lru_cache
from typing import Dict, List, Type

from .base_checker import BaseChecker
from .config import Config
from .. import checkers as checkers_package

# Initialize a logger for this module.
logger = logging.getLogger(__name__)

DEFAULT_CHECKER = "jsonschema"


def discover_checkers() -> List[Type[BaseChecker]]:
    """Discovers all checker classes within the `pyquidquid.checkers` package.

    This function iterates through the modules in the `checkers` package,
    inspects their members, and collects all classes that are subclasses of
    `BaseChecker` (excluding `BaseChecker` itself).

    Returns:
        List[Type[BaseChecker]]: The discovered checker classes, in module
        order, without duplicates.
    """
    checkers: List[Type[BaseChecker]] = []
    path = os.path.dirname(checkers_package.__file__)

    for _, name, _ in pkgutil.iter_modules([path]):
        try:
            module = __import__(f"pyquidquid.checkers.{name}", fromlist=["*"])
            for _, item in inspect.getmembers(module, inspect.isclass):
                if issubclass(item, BaseChecker) and item is not BaseChecker and item not in checkers:
                    checkers.append(item)
        except ImportError as e:
            logger.warning(f"Could not import checker module {name}: {e}")
    return checkers


def available_checkers() -> Dict[str, Type[BaseChecker]]:
    """Maps lower-cased checker names to their classes."""
    return {c.name.lower(): c for c in discover_checkers()}


def get_checker(name: str = DEFAULT_CHECKER) -> BaseChecker:
    """Returns a shared checker instance by name.

    Checkers are stateless after construction, so one instance per name is
    shared across all accessors.

    Args:
        name (str): The checker's `name` attribute, case-insensitive.

    Returns:
        BaseChecker: The checker instance.

    Raises:
        ValueError: If no checker with that name exists.
    """
    return _get_checker(name.lower())


@lru_cache(maxsize=None)
def _get_checker(name: str) -> BaseChecker:
    found = available_checkers()
    checker_cls = found.get(name)
    if checker_cls is None:
        raise ValueError(f"Unknown checker '{name}'. Available: {', '.join(sorted(found))}")
    logger.debug(f"Using checker: {checker_cls.name}")
    return checker_cls()


def checker_from_config(config: Config) -> BaseChecker:
    """Resolves the checker named by the `checker` configuration setting."""
    return get_checker(config.get("checker", DEFAULT_CHECKER))
