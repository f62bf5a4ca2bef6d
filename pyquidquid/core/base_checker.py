"""
Base checker class that all validation backends inherit from.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict

logger = logging.getLogger(__name__)

# The value kinds an accessor can ask a checker about.
KINDS = ("string", "number", "boolean", "object")


class BaseChecker(ABC):
    """Abstract base class for all validation backends.

    A checker answers a single question: does a value belong to a given kind?
    Accessors only need pass/fail, so every method returns a plain bool and
    any diagnostic detail the underlying engine produces is discarded.

    Subclasses implement one predicate per kind. `check` and `check_array`
    dispatch to them, so a backend that can validate a whole array in one
    call may override `check_array` directly.

    Attributes:
        name (str): The lookup name of the checker (e.g. "jsonschema").
        description (str): A brief explanation of how the checker works.
    """

    name: str = "unnamed"
    description: str = "No description provided"

    def check(self, value: Any, kind: str) -> bool:
        """Checks whether `value` belongs to `kind`.

        This wraps the kind-specific predicate with a try-except block so
        that a backend failing on an unexpected input is reported as a
        rejection instead of crashing the caller.

        Args:
            value (Any): The value to check.
            kind (str): One of "string", "number", "boolean" or "object".

        Returns:
            bool: True if the value is accepted.

        Raises:
            ValueError: If `kind` is not a supported kind.
        """
        predicate = self._predicate(kind)
        try:
            return bool(predicate(value))
        except Exception as e:
            logger.warning(f"Checker {self.name} failed on {kind} check: {e}")
            return False

    def check_array(self, value: Any, kind: str) -> bool:
        """Checks whether `value` is an array whose every element is `kind`.

        Args:
            value (Any): The value to check.
            kind (str): The kind every element must belong to.

        Returns:
            bool: True if the value is an array of `kind` elements.
        """
        self._predicate(kind)
        if not self.check_is_array(value):
            return False
        return all(self.check(item, kind) for item in value)

    def check_is_array(self, value: Any) -> bool:
        try:
            return bool(self.is_array(value))
        except Exception as e:
            logger.warning(f"Checker {self.name} failed on array check: {e}")
            return False

    def _predicate(self, kind: str) -> Callable[[Any], bool]:
        predicates: Dict[str, Callable[[Any], bool]] = {
            "string": self.is_string,
            "number": self.is_number,
            "boolean": self.is_boolean,
            "object": self.is_object,
        }
        try:
            return predicates[kind]
        except KeyError:
            raise ValueError(f"Unsupported kind '{kind}'. Expected one of: {', '.join(KINDS)}") from None

    @abstractmethod
    def is_string(self, value: Any) -> bool:
        raise NotImplementedError("Subclasses must implement is_string()")

    @abstractmethod
    def is_number(self, value: Any) -> bool:
        """Numbers exclude booleans and NaN."""
        raise NotImplementedError("Subclasses must implement is_number()")

    @abstractmethod
    def is_boolean(self, value: Any) -> bool:
        raise NotImplementedError("Subclasses must implement is_boolean()")

    @abstractmethod
    def is_object(self, value: Any) -> bool:
        """Objects are key/value mappings; arrays are not objects."""
        raise NotImplementedError("Subclasses must implement is_object()")

    @abstractmethod
    def is_array(self, value: Any) -> bool:
        raise NotImplementedError("Subclasses must implement is_array()")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
