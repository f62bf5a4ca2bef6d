"""Typed, fail-fast field extraction from loosely-typed nested data.

A `Quidquid` wraps one level of a decoded payload (a mapping, a list, or a
scalar). Each `pick_*` coroutine reads one field, checks its kind with the
accessor's checker, and either returns the value, returns a new accessor for
a nested object, or raises a `FieldError` whose message names the dotted
path of the field, e.g. ``"user.address.city must not be empty"``.

Example:
    body = accessor_from(json.loads(raw))
    name = await body.pick_string("name")
    tags = await body.pick_string_array_optional("tags")
    address = await body.pick_object("address")
    city = await address.pick_string("city")

Strings use a wider notion of "empty" than the other kinds: any falsy value
(``None``, ``""``, ``0``, ``False``, NaN) counts as a missing string, while
numbers, booleans, objects and arrays are only missing when they are
``None`` or absent.
"""

import logging
import math
from collections.abc import Mapping
from typing import Any, List, Optional

from .base_checker import BaseChecker
from .errors import InvalidTypeError, MissingFieldError
from .registry import get_checker

# Initialize a logger for this module.
logger = logging.getLogger(__name__)

# Name used in error messages when an accessor reads its own wrapped value.
BODY = "body"

_ARTICLES = {
    "string": "a string",
    "number": "a number",
    "boolean": "a boolean",
    "object": "an object",
}


def _is_falsy(value: Any) -> bool:
    """Mirrors the truthiness of decoded JSON values, where containers are truthy."""
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (int, float)):
        return value == 0 or math.isnan(value)
    return False


class Quidquid:
    """Extracts and validates fields from one level of decoded data.

    Instances are read-only after construction. Nested objects are exposed
    through child accessors which share the parent's checker and record the
    parent's dotted path for error messages; the parent is never affected.

    Attributes:
        value (Any): The wrapped data.
        path_prefix (Optional[str]): Dotted path of this accessor relative to
            the root, or None for a root accessor.
        checker (BaseChecker): The backend used to check value kinds.
    """

    __slots__ = ("_value", "_path_prefix", "_checker")

    def __init__(self, value: Any, path_prefix: Optional[str] = None, checker: Optional[BaseChecker] = None) -> None:
        """Initializes the accessor.

        Callers normally use `Quidquid.from_value` or `accessor_from`;
        `path_prefix` is only set for child accessors.

        Args:
            value (Any): The data to extract fields from.
            path_prefix (Optional[str]): The dotted path of `value` within
                the root payload. Defaults to None.
            checker (Optional[BaseChecker]): The validation backend. Defaults
                to the shared "jsonschema" checker.
        """
        self._value = value
        self._path_prefix = path_prefix
        self._checker = checker if checker is not None else get_checker()

    @classmethod
    def from_value(cls, value: Any, checker: Optional[BaseChecker] = None) -> "Quidquid":
        """Constructs a root accessor for `value`.

        Args:
            value (Any): The source data from which fields will be extracted.
            checker (Optional[BaseChecker]): The validation backend to use
                for this accessor and every accessor derived from it.

        Returns:
            Quidquid: A new accessor with no path prefix.
        """
        return cls(value, checker=checker)

    @property
    def value(self) -> Any:
        return self._value

    @property
    def path_prefix(self) -> Optional[str]:
        return self._path_prefix

    @property
    def checker(self) -> BaseChecker:
        return self._checker

    def full_name(self, key: str) -> str:
        """Returns the dotted name of `key` relative to the root payload."""
        if not self._path_prefix:
            return key
        return f"{self._path_prefix}.{key}"

    def _read(self, key: str) -> Any:
        if isinstance(self._value, Mapping):
            return self._value.get(key)
        return None

    def _child(self, value: Any, path_prefix: Optional[str] = None) -> "Quidquid":
        logger.debug(f"Creating child accessor at {path_prefix or '<root>'}")
        return Quidquid(value, path_prefix=path_prefix, checker=self._checker)

    # Shared templates

    def _require_scalar(self, key: str, kind: str) -> Any:
        full_name = self.full_name(key)
        value = self._read(key)
        if value is None:
            raise MissingFieldError(full_name)
        if not self._checker.check(value, kind):
            raise InvalidTypeError(full_name, _ARTICLES[kind])
        return value

    def _require_array(self, key: Optional[str], kind: str) -> List[Any]:
        if not key:
            field, value = BODY, self._value
        else:
            field, value = self.full_name(key), self._read(key)
        if value is None:
            raise MissingFieldError(field)
        if not self._checker.check_array(value, kind):
            raise InvalidTypeError(field, f"an array of {kind}s")
        return value

    # Strings

    async def pick_string(self, key: str) -> str:
        """Extracts and validates a string field.

        Any falsy value, including the empty string, is treated as missing.

        Args:
            key (str): The key of the field to extract.

        Returns:
            str: The field's value.

        Raises:
            MissingFieldError: If the field is absent or falsy.
            InvalidTypeError: If the field is not a string.
        """
        if _is_falsy(self._read(key)):
            raise MissingFieldError(self.full_name(key))
        return self._require_scalar(key, "string")

    async def pick_string_optional(self, key: str) -> Optional[str]:
        """Like `pick_string`, but returns None when the field is absent or falsy."""
        if _is_falsy(self._read(key)):
            return None
        return await self.pick_string(key)

    async def pick_string_array(self, key: Optional[str] = None) -> List[str]:
        """Extracts and validates an array of strings.

        Args:
            key (Optional[str]): The key of the field to extract. If omitted,
                the accessor's own value is expected to be the array and
                errors refer to it as "body".

        Returns:
            List[str]: The array, unchanged.

        Raises:
            MissingFieldError: If the field (or body) is None or absent.
            InvalidTypeError: If it is not an array of strings.
        """
        return self._require_array(key, "string")

    async def pick_string_array_optional(self, key: str) -> Optional[List[str]]:
        if self._read(key) is None:
            return None
        return await self.pick_string_array(key)

    # Numbers

    async def pick_number(self, key: str) -> float:
        """Extracts and validates a number field. Zero is a present value.

        Raises:
            MissingFieldError: If the field is None or absent.
            InvalidTypeError: If the field is not a number.
        """
        return self._require_scalar(key, "number")

    async def pick_number_optional(self, key: str) -> Optional[float]:
        if self._read(key) is None:
            return None
        return await self.pick_number(key)

    async def pick_number_array(self, key: Optional[str] = None) -> List[float]:
        """Extracts an array of numbers; see `pick_string_array` for keyless use."""
        return self._require_array(key, "number")

    async def pick_number_array_optional(self, key: str) -> Optional[List[float]]:
        if self._read(key) is None:
            return None
        return await self.pick_number_array(key)

    # Booleans

    async def pick_boolean(self, key: str) -> bool:
        """Extracts and validates a boolean field. False is a present value."""
        return self._require_scalar(key, "boolean")

    async def pick_boolean_optional(self, key: str) -> Optional[bool]:
        if self._read(key) is None:
            return None
        return await self.pick_boolean(key)

    # Objects

    async def pick_object(self, key: str) -> "Quidquid":
        """Extracts a nested object and returns an accessor scoped to it.

        Errors raised by the returned accessor name fields relative to the
        root, e.g. picking "city" from the accessor returned for "address"
        reports "address.city".

        Args:
            key (str): The key of the field to extract.

        Returns:
            Quidquid: A child accessor wrapping the nested object.

        Raises:
            MissingFieldError: If the field is None or absent.
            InvalidTypeError: If the field is not an object.
        """
        value = self._require_scalar(key, "object")
        return self._child(value, path_prefix=self.full_name(key))

    async def pick_object_optional(self, key: str) -> Optional["Quidquid"]:
        if self._read(key) is None:
            return None
        return await self.pick_object(key)

    async def pick_object_array(self, key: Optional[str] = None) -> List["Quidquid"]:
        """Extracts an array of objects and wraps each element in an accessor.

        The element accessors have no path prefix: they are siblings, each
        reporting its own field names as top-level names.

        Args:
            key (Optional[str]): The key of the field to extract. If omitted,
                the accessor's own value is expected to be the array.

        Returns:
            List[Quidquid]: One accessor per element, in order.

        Raises:
            MissingFieldError: If the field (or body) is None or absent.
            InvalidTypeError: If it is not an array of objects.
        """
        values = self._require_array(key, "object")
        return [self._child(item) for item in values]

    async def pick_object_array_optional(self, key: str) -> Optional[List["Quidquid"]]:
        if self._read(key) is None:
            return None
        return await self.pick_object_array(key)

    def __repr__(self) -> str:
        return f"Quidquid(path_prefix={self._path_prefix!r}, checker={self._checker.name!r})"


def accessor_from(value: Any, checker: Optional[BaseChecker] = None) -> Quidquid:
    """Constructs a root accessor for `value`. See `Quidquid.from_value`."""
    return Quidquid.from_value(value, checker=checker)
