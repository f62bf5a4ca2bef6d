"""Checks value kinds with plain isinstance tests."""
import math
from collections.abc import Mapping
from typing import Any

from ..core.base_checker import BaseChecker


class BuiltinChecker(BaseChecker):
    """Validates kinds against the Python types produced by `json.loads`."""
    name = "builtin"
    description = "Checks kinds with isinstance, without a schema engine."

    def is_string(self, value: Any) -> bool:
        return isinstance(value, str)

    def is_number(self, value: Any) -> bool:
        # bool is a subclass of int.
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        return not (isinstance(value, float) and math.isnan(value))

    def is_boolean(self, value: Any) -> bool:
        return isinstance(value, bool)

    def is_object(self, value: Any) -> bool:
        return isinstance(value, Mapping)

    def is_array(self, value: Any) -> bool:
        return isinstance(value, list)
