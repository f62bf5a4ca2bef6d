"""Validates value kinds with JSON Schema (Draft 7).

Each kind is compiled once into a small schema such as `{"type": "string"}`,
and arrays of a kind into `{"type": "array", "items": {...}}`, so an array
is validated in a single call to the schema engine.

The stock Draft 7 type checker treats NaN as a number. Payloads decoded
from JSON cannot contain NaN, but Python callers can pass one in, so the
"number" type is redefined to reject it.
"""
import math
from typing import Any, Dict

from jsonschema import Draft7Validator, validators

from ..core.base_checker import KINDS, BaseChecker


def _is_number(checker, instance: Any) -> bool:
    if not Draft7Validator.TYPE_CHECKER.is_type(instance, "number"):
        return False
    return not (isinstance(instance, float) and math.isnan(instance))


StrictDraft7Validator = validators.extend(
    Draft7Validator,
    type_checker=Draft7Validator.TYPE_CHECKER.redefine("number", _is_number),
)


class JsonSchemaChecker(BaseChecker):
    """Validates kinds by running compiled JSON Schemas."""
    name = "jsonschema"
    description = "Checks kinds with Draft 7 JSON Schemas via the jsonschema library."

    def __init__(self) -> None:
        self._scalar_validators: Dict[str, Any] = {}
        self._array_validators: Dict[str, Any] = {}
        for kind in KINDS:
            schema = {"type": kind}
            self._scalar_validators[kind] = StrictDraft7Validator(schema)
            self._array_validators[kind] = StrictDraft7Validator({"type": "array", "items": schema})
        self._any_array = StrictDraft7Validator({"type": "array"})

    def is_string(self, value: Any) -> bool:
        return self._scalar_validators["string"].is_valid(value)

    def is_number(self, value: Any) -> bool:
        return self._scalar_validators["number"].is_valid(value)

    def is_boolean(self, value: Any) -> bool:
        return self._scalar_validators["boolean"].is_valid(value)

    def is_object(self, value: Any) -> bool:
        return self._scalar_validators["object"].is_valid(value)

    def is_array(self, value: Any) -> bool:
        return self._any_array.is_valid(value)

    def check_array(self, value: Any, kind: str) -> bool:
        """Validates the whole array against one compiled schema."""
        self._predicate(kind)
        try:
            return self._array_validators[kind].is_valid(value)
        except Exception:
            # Fall back to element-wise checks, which log the failure.
            return super().check_array(value, kind)
