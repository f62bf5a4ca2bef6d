"""Validation backends for field accessors.

Every module in this package is scanned by the checker registry. Each one
should contain one or more classes that inherit from
`pyquidquid.core.base_checker.BaseChecker`.
"""
from .builtin_checker import BuiltinChecker
from .jsonschema_checker import JsonSchemaChecker

__all__ = ["BuiltinChecker", "JsonSchemaChecker"]
