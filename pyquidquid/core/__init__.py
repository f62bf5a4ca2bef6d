"""Core components for pyquidquid.

This package contains the field accessor, its error types, the base class
for validation checkers, the checker registry, and the configuration
manager.
"""
