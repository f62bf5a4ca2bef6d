"""Utility modules for pyquidquid.

This package contains helpers used by the command line tool: loading JSON
documents from files, stdin or URLs, and extracting fields addressed by
dotted paths.
"""
