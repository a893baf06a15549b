"""UI package for mainline terminal user interfaces.

The engine is host-agnostic; this package provides the Textual host that
renders it as a modal command palette.
"""
