"""Errors raised while building simulation state.

Everything here is raised *before* a simulation exists: once an engine is
constructed, stepping is total over valid state and does not raise.
"""

from __future__ import annotations


class AntSimError(Exception):
    """Base class for all antsim errors."""


class MalformedSaveError(AntSimError, ValueError):
    """A save document failed schema validation.

    Raised for missing keys, wrong field types, out-of-range indices and
    conflicting cell classifications.  The message names the offending
    field, e.g. ``ants[3].position``.
    """


class InvalidConfigurationError(AntSimError, ValueError):
    """A well-formed document or config describes an unusable world.

    Examples: a zero-size board, an empty movement direction set, or an
    ant standing on a blocker.
    """
