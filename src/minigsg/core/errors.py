# Copyright (c) 2025.
# This file is part of MiniGSG, released under the MIT License.
"""
Exception hierarchy for MiniGSG.

Every error derives from :class:`ContactGraphError` and also from the builtin
exception a caller would naturally catch (``ValueError`` for bad input,
``KeyError`` for failed lookups). Errors abort the single operation that
raised them; mutations are validated before they are applied, so a graph is
left in its last valid state.
"""

from __future__ import annotations


class ContactGraphError(Exception):
    """Base class for all MiniGSG errors."""


class UnknownContactFamilyError(ContactGraphError, ValueError):
    """A contact-plane family id is not in the shape's catalog."""


class OverwriteError(ContactGraphError, ValueError):
    """A forest scan would overwrite a value that is already set."""

    def __init__(self, message: str, vertex=None) -> None:
        super().__init__(message)
        self.vertex = vertex


class PoseOverspecifiedError(OverwriteError):
    """An object's placement was given both as a fixed pose and by a contact."""


class StructuralViolationError(ContactGraphError, ValueError):
    """An edge would break the forest structure (cycle, self loop, second parent)."""


class NameConflictError(ContactGraphError, ValueError):
    """An object name is already registered."""


class UnknownNameError(ContactGraphError, KeyError):
    """No object is registered under the given name."""


class MissingContactError(ContactGraphError, KeyError):
    """No contact edge exists between the given objects."""


class MissingSeedError(ContactGraphError, ValueError):
    """A forest root has no seed value (for contact graphs: no absolute pose)."""

    def __init__(self, message: str, vertex=None) -> None:
        super().__init__(message)
        self.vertex = vertex
