# errors.py
from __future__ import annotations


class EnigmaError(ValueError):
    """Base class for every failure raised by the machine and its loaders."""


class OutOfRangeError(EnigmaError):
    """An index falls outside ``0 <= index < size``."""


class UnknownCharacterError(EnigmaError):
    """A character is not a member of the governing alphabet."""


class ConfigError(EnigmaError):
    """Structural mismatch in rotors, settings or plugboard."""
