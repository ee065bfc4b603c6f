# rotor_and_reflector.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from alphabet_and_permutation import Alphabet, Permutation
from errors import ConfigError, OutOfRangeError, UnknownCharacterError


class RotorKind(Enum):
    """Rotor variants, valued by their catalogue type letter."""

    REFLECTOR = "R"
    FIXED = "N"
    MOVING = "M"


@dataclass(slots=True, eq=False)
class Rotor:
    """One wheel of the machine: a permutation seen through a rotation.

    ``notches`` is only meaningful for ``RotorKind.MOVING`` wheels; the
    other kinds always carry an empty string.
    """

    name: str
    kind: RotorKind
    permutation: Permutation
    notches: str = ""
    setting: int = 0

    @property
    def alphabet(self) -> Alphabet:
        return self.permutation.alphabet

    @property
    def size(self) -> int:
        return self.permutation.size()

    def __repr__(self) -> str:
        return f"<Rotor {self.name} {self.kind.name} pos={self.setting}>"


# ── construction ─────────────────────────────────────────────────
def reflector(name: str, perm: Permutation) -> Rotor:
    # reciprocity needs w[w[i]] == i
    if not perm.is_involution():
        raise ConfigError(f"Reflector {name} wiring must be an involution")
    return Rotor(name, RotorKind.REFLECTOR, perm)


def fixed_rotor(name: str, perm: Permutation) -> Rotor:
    return Rotor(name, RotorKind.FIXED, perm)


def moving_rotor(name: str, perm: Permutation, notches: str) -> Rotor:
    for ch in notches:
        if ch not in perm.alphabet:
            raise UnknownCharacterError(
                f"Notch {ch!r} of rotor {name} not in alphabet"
            )
    return Rotor(name, RotorKind.MOVING, perm, notches)


# ── capability queries ───────────────────────────────────────────
def rotates(rotor: Rotor) -> bool:
    return rotor.kind is RotorKind.MOVING


def reflecting(rotor: Rotor) -> bool:
    return rotor.kind is RotorKind.REFLECTOR


def at_notch(rotor: Rotor) -> bool:
    """True iff a moving rotor shows one of its notch letters."""
    if rotor.kind is not RotorKind.MOVING:
        return False
    return rotor.alphabet.to_char(rotor.setting) in rotor.notches


# ── setting & stepping ───────────────────────────────────────────
def set_setting(rotor: Rotor, posn: int) -> None:
    if rotor.kind is RotorKind.REFLECTOR and posn != 0:
        raise ConfigError(f"Reflector {rotor.name} cannot be set to {posn}")
    if not (0 <= posn < rotor.size):
        raise OutOfRangeError(
            f"Setting {posn} out of range 0–{rotor.size - 1} for {rotor.name}"
        )
    rotor.setting = posn


def reset(rotor: Rotor) -> None:
    rotor.setting = 0


def advance(rotor: Rotor) -> None:
    """Step a moving rotor one position; other kinds never move."""
    if rotor.kind is RotorKind.MOVING:
        rotor.setting = (rotor.setting + 1) % rotor.size


# ── signal paths ─────────────────────────────────────────────────
def convert_forward(rotor: Rotor, p: int) -> int:
    perm = rotor.permutation
    mapped = perm.permute(perm.wrap(p + rotor.setting))
    return perm.wrap(mapped - rotor.setting)


def convert_backward(rotor: Rotor, e: int) -> int:
    perm = rotor.permutation
    mapped = perm.invert(perm.wrap(e + rotor.setting))
    return perm.wrap(mapped - rotor.setting)
