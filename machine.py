# machine.py  ─────────────────────────────────────────────────────
from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import NamedTuple, Optional

import rotor_and_reflector as rr
from alphabet_and_permutation import Alphabet, Permutation
from errors import ConfigError
from rotor_and_reflector import Rotor


class StepTrace(NamedTuple):
    """What one key-press did, handed to an optional observer."""

    settings: str   # window letters after stepping, slots 1..n-1
    source: str
    plugged: str    # after the plugboard on the way in
    rotated: str    # back out of the rotor stack
    result: str


Observer = Callable[[StepTrace], None]


class Machine:
    """A rotor machine with ``num_rotors`` slots and ``num_pawls`` pawls.

    Slot 0 holds the reflector and the last slot the fast rotor.  Rotors
    are picked by name from the catalogue given at construction time.
    """

    def __init__(
        self,
        alphabet: Alphabet,
        num_rotors: int,
        num_pawls: int,
        all_rotors: Iterable[Rotor] | Mapping[str, Rotor],
    ) -> None:
        if num_rotors < 1:
            raise ConfigError("Machine needs at least one rotor slot")
        if not (0 <= num_pawls < num_rotors):
            raise ConfigError(
                f"Pawl count {num_pawls} must be in 0–{num_rotors - 1}"
            )

        if isinstance(all_rotors, Mapping):
            all_rotors = all_rotors.values()
        catalogue: dict[str, Rotor] = {}
        for rotor in all_rotors:
            if rotor.name in catalogue:
                raise ConfigError(f"Rotor {rotor.name} defined twice")
            if rotor.alphabet != alphabet:
                raise ConfigError(f"Rotor {rotor.name} uses another alphabet")
            catalogue[rotor.name] = rotor

        self._alphabet = alphabet
        self._num_rotors = num_rotors
        self._num_pawls = num_pawls
        self._catalogue = catalogue
        self._slots: list[Optional[Rotor]] = [None] * num_rotors
        self._plugboard = Permutation("", alphabet)

    # ── accessors ───────────────────────────────────────────────

    @property
    def alphabet(self) -> Alphabet:
        return self._alphabet

    @property
    def num_rotors(self) -> int:
        return self._num_rotors

    @property
    def num_pawls(self) -> int:
        return self._num_pawls

    @property
    def plugboard(self) -> Permutation:
        return self._plugboard

    @property
    def catalogue(self) -> Mapping[str, Rotor]:
        return self._catalogue

    def get_rotor(self, k: int) -> Optional[Rotor]:
        """Rotor in slot K, 0 being the reflector.  Do not modify it."""
        return self._slots[k]

    def rotor_names(self) -> list[str]:
        return [r.name for r in self._require_rotors()]

    def settings(self) -> str:
        """Window letters of slots 1..n-1, left to right."""
        return "".join(
            self._alphabet.to_char(r.setting) for r in self._require_rotors()[1:]
        )

    # ── configuration ───────────────────────────────────────────

    def insert_rotors(self, names: Sequence[str]) -> None:
        """Bind the slots to the catalogue rotors NAMES, reflector first.

        Every check runs before any slot is touched, so a failing call
        leaves the previous bindings in place.  Bound rotors start at
        setting 0.
        """
        if len(names) != self._num_rotors:
            raise ConfigError(
                f"Need exactly {self._num_rotors} rotors, got {len(names)}"
            )
        if len(set(names)) != len(names):
            raise ConfigError(f"Duplicate rotor in {' '.join(names)}")

        chosen: list[Rotor] = []
        for name in names:
            try:
                chosen.append(self._catalogue[name])
            except KeyError:
                raise ConfigError(f"Unknown rotor {name!r}") from None

        if not rr.reflecting(chosen[0]):
            raise ConfigError(f"Rotor {chosen[0].name} in slot 0 is not a reflector")
        if self._num_rotors > 1 and rr.rotates(chosen[0]):
            raise ConfigError(f"Rotor {chosen[0].name} in slot 0 must not rotate")
        for rotor in chosen[1:]:
            if rr.reflecting(rotor):
                raise ConfigError(f"Reflector {rotor.name} must sit in slot 0")

        for slot, rotor in enumerate(chosen):
            rr.reset(rotor)
            self._slots[slot] = rotor

    def set_rotors(self, setting: str) -> None:
        """Set slots 1..n-1 from SETTING, leftmost rotor first."""
        if len(setting) != self._num_rotors - 1:
            raise ConfigError(
                f"Setting {setting!r} must have {self._num_rotors - 1} characters"
            )
        for ch in setting:
            if not self._alphabet.contains(ch):
                raise ConfigError(f"Setting character {ch!r} not in alphabet")

        rotors = self._require_rotors()
        for rotor, ch in zip(rotors[1:], setting):
            rr.set_setting(rotor, self._alphabet.to_int(ch))

    def set_plugboard(self, plugboard: Permutation) -> None:
        if plugboard.alphabet != self._alphabet:
            raise ConfigError("Plugboard uses another alphabet")
        if not plugboard.is_involution():
            raise ConfigError("Plugboard must consist of swapped pairs")
        self._plugboard = plugboard

    # ── stepping logic  ─────────────────────────────────────────

    def advance_rotors(self) -> None:
        """Advance rotors one key-press, double-stepping included.

        Every decision reads the settings from before this key-press.
        """
        rotors = self._require_rotors()
        last = len(rotors) - 1
        notched = [rr.at_notch(r) for r in rotors]

        step = [False] * len(rotors)
        step[last] = True
        for i in range(1, last):
            if notched[i + 1]:
                step[i] = True
        for i in range(2, len(rotors)):
            if notched[i] and rr.rotates(rotors[i - 1]):
                step[i] = True

        for rotor, go in zip(rotors, step):
            if go:
                rr.advance(rotor)

    # ── encipher  ───────────────────────────────────────────────

    def convert(self, c: int, observer: Optional[Observer] = None) -> int:
        """Convert signal C after first advancing the machine."""
        rotors = self._require_rotors()
        self.advance_rotors()

        signal = self._plugboard.permute(c)
        plugged = signal

        for rotor in reversed(rotors):
            signal = rr.convert_forward(rotor, signal)
        for rotor in rotors[1:]:
            signal = rr.convert_backward(rotor, signal)

        rotated = signal
        signal = self._plugboard.permute(signal)

        if observer is not None:
            to_char = self._alphabet.to_char
            observer(StepTrace(
                self.settings(),
                to_char(self._plugboard.wrap(c)),
                to_char(plugged),
                to_char(rotated),
                to_char(signal),
            ))
        return signal

    def convert_message(self, msg: str, observer: Optional[Observer] = None) -> str:
        """Convert every character of MSG, carrying rotor state along."""
        alpha = self._alphabet
        return "".join(
            alpha.to_char(self.convert(alpha.to_int(ch), observer)) for ch in msg
        )

    # ── helpers ─────────────────────────────────────────────────

    def _require_rotors(self) -> list[Rotor]:
        if any(r is None for r in self._slots):
            raise ConfigError("Rotors have not been inserted")
        return self._slots  # type: ignore[return-value]

    def __repr__(self) -> str:
        names = [r.name if r else "-" for r in self._slots]
        return f"<Machine slots={names} pawls={self._num_pawls}>"
