# alphabet_and_permutation.py
from __future__ import annotations

from collections.abc import Iterator

from errors import ConfigError, OutOfRangeError, UnknownCharacterError

UPPER = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


# ── Alphabet ──────────────────────────────────────────────────────
class Alphabet:
    """Ordered, duplicate-free set of encodable characters.

    The K-th character has index K, so the alphabet also fixes the valid
    signal range ``0 <= index < size()``.
    """

    def __init__(self, chars: str = UPPER) -> None:
        if not chars:
            raise ConfigError("Alphabet must contain at least one character")
        seen: set[str] = set()
        for ch in chars:
            if ch in seen:
                raise ConfigError(f"Character {ch!r} duplicated in alphabet")
            seen.add(ch)

        self._chars: str = chars
        self._index: dict[str, int] = {ch: i for i, ch in enumerate(chars)}

    def size(self) -> int:
        return len(self._chars)

    def contains(self, ch: str) -> bool:
        return ch in self._index

    # integer signal → letter
    def to_char(self, index: int) -> str:
        if not (0 <= index < len(self._chars)):
            hi = len(self._chars) - 1
            raise OutOfRangeError(f"Index {index} out of range 0–{hi}")
        return self._chars[index]

    # letter → integer signal
    def to_int(self, ch: str) -> int:
        try:
            return self._index[ch]
        except KeyError:
            raise UnknownCharacterError(
                f"Invalid character {ch!r} for current alphabet."
            ) from None

    @property
    def chars(self) -> str:
        return self._chars

    # niceties
    def __len__(self) -> int:
        return len(self._chars)

    def __contains__(self, ch: object) -> bool:
        return ch in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self._chars)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Alphabet):
            return NotImplemented
        return self._chars == other._chars

    def __hash__(self) -> int:
        return hash(self._chars)

    def __repr__(self) -> str:
        return f"<Alphabet {self._chars!r}>"


# ── Permutation ───────────────────────────────────────────────────
def _split_cycles(cycles: str) -> tuple[str, ...]:
    """Split "(ABC) (DE)" into ("ABC", "DE"), rejecting malformed text."""
    depth = 0
    for ch in cycles:
        if ch == "(":
            if depth:
                raise ConfigError(f"Nested parenthesis in cycles {cycles!r}")
            depth = 1
        elif ch == ")":
            if not depth:
                raise ConfigError(f"Unbalanced ')' in cycles {cycles!r}")
            depth = 0
        elif depth == 0 and not ch.isspace():
            raise ConfigError(f"Character {ch!r} outside a cycle in {cycles!r}")
    if depth:
        raise ConfigError(f"Unclosed cycle in {cycles!r}")

    return tuple(cycles.replace("(", "").replace(")", " ").split())


class Permutation:
    """A permutation of alphabet indices written in cycle notation.

    Characters missing from every cycle map to themselves, so the empty
    string is the identity.  Both directions are kept as integer lookup
    tables.
    """

    def __init__(self, cycles: str, alphabet: Alphabet) -> None:
        self.alphabet: Alphabet = alphabet
        self.cycles: tuple[str, ...] = _split_cycles(cycles)

        size = alphabet.size()
        self._fwd: list[int] = list(range(size))
        used: set[str] = set()

        for cycle in self.cycles:
            for ch in cycle:
                if ch not in alphabet:
                    raise UnknownCharacterError(
                        f"Cycle character {ch!r} not in alphabet"
                    )
                if ch in used:
                    raise ConfigError(f"Character {ch!r} appears in two cycles")
                used.add(ch)
            self._add_cycle(cycle)

        self._rev: list[int] = [0] * size
        for src, dst in enumerate(self._fwd):
            self._rev[dst] = src

    @classmethod
    def from_wiring(cls, wiring: str, alphabet: Alphabet) -> "Permutation":
        """Build from a wiring string, the image of each alphabet letter."""
        if sorted(wiring) != sorted(alphabet.chars):
            raise ConfigError("wiring must be a permutation of alphabet")

        image = dict(zip(alphabet.chars, wiring))
        seen: set[str] = set()
        cycles: list[str] = []
        for start in alphabet:
            if start in seen or image[start] == start:
                continue
            cycle = ""
            ch = start
            while ch not in seen:
                seen.add(ch)
                cycle += ch
                ch = image[ch]
            cycles.append(f"({cycle})")
        return cls(" ".join(cycles), alphabet)

    # c0 → c1 → … → cm → c0
    def _add_cycle(self, cycle: str) -> None:
        idx = [self.alphabet.to_int(ch) for ch in cycle]
        for k, src in enumerate(idx):
            self._fwd[src] = idx[(k + 1) % len(idx)]

    def size(self) -> int:
        return self.alphabet.size()

    def wrap(self, p: int) -> int:
        """Return P modulo the alphabet size, also for negative P."""
        return p % self.size()

    # ── index signal paths ───────────────────────────────────────
    def permute(self, p: int) -> int:
        return self._fwd[self.wrap(p)]

    def invert(self, c: int) -> int:
        return self._rev[self.wrap(c)]

    # ── character signal paths ───────────────────────────────────
    def permute_char(self, p: str) -> str:
        return self.alphabet.to_char(self._fwd[self.alphabet.to_int(p)])

    def invert_char(self, c: str) -> str:
        return self.alphabet.to_char(self._rev[self.alphabet.to_int(c)])

    # ── queries ──────────────────────────────────────────────────
    def derangement(self) -> bool:
        """True iff the cycles cover the whole alphabet."""
        return sum(len(c) for c in self.cycles) == self.size()

    def is_involution(self) -> bool:
        return all(self._fwd[dst] == src for src, dst in enumerate(self._fwd))

    def __repr__(self) -> str:
        cycles = " ".join(f"({c})" for c in self.cycles)
        return f"<Permutation {cycles or 'identity'}>"
