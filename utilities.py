# utilities.py
from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from alphabet_and_permutation import UPPER, Alphabet, Permutation
from debug import Debug
from errors import ConfigError
from machine import Machine, Observer
from rotor_and_reflector import Rotor, RotorKind, fixed_rotor, moving_rotor, reflector

debug = Debug()

# ────────────────────────────────────────────────────────────────────────
#  0. Regex & trivial helpers
# ────────────────────────────────────────────────────────────────────────

_cycle_re = re.compile(r"^\(.*\)$")
_RESERVED = set("()*")


def _is_cycle(token: str) -> bool:
    return token.startswith("(")


def _build_rotor(name: str, kind: str, perm: Permutation, notches: str = "") -> Rotor:
    if kind == RotorKind.MOVING.value:
        return moving_rotor(name, perm, notches)
    if notches:
        raise ConfigError(f"Only moving rotors have notches (rotor {name})")
    if kind == RotorKind.FIXED.value:
        return fixed_rotor(name, perm)
    if kind == RotorKind.REFLECTOR.value:
        return reflector(name, perm)
    raise ConfigError(f"Unknown rotor type {kind!r} for rotor {name}")


def _check_alphabet(chars: str) -> Alphabet:
    bad = (_RESERVED & set(chars)) | {c for c in chars if c.isspace()}
    if bad:
        raise ConfigError(f"Alphabet may not contain {''.join(sorted(bad))!r}")
    return Alphabet(chars)


def _count(token: str, what: str) -> int:
    if not token.isdigit():
        raise ConfigError(f"Expected {what}, found {token!r}")
    return int(token)


def _json_str(obj: dict, key: str, where: str, default: Optional[str] = None) -> str:
    value = obj.get(key, default)
    if not isinstance(value, str):
        raise ConfigError(f"{key!r} of {where} must be a string, got {value!r}")
    return value


def _json_int(obj: dict, key: str) -> int:
    value = obj[key]
    # bool is an int subclass; "true" slots make no sense
    if not isinstance(value, int) or isinstance(value, bool):
        raise ConfigError(f"{key!r} must be an integer, got {value!r}")
    return value


# ────────────────────────────────────────────────────────────────────────
#  1. Catalogue (machine configuration) loading
# ────────────────────────────────────────────────────────────────────────


def parse_config(text: str) -> Machine:
    """Build a Machine from configuration text.

    The text holds the alphabet, the slot and pawl counts, then one entry
    per rotor: ``NAME TYPE (cycle)...`` with TYPE ``M<notches>``, ``N`` or
    ``R``.  Cycles may continue over several lines.
    """
    tokens = text.split()
    if len(tokens) < 3:
        raise ConfigError("configuration file truncated")

    alphabet = _check_alphabet(tokens[0])
    num_rotors = _count(tokens[1], "number of rotor slots")
    num_pawls = _count(tokens[2], "number of pawls")

    rotors: List[Rotor] = []
    pos = 3
    while pos < len(tokens):
        if pos + 1 >= len(tokens):
            raise ConfigError(f"bad rotor description after {tokens[pos]!r}")
        name, kind = tokens[pos], tokens[pos + 1]
        if _is_cycle(name) or _is_cycle(kind):
            raise ConfigError(f"bad rotor description near {name!r}")
        pos += 2

        cycles: List[str] = []
        while pos < len(tokens) and _is_cycle(tokens[pos]):
            cycles.append(tokens[pos])
            pos += 1

        perm = Permutation(" ".join(cycles), alphabet)
        rotors.append(_build_rotor(name, kind[:1], perm, kind[1:]))
        debug.log("config", f"rotor {name} type={kind} cycles={len(cycles)}")

    return Machine(alphabet, num_rotors, num_pawls, rotors)


def parse_json_config(data: dict) -> Machine:
    """Build a Machine from the JSON form of the configuration."""
    if not isinstance(data, dict):
        raise ConfigError("Config must be a JSON object")
    required = {"alphabet", "rotors", "pawls", "wheels"}
    missing = required - data.keys()
    if missing:
        raise ConfigError(f"Missing keys in config: {', '.join(sorted(missing))}")

    alphabet = _check_alphabet(_json_str(data, "alphabet", "config"))
    if not isinstance(data["wheels"], list):
        raise ConfigError("'wheels' must be a list")

    rotors: List[Rotor] = []
    for wheel in data["wheels"]:
        if not isinstance(wheel, dict):
            raise ConfigError(f"Wheel entry must be an object, got {wheel!r}")
        for key in ("name", "type"):
            if key not in wheel:
                raise ConfigError(f"Wheel entry lacks {key!r}")
        name = _json_str(wheel, "name", "wheel entry")
        where = f"wheel {name!r}"
        kind = _json_str(wheel, "type", where)
        notches = _json_str(wheel, "notches", where, "")

        if "wiring" in wheel:
            perm = Permutation.from_wiring(_json_str(wheel, "wiring", where), alphabet)
        else:
            perm = Permutation(_json_str(wheel, "cycles", where, ""), alphabet)
        rotors.append(_build_rotor(name, kind, perm, notches))
        debug.log("config", f"wheel {name} type={kind}")

    return Machine(alphabet, _json_int(data, "rotors"), _json_int(data, "pawls"), rotors)


def load_config(path: str | Path) -> Machine:
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"{path}: {exc}") from exc
        machine = parse_json_config(data)
    else:
        machine = parse_config(text)
    debug.log("config", f"loaded {path} → {machine!r}")
    return machine


# ────────────────────────────────────────────────────────────────────────
#  2. Settings lines
# ────────────────────────────────────────────────────────────────────────


def parse_settings(line: str, num_rotors: int) -> Tuple[List[str], str, str]:
    """Split ``* B BETA III IV I AXLE (HQ) (EX)`` into its three parts.

    Returns ``(rotor_names, setting, plugboard_cycles)``.
    """
    fields = line.split()
    if not fields or fields[0] != "*":
        raise ConfigError(f"Settings line must start with '*': {line!r}")
    fields = fields[1:]
    if len(fields) < num_rotors + 1:
        raise ConfigError("Incorrect number of args in settings line")

    names = fields[:num_rotors]
    setting = fields[num_rotors]
    plugs = fields[num_rotors + 1:]

    for token in plugs:
        if not _is_cycle(token):
            raise ConfigError(f"Ring settings are not supported: {token!r}")
        if not _cycle_re.match(token) or len(token) != 4:
            raise ConfigError(f"Plugboard entry {token!r} must be one pair")
    return names, setting, " ".join(plugs)


def apply_settings(machine: Machine, line: str) -> None:
    names, setting, plugs = parse_settings(line, machine.num_rotors)
    machine.insert_rotors(names)
    machine.set_rotors(setting)
    machine.set_plugboard(Permutation(plugs, machine.alphabet))
    debug.log("config", f"rotors={names} setting={setting} plugs={plugs or '-'}")


# ────────────────────────────────────────────────────────────────────────
#  3. Text preprocessing & output
# ────────────────────────────────────────────────────────────────────────


def preprocess_message(msg: str) -> str:
    """Drop the whitespace operators use to separate groups."""
    return "".join(msg.split())


def group_message(msg: str, block: int = 5) -> str:
    """Return MSG in blocks of BLOCK characters (the last may be shorter)."""
    if block < 1:
        raise ConfigError(f"Block size must be at least 1, got {block}")
    return " ".join(msg[i : i + block] for i in range(0, len(msg), block))


def process_lines(machine: Machine, lines: Iterable[str], *, block: int = 5,
                  observer: Optional[Observer] = None) -> Iterator[str]:
    """Yield one output line per message line, reconfiguring on ``*`` lines."""
    configured = False
    for raw in lines:
        line = raw.rstrip("\r\n")
        if line.lstrip().startswith("*"):
            apply_settings(machine, line)
            configured = True
            continue
        if not configured:
            if not line.strip():
                continue
            raise ConfigError("Input must begin with a settings line")
        result = machine.convert_message(preprocess_message(line), observer)
        yield group_message(result, block)


# ────────────────────────────────────────────────────────────────────────
#  4. Wheel database
# ────────────────────────────────────────────────────────────────────────

# (wiring, notches) for the Enigma I / M3 wheels
HISTORIC_ROTORS: Dict[str, Tuple[str, str]] = {
    "I":   ("EKMFLGDQVZNTOWYHXUSPAIBRCJ", "Q"),
    "II":  ("AJDKSIRUXBLHWTMCQGZNPYFVOE", "E"),
    "III": ("BDFHJLCPRTXVZNYEIWGAKMUSQO", "V"),
    "IV":  ("ESOVPZJAYQUIRHXLNFTGKDCMWB", "J"),
    "V":   ("VZBRGITYUPSDNHLXAWMJQOFECK", "Z"),
    "VI":  ("JPGVOUMFYQBENHZRDKASXLICTW", "ZM"),
    "VII": ("NZJHGRCXMYSWBOUFAIVLPEKQDT", "ZM"),
}

HISTORIC_REFLECTORS: Dict[str, str] = {
    "A": "EJMZALYXVBWFCRQUONTSPIKHGD",
    "B": "YRUHQSLDPXNGOKMIEBFZCWVJAT",
    "C": "FVPJIAOYEDRZXWGCTKUQSBNMHL",
}


def historic_catalogue(alphabet: Alphabet | None = None) -> List[Rotor]:
    """Fresh rotor objects for every historic wheel and reflector."""
    alphabet = alphabet or Alphabet(UPPER)
    wheels = [
        moving_rotor(name, Permutation.from_wiring(wiring, alphabet), notches)
        for name, (wiring, notches) in HISTORIC_ROTORS.items()
    ]
    wheels += [
        reflector(name, Permutation.from_wiring(wiring, alphabet))
        for name, wiring in HISTORIC_REFLECTORS.items()
    ]
    return wheels


def historic_machine() -> Machine:
    """Three-rotor machine (reflector + 3 moving wheels) over A–Z."""
    alphabet = Alphabet(UPPER)
    return Machine(alphabet, 4, 3, historic_catalogue(alphabet))


__all__ = [
    "load_config",
    "parse_config",
    "parse_json_config",
    "parse_settings",
    "apply_settings",
    "preprocess_message",
    "group_message",
    "process_lines",
    "historic_machine",
]
