import pytest

from alphabet_and_permutation import UPPER, Alphabet, Permutation
from errors import ConfigError, EnigmaError, OutOfRangeError, UnknownCharacterError


@pytest.fixture
def abcde():
    return Alphabet("ABCDE")


# ── Alphabet ──────────────────────────────────────────────────────
def test_default_alphabet_is_upper_case():
    alpha = Alphabet()
    assert alpha.size() == 26
    assert alpha.chars == UPPER
    assert alpha.to_int("A") == 0
    assert alpha.to_char(25) == "Z"


def test_alphabet_index_round_trip(abcde):
    for i, ch in enumerate("ABCDE"):
        assert abcde.to_int(ch) == i
        assert abcde.to_char(i) == ch
    assert abcde.contains("C")
    assert not abcde.contains("Z")
    assert "E" in abcde and len(abcde) == 5


def test_to_char_rejects_index_equal_to_size(abcde):
    with pytest.raises(OutOfRangeError):
        abcde.to_char(5)
    with pytest.raises(OutOfRangeError):
        abcde.to_char(-1)


def test_to_int_rejects_unknown_character(abcde):
    with pytest.raises(UnknownCharacterError):
        abcde.to_int("Z")


@pytest.mark.parametrize("chars", ["", "ABCA"])
def test_bad_alphabets(chars):
    with pytest.raises(ConfigError):
        Alphabet(chars)


def test_errors_are_value_errors(abcde):
    with pytest.raises(ValueError):
        abcde.to_int("?")
    assert issubclass(ConfigError, EnigmaError)


# ── Permutation ───────────────────────────────────────────────────
def test_single_cycle(abcde):
    perm = Permutation("(BACDE)", abcde)
    assert perm.permute_char("A") == "C"
    assert perm.permute_char("B") == "A"
    assert perm.permute_char("D") == "E"
    assert perm.permute_char("E") == "B"
    assert perm.invert_char("A") == "B"
    assert perm.invert_char("B") == "E"
    assert perm.invert_char("D") == "C"
    assert perm.derangement()


def test_several_cycles_with_singleton(abcde):
    perm = Permutation("(AE) (CD) (B)", abcde)
    assert perm.permute_char("A") == "E"
    assert perm.permute_char("E") == "A"
    assert perm.permute_char("B") == "B"
    assert perm.invert_char("C") == "D"
    assert perm.cycles == ("AE", "CD", "B")
    assert perm.is_involution()


def test_identity_when_no_cycles(abcde):
    perm = Permutation("", abcde)
    assert [perm.permute(i) for i in range(5)] == [0, 1, 2, 3, 4]
    assert not perm.derangement()
    assert perm.is_involution()


def test_missing_characters_are_fixed(abcde):
    perm = Permutation("(ABC)", abcde)
    assert perm.permute(3) == 3
    assert perm.invert(4) == 4
    assert not perm.derangement()
    assert not perm.is_involution()


def test_integer_paths_wrap(abcde):
    perm = Permutation("(BACDE)", abcde)
    assert perm.wrap(-1) == 4
    assert perm.wrap(7) == 2
    assert perm.permute(-5) == perm.permute(0)
    assert perm.invert(perm.permute(12)) == 2


def test_cycles_without_spaces(abcde):
    perm = Permutation("(AB)(CD)", abcde)
    assert perm.permute_char("C") == "D"


def test_inverse_is_total(abcde):
    perm = Permutation("(ACE) (BD)", abcde)
    for i in range(perm.size()):
        assert perm.invert(perm.permute(i)) == i
        assert perm.permute(perm.invert(i)) == i


@pytest.mark.parametrize("cycles", ["(AB", "AB)", "((AB))", "X (AB)", "(AB) C"])
def test_malformed_cycles(abcde, cycles):
    with pytest.raises(ConfigError):
        Permutation(cycles, abcde)


def test_repeated_character_rejected(abcde):
    with pytest.raises(ConfigError):
        Permutation("(AB) (BC)", abcde)


def test_cycle_character_outside_alphabet(abcde):
    with pytest.raises(UnknownCharacterError):
        Permutation("(AZ)", abcde)


def test_from_wiring_matches_cycles():
    alpha = Alphabet()
    perm = Permutation.from_wiring("EKMFLGDQVZNTOWYHXUSPAIBRCJ", alpha)
    assert perm.permute_char("A") == "E"
    assert perm.permute_char("Z") == "J"
    assert perm.invert_char("E") == "A"
    assert perm.cycles[0] == "AELTPHQXRU"


def test_from_wiring_drops_fixed_points(abcde):
    perm = Permutation.from_wiring("BACDE", abcde)
    assert perm.cycles == ("AB",)


def test_from_wiring_must_permute_alphabet(abcde):
    with pytest.raises(ConfigError):
        Permutation.from_wiring("AACDE", abcde)
