import pytest

from cryptool.core.config import (
    DEFAULT_CONFIG,
    ENGLISH_FREQUENCIES,
    Alphabet,
    CrackConfig,
    config_for_alphabet,
    load_frequency_table,
)


def test_default_alphabet():
    assert len(DEFAULT_CONFIG.alphabet) == 26
    assert DEFAULT_CONFIG.modulus == 26
    assert DEFAULT_CONFIG.alphabet.index("e") == 4
    assert "E" not in DEFAULT_CONFIG.alphabet


def test_alphabet_rejects_degenerate_input():
    with pytest.raises(ValueError):
        Alphabet("a")
    with pytest.raises(ValueError):
        Alphabet("abca")


def test_alphabet_filter():
    alphabet = Alphabet()
    assert alphabet.filter("Hello, World!") == "helloworld"
    assert alphabet.filter("Hello", fold_case=False) == "ello"


def test_english_table_is_a_distribution():
    assert len(ENGLISH_FREQUENCIES) == 26
    assert abs(sum(ENGLISH_FREQUENCIES) - 1.0) < 0.02


def test_config_validates_reference_length():
    with pytest.raises(ValueError):
        CrackConfig(reference_frequencies=(0.5, 0.5))


def test_config_validates_frequency_order():
    with pytest.raises(ValueError):
        CrackConfig(alphabet=Alphabet("abc"), frequency_order="abd", reference_frequencies=(1, 1, 1))


def test_config_accepts_plain_string_alphabet():
    config = CrackConfig(alphabet="abc", frequency_order="cab", reference_frequencies=(0.2, 0.3, 0.5))
    assert isinstance(config.alphabet, Alphabet)
    assert config.modulus == 3


def test_config_for_alphabet():
    assert config_for_alphabet("abcdefghijklmnopqrstuvwxyz") is DEFAULT_CONFIG
    config = config_for_alphabet("abcde")
    assert config.modulus == 5
    assert config.frequency_order == "abcde"
    assert config.reference_frequencies == (0.2,) * 5


def test_with_reference_replaces_table_only():
    table = tuple(1 / 26 for _ in range(26))
    config = DEFAULT_CONFIG.with_reference(table)
    assert config.reference_frequencies == table
    assert config.alphabet == DEFAULT_CONFIG.alphabet


def test_load_frequency_table(tmp_path):
    path = tmp_path / "freqs.txt"
    path.write_text("# toy table\nA 3\nb=1\n\nnot a line\nz, 4\n", encoding="utf-8")

    table = load_frequency_table(path)
    assert len(table) == 26
    assert table[0] == pytest.approx(0.375)
    assert table[1] == pytest.approx(0.125)
    assert table[25] == pytest.approx(0.5)
    assert table[2] == 0.0


def test_load_frequency_table_rejects_garbage(tmp_path):
    path = tmp_path / "freqs.txt"
    path.write_text("nothing useful here\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_frequency_table(path)


def test_config_for_upper_case_alphabet():
    config = config_for_alphabet("ABCDEFGHIJKLMNOPQRSTUVWXYZ")
    assert config.fold_case is False
    assert config.frequency_order == "ETAOINSRHDLUCMFYWGPBVKXQJZ"
    assert config.reference_frequencies == ENGLISH_FREQUENCIES

    mixed = config_for_alphabet("aBcD")
    assert mixed.fold_case is False
    assert mixed.alphabet.filter("abcdABCD", fold_case=mixed.fold_case) == "acBD"


def test_config_rejects_folding_an_upper_case_alphabet():
    with pytest.raises(ValueError):
        CrackConfig(alphabet="ABC", frequency_order="ABC", reference_frequencies=(1, 1, 1))


def test_load_frequency_table_for_upper_case_alphabet(tmp_path):
    path = tmp_path / "freqs.txt"
    path.write_text("e 3\nT 1\n", encoding="utf-8")

    table = load_frequency_table(path, Alphabet("ABCDEFGHIJKLMNOPQRSTUVWXYZ"))
    assert table[4] == pytest.approx(0.75)
    assert table[19] == pytest.approx(0.25)
