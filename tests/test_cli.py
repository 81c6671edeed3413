import json

from typer.testing import CliRunner

from cryptool.classical.monoalphabetic.affine import AffineTransformer
from cryptool.classical.polyalphabetic.vigenere import VigenereTransformer
from cryptool.cli import app

runner = CliRunner()


def test_plugins_lists_both_ciphers():
    result = runner.invoke(app, ["plugins"])
    assert result.exit_code == 0
    assert "affine  (monoalphabetic)" in result.output
    assert "vigenere  (polyalphabetic)" in result.output


def test_encrypt_then_decrypt_affine():
    result = runner.invoke(app, ["encrypt", "-c", "affine", "-k", "3,5", "Hello World"])
    assert result.exit_code == 0
    cipher = result.output.strip()
    assert cipher == AffineTransformer(3, 5).encrypt("hello world")

    result = runner.invoke(app, ["decrypt", "-c", "affine", "-k", "3,5", cipher])
    assert result.exit_code == 0
    assert result.output.strip() == "hello world"


def test_invalid_affine_key_is_a_usage_error():
    result = runner.invoke(app, ["encrypt", "-c", "affine", "-k", "13,5", "hello"])
    assert result.exit_code == 2


def test_input_must_be_text_or_file():
    result = runner.invoke(app, ["encrypt", "-c", "vigenere", "-k", "key"])
    assert result.exit_code == 2


def test_file_input_and_output(tmp_path):
    src = tmp_path / "in.txt"
    dst = tmp_path / "out.txt"
    src.write_text("attack at dawn\nsecond line\n", encoding="utf-8")

    result = runner.invoke(app, ["encrypt", "-c", "vigenere", "-k", "lemon", "-f", str(src), "-o", str(dst)])
    assert result.exit_code == 0
    lines = dst.read_text(encoding="utf-8").splitlines()
    assert lines == ["lxfopv ef rnhr", VigenereTransformer("lemon").encrypt("second line")]


def test_affine_crack_all_with_hints():
    result = runner.invoke(app, ["affine", "crack", "ifmmp", "-k", "h:i", "-k", "e:f"])
    assert result.exit_code == 0
    assert "Possible translations for first line of text" in result.output
    assert result.output.rstrip().endswith("  1  1 | hello")


def test_affine_crack_linear():
    cipher = AffineTransformer(3, 5).encrypt("the quick brown fox jumps over the lazy dog")
    result = runner.invoke(app, ["affine", "crack", cipher, "--mode", "linear", "-k", "t:k", "-k", "e:r"])
    assert result.exit_code == 0
    assert "  3  5 | the quick brown fox jumps over the lazy dog" in result.output


def test_affine_crack_contradicting_hints():
    result = runner.invoke(app, ["affine", "crack", "aaaa", "-k", "a:b", "-k", "b:b", "-m", "linear"])
    assert result.exit_code == 0


def test_affine_crack_bad_hint():
    result = runner.invoke(app, ["affine", "crack", "ifmmp", "-k", "hello"])
    assert result.exit_code == 2


def test_vigenere_crack(english_text):
    cipher = VigenereTransformer("lemon").encrypt(english_text)
    result = runner.invoke(app, ["vigenere", "crack", cipher, "--max-len", "8", "-p"])
    assert result.exit_code == 0
    assert "Potential key: lemon" in result.output
    assert english_text.lower()[:40] in result.output


def test_vigenere_crack_verbose_shows_notes(english_text):
    cipher = VigenereTransformer("lemon").encrypt(english_text)

    result = runner.invoke(app, ["-v", "vigenere", "crack", cipher, "-n", "8"])
    assert result.exit_code == 0
    assert "notes: Autocorrelation keylen=5" in result.output
    assert "sample_length" in result.output

    result = runner.invoke(app, ["vigenere", "crack", cipher, "-n", "8"])
    assert "notes:" not in result.output


def test_vigenere_crack_too_short():
    result = runner.invoke(app, ["vigenere", "crack", "abcdef", "-n", "4"])
    assert result.exit_code == 0
    assert "No key recovered" in result.output


def test_vigenere_crack_custom_frequency_table(tmp_path, english_text):
    table = tmp_path / "english.txt"
    table.write_text(
        "\n".join(f"{ch} {v}" for ch, v in zip("etaoinshrdlu", [12, 9, 8, 7.5, 7, 6.7, 6.3, 6.1, 6, 4.3, 4, 2.8])),
        encoding="utf-8",
    )
    cipher = VigenereTransformer("lemon").encrypt(english_text)
    result = runner.invoke(app, ["vigenere", "crack", cipher, "-n", "8", "--frequencies", str(table)])
    assert result.exit_code == 0
    assert "Potential key: lemon" in result.output


def test_vigenere_lengths(english_text):
    cipher = VigenereTransformer("lemon").encrypt(english_text)
    result = runner.invoke(app, ["vigenere", "lengths", cipher, "-n", "8", "-t", "1"])
    assert result.exit_code == 0
    assert result.output.strip().startswith("k= 5")


def test_custom_alphabet_option():
    result = runner.invoke(app, ["--alphabet", "abcde", "encrypt", "-c", "affine", "-k", "2,1", "abcde"])
    assert result.exit_code == 0
    assert result.output.strip() == "bdace"


def test_upper_case_alphabet_option():
    upper = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

    result = runner.invoke(app, ["--alphabet", upper, "encrypt", "-c", "affine", "-k", "3,5", "HELLO"])
    assert result.exit_code == 0
    assert result.output.strip() == "ARMMV"

    result = runner.invoke(app, ["--alphabet", upper, "affine", "crack", "IFMMP", "-k", "H:I", "-k", "E:F"])
    assert result.exit_code == 0
    assert result.output.rstrip().endswith("  1  1 | HELLO")


def test_bad_alphabet_option():
    result = runner.invoke(app, ["--alphabet", "aa", "plugins"])
    assert result.exit_code == 2


def test_freq(tmp_path):
    path = tmp_path / "sample.txt"
    path.write_text("aab", encoding="utf-8")

    result = runner.invoke(app, ["freq", str(path), str(tmp_path / "missing.txt")])
    assert result.exit_code == 0
    assert "3 total characters read" in result.output
    assert "(  97)" in result.output


def test_affine_crack_json():
    result = runner.invoke(app, ["affine", "crack", "ifmmp", "-k", "h:i", "-k", "e:f", "--json"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data[-1] == {"a": 1, "b": 1, "plaintext": "hello", "matches": 2, "stage": "brute"}


def test_vigenere_json(english_text):
    cipher = VigenereTransformer("lemon").encrypt(english_text)

    result = runner.invoke(app, ["vigenere", "crack", cipher, "-n", "8", "--json"])
    assert result.exit_code == 0
    assert [r["key"] for r in json.loads(result.output)] == ["lemon"]

    result = runner.invoke(app, ["vigenere", "lengths", cipher, "-n", "8", "-t", "2", "--json"])
    assert result.exit_code == 0
    scores = json.loads(result.output)
    assert len(scores) == 2
    assert scores[0]["length"] == 5
