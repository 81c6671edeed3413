from __future__ import annotations

import io
import json
import logging
import sys
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Iterator, List, Optional, TextIO

import typer

from cryptool.classical import register_all
from cryptool.classical.common import parse_known_pairs
from cryptool.core.config import DEFAULT_CONFIG, CrackConfig, config_for_alphabet, load_frequency_table
from cryptool.core.frequency import frequency_report
from cryptool.core.registry import decrypt_known, encrypt_known, get_plugin, list_plugins

app = typer.Typer(help="cryptool: affine and Vigenère ciphers with cryptanalysis helpers.")
affine_app = typer.Typer(help="Affine cipher attacks.")
vigenere_app = typer.Typer(help="Vigenère cipher attacks.")
app.add_typer(affine_app, name="affine")
app.add_typer(vigenere_app, name="vigenere")


class CrackMode(str, Enum):
    all = "all"
    linear = "linear"


@app.callback()
def _init(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log search progress to stderr."),
    alphabet: str = typer.Option(
        DEFAULT_CONFIG.alphabet.symbols,
        "--alphabet",
        envvar="CRYPTOOL_ALPHABET",
        help="Ordered symbol set; its size is the modulus.",
    ),
):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format="%(message)s")
    ctx.meta["verbose"] = verbose
    # Register plugins exactly once per CLI run
    register_all()
    try:
        ctx.obj = config_for_alphabet(alphabet)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--alphabet")


def _config(ctx: typer.Context) -> CrackConfig:
    return ctx.obj if isinstance(ctx.obj, CrackConfig) else DEFAULT_CONFIG


@contextmanager
def _open_input(text: Optional[str], infile: Optional[Path]) -> Iterator[TextIO]:
    if (text is None) == (infile is None):
        raise typer.BadParameter("Give exactly one input: TEXT or --file.")
    if infile is None:
        yield io.StringIO(text)
        return
    try:
        fh = infile.open("r", encoding="utf-8", errors="replace")
    except OSError as e:
        raise typer.BadParameter(f"Unable to open input file {infile}: {e}")
    with fh:
        yield fh


@contextmanager
def _open_output(outfile: Optional[Path]) -> Iterator[TextIO]:
    if outfile is None:
        yield sys.stdout
        return
    try:
        fh = outfile.open("w", encoding="utf-8")
    except OSError as e:
        raise typer.BadParameter(f"Unable to open output file {outfile}: {e}")
    with fh:
        yield fh


@app.command()
def plugins():
    """List all registered cipher plugins."""
    for name in list_plugins():
        typer.echo(f"{name}  ({get_plugin(name).family})")


def _transform_lines(ctx: typer.Context, op, cipher: str, key: str, text, infile, outfile) -> None:
    config = _config(ctx)
    with _open_input(text, infile) as src, _open_output(outfile) as out:
        for line in src:
            try:
                result = op(cipher, line.rstrip("\n"), key, config)
            except ValueError as e:
                raise typer.BadParameter(str(e))
            typer.echo(result, file=out)


@app.command()
def encrypt(
    ctx: typer.Context,
    cipher: str = typer.Option(..., "--cipher", "-c", help="Cipher plugin name (affine, vigenere)."),
    key: str = typer.Option(..., "--key", "-k", help="Key: 'a,b' for affine, a keyword for vigenere."),
    text: Optional[str] = typer.Argument(None, help="Input text (or use --file)."),
    infile: Optional[Path] = typer.Option(None, "--file", "-f", help="Read input from this file."),
    outfile: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to this file instead of the terminal."),
):
    """Encrypt text line by line with a known key."""
    _transform_lines(ctx, encrypt_known, cipher, key, text, infile, outfile)


@app.command()
def decrypt(
    ctx: typer.Context,
    cipher: str = typer.Option(..., "--cipher", "-c", help="Cipher plugin name (affine, vigenere)."),
    key: str = typer.Option(..., "--key", "-k", help="Key: 'a,b' for affine, a keyword for vigenere."),
    text: Optional[str] = typer.Argument(None, help="Input text (or use --file)."),
    infile: Optional[Path] = typer.Option(None, "--file", "-f", help="Read input from this file."),
    outfile: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to this file instead of the terminal."),
):
    """Decrypt when you already know the cipher type and have the key."""
    _transform_lines(ctx, decrypt_known, cipher, key, text, infile, outfile)


@affine_app.command("crack")
def affine_crack(
    ctx: typer.Context,
    text: Optional[str] = typer.Argument(None, help="Input text (or use --file)."),
    infile: Optional[Path] = typer.Option(None, "--file", "-f", help="Read input from this file."),
    outfile: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to this file instead of the terminal."),
    mode: CrackMode = typer.Option(
        CrackMode.all, "--mode", "-m", help="'all' tries every key; 'linear' solves from known/frequent pairs."
    ),
    known: Optional[List[str]] = typer.Option(
        None, "--known", "-k", help="Plain:cipher hint, e.g. -k e:x. Can repeat."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print candidates as JSON."),
):
    """Crack the first line of input; the rest only feeds frequency analysis (linear mode)."""
    from cryptool.classical.monoalphabetic.affine import crack_all, crack_linear

    config = _config(ctx)
    try:
        pairs = parse_known_pairs(known or [])
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--known")

    with _open_input(text, infile) as src, _open_output(outfile) as out:
        ciph = src.readline().rstrip("\n")
        if mode is CrackMode.all:
            results = crack_all(ciph, pairs, config)
        else:
            results = crack_linear(ciph, src, pairs, config)

        if as_json:
            typer.echo(json.dumps([r.to_dict() for r in results], indent=2), file=out)
            return

        if not results:
            typer.echo("No candidates produced. Input may be too short or the hints contradict each other.", file=out)
            raise typer.Exit(code=0)

        typer.echo("Possible translations for first line of text", file=out)
        typer.echo(f"{'a':>3}{'b':>3} | {ciph}", file=out)
        typer.echo("-" * 7 + "|" + "-" * (len(ciph) + 1), file=out)
        for r in results:
            typer.echo(f"{r.a:3d}{r.b:3d} | {r.plaintext}", file=out)


def _read_sample(src: TextIO, config: CrackConfig) -> str:
    """Read whole lines until the sample limit of alphabet symbols is reached."""
    lines = []
    seen = 0
    for line in src:
        lines.append(line)
        seen += len(config.alphabet.filter(line, fold_case=config.fold_case))
        if seen >= config.sample_limit:
            break
    return "".join(lines)


def _vigenere_config(ctx: typer.Context, frequencies: Optional[Path]) -> CrackConfig:
    config = _config(ctx)
    if frequencies is None:
        return config
    try:
        return config.with_reference(load_frequency_table(frequencies, config.alphabet))
    except (OSError, ValueError) as e:
        raise typer.BadParameter(str(e), param_hint="--frequencies")


@vigenere_app.command("crack")
def vigenere_crack(
    ctx: typer.Context,
    text: Optional[str] = typer.Argument(None, help="Input text (or use --file)."),
    infile: Optional[Path] = typer.Option(None, "--file", "-f", help="Read input from this file."),
    outfile: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to this file instead of the terminal."),
    max_len: int = typer.Option(..., "--max-len", "-n", min=1, help="Longest key length to test."),
    frequencies: Optional[Path] = typer.Option(
        None, "--frequencies", help="Reference table file with lines like 'e 0.127'."
    ),
    show_plaintext: bool = typer.Option(False, "--plaintext", "-p", help="Also print the decryption."),
    as_json: bool = typer.Option(False, "--json", help="Print candidates as JSON."),
):
    """Estimate the key length and recover a key for each best length."""
    from cryptool.classical.polyalphabetic.vigenere import crack

    config = _vigenere_config(ctx, frequencies)
    with _open_input(text, infile) as src, _open_output(outfile) as out:
        results = crack(_read_sample(src, config), max_len, config)

        if as_json:
            typer.echo(json.dumps([r.to_dict() for r in results], indent=2), file=out)
            return

        if not results:
            typer.echo("No key recovered. Input may be too short for the requested key lengths.", file=out)
            raise typer.Exit(code=0)

        for r in results:
            typer.echo(f"Potential key: {r.key}", file=out)
            if ctx.meta.get("verbose"):
                if r.notes:
                    typer.echo(f"    notes: {r.notes}", file=out)
                if r.meta:
                    typer.echo(f"    meta: {r.meta}", file=out)
            if show_plaintext:
                typer.echo(r.plaintext, file=out)
                typer.echo("-" * 60, file=out)


@vigenere_app.command("lengths")
def vigenere_lengths(
    ctx: typer.Context,
    text: Optional[str] = typer.Argument(None, help="Input text (or use --file)."),
    infile: Optional[Path] = typer.Option(None, "--file", "-f", help="Read input from this file."),
    max_len: int = typer.Option(..., "--max-len", "-n", min=1, help="Longest key length to test."),
    top: int = typer.Option(10, "--top", "-t", min=1),
    as_json: bool = typer.Option(False, "--json", help="Print scores as JSON."),
):
    """Show self-alignment match counts per trial key length."""
    from cryptool.classical.polyalphabetic.vigenere import score_key_lengths

    config = _config(ctx)
    with _open_input(text, infile) as src:
        scores = sorted(score_key_lengths(_read_sample(src, config), max_len, config))

    if as_json:
        typer.echo(json.dumps([s.to_dict() for s in scores[:top]], indent=2))
        return

    for s in scores[:top]:
        typer.echo(f"  k={s.length:2d}  matches={s.matches}")


@app.command()
def freq(
    files: List[Path] = typer.Argument(..., help="Files to count characters in."),
):
    """Frequency analysis: count every character across the given files."""
    texts = []
    for path in files:
        try:
            texts.append(path.read_text(encoding="utf-8", errors="replace"))
            typer.echo(f"Processing {path}...")
        except OSError:
            typer.echo(f"Unable to process {path}", err=True)

    rows = frequency_report(texts)
    total = sum(r.count for r in rows)
    line = "-" * 50

    typer.echo(f"\n{line}")
    typer.echo(f"{total} total characters read\n{line}\n")
    for r in rows:
        typer.echo(f"\t {r.label}  ({ord(r.symbol):4d})\t{r.count:10d}\t{r.percent:.5g}%")


def main():
    app()


if __name__ == "__main__":
    main()
