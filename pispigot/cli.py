import gzip
import logging
import os
import subprocess
import sys
import time
import webbrowser

import click

from .config import DEFAULT_CHUNK_SIZE, DEFAULT_DIGITS, DEFAULT_OUT, ENV_PREFIX, configure_logging
from .engine import generate as generate_digits
from .formats import COMPRESSIONS, FORMATS, apply_compression, final_filename, serialize_payload
from .render import INTEGER_PREFIX, digits_to_string, iter_display_chunks
from .verify import check_margin, margin_shortfall, read_fractional_digits_from_text, verify_digits


logger = logging.getLogger(__name__)


def _run_app(host: str, port: int, open_browser: bool):
    url = f"http://{host}:{port}"
    cmd = [
        sys.executable,
        "-m",
        "streamlit",
        "run",
        os.path.join(os.path.dirname(__file__), "streamlit_app.py"),
        "--server.address",
        host,
        "--server.port",
        str(port),
    ]
    logger.info("starting streamlit at %s", url)
    proc = subprocess.Popen(cmd)
    if open_browser:
        time.sleep(1.0)
        if not webbrowser.open(url):
            logger.warning("could not open a browser, visit %s", url)
    raise SystemExit(proc.wait())


def _check_digits(digits: int):
    if digits < 0:
        raise click.ClickException("--digits must be >= 0")


def _report_verification(digits):
    ok, index = verify_digits(digits)
    if not ok:
        raise click.ClickException(f"verification failed at digit {index}")
    click.echo(f"verified {len(digits)} digits", err=True)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--verbose", "-v", is_flag=True, help="Log at debug level.")
def main(verbose: bool):
    configure_logging(verbose)


@main.command()
@click.option("--digits", default=DEFAULT_DIGITS, show_default=True, type=int)
@click.option("--format", "fmt", type=click.Choice(list(FORMATS), case_sensitive=False), default="txt", show_default=True)
@click.option("--compression", type=click.Choice(list(COMPRESSIONS), case_sensitive=False), default="none", show_default=True)
@click.option("--stream/--no-stream", default=False, show_default=True, help="Write digits as they are confirmed (txt only).")
@click.option("--chunk-size", default=DEFAULT_CHUNK_SIZE, show_default=True, type=int)
@click.option("--label/--no-label", default=False, show_default=True, help='Prefix the value with "Pi = ".')
@click.option("--timing/--no-timing", default=True, show_default=True)
@click.option("--verify/--no-verify", default=False, show_default=True)
@click.option("--out", "out_path", default=DEFAULT_OUT, show_default=True, help='Output stem, or "-" for stdout.')
def generate(
    digits: int,
    fmt: str,
    compression: str,
    stream: bool,
    chunk_size: int,
    label: bool,
    timing: bool,
    verify: bool,
    out_path: str,
):
    _check_digits(digits)
    fmt = fmt.lower().strip()
    compression = compression.lower().strip()
    if chunk_size < 1:
        raise click.ClickException("--chunk-size must be >= 1")
    if stream and fmt != "txt":
        raise click.ClickException("stream mode supports only the txt format")
    if stream and verify and out_path == "-":
        raise click.ClickException("--verify needs a file output in stream mode")
    label_prefix = "Pi = " if label else ""
    to_stdout = out_path == "-"
    t0 = time.perf_counter()
    if stream:
        suffix = ".gz" if compression == "gzip" else ""
        filename = None if to_stdout else final_filename(out_path, fmt, suffix)
        if to_stdout:
            f = click.open_file("-", "wb")
            if compression == "gzip":
                f = gzip.GzipFile(fileobj=f, mode="wb")
        elif compression == "gzip":
            f = gzip.open(filename, "wb")
        else:
            f = open(filename, "wb")
        try:
            for chunk in iter_display_chunks(digits, chunk_size, label_prefix=label_prefix):
                f.write(chunk.encode("ascii"))
            if to_stdout and compression == "none":
                f.write(b"\n")
        finally:
            if to_stdout and compression == "none":
                f.flush()
            else:
                f.close()
        elapsed_ms = (time.perf_counter() - t0) * 1000.0
        if verify:
            fractional = read_fractional_digits_from_text(filename, digits)
            _report_verification([int(ch) for ch in fractional])
    else:
        fractional = generate_digits(digits)
        elapsed_ms = (time.perf_counter() - t0) * 1000.0
        display = label_prefix + INTEGER_PREFIX + digits_to_string(fractional)
        meta = {"constant": "pi", "digits": digits, "engine": "spigot", "elapsed_ms": round(elapsed_ms, 3)}
        payload, _ = serialize_payload(display, fmt, meta)
        payload, suffix = apply_compression(payload, compression)
        if to_stdout:
            out = click.open_file("-", "wb")
            out.write(payload)
            if compression == "none" and not payload.endswith(b"\n"):
                out.write(b"\n")
            out.flush()
            filename = None
        else:
            filename = final_filename(out_path, fmt, suffix)
            with open(filename, "wb") as f:
                f.write(payload)
        if verify:
            _report_verification(fractional)
    if timing:
        click.echo(f"Calculation took {elapsed_ms:.0f} milliseconds.", err=True)
    if filename:
        click.echo(filename)


@main.command()
@click.option("--digits", default=DEFAULT_DIGITS, show_default=True, type=int)
def verify(digits: int):
    _check_digits(digits)
    _report_verification(generate_digits(digits))


@main.command()
@click.option("--start", default=0, show_default=True, type=int)
@click.option("--stop", default=200, show_default=True, type=int, help="Exclusive upper bound.")
@click.option("--reference/--no-reference", default=False, show_default=True, help="Also compare every run against mpmath.")
def margin(start: int, stop: int, reference: bool):
    """Check that the state length delivers every digit count in a range."""
    if start < 0 or stop < start:
        raise click.ClickException("need 0 <= --start <= --stop")
    short = 0
    failed = []
    for n in range(start, stop):
        missing = margin_shortfall(n)
        if missing:
            short += 1
            logger.info("n=%d: single run left %d digits pending", n, missing)
        if reference:
            if not check_margin(n):
                failed.append(n)
        elif len(generate_digits(n)) != n:
            failed.append(n)
    click.echo(f"checked {stop - start} digit counts, {short} left digits pending in a single run")
    if failed:
        raise click.ClickException("digit counts failed: " + ", ".join(str(n) for n in failed))


@main.command()
@click.option("--host", default="localhost", show_default=True)
@click.option("--port", default=8501, show_default=True, type=int)
@click.option("--open/--no-open", default=True, show_default=True)
def app(host: str, port: int, open: bool):
    _run_app(host, port, open)


def run():
    main(auto_envvar_prefix=ENV_PREFIX)
