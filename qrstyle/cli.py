"""
Command-line interface.

Usage:
  qrstyle DATA [-e L|M|Q|H] [-s SIZE] [-m MARGIN] [-f HEX] [-b HEX|transparent]
               [--module-shape square|circle] [--qr-version N] [-o OUTPUT]
               [--no-terminal] [--compact] [-v]
  qrstyle -i

Without DATA the prompt-driven flow starts.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Optional, Sequence

from . import __version__
from .errors import QRStyleError, InputValidationError
from .generator import describe, render_qr, save_qr
from .preview import render_terminal
from .style import (
    DEFAULT_BACKGROUND,
    DEFAULT_ERROR_CORRECTION,
    DEFAULT_FOREGROUND,
    DEFAULT_MARGIN,
    DEFAULT_OUTPUT,
    DEFAULT_SIZE,
    MAX_VERSION,
    TRANSPARENT,
    ModuleShape,
    StyleOptions,
    normalize_hex_input,
    parse_background,
    validate_ecc,
)

logger = logging.getLogger(__name__)

Ask = Callable[[str], str]

DEFAULT_DATA = "https://example.com"
SIZE_RANGE = (50, 2000)
MARGIN_RANGE = (1, 20)
RULE = "=" * 50


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qrstyle",
        description="QR code generator with custom colors, transparency and module shapes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  qrstyle "https://example.com"
  qrstyle "Hello" -f "#1a73e8" -b transparent -o hello.png
  qrstyle "Hello" --module-shape circle -e H -s 600

Error Correction Levels:
  L - Low (7%)
  M - Medium (15%) [default]
  Q - Quartile (25%)
  H - High (30%)
        """,
    )
    parser.add_argument("data", nargs="?", help="URL or text to encode")
    parser.add_argument(
        "-e", "--error-correction",
        type=str.upper,
        choices=["L", "M", "Q", "H"],
        default=DEFAULT_ERROR_CORRECTION,
        help="error correction level (default: M)",
    )
    parser.add_argument("-s", "--size", type=int, default=DEFAULT_SIZE, help="QR code size in pixels (default: 300)")
    parser.add_argument("-m", "--margin", type=int, default=DEFAULT_MARGIN, help="border margin in modules (default: 4)")
    parser.add_argument("-f", "--foreground-color", default=DEFAULT_FOREGROUND, help="foreground color as hex (default: #000000)")
    parser.add_argument(
        "-b", "--background-color",
        default=DEFAULT_BACKGROUND,
        help='background color as hex, or "transparent" (default: #FFFFFF)',
    )
    parser.add_argument(
        "--module-shape",
        choices=[shape.value for shape in ModuleShape],
        default=ModuleShape.SQUARE.value,
        help="module shape (default: square)",
    )
    parser.add_argument("--qr-version", type=int, default=None, help="QR version 1-40 (default: auto)")
    parser.add_argument("-o", "--output", default=DEFAULT_OUTPUT, help="output filename (default: qrcode.png)")
    parser.add_argument("--no-terminal", dest="terminal", action="store_false", help="skip terminal display")
    parser.add_argument("--compact", action="store_true", help="compact terminal display")
    parser.add_argument("-i", "--interactive", action="store_true", help="run in interactive mode")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def print_terminal(data: str, error_correction: str, compact: bool = False) -> None:
    print("\nQR Code (Terminal View):")
    print(RULE)
    print(render_terminal(data, error_correction, compact=compact))
    print(RULE)


def run(
    data: str,
    options: StyleOptions,
    output: Optional[str],
    show_terminal: bool = True,
    compact: bool = False,
) -> None:
    """Preview, generate, save and summarize one QR code."""
    if show_terminal:
        print_terminal(data, options.error_correction, compact=compact)

    print("Generating QR code...")
    result = render_qr(data, options)

    if output:
        path = save_qr(result.png, output)
        print(f"QR code saved: {path}")

    print()
    print(describe(data, options, result))
    print("\nQR code generated successfully!")


# ---------- Interactive prompts ----------

def _prompt(
    ask: Ask,
    message: str,
    default: str,
    convert: Callable[[str], object] = str,
) -> object:
    """Ask until `convert` accepts the answer; empty input takes `default`."""
    while True:
        answer = ask(f"{message} [{default}]: ").strip() or default
        try:
            return convert(answer)
        except (InputValidationError, ValueError) as exc:
            print(f"  {exc}")


def _non_empty(value: str) -> str:
    if not value.strip():
        raise InputValidationError("Please enter some data")
    return value


def _int_in_range(lo: int, hi: int, label: str) -> Callable[[str], int]:
    def convert(value: str) -> int:
        try:
            number = int(value)
        except ValueError:
            raise InputValidationError(f"{label} must be a whole number") from None
        if not lo <= number <= hi:
            raise InputValidationError(f"{label} must be between {lo} and {hi}")
        return number

    return convert


def _yes_no(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("y", "yes"):
        return True
    if lowered in ("n", "no"):
        return False
    raise InputValidationError("Please answer y or n")


def _shape(value: str) -> ModuleShape:
    try:
        return ModuleShape(value.strip().lower())
    except ValueError:
        raise InputValidationError("Module shape must be 'square' or 'circle'") from None


def _background(value: str) -> str:
    if value.strip().lower() == TRANSPARENT:
        return TRANSPARENT
    return normalize_hex_input(value)


def interactive_mode(ask: Ask = input) -> int:
    """
    Prompt for every option, then generate.

    Parameters
    ----------
    ask : callable, optional
        Reads one answer given a prompt string. The default is the
        builtin ``input``.

    Returns
    -------
    int
        Process exit status.
    """
    print("\nQR Code Generator - Interactive Mode")
    print(RULE)

    try:
        data = _prompt(ask, "Enter URL or text to encode", DEFAULT_DATA, _non_empty)
        ecc = _prompt(ask, "Error correction level (L/M/Q/H)", DEFAULT_ERROR_CORRECTION, validate_ecc)
        size = _prompt(ask, "QR code size (pixels)", str(DEFAULT_SIZE), _int_in_range(*SIZE_RANGE, "Size"))
        margin = _prompt(ask, "Border margin (modules)", str(DEFAULT_MARGIN), _int_in_range(*MARGIN_RANGE, "Margin"))
        foreground = _prompt(ask, "Foreground color (hex)", DEFAULT_FOREGROUND, normalize_hex_input)
        background = _prompt(ask, 'Background color (hex or "transparent")', DEFAULT_BACKGROUND, _background)
        shape = _prompt(ask, "Module shape (square/circle)", ModuleShape.SQUARE.value, _shape)
        version = _prompt(ask, "QR version (1-40, 0 for auto)", "0", _int_in_range(0, MAX_VERSION, "Version"))
        show_terminal = _prompt(ask, "Display in terminal? (y/n)", "y", _yes_no)
        save_file = _prompt(ask, "Save to file? (y/n)", "y", _yes_no)
        output = _prompt(ask, "Filename", DEFAULT_OUTPUT, _non_empty) if save_file else None
    except (EOFError, KeyboardInterrupt):
        print("\nError: input cancelled", file=sys.stderr)
        return 1

    background_color, transparent = parse_background(background)
    try:
        options = StyleOptions(
            foreground_color=foreground,
            background_color=background_color,
            transparent=transparent,
            module_shape=shape,
            size=size,
            margin=margin,
            error_correction=ecc,
            version=version,
        )
        run(data, options, output, show_terminal=show_terminal)
    except QRStyleError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.interactive or not args.data:
        return interactive_mode()

    print("QR Code Generator")
    print("=" * 30)
    try:
        options = StyleOptions.from_args(args)
        run(args.data, options, args.output, show_terminal=args.terminal, compact=args.compact)
    except QRStyleError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
