"""
Command-line entry points.

    blackTopHat <input-image> <output-image>
    whiteTopHat <safe-border:0|1> <input-image> <output-image>

Both programs use a disk structuring element of radius 5 unless the settings
file or ``--radius`` says otherwise.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

import yaml

from .errors import InvalidParameter, TopHatError
from .image_io import read_gray, write_image
from .morphology import black_top_hat, white_top_hat
from .structuring import StructuringElement
from .utils import as_int, configure_logging, default_settings, load_settings, parse_flag
from .watcher import FilterWatcher


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "settings.yaml"


# ============================================================================
# Argument parsing
# ============================================================================

def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("input", help="Input image path")
    parser.add_argument("output", help="Output image path")
    parser.add_argument("--config", "-c", default=DEFAULT_CONFIG_PATH,
                        help="Path to YAML settings file")
    parser.add_argument("--radius", "-r", default=None,
                        help="Structuring element radius (default from settings: 5)")
    parser.add_argument("--workers", "-w", default=None,
                        help="Number of threads (default from settings: 1)")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log progress at debug level")


def build_black_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Black top-hat (closing - image) of a grayscale image"
    )
    _add_common_options(parser)
    parser.add_argument("--no-safe-border", dest="safe_border", action="store_false",
                        default=None, help="Clip the neighborhood at the image border")
    return parser


def build_white_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="White top-hat (image - opening) of a grayscale image"
    )
    parser.add_argument("safe_border", help="1 to pad the border before opening, 0 to clip")
    _add_common_options(parser)
    return parser


# ============================================================================
# Settings
# ============================================================================

def resolve_settings(args: argparse.Namespace) -> Dict[str, Any]:
    """Load the settings file, falling back to defaults when it is missing."""
    try:
        config = load_settings(args.config)
    except FileNotFoundError:
        if args.config != DEFAULT_CONFIG_PATH:
            logger.warning("Settings file not found: %s, using defaults", args.config)
        config = default_settings()

    if args.radius is not None:
        config["kernel"]["radius"] = args.radius
    if args.workers is not None:
        config["morphology"]["workers"] = args.workers
    return config


# ============================================================================
# Runner
# ============================================================================

def run(mode: str, args: argparse.Namespace) -> None:
    """Validate parameters, read the input, apply the top-hat, write the output."""
    try:
        config = resolve_settings(args)
    except (ValueError, yaml.YAMLError) as exc:
        raise InvalidParameter(f"Invalid settings file {args.config}: {exc}") from exc

    if not args.verbose:
        configure_logging(config["logging"].get("level", "INFO"))

    radius = as_int(config["kernel"]["radius"], "radius")
    workers = as_int(config["morphology"]["workers"], "workers")
    if mode == "white":
        safe_border = parse_flag(args.safe_border)
    elif args.safe_border is None:
        safe_border = bool(config["morphology"].get("black_safe_border", True))
    else:
        safe_border = args.safe_border

    element = StructuringElement(radius)
    if workers < 1:
        raise InvalidParameter(f"Worker count must be a positive integer, got {workers}")

    image = read_gray(args.input)
    logger.info(
        "%s top-hat: %s (%dx%d), radius=%d, safe_border=%s",
        mode.capitalize(), args.input, image.shape[1], image.shape[0], radius, safe_border,
    )

    operation = white_top_hat if mode == "white" else black_top_hat
    with FilterWatcher(f"{mode}_top_hat") as watcher:
        result = operation(
            image, element, safe_border=safe_border, workers=workers,
            progress=watcher.progress,
        )

    write_image(args.output, result)
    logger.info("Saved: %s", args.output)


def _execute(mode: str, args: argparse.Namespace) -> int:
    configure_logging("DEBUG" if args.verbose else "INFO")
    try:
        run(mode, args)
    except (TopHatError, OSError) as exc:
        logger.error("%s", exc)
        return 1
    return 0


def black_main(argv: Optional[List[str]] = None) -> int:
    args = build_black_parser().parse_args(argv)
    return _execute("black", args)


def white_main(argv: Optional[List[str]] = None) -> int:
    args = build_white_parser().parse_args(argv)
    return _execute("white", args)


def main(argv: Optional[List[str]] = None) -> int:
    """``python -m tophat2d {black,white} ...``"""
    argv = list(sys.argv[1:] if argv is None else argv)
    commands = {"black": black_main, "white": white_main}
    if not argv or argv[0] not in commands:
        print("usage: python -m tophat2d {black,white} ...", file=sys.stderr)
        return 2
    return commands[argv[0]](argv[1:])


if __name__ == "__main__":
    raise SystemExit(main())
