"""
PIL Squasher - Command Line

Splits Qualcomm peripheral firmware images into the .mdt/.bNN form loaded by
the remoteproc runtime, and squashes such split sets back into a single image.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import PilConfig, load_config
from .errors import PilError
from .image import describe_image
from .split import split
from .squash import squash

log = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-5s %(message)s",
        datefmt="%H:%M:%S",
    )


def _run(action, *args) -> int:
    """Call ``action`` and turn a PilError into one diagnostic line."""
    try:
        action(*args)
    except PilError as e:
        log.error("%s", e)
        return 1
    return 0


def _cmd_split(args: argparse.Namespace, config: PilConfig) -> int:
    return _run(split, args.source, args.metadata, config)


def _cmd_squash(args: argparse.Namespace, config: PilConfig) -> int:
    return _run(squash, args.metadata, args.destination, config)


def _cmd_inspect(args: argparse.Namespace, config: PilConfig) -> int:
    def show(path: Path, config: PilConfig) -> None:
        summary = describe_image(path, config)
        json.dump(summary.to_dict(), sys.stdout, indent=2)
        sys.stdout.write("\n")

    return _run(show, args.image, config)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pil-squasher-tool",
        description="Split and squash Qualcomm PIL firmware images",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file overriding artifact naming (metadata_suffix, "
             "sidecar_prefix, max_sidecar_index)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_split = sub.add_parser("split", help="Split an image into .mdt + .bNN files")
    p_split.add_argument("source", type=Path, help="Monolithic image (.mbn)")
    p_split.add_argument("metadata", type=Path, help="Metadata output (.mdt)")
    p_split.set_defaults(func=_cmd_split)

    p_squash = sub.add_parser("squash", help="Rebuild an image from .mdt + .bNN files")
    p_squash.add_argument("metadata", type=Path, help="Metadata input (.mdt)")
    p_squash.add_argument("destination", type=Path, help="Monolithic image output")
    p_squash.set_defaults(func=_cmd_squash)

    p_inspect = sub.add_parser("inspect", help="Show program headers and segment routing")
    p_inspect.add_argument("image", type=Path, help="Image or metadata file")
    p_inspect.set_defaults(func=_cmd_inspect)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _setup_logging(args.verbose)

    if args.config is not None:
        try:
            config = load_config(args.config)
        except PilError as e:
            log.error("%s", e)
            return 1
    else:
        config = PilConfig()

    return args.func(args, config)


# ---------------------------------------------------------------------------
# Two-argument entry points in the classic pil-splitter / pil-squasher order
# ---------------------------------------------------------------------------


def splitter_main(argv: list[str] | None = None) -> int:
    """``pil-splitter <mbn input> <mdt output>``"""
    parser = argparse.ArgumentParser(prog="pil-splitter")
    parser.add_argument("mbn", type=Path, help="mbn input")
    parser.add_argument("mdt", type=Path, help="mdt output")
    args = parser.parse_args(argv)
    _setup_logging(False)
    return _run(split, args.mbn, args.mdt)


def squasher_main(argv: list[str] | None = None) -> int:
    """``pil-squasher <mbn output> <mdt input>``"""
    parser = argparse.ArgumentParser(prog="pil-squasher")
    parser.add_argument("mbn", type=Path, help="mbn output")
    parser.add_argument("mdt", type=Path, help="mdt input")
    args = parser.parse_args(argv)
    _setup_logging(False)
    return _run(squash, args.mdt, args.mbn)
