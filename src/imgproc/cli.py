from __future__ import annotations
import argparse
import logging
import math
import sys
from enum import Enum
from typing import List, Optional

import numpy as np

from .errors import ImageToolError, InvalidArgument, UsageError
from .generators import GenerationMode
from .helpers import PipelineConfig, TransformRequest, load_image_rgb, parse_crop, save_image
from .pipeline import TransformPipeline
from .viz import Visualizer

logger = logging.getLogger(__name__)

_TRANSFORM_DESTS = ("blur", "brighten", "crop", "rotate", "invert", "grayscale")


class Command(str, Enum):
    TRANSFORM = "transform"
    FRACTAL = "fractal"
    GENERATE = "generate"


_GENERATORS = {
    Command.FRACTAL: GenerationMode.FRACTAL,
    Command.GENERATE: GenerationMode.GRADIENT,
}


I32_MIN, I32_MAX = -2**31, 2**31 - 1


def _positive_float(value: str) -> float:
    try:
        f = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid blur value: {value}") from None
    if not (f > 0 and math.isfinite(f)):
        raise argparse.ArgumentTypeError(f"blur sigma must be a finite number > 0, got {value}")
    return f


def _i32(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid integer value: {value}") from None
    if not I32_MIN <= n <= I32_MAX:
        raise argparse.ArgumentTypeError(f"value out of 32-bit range: {value}")
    return n


def _crop_arg(value: str):
    try:
        return parse_crop(value)
    except InvalidArgument as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _add_transform_args(group, default) -> None:
    # Booleans fall back to False in _request_from_args when suppressed
    flag_default = False if default is None else default
    group.add_argument("-u", "--blur", type=_positive_float, default=default, metavar="SIGMA",
                       help="Gaussian blur with the given sigma")
    group.add_argument("-b", "--brighten", type=_i32, default=default, metavar="DELTA",
                       help="Add DELTA to every channel (may be negative)")
    group.add_argument("-c", "--crop", type=_crop_arg, default=default, metavar="X,Y,W,H",
                       help="Crop to the given rectangle")
    group.add_argument("-r", "--rotate", type=_i32, default=default, metavar="DEGREES",
                       help="Rotate clockwise by 90, 180 or 270 (other values are ignored)")
    group.add_argument("-i", "--invert", action="store_true", default=flag_default,
                       help="Invert colors")
    group.add_argument("-g", "--grayscale", action="store_true", default=flag_default,
                       help="Convert to grayscale")


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="imgproc", description="A command line tool to process images")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    p.add_argument("--show", action="store_true", help="Display the result after saving")
    _add_transform_args(p.add_argument_group("Transform"), default=None)

    sub = p.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    t = sub.add_parser(Command.TRANSFORM.value, help="Transform an image")
    t.add_argument("infile", help="Input image")
    t.add_argument("outfile", help="Output image (format from extension)")
    # Same flags after the positionals; suppressed so they don't reset top-level values
    _add_transform_args(t.add_argument_group("Transform"), default=argparse.SUPPRESS)

    f = sub.add_parser(Command.FRACTAL.value, help="Generate a fractal image")
    f.add_argument("outfile", help="Output image (format from extension)")

    g = sub.add_parser(Command.GENERATE.value, help="Generate a simple gradient image")
    g.add_argument("outfile", help="Output image (format from extension)")

    return p


def _request_from_args(args: argparse.Namespace) -> TransformRequest:
    return TransformRequest(
        blur=getattr(args, "blur", None),
        brighten=getattr(args, "brighten", None),
        crop=getattr(args, "crop", None),
        rotate=getattr(args, "rotate", None),
        invert=bool(getattr(args, "invert", False)),
        grayscale=bool(getattr(args, "grayscale", False)),
    )


def _run_transform(args: argparse.Namespace, cfg: PipelineConfig) -> np.ndarray:
    img = load_image_rgb(args.infile)
    logger.debug("loaded %s (%dx%d)", args.infile, img.shape[1], img.shape[0])
    out = TransformPipeline(cfg.request).run(img)
    save_image(out, cfg.outfile)
    return out


def _run_generate(command: Command, cfg: PipelineConfig) -> np.ndarray:
    if not cfg.request.is_empty():
        used = [
            f"--{d}" for d in _TRANSFORM_DESTS
            if getattr(cfg.request, d) is not None and getattr(cfg.request, d) is not False
        ]
        raise UsageError(f"{command.value} does not accept {', '.join(used)}")
    mode = _GENERATORS[command]
    logger.debug("rendering %s %dx%d", mode.value, *mode.size)
    img = mode.render()
    save_image(img, cfg.outfile)
    return img


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_argparser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    command = Command(args.command)
    cfg = PipelineConfig(request=_request_from_args(args), outfile=args.outfile, show=args.show)
    try:
        if command is Command.TRANSFORM:
            img = _run_transform(args, cfg)
        else:
            img = _run_generate(command, cfg)
    except UsageError as e:
        parser.print_help(sys.stderr)
        print(f"error: {e}", file=sys.stderr)
        return 2
    except ImageToolError as e:
        logger.debug("aborted", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(f"Wrote: {cfg.outfile}")
    if cfg.show:
        Visualizer.show_image(img, title=cfg.outfile)
    return 0
