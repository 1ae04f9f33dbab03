#!/usr/bin/env python3
"""
Command-line interface for blending images and moving alpha channels.

Usage:
    # Multiply an overlay into a base image
    python -m pixel_blend.cli blend base.png overlay.png -o out.png --mode multiply

    # Half-strength screen, blending alpha too
    python -m pixel_blend.cli blend base.png glow.png -o out.png --mode screen --opacity 0.5 --blend-alpha

    # Save an image's alpha channel as a grayscale mask
    python -m pixel_blend.cli get-alpha sprite.png -o mask.png

    # Apply a grayscale mask as alpha
    python -m pixel_blend.cli set-alpha sprite.png mask.png -o out.png

    # Copy alpha from one image to another
    python -m pixel_blend.cli transplant-alpha target.png source.png -o out.png

    # Blend one overlay into every PNG in a folder
    python -m pixel_blend.cli batch overlay.png --input-dir frames --output-dir out

    # List available blend modes
    python -m pixel_blend.cli modes
"""

import argparse
import sys
from pathlib import Path

from PIL import Image
from tqdm import tqdm

from .alpha import get_alpha, set_alpha, transplant_alpha
from .blend_modes import BLEND_MODES
from .config import BatchConfig, BlendConfig
from .engine import blend
from .errors import PixelOpsError
from .formats import PIL_MODES


def load_image(path: Path) -> Image.Image:
    """Open an image and convert it to a mode the engine understands."""
    image = Image.open(path)
    image.load()
    if image.mode in PIL_MODES:
        return image
    if "A" in image.mode or "transparency" in image.info:
        return image.convert("RGBA")
    return image.convert("RGB")


def _blend_config(args: argparse.Namespace) -> BlendConfig:
    return BlendConfig(
        mode=args.mode,
        opacity=args.opacity,
        blend_color=not args.alpha_only,
        blend_alpha=args.blend_alpha or args.alpha_only,
        clamp_alpha=not args.no_clamp_alpha,
        alpha_weighted=args.alpha_weighted,
    )


def cmd_blend(args: argparse.Namespace) -> int:
    """Blend SOURCE into TARGET and save the result."""
    try:
        config = _blend_config(args)
    except ValueError as e:
        print(f"✗ {e}")
        return 1
    target = load_image(Path(args.target))
    source = load_image(Path(args.source))

    print(f"Blending {args.source} ({source.mode}) into {args.target} ({target.mode})")
    print(f"Mode: {config.mode}, opacity: {config.opacity}")

    try:
        blend(target, source, config.blend_function(), **config.blend_kwargs())
    except PixelOpsError as e:
        print(f"✗ {e}")
        return 1

    target.save(args.output)
    print(f"✓ Saved {args.output}")
    return 0


def cmd_get_alpha(args: argparse.Namespace) -> int:
    """Save the alpha channel of IMAGE as a grayscale image."""
    image = load_image(Path(args.image))
    try:
        mask = get_alpha(image)
    except PixelOpsError as e:
        print(f"✗ {e}")
        return 1

    mask.save(args.output)
    print(f"✓ Saved alpha of {args.image} to {args.output}")
    return 0


def cmd_set_alpha(args: argparse.Namespace) -> int:
    """Use the first channel of ALPHA as the alpha channel of IMAGE."""
    image = load_image(Path(args.image))
    mask = load_image(Path(args.alpha))
    if args.add_alpha and not image.mode.endswith("A"):
        image = image.convert("LA" if image.mode in ("L", "I;16") else "RGBA")

    try:
        set_alpha(image, mask)
    except PixelOpsError as e:
        print(f"✗ {e}")
        return 1

    image.save(args.output)
    print(f"✓ Saved {args.output}")
    return 0


def cmd_transplant_alpha(args: argparse.Namespace) -> int:
    """Copy the alpha channel of SOURCE into TARGET."""
    target = load_image(Path(args.target))
    source = load_image(Path(args.source))
    try:
        transplant_alpha(target, source)
    except PixelOpsError as e:
        print(f"✗ {e}")
        return 1

    target.save(args.output)
    print(f"✓ Saved {args.output}")
    return 0


def cmd_batch(args: argparse.Namespace) -> int:
    """Blend one source image into every matching image of a folder."""
    try:
        config = BatchConfig(
            input_dir=Path(args.input_dir),
            output_dir=Path(args.output_dir),
            pattern=args.pattern,
            overwrite=args.overwrite,
            blend=_blend_config(args),
        )
    except ValueError as e:
        print(f"✗ {e}")
        return 1
    source = load_image(Path(args.source))
    fn = config.blend.blend_function()

    inputs = config.inputs()
    if not inputs:
        print(f"No files matching {config.pattern} in {config.input_dir}")
        return 1

    written = 0
    failed = []
    for path in tqdm(inputs, desc="Blending"):
        out_path = config.output_path(path)
        if out_path.exists() and not config.overwrite:
            continue
        target = load_image(path)
        try:
            blend(target, source, fn, **config.blend.blend_kwargs())
        except PixelOpsError as e:
            failed.append((path.name, str(e)))
            continue
        target.save(out_path)
        written += 1

    print(f"Blended {written} of {len(inputs)} images into {config.output_dir}")
    for name, error in failed:
        print(f"  ✗ {name}: {error}")
    return 1 if failed else 0


def cmd_modes(args: argparse.Namespace) -> int:
    """List available blend modes."""
    print("Available blend modes:\n")
    for name, fn in BLEND_MODES.items():
        summary = (fn.__doc__ or "").strip().splitlines()[0]
        print(f"  {name:<12} {summary}")
    return 0


def _add_blend_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--mode", choices=list(BLEND_MODES.keys()), default="multiply",
                        help="Blend mode (see 'modes' command)")
    parser.add_argument("--opacity", type=float, default=1.0, help="Blend strength 0-1")
    parser.add_argument("--blend-alpha", action="store_true",
                        help="Also blend the alpha channel")
    parser.add_argument("--alpha-only", action="store_true",
                        help="Blend the alpha channel only, leave colour untouched")
    parser.add_argument("--no-clamp-alpha", action="store_true",
                        help="Do not clamp blended alpha to 0-1 before re-encoding")
    parser.add_argument("--alpha-weighted", action="store_true",
                        help="Weight the colour blend by the source alpha")


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Blend images and move alpha channels between them",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Blend command
    blend_parser = subparsers.add_parser("blend", help="Blend SOURCE into TARGET")
    blend_parser.add_argument("target", help="Image to blend into")
    blend_parser.add_argument("source", help="Image to blend from")
    blend_parser.add_argument("--output", "-o", required=True, help="Output file path")
    _add_blend_options(blend_parser)

    # Alpha commands
    get_parser = subparsers.add_parser("get-alpha", help="Extract the alpha channel as grayscale")
    get_parser.add_argument("image", help="Image with an alpha channel")
    get_parser.add_argument("--output", "-o", required=True, help="Output file path")

    set_parser = subparsers.add_parser("set-alpha", help="Set the alpha channel from a grayscale image")
    set_parser.add_argument("image", help="Image to modify")
    set_parser.add_argument("alpha", help="Grayscale image (first channel is used)")
    set_parser.add_argument("--output", "-o", required=True, help="Output file path")
    set_parser.add_argument("--add-alpha", action="store_true",
                            help="Convert IMAGE to LA/RGBA first if it has no alpha channel")

    transplant_parser = subparsers.add_parser("transplant-alpha",
                                              help="Copy the alpha channel of SOURCE into TARGET")
    transplant_parser.add_argument("target", help="Image to modify")
    transplant_parser.add_argument("source", help="Image whose alpha is copied")
    transplant_parser.add_argument("--output", "-o", required=True, help="Output file path")

    # Batch command
    batch_parser = subparsers.add_parser("batch", help="Blend SOURCE into every image of a folder")
    batch_parser.add_argument("source", help="Image to blend from")
    batch_parser.add_argument("--input-dir", required=True, help="Folder of target images")
    batch_parser.add_argument("--output-dir", required=True, help="Folder for blended images")
    batch_parser.add_argument("--pattern", default="*.png", help="Glob for input files (default: *.png)")
    batch_parser.add_argument("--overwrite", action="store_true", help="Replace existing outputs")
    _add_blend_options(batch_parser)

    # Modes command
    subparsers.add_parser("modes", help="List available blend modes")

    args = parser.parse_args(argv)

    if args.command == "blend":
        return cmd_blend(args)
    elif args.command == "get-alpha":
        return cmd_get_alpha(args)
    elif args.command == "set-alpha":
        return cmd_set_alpha(args)
    elif args.command == "transplant-alpha":
        return cmd_transplant_alpha(args)
    elif args.command == "batch":
        return cmd_batch(args)
    elif args.command == "modes":
        return cmd_modes(args)
    else:
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())
