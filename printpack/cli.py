# printpack/cli.py
# Command-line entry point: one source image in, a folder of print files out.

from __future__ import annotations

import sys
import argparse
from pathlib import Path
from typing import Dict, List, Optional

from printpack.models.enums import WatermarkPosition
from printpack.models.settings import ExportSettings, ProcessingSettings, WatermarkSpec
from printpack.models.specs import Progress
from printpack.imaging.batch import generate_batch, load_source
from printpack.imaging.catalog import CROP_RATIOS
from printpack.imaging.dpi_presets import DEFAULT_DPI, DPI_CHOICES, size_key
from printpack.imaging.encoding import encode_preview
from printpack.imaging.errors import ConfigurationError, PrintPackError
from printpack.imaging.instructions_pdf import generate_instructions_pdf, ratio_summary
from printpack.controllers.exporter import save_images
from printpack.utils.logging_utils import LOG_LEVELS, build_logger, log_section


def parse_overrides(values: List[str]) -> Dict[str, int]:
    """Parse repeated "RATIO|SIZE=DPI" arguments."""
    known = {size_key(r.name, s.name) for r in CROP_RATIOS for s in r.sizes}
    out: Dict[str, int] = {}
    for raw in values:
        key, sep, dpi = raw.rpartition("=")
        if not sep or "|" not in key:
            raise ConfigurationError(f"Expected RATIO|SIZE=DPI, got {raw!r}")
        if key not in known:
            raise ConfigurationError(f"Unknown ratio/size {key!r}")
        try:
            out[key] = int(dpi)
        except ValueError as e:
            raise ConfigurationError(f"DPI must be an integer in {raw!r}") from e
    return out


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Print-ready crop, resize and watermark batch.")
    ap.add_argument("-i", "--input", required=True, help="Path to source image")
    ap.add_argument("-o", "--outdir", required=True, help="Output directory")
    ap.add_argument("--title", default="", help="Artwork title used in file names and metadata")
    ap.add_argument("--shop", default="", help="Shop name used in file names and metadata")
    presets = "; ".join(f"{d} = {label}" for d, label in DPI_CHOICES)
    ap.add_argument("--dpi", type=int, default=DEFAULT_DPI, help=f"Default DPI for every size. Presets: {presets}")
    ap.add_argument("--dpi-override", action="append", default=[], metavar="RATIO|SIZE=DPI",
                    help="Per-size DPI, e.g. '2:3 Portrait|24x36 in=300' (repeatable)")
    ap.add_argument("--quality", type=float, default=0.9, help="JPEG quality 0.1-1.0")

    wm = ap.add_argument_group("watermark")
    wm.add_argument("--text", default="© Your Name")
    wm.add_argument("--no-watermark", action="store_true", help="Watermarked variant equals the final one")
    wm.add_argument("--opacity", type=float, default=0.5)
    wm.add_argument("--font-size", type=float, default=48)
    wm.add_argument("--font", dest="font_path", help="TrueType font file")
    wm.add_argument("--color", default="#ffffff")
    wm.add_argument("--position", choices=[p.value for p in WatermarkPosition], default="bottom-right")
    wm.add_argument("--rotation", type=float, default=-45)
    wm.add_argument("--margin-x", type=float, default=20)
    wm.add_argument("--margin-y", type=float, default=20)

    pdf = ap.add_argument_group("instructions pdf")
    pdf.add_argument("--pdf", action="store_true", help="Also write instructions.pdf")
    pdf.add_argument("--download-link", default="")
    pdf.add_argument("--thank-you", default="")

    ap.add_argument("--no-exif", action="store_true", help="Do not embed EXIF metadata")
    ap.add_argument("--log-dir", default="logs")
    ap.add_argument("--log-level", default="INFO", choices=LOG_LEVELS, help="Console and file log level")
    return ap


def _print_progress(p: Progress) -> None:
    end = "\n" if p.is_complete else "\r"
    sys.stdout.write(f"[{p.current}/{p.total}] {p.current_task:<70}{end}")
    sys.stdout.flush()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    log = build_logger(log_dir=Path(args.log_dir), level=args.log_level)

    try:
        processing = ProcessingSettings(
            jpeg_quality=args.quality,
            default_dpi=args.dpi,
            dpi_overrides=parse_overrides(args.dpi_override),
        )
        watermark = WatermarkSpec(
            text=args.text,
            opacity=args.opacity,
            font_size=args.font_size,
            color=args.color,
            position=WatermarkPosition(args.position),
            rotation=args.rotation,
            margin_x=args.margin_x,
            margin_y=args.margin_y,
            enabled=not args.no_watermark,
            font_path=args.font_path,
        )
        export = ExportSettings(
            output_dir=Path(args.outdir),
            shop_name=args.shop,
            art_title=args.title,
            embed_exif=not args.no_exif,
        )

        source = load_source(args.input)
        with log_section("GENERATING PRINT SET", log):
            images = generate_batch(source, watermark, processing, progress_cb=_print_progress)

        with log_section("SAVING", log):
            saved, failed = save_images(images, export)

        if args.pdf:
            pdf_bytes = generate_instructions_pdf(
                shop_name=args.shop,
                art_title=args.title,
                download_link=args.download_link,
                ratios=ratio_summary(images),
                preview_jpeg=encode_preview(source),
                thank_you_message=args.thank_you,
            )
            pdf_path = export.output_dir / "instructions.pdf"
            pdf_path.write_bytes(pdf_bytes)
            log.info("Instructions: %s", pdf_path)
    except (PrintPackError, OSError, ValueError) as e:
        log.error(str(e))
        return 1

    expected = 2 * sum(len(r.sizes) for r in CROP_RATIOS)
    if len(images) < expected:
        log.error("Only %d of %d images were generated; see log for skipped sizes", len(images), expected)
        return 1
    return 0 if failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
