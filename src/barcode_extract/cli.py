from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path

from . import __version__
from .artifacts import default_output_file, write_document_json
from .config import ExtractConfig, LabelWeights, TextSource
from .errors import ArgumentError, BarcodeExtractError
from .logging_config import configure_logging
from .page_selection import parse_page_range, parse_page_set
from .pipeline import ExtractEngines, extract_document

logger = logging.getLogger("barcode_extract.cli")

_DEFAULT_WEIGHTS = LabelWeights()


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="barcode-extract",
        description="Extract barcodes and their labels from PDF files into one JSON file per input.",
    )
    p.add_argument("files", nargs="*", type=str, help="Input PDF file(s).")
    p.add_argument("-d", "--debug", action="store_true", help="Debug logging, pretty JSON, keep the working directory.")
    p.add_argument("-p", "--pages", default=None, help='Page range to process, e.g. "3", "2-5" or "3-". Default: all.')
    p.add_argument("-x", "--exclude-pages", default=None, help='Pages to skip, e.g. "1-3,5,8".')
    p.add_argument(
        "-s",
        "--strict",
        action="store_true",
        help=(
            "Re-decode code128/datamatrix codes for raw codewords and regenerate them byte-exact. "
            "The bundled zxing-cpp decoder exposes no codewords, so codes stay non-strict with it."
        ),
    )
    p.add_argument("-o", "--output", type=Path, default=None, help="Output JSON file (single input only).")
    p.add_argument("--ocr", action="store_true", help="Take text lines from tesseract OCR instead of the PDF text layer.")
    p.add_argument("--ocr-language", default="eng", help="Tesseract language(s), e.g. 'eng+deu'.")
    p.add_argument(
        "--north-penalty",
        type=float,
        default=_DEFAULT_WEIGHTS.north,
        help="Distance penalty for label candidates above a barcode (0.10 = +10%%).",
    )
    p.add_argument(
        "--side-penalty",
        type=float,
        default=_DEFAULT_WEIGHTS.east_west,
        help="Distance penalty for label candidates left or right of a barcode.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def _input_files(args: argparse.Namespace) -> list[Path]:
    names = [name.strip() for name in args.files if name.strip()]
    if not names:
        raise ArgumentError("No input file(s) given", code="INPUT_NO_FILES")
    if args.output is not None and len(names) > 1:
        raise ArgumentError(
            "-o / --output option can only be used with a single input file",
            code="INPUT_OUTPUT_WITH_MULTIPLE_FILES",
            detail={"files": names},
        )
    return [Path(name) for name in names]


def config_from_args(args: argparse.Namespace) -> ExtractConfig:
    first_page, last_page = parse_page_range(args.pages)
    excluded_pages = parse_page_set(args.exclude_pages)
    try:
        return ExtractConfig(
            strict=args.strict,
            debug=args.debug,
            first_page=first_page,
            last_page=last_page,
            excluded_pages=excluded_pages,
            text_source=TextSource.OCR if args.ocr else TextSource.PDF,
            ocr_language=args.ocr_language,
            label_weights=LabelWeights(north=args.north_penalty, east_west=args.side_penalty),
        )
    except ValueError as e:
        raise ArgumentError(str(e)) from e


async def run_files(
    *,
    files: list[Path],
    config: ExtractConfig,
    output: Path | None = None,
    engines: ExtractEngines | None = None,
) -> int:
    """Process `files` one after another. Returns the number of failed documents."""

    failed = 0
    for pdf_file in files:
        out_file = output or default_output_file(pdf_file)
        try:
            result = await extract_document(pdf_file=pdf_file, config=config, engines=engines)
        except (BarcodeExtractError, OSError) as e:
            logger.error("Failed to process %s: %s", pdf_file, e)
            failed += 1
            continue
        except Exception:
            logger.exception("Unexpected error while processing %s", pdf_file)
            failed += 1
            continue

        logger.info("Writing result to %s", out_file)
        try:
            write_document_json(result=result, out_file=out_file, pretty=config.debug)
        except OSError as e:
            logger.error("Failed to write %s: %s", out_file, e)
            failed += 1
    return failed


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    configure_logging(debug=args.debug)

    try:
        files = _input_files(args)
        config = config_from_args(args)
    except ArgumentError as e:
        logger.error("%s", e.message)
        return 1

    if config.strict:
        logger.info(
            "Running in strict mode, code128 and datamatrix codes are re-decoded "
            "for a byte-exact copy when the secondary decoder exposes codewords"
        )

    failed = asyncio.run(run_files(files=files, config=config, output=args.output))
    return 2 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
