#!/usr/bin/env python3
"""
Command-line SSIM comparison of two images.

    imagediff IMAGE1 IMAGE2 [--diff-output PATH] [--rect-color R,G,B] [--silent]
"""
import os
import sys
import argparse
import logging
from typing import List, Optional

from dotenv import load_dotenv

from ..models.errors import ImageDiffError, ImageSaveFailure
from ..pipeline.similarity_report import SimilarityReport

# Load environment variables first
load_dotenv()

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    # --- Centralized Logging Configuration ---
    logging.basicConfig(
        level=os.getenv("SSIM_LOG_LEVEL", "INFO").upper(),
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )


def _report_error(err: ImageDiffError, silent: bool) -> None:
    if not silent:
        logger.error(f"{err.kind.value}: {err.message}")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="imagediff",
        description="Compare two equally sized images with SSIM.",
    )
    ap.add_argument("images", nargs="*", metavar="IMAGE",
                    help="exactly two image paths: reference, then test")
    ap.add_argument("--diff-output", default=None,
                    help="write a copy of IMAGE2 with difference regions outlined")
    ap.add_argument("--rect-color", default=None,
                    help="outline color as R,G,B (default: red)")
    ap.add_argument("--silent", action="store_true",
                    help="do not report comparison errors")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    if len(args.images) != 2:
        ap.print_usage()
        return 0

    _configure_logging()
    image1, image2 = args.images

    exit_code = 0
    try:
        report = SimilarityReport(image1, image2, args.diff_output, rect_color=args.rect_color)
        report.compute()
    except ImageSaveFailure as err:
        # scores are already computed, only the difference image is missing
        _report_error(err, args.silent)
        exit_code = 1
    except ImageDiffError as err:
        _report_error(err, args.silent)
        return 1

    print(f"SSIM_All: {report.ssim_all}")  # 1 means identical
    print(f"SSIM_Red: {report.ssim_red}")
    print(f"SSIM_Green: {report.ssim_green}")
    print(f"SSIM_Blue: {report.ssim_blue}")
    logger.info(f"Difference regions: {report.num_differences}")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
