import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from . import config
from .classification.kinds import KINDS, get_kind
from .compression.remote import RemoteCompressor, ShrinkServiceConfig
from .core import AssetPipelineApp
from .exceptions import AssetPipelineError
from .metadata.extract import ExifMetadataReader, MetadataExtractor
from .models import CompressionConfig, FilterConfig


def setup_logging(verbose: bool, log_file: Optional[Path] = None):
    """Sets up logging to the console and, optionally, a file."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # stdout is reserved for the tables
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
        force=True,
    )

    # Silence chatty libraries
    logging.getLogger("exifread").setLevel(logging.ERROR)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def parse_args(argv: Optional[List[str]] = None):
    p = argparse.ArgumentParser(description="Asset Pipeline: list, hash and compress images under a directory")

    p.add_argument("root", type=Path, nargs="?", default=Path.cwd(), help="Directory to scan (default: current directory)")
    p.add_argument("--kinds", nargs="+", default=["jpeg", "png"], choices=sorted(KINDS),
                   help="File kinds to process, in order")

    p.add_argument("--include-hidden", action="store_true", help="Do not skip dot-files")
    p.add_argument("--no-size", action="store_true", help="Hide the size column")
    p.add_argument("--no-hash", action="store_true", help="Skip MD5 computation")
    p.add_argument("--meta", action="store_true", help="Show the embedded metadata column")
    p.add_argument("--exif", action="store_true", help="Read EXIF tags for the metadata column (implies --meta)")

    p.add_argument("--compress", action="store_true", help="Send matched images to the shrink service")
    p.add_argument("--quality", type=int, default=config.DEFAULT_QUALITY, help="Quality recorded in the run configuration; the shrink service chooses its own and ignores it")
    p.add_argument("--output-dir", type=Path, default=config.OUTPUT_DIR,
                   help="Where compressed files are written (default: ./compressed)")

    p.add_argument("--csv", type=Path, default=None, help="Also write the file listing to this CSV")
    p.add_argument("--log-file", type=Path, default=None, help="Also log to this file")
    p.add_argument("--no-progress", action="store_true", help="Disable progress bars")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    return p.parse_args(argv)


def build_filter_config(args) -> FilterConfig:
    return FilterConfig(
        exclude_hidden=not args.include_hidden,
        compute_size=not args.no_size,
        compute_hash=not args.no_hash,
        compute_meta=args.meta or args.exif,
    )


def main(argv: Optional[List[str]] = None):
    load_dotenv()
    args = parse_args(argv)
    setup_logging(args.verbose, args.log_file)

    root = args.root.resolve()
    logging.info("=== Asset Pipeline Started ===")
    logging.info(f"Root: {root}")

    filter_options = build_filter_config(args)
    compression = CompressionConfig(enabled=args.compress, quality=args.quality)
    kinds = [get_kind(k) for k in args.kinds]
    extractor = MetadataExtractor(reader=ExifMetadataReader() if args.exif else None)

    app = AssetPipelineApp(
        filter_options,
        compression=compression,
        kinds=kinds,
        extractor=extractor,
        progress=not args.no_progress,
    )

    compressor = None
    try:
        if compression.enabled:
            compressor = RemoteCompressor(ShrinkServiceConfig.from_env(), kinds=kinds, output_dir=args.output_dir)
        run = app.run(root, compressor=compressor, report_csv=args.csv)
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        sys.exit(1)
    except AssetPipelineError as e:
        logging.error(f"Pipeline failed: {e.describe()}")
        sys.exit(1)
    finally:
        if compressor is not None:
            compressor.close()

    if run.error is not None:
        sys.exit(1)


if __name__ == "__main__":
    main()
