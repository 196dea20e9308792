"""Command line importer: .ase palette in, Unity .colors preset library out."""

import argparse
import logging
import sys

from ase_palette import AseDecodeError, load_ase
from colors_export import output_path_for, render, write_colors_file
from swatch_config import ConfigManager
from swatch_preview import save_preview

logger = logging.getLogger("ase_import")


def build_argument_parser():
    parser = argparse.ArgumentParser(
        prog="ase-import",
        description="Convert an Adobe Swatch Exchange palette into a Unity color preset library",
    )
    parser.add_argument("input", help="ASE palette to import")
    parser.add_argument(
        "-o", "--output-dir", dest="output_dir",
        help="Directory for the .colors file (default: config output_dir, else an Editor folder next to the input)",
    )
    parser.add_argument("--preview", metavar="PNG", help="Also write a PNG contact sheet of the swatches")
    parser.add_argument("--config", help="Preference file to read (default: ASE_SWATCH_PREF_DIR or home)")
    parser.add_argument(
        "--dry-run", action="store_true", help="Print the rendered library instead of writing it"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")
    return parser


def main(argv=None):
    args = build_argument_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    config = ConfigManager(args.config).load_config()
    output_dir = args.output_dir or config.get("output_dir") or None

    try:
        records = load_ase(args.input)
        # preview first, a failed run never leaves a .colors file behind
        if args.preview:
            save_preview(records, args.preview)
            logger.info("Preview saved to %s", args.preview)
        if args.dry_run:
            sys.stdout.write(render(records))
        else:
            write_colors_file(records, output_path_for(args.input, output_dir))
    except AseDecodeError as e:
        logger.error("ASE Decode Error: %s", e)
        return 1
    except OSError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
