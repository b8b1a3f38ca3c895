#!/usr/bin/env python3
"""
Command-line interface for xsltbridge.

Example Usage:
    xsltbridge echo.xsl input.xml -p title=Report -O indent=yes
    xsltbridge echo.xsl -x lookup=codes.xml -o result.xml
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from lxml import etree

from xsltbridge import __version__
from xsltbridge.config.settings import EngineConfig, load_config, set_config
from xsltbridge.exceptions import XSLTBridgeError
from xsltbridge.transform.processor import XSLTProcessor

logger = logging.getLogger(__name__)


def _assignment(text: str) -> Tuple[str, str]:
    name, sep, value = text.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {text!r}")
    return name, value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xsltbridge",
        description="Apply an XSLT stylesheet to an XML document",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s style.xsl input.xml
  %(prog)s style.xsl input.xml -p title=Report -O method=text
  %(prog)s style.xsl -x lookup=codes.xml --output result.xml
        """
    )

    parser.add_argument(
        "stylesheet",
        type=Path,
        help="Path to the XSLT stylesheet"
    )

    parser.add_argument(
        "input",
        type=Path,
        nargs="?",
        default=None,
        help="Path to the input XML document (default: an empty <root/> document)"
    )

    parser.add_argument(
        "-p", "--param",
        type=_assignment,
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Set a string parameter (repeatable)"
    )

    parser.add_argument(
        "-x", "--xml-param",
        type=_assignment,
        action="append",
        default=[],
        metavar="NAME=FILE",
        help="Set a parameter to the document parsed from FILE (repeatable)"
    )

    parser.add_argument(
        "-O", "--output-property",
        type=_assignment,
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Set a sealed output property such as method or indent (repeatable)"
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Write the result to this file instead of standard output"
    )

    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Engine configuration file (JSON or YAML)"
    )

    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: from configuration)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser


def run(args: argparse.Namespace) -> str:
    """Build a processor from parsed arguments and return the result."""
    processor = XSLTProcessor(args.stylesheet)

    for name, value in args.param:
        processor.set_parameter(name, value)

    for name, path in args.xml_param:
        try:
            document = etree.parse(str(path))
        except (OSError, etree.XMLSyntaxError) as e:
            raise XSLTBridgeError(f"Cannot load XML parameter {name} from {path}: {e}") from e
        processor.set_parameter(name, document)

    for name, value in args.output_property:
        processor.set_output_property(name, value)

    if args.input is None:
        return processor.transform()
    return processor.transform(args.input)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config) if args.config else EngineConfig.from_env()
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.log_level:
        config.log_level = args.log_level
    set_config(config)

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        result = run(args)
    except XSLTBridgeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(result, encoding="utf-8")
        logger.info(f"Result written to: {args.output}")
    else:
        sys.stdout.write(result)

    return 0


if __name__ == "__main__":
    sys.exit(main())
