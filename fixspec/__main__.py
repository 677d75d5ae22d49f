"""
FIXSPEC - Main Entry Point

Compiles a FIX data dictionary and generates the runtime lookup tables.
"""

import argparse
import logging
import sys

from .core.config import CompilerConfig, LogLevel, set_config
from .core.exceptions import FixSpecException
from .core.structured_logging import configure_logging
from .dictionary.spec import compile_file


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="fixspec",
        description="FIXSPEC - FIX Data Dictionary Compiler and Table Generator",
    )

    parser.add_argument("dictionary", type=str, help="FIX data dictionary XML file")
    parser.add_argument(
        "-o", "--output", type=str, default=".",
        help="Output file or directory (default: current directory)",
    )
    parser.add_argument(
        "--language", type=str, choices=["c", "python"], help="Output language"
    )

    # Configuration
    parser.add_argument("--config", type=str, help="Configuration file path")
    parser.add_argument(
        "--max-tag", type=int, help="Largest tag indexed by the tag sequence tables"
    )

    # Logging
    parser.add_argument(
        "--log-level",
        type=str,
        choices=[level.value for level in LogLevel],
        help="Log level",
    )
    parser.add_argument(
        "--json-logs", action="store_true", help="Emit structured JSON log lines"
    )

    return parser


def main():
    """Main entry point for the dictionary compiler."""
    from table_generator import GeneratorConfig, Language, TableGenerator

    args = build_parser().parse_args()

    # Early logging so configuration errors are reported
    logging.basicConfig(
        level=getattr(logging, (args.log_level or "INFO").upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    logger = logging.getLogger(__name__)

    try:
        # Load configuration
        if args.config:
            config = CompilerConfig.load_from_file(args.config)
        else:
            config = CompilerConfig.load_from_env()

        # Override config with CLI arguments
        if args.language:
            config.language = args.language
        if args.max_tag is not None:
            config.max_tag = args.max_tag
        if args.log_level:
            config.log_level = LogLevel(args.log_level)
        if args.json_logs:
            config.json_logs = True

        set_config(config)
        configure_logging(config.log_level.value, json_format=config.json_logs)

        logger.info(f"Compiling {args.dictionary}")
        spec = compile_file(args.dictionary, config=config)

        generator = TableGenerator(
            spec, GeneratorConfig(reference_dir=config.reference_dir)
        )
        path = generator.generate(Language.from_name(config.language), args.output)
        logger.info(f"Wrote {path}")

    except FixSpecException as e:
        logger.error(f"Failed to compile {args.dictionary}: {e}")
        sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()
