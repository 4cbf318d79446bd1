"""Command line interface for the fairness audit toolkit."""

import argparse
import sys
from pathlib import Path

from .audit_runner import AuditRunner
from .config import ConfigParser


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fairness-audit",
        description="Audit classification outcomes for group fairness",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "config_path", type=str, help="Path to audit configuration YAML file"
    )

    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Only validate configuration without running the audit",
    )

    parser.add_argument(
        "--json", action="store_true", help="Print the audit result as JSON"
    )

    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )

    return parser


def main(argv=None) -> int:
    """Main CLI entry point.

    Returns 0 when the audit ran, whatever its verdict, and 1 on any
    configuration or execution error.
    """
    args = build_parser().parse_args(argv)
    status = sys.stderr

    try:
        config_path = Path(args.config_path)
        print(f"Loading configuration from: {config_path}", file=status)

        config = ConfigParser.load(config_path)

        errors = ConfigParser.validate(config)
        if errors:
            print("Configuration validation failed:", file=status)
            for error in errors:
                print(f"  - {error}", file=status)
            return 1

        print("Configuration validated successfully", file=status)

        if args.validate_only:
            print("Validation complete. Exiting.", file=status)
            return 0

        runner = AuditRunner(config, verbose=args.verbose)
        result = runner.run()
        runner.render(result, output_format="json" if args.json else None)

    except FileNotFoundError as e:
        print(f"Error: {e}", file=status)
        return 1
    except Exception as e:
        print(f"Audit failed: {e}", file=status)
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
