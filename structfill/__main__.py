"""structfill CLI entry point.

Usage:
    python -m structfill fill myapp.models.Employee employee.yaml
    python -m structfill fill myapp.models.House house.json --registry pets.yaml
    python -m structfill describe myapp.models.Employee
"""

import argparse
import logging
import sys

from structfill.cli import describe_command, fill_command


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Fill dataclass / pydantic structures from JSON or YAML"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Fill command
    fill_parser = subparsers.add_parser(
        "fill",
        help="Fill a structure from an input document and print it as JSON",
    )
    fill_parser.add_argument(
        "target", help="Struct FQN (e.g., myapp.models.Employee)"
    )
    fill_parser.add_argument("input", help="Path to input JSON/YAML")
    fill_parser.add_argument(
        "--registry",
        help="Path to JSON/YAML mapping type identifiers to class FQNs",
    )

    # Describe command
    describe_parser = subparsers.add_parser(
        "describe",
        help="Show the fields, defaults and rules of a structure",
    )
    describe_parser.add_argument("target", help="Struct FQN")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "fill":
        return fill_command(args.target, args.input, args.registry)
    elif args.command == "describe":
        return describe_command(args.target)

    return 1


if __name__ == "__main__":
    sys.exit(main())
