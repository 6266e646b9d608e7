"""
Command line entry point.

    ngrequire [--mode {tagged,all-without-defaults}] [--config FILE] PATH...

Exit status is 0 when no findings are reported, 1 when there are findings and
2 when the configuration or a `@required if` directive is broken.
"""

import argparse
import logging
import sys

from ngrequire.core.config import RequirednessMode, RuleOptions
from ngrequire.exceptions import NgRequireError
from ngrequire.rule import TemplatesRequireInputsRule

logger = logging.getLogger("ngrequire")

EXIT_CLEAN = 0
EXIT_FINDINGS = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ngrequire",
        description="Report component usages that omit required inputs.",
    )
    parser.add_argument("paths", nargs="+", help="Files or directories to analyse")
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in RequirednessMode],
        help="Default requiredness of inputs without a @required marker",
    )
    parser.add_argument("--config", help="YAML file with rule options")
    parser.add_argument(
        "--skip-element",
        action="append",
        default=[],
        metavar="NAME",
        help="Tag name never to track (repeatable)",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log debug details")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log errors")
    return parser


def load_options(args: argparse.Namespace) -> RuleOptions:
    """Merge the configuration file (if any) with command line overrides."""
    options = RuleOptions.from_yaml(args.config) if args.config else RuleOptions()

    overrides = {}
    if args.mode:
        overrides["mode"] = RequirednessMode(args.mode)
    if args.skip_element:
        overrides["skip_elements"] = options.skip_elements + args.skip_element
    return options.model_copy(update=overrides) if overrides else options


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.WARNING
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        options = load_options(args)
        findings = TemplatesRequireInputsRule(options).apply_to_paths(args.paths)
    except NgRequireError as e:
        logger.error("%s", e)
        return EXIT_ERROR

    for finding in findings:
        print(finding)

    return EXIT_FINDINGS if findings else EXIT_CLEAN


if __name__ == "__main__":
    sys.exit(main())
