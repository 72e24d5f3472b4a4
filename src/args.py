"""Argument parsing functionality for SiteGate."""

import argparse
from constants import Constants

AFTER_HELP = """\
Examples:
  sitegate scan
  sitegate scan -o /tmp/pkgscan.csv --delimiter '|'

  sitegate search --pattern "pip*"
  sitegate search -p "Django-4.*" --case -o /tmp/search.csv

  sitegate count

  sitegate --exe python3 derive -a lower -o /tmp/bound_requirements.txt

  sitegate validate --bound /tmp/bound_requirements.txt
  sitegate --exe python3 validate --bound requirements.txt --superset -f json
  sitegate validate --bound requirements.txt --exit-code 3
"""


def delimiter(value):
    """Argparse type for a single-character delimiter."""
    if len(value) != 1:
        raise argparse.ArgumentTypeError(f"delimiter must be a single character, got {value!r}")
    return value


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="sitegate",
        description=(
            "SiteGate - Validate installed Python packages against bound requirements"
        ),
        epilog=AFTER_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=True,
    )

    parser.add_argument("-e", "--exe",
                        dest="EXE",
                        help="Python executable to derive site packages from; repeatable. "
                             "If omitted, all discoverable executables are used.",
                        action="append",
                        type=str,
                        default=None)
    parser.add_argument("--user-site",
                        dest="USER_SITE",
                        help="Always include the user site-packages, even if not enabled.",
                        action="store_true",
                        default=None)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("--set",
                        dest="CONFIG_SET",
                        help="Set configuration override (KEY=VALUE format, can be used multiple times)",
                        action="append",
                        type=str,
                        default=[])
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not output to console.",
                        action="store_true")

    subparsers = parser.add_subparsers(dest="action", metavar="COMMAND")

    scan = subparsers.add_parser("scan", help="Report installed packages and their sites.")
    scan.add_argument("-o", "--output",
                      dest="OUTPUT",
                      help="Write a delimited report to this file instead of displaying it.",
                      action="store",
                      type=str)
    scan.add_argument("-d", "--delimiter",
                      dest="DELIMITER",
                      help="Delimiter for written reports (default: ',')",
                      action="store",
                      type=delimiter,
                      default=",")

    search = subparsers.add_parser("search", help="Report installed packages matching a pattern.")
    search.add_argument("-p", "--pattern",
                        dest="PATTERN",
                        help="Glob-like pattern matched against 'name-version' ('*', '?'; '-' and '_' match each other).",
                        action="store",
                        type=str,
                        required=True)
    search.add_argument("--case",
                        dest="CASE",
                        help="Enable case-sensitive pattern matching.",
                        action="store_true")
    search.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Write a delimited report to this file instead of displaying it.",
                        action="store",
                        type=str)
    search.add_argument("-d", "--delimiter",
                        dest="DELIMITER",
                        help="Delimiter for written reports (default: ',')",
                        action="store",
                        type=delimiter,
                        default=",")

    count = subparsers.add_parser("count", help="Count discovered executables, sites, and packages.")
    count.add_argument("-o", "--output",
                       dest="OUTPUT",
                       help="Write a delimited report to this file instead of displaying it.",
                       action="store",
                       type=str)
    count.add_argument("-d", "--delimiter",
                       dest="DELIMITER",
                       help="Delimiter for written reports (default: ',')",
                       action="store",
                       type=delimiter,
                       default=",")

    derive =subparsers.add_parser("derive", help="Derive bound requirements from installed packages.")
    derive.add_argument("-a", "--anchor",
                        dest="ANCHOR",
                        help="Bound to derive: lower (>=), upper (<=), or both",
                        action="store",
                        type=str.lower,
                        choices=Constants.ANCHORS,
                        required=True)
    derive.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Write the requirements to this file instead of displaying them.",
                        action="store",
                        type=str)

    validate = subparsers.add_parser("validate", help="Validate installed packages against bound requirements.")
    validate.add_argument("-b", "--bound",
                          dest="BOUND",
                          help="Requirements file (or pyproject.toml) with bound requirements.",
                          action="store",
                          type=str)
    validate.add_argument("--subset",
                          dest="SUBSET",
                          help="Permit observed packages to be a subset of the bound requirements.",
                          action="store_true",
                          default=None)
    validate.add_argument("--superset",
                          dest="SUPERSET",
                          help="Permit observed packages to be a superset of the bound requirements.",
                          action="store_true",
                          default=None)
    validate.add_argument("-f", "--format",
                          dest="OUTPUT_FORMAT",
                          help="Output format (display, json or csv). If not specified, inferred "
                               "from --output extension; defaults to display.",
                          action="store",
                          type=str.lower,
                          choices=Constants.OUTPUT_FORMATS)
    validate.add_argument("-o", "--output",
                          dest="OUTPUT",
                          help="Path to output file (JSON or CSV)",
                          action="store",
                          type=str)
    validate.add_argument("-d", "--delimiter",
                          dest="DELIMITER",
                          help="Delimiter for CSV output (default: ',')",
                          action="store",
                          type=delimiter,
                          default=",")
    validate.add_argument("--exit-code",
                          dest="EXIT_CODE",
                          help="Exit with this code (default: %(const)s) if any package fails validation.",
                          action="store",
                          type=int,
                          nargs="?",
                          const=Constants.VALIDATE_EXIT_CODE)

    return parser.parse_args(argv)
