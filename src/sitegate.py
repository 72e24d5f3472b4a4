"""SiteGate - Validate installed Python packages against bound requirements

    Returns:
        int: Exit code
"""
import csv
import io
import logging
import os
import sys

from args import parse_args
from cli_config import ConfigError, apply_config, load_config
from common.logging_utils import add_file_handler, configure_logging, extra_context, is_debug_enabled
from constants import Constants, ExitCodes
from scan.site_scan import ScanFS
from validation.manifest import Anchor, Manifest
from validation.reconcile import ValidationFlags
from validation.report import ValidationReport, format_table
from validation.schema import SchemaError
from versioning.errors import DuplicateNameError, ParseError

logger = logging.getLogger(__name__)


def _setup_logging(args) -> None:
    """Configure logging based on CLI arguments."""
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()
    configure_logging()
    if getattr(args, "QUIET", False):
        logging.getLogger().setLevel(logging.ERROR)
    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        try:
            add_file_handler(log_file)
        except OSError as e:
            logger.error("Log file couldn't be opened: %s", e)
            sys.exit(ExitCodes.FILE_ERROR.value)
        logger.info("Logging to file: %s", log_file)


def emit(text, args) -> None:
    """Write report text to stdout unless running quiet."""
    if not getattr(args, "QUIET", False):
        sys.stdout.write(text)
        sys.stdout.flush()


def write_text(path, text, label) -> None:
    """Write report text to ``path``, exiting with FILE_ERROR on failure."""
    try:
        with open(path, "w", encoding="utf-8", newline="") as file:
            file.write(text)
        logger.info("%s file has been successfully exported at: %s", label, path)
    except OSError as e:
        logger.error("%s file couldn't be written to disk: %s", label, e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def get_scan(args) -> ScanFS:
    """Scan the given executables, or every discoverable one."""
    force_usite = bool(getattr(args, "USER_SITE", False))
    max_workers = getattr(args, "MAX_WORKERS", None)
    exes = getattr(args, "EXE", None)
    if exes:
        sfs = ScanFS.from_exes(exes, force_usite, max_workers)
    else:
        sfs = ScanFS.from_exe_scan(force_usite, max_workers)
    logger.info(
        "Scanned %d executables; found %d packages.", len(sfs.exe_to_sites), len(sfs)
    )
    return sfs


def get_manifest(path) -> Manifest:
    """Load the bound requirements, exiting on unreadable or invalid input."""
    try:
        return Manifest.from_path(path)
    except OSError as e:
        logger.error("Bound requirements couldn't be read: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    except (ParseError, DuplicateNameError) as e:
        logger.error("Invalid bound requirements in %s: %s", path, e)
        sys.exit(ExitCodes.PARSE_ERROR.value)


def _output_format(args) -> str:
    fmt = getattr(args, "OUTPUT_FORMAT", None)
    if fmt:
        return fmt
    output = getattr(args, "OUTPUT", None)
    if output:
        lower = output.lower()
        if lower.endswith(".json"):
            return "json"
        if lower.endswith(".csv"):
            return "csv"
    return "display"


def render_rows(args, headers, rows) -> None:
    """Display rows as a table, or write them delimited to ``args.OUTPUT``."""
    if args.OUTPUT:
        buf = io.StringIO()
        writer = csv.writer(buf, delimiter=args.DELIMITER, lineterminator="\n")
        writer.writerow(headers)
        writer.writerows(rows)
        write_text(args.OUTPUT, buf.getvalue(), "CSV")
    else:
        emit(format_table(headers, rows), args)


def run_scan(args, sfs) -> None:
    render_rows(args, ["Package", "Site"], sfs.to_scan_rows())


def run_search(args, sfs) -> None:
    rows = sfs.search(args.PATTERN, args.CASE)
    logger.info("%d packages matched '%s'.", len({row[0] for row in rows}), args.PATTERN)
    render_rows(args, ["Package", "Site"], rows)


def run_count(args, sfs) -> None:
    render_rows(args, ["Name", "Count"], sfs.to_count_rows())


def run_derive(args, sfs) -> None:
    manifest = sfs.to_manifest(Anchor(args.ANCHOR))
    body = "".join(line + "\n" for line in manifest.to_lines())
    if args.OUTPUT:
        write_text(args.OUTPUT, body, "Requirements")
    else:
        emit(body, args)


def render_validation(args, report: ValidationReport) -> None:
    fmt = _output_format(args)
    try:
        if fmt == "json":
            text = report.to_json(indent=4 if args.OUTPUT else None) + "\n"
        elif fmt == "csv":
            text = report.to_csv(args.DELIMITER)
        else:
            text = report.to_table()
    except SchemaError as e:
        logger.error("Validation digest failed its schema: %s", e)
        sys.exit(ExitCodes.PARSE_ERROR.value)
    if args.OUTPUT:
        write_text(args.OUTPUT, text, fmt.upper())
    else:
        emit(text, args)


def run_validate(args, sfs) -> int:
    if not getattr(args, "BOUND", None):
        logger.error("No bound requirements given; use --bound or validate.bound in the config.")
        sys.exit(ExitCodes.FILE_ERROR.value)
    manifest = get_manifest(args.BOUND)
    flags = ValidationFlags(
        permit_superset=bool(args.SUPERSET),
        permit_subset=bool(args.SUBSET),
    )
    report = sfs.to_validation_report(manifest, flags, getattr(args, "MAX_WORKERS", None))
    render_validation(args, report)

    if len(report):
        logger.warning("%d packages failed validation.", len(report))
        if args.EXIT_CODE is not None:
            return args.EXIT_CODE
    else:
        logger.info("All packages validated.")
    return ExitCodes.SUCCESS.value


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    _setup_logging(args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main", target=args.action)
        )

    if not args.action:
        logger.warning("No command provided. For more information, try '--help'.")
        sys.exit(ExitCodes.SUCCESS.value)

    try:
        apply_config(args, load_config(getattr(args, "CONFIG", None)))
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)

    # we always scan; every command reports on observed packages
    sfs = get_scan(args)

    code = ExitCodes.SUCCESS.value
    if args.action == "scan":
        run_scan(args, sfs)
    elif args.action == "search":
        run_search(args, sfs)
    elif args.action == "count":
        run_count(args, sfs)
    elif args.action == "derive":
        run_derive(args, sfs)
    elif args.action == "validate":
        code = run_validate(args, sfs)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI finished",
            extra=extra_context(event="function_exit", component="cli", action="main", outcome=str(code))
        )
    sys.exit(code)


if __name__ == "__main__":
    main()
