"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    PARSE_ERROR = 2
    EXIT_WARNINGS = 3


class Explain(Enum):
    """Explain codes attached to validation records.

    Args:
        Enum (string): Classification label of a validation record.
    """

    INVALID = "Invalid"  # found, version not accepted
    MISSING = "Missing"  # specified, not found
    DISALLOWED = "Disallowed"  # found, not specified


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
    ENV_LOG_LEVEL = "SITEGATE_LOG_LEVEL"
    REQUIREMENTS_FILE = "requirements.txt"
    PYPROJECT_TOML_FILE = "pyproject.toml"
    DIST_INFO_SUFFIX = ".dist-info"
    ANCHORS = ["lower", "upper", "both"]
    OUTPUT_FORMATS = ["display", "json", "csv"]
    VALIDATE_EXIT_CODE = ExitCodes.EXIT_WARNINGS.value
    MAX_WORKERS = 8
    SUBPROCESS_TIMEOUT = 10  # seconds allowed for an interpreter to report its site dirs
    EXE_SEARCH_DIRS = [
        "/bin",
        "/sbin",
        "/usr/bin",
        "/usr/sbin",
        "/usr/local/bin",
        "/usr/local/sbin",
        "/opt/homebrew/bin",
    ]
