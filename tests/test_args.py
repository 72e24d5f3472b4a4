"""Tests for CLI argument parsing."""

import pytest

from args import parse_args


def test_global_options_before_command():
    ns = parse_args(["-e", "/usr/bin/python3", "-e", "python3.11", "--user-site", "scan"])
    assert ns.action == "scan"
    assert ns.EXE == ["/usr/bin/python3", "python3.11"]
    assert ns.USER_SITE is True
    assert ns.DELIMITER == ","


def test_validate_defaults_leave_room_for_config():
    ns = parse_args(["validate", "--bound", "req.txt"])
    assert ns.BOUND == "req.txt"
    assert ns.SUBSET is None
    assert ns.SUPERSET is None
    assert ns.EXIT_CODE is None
    assert ns.OUTPUT_FORMAT is None


def test_exit_code_const_and_value():
    assert parse_args(["validate", "--exit-code"]).EXIT_CODE == 3
    assert parse_args(["validate", "--exit-code", "7"]).EXIT_CODE == 7


def test_format_is_case_insensitive():
    assert parse_args(["validate", "-f", "JSON"]).OUTPUT_FORMAT == "json"


def test_derive_requires_anchor():
    assert parse_args(["derive", "-a", "Both"]).ANCHOR == "both"
    with pytest.raises(SystemExit):
        parse_args(["derive"])
    with pytest.raises(SystemExit):
        parse_args(["derive", "-a", "middle"])


def test_no_command():
    ns = parse_args([])
    assert ns.action is None
    assert ns.CONFIG_SET == []


def test_delimiter_must_be_one_character():
    assert parse_args(["scan", "-d", "|"]).DELIMITER == "|"
    with pytest.raises(SystemExit):
        parse_args(["validate", "-d", "||"])
    with pytest.raises(SystemExit):
        parse_args(["scan", "--delimiter", ""])


def test_search_and_count():
    ns = parse_args(["search", "-p", "pip*", "--case"])
    assert ns.action == "search"
    assert ns.PATTERN == "pip*"
    assert ns.CASE is True
    assert parse_args(["search", "-p", "pip*"]).CASE is False
    with pytest.raises(SystemExit):
        parse_args(["search"])
    assert parse_args(["count", "-d", ";"]).DELIMITER == ";"
