# topmark:header:start
#
#   project      : Trailmark
#   file         : test_interpret.py
#   file_relpath : tests/cli/test_interpret.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""CLI tests for `trailmark interpret`."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tests.cli.conftest import assert_exit, assert_SUCCESS, run_cli_in
from tests.conftest import mark_cli, parametrize
from trailmark.cli.exit_codes import ExitCode

if TYPE_CHECKING:
    from pathlib import Path

    from click.testing import Result

FIX_BUG = "Fix bug\n\nSigned-off-by: A <a@x.com>\n"


@mark_cli
def test_stdin_to_stdout(isolation: Path) -> None:
    result: Result = run_cli_in(
        isolation,
        ["interpret", "--trailer", "Signed-off-by: B <b@x.com>"],
        input_text=FIX_BUG,
    )
    assert_SUCCESS(result)
    assert result.stdout == FIX_BUG + "Signed-off-by: B <b@x.com>\n"


@mark_cli
def test_input_is_completed_with_a_final_newline(isolation: Path) -> None:
    result: Result = run_cli_in(
        isolation, ["interpret", "--trailer", "Acked-by=B"], input_text="Fix bug"
    )
    assert_SUCCESS(result)
    assert result.stdout == "Fix bug\n\nAcked-by: B\n"


@mark_cli
def test_policy_options_apply_to_following_trailers_only(isolation: Path) -> None:
    result: Result = run_cli_in(
        isolation,
        [
            "interpret",
            "--trailer",
            "X=1",
            "--where",
            "start",
            "--trailer",
            "Y=2",
            "--no-where",
            "--trailer",
            "Z=3",
        ],
        input_text="Subject\n\nA: 0\n",
    )
    assert_SUCCESS(result)
    assert result.stdout == "Subject\n\nY: 2\nA: 0\nX: 1\nZ: 3\n"


@mark_cli
def test_if_exists_replace_with_equals_form(isolation: Path) -> None:
    result: Result = run_cli_in(
        isolation,
        ["interpret", "--if-exists=replace", "--trailer=Signed-off-by=C"],
        input_text=FIX_BUG,
    )
    assert_SUCCESS(result)
    assert result.stdout == "Fix bug\n\nSigned-off-by: C\n"


@mark_cli
def test_project_config_aliases(isolation: Path) -> None:
    (isolation / "trailmark.toml").write_text(
        'root = true\n[keys.sob]\nkey = "Signed-off-by"\nwhere = "start"\nif_exists = "add"\n',
        encoding="utf-8",
    )
    result: Result = run_cli_in(
        isolation, ["interpret", "--trailer", "sob=B"], input_text=FIX_BUG
    )
    assert_SUCCESS(result)
    assert result.stdout == "Fix bug\n\nSigned-off-by: B\nSigned-off-by: A <a@x.com>\n"

    bare: Result = run_cli_in(
        isolation, ["interpret", "--no-config", "--trailer", "sob=B"], input_text=FIX_BUG
    )
    assert bare.stdout == FIX_BUG + "sob: B\n"


@mark_cli
def test_parse_mode_lists_trailers(isolation: Path) -> None:
    result: Result = run_cli_in(
        isolation,
        ["interpret", "--parse"],
        input_text="Subject\n\nKey =  a\n  b\n(cherry picked from commit abc)\n",
    )
    assert_SUCCESS(result)
    assert result.stdout == "Key= a b\n(cherry picked from commit abc)\n"


@mark_cli
def test_crlf_is_preserved(isolation: Path) -> None:
    result: Result = run_cli_in(
        isolation,
        ["interpret", "--trailer", "Acked-by: B"],
        input_text=b"Subject\r\n\r\nKey: v\r\n",
    )
    assert_SUCCESS(result)
    assert result.stdout_bytes == b"Subject\r\n\r\nKey: v\r\nAcked-by: B\r\n"


@mark_cli
def test_files_in_place(isolation: Path) -> None:
    a: Path = isolation / "a.txt"
    b: Path = isolation / "b.txt"
    a.write_text("One\n", encoding="utf-8")
    b.write_text(FIX_BUG, encoding="utf-8")

    result: Result = run_cli_in(
        isolation, ["interpret", "--in-place", "--trailer", "Acked-by: Z", "a.txt", "b.txt"]
    )
    assert_SUCCESS(result)
    assert result.stdout == ""
    assert a.read_text(encoding="utf-8") == "One\n\nAcked-by: Z\n"
    assert b.read_text(encoding="utf-8") == FIX_BUG + "Acked-by: Z\n"


@mark_cli
def test_files_to_stdout(isolation: Path) -> None:
    (isolation / "msg").write_text("One\n", encoding="utf-8")
    result: Result = run_cli_in(isolation, ["interpret", "--trailer", "K=v", "msg"])

    assert_SUCCESS(result)
    assert result.stdout == "One\n\nK: v\n"
    assert (isolation / "msg").read_text(encoding="utf-8") == "One\n"


@mark_cli
def test_missing_file_reports_and_continues(isolation: Path) -> None:
    (isolation / "ok").write_text("One\n", encoding="utf-8")
    result: Result = run_cli_in(isolation, ["interpret", "--trailer", "K=v", "nope", "ok"])

    assert_exit(result, ExitCode.FILE_NOT_FOUND)
    assert result.stdout == "One\n\nK: v\n"
    assert "nope" in result.stderr


@mark_cli
def test_invalid_utf8_is_an_encoding_error(isolation: Path) -> None:
    (isolation / "bad").write_bytes(b"One\n\xff\n")
    result: Result = run_cli_in(isolation, ["interpret", "bad"])

    assert_exit(result, ExitCode.ENCODING_ERROR)


@mark_cli
@parametrize(
    "argv",
    [
        ["interpret", "--only-input", "--trailer", "K=v"],
        ["interpret", "--parse", "--trailer", "K=v"],
        ["interpret", "--in-place", "--trailer", "K=v"],
        ["interpret", "--trailer", "=v"],
        ["-v", "-q", "interpret"],
    ],
)
def test_usage_errors(isolation: Path, argv: list[str]) -> None:
    result: Result = run_cli_in(isolation, argv, input_text="One\n")
    assert_exit(result, ExitCode.USAGE_ERROR)


@mark_cli
def test_invalid_key_is_a_pipeline_error(isolation: Path) -> None:
    result: Result = run_cli_in(
        isolation, ["interpret", "--trailer", "bad key=v"], input_text="One\n"
    )
    assert_exit(result, ExitCode.PIPELINE_ERROR)
    assert result.stdout == ""


@mark_cli
def test_config_conflict_is_a_config_error(isolation: Path) -> None:
    (isolation / "trailmark.toml").write_text(
        'root = true\n[keys.a]\naliases = ["x"]\n[keys.b]\naliases = ["x"]\n',
        encoding="utf-8",
    )
    result: Result = run_cli_in(isolation, ["interpret"], input_text="One\n")

    assert_exit(result, ExitCode.CONFIG_ERROR)
    assert "declared for both" in result.stderr


@mark_cli
def test_invalid_policy_keyword_is_rejected_by_click(isolation: Path) -> None:
    result: Result = run_cli_in(
        isolation, ["interpret", "--where", "sideways", "--trailer", "K=v"], input_text="One\n"
    )
    assert result.exit_code == 2


@mark_cli
def test_verbose_prints_status_summary_to_stderr(isolation: Path) -> None:
    result: Result = run_cli_in(
        isolation,
        ["--no-color", "-v", "interpret", "--trailer", "K=v"],
        input_text="One\n",
    )
    assert_SUCCESS(result)
    assert result.stdout == "One\n\nK: v\n"
    assert "<stdin>: locate: no trailer block" in result.stderr
    assert "merge: trailers changed" in result.stderr


@mark_cli
def test_bare_key_adds_empty_value(isolation: Path) -> None:
    result: Result = run_cli_in(
        isolation, ["interpret", "--trailer", "Reviewed-by"], input_text="One\n"
    )
    assert_SUCCESS(result)
    assert result.stdout == "One\n\nReviewed-by:\n"


@mark_cli
def test_unexpected_pipeline_failure(isolation: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def boom(*_args: object, **_kwargs: object) -> None:
        raise RuntimeError("boom")

    monkeypatch.setattr("trailmark.cli.commands.interpret.run_pipeline", boom)
    result: Result = run_cli_in(isolation, ["interpret"], input_text="One\n")

    assert_exit(result, ExitCode.UNEXPECTED_ERROR)
    assert "boom" in result.stderr


@mark_cli
def test_spec_validation_errors_propagate_unchanged(
    isolation: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def broken(*_args: object, **_kwargs: object) -> None:
        raise RuntimeError("validator broke")

    monkeypatch.setattr("trailmark.cli.commands.interpret.validate_specs", broken)
    result: Result = run_cli_in(isolation, ["interpret", "--trailer", "K=v"], input_text="One\n")

    assert isinstance(result.exception, RuntimeError)
    assert str(result.exception) == "validator broke"


@mark_cli
def test_no_trailer_drops_earlier_trailers(isolation: Path) -> None:
    result: Result = run_cli_in(
        isolation,
        ["interpret", "--trailer", "A=1", "--trailer=B=2", "--no-trailer", "--trailer", "C=3"],
        input_text="One\n",
    )
    assert_SUCCESS(result)
    assert result.stdout == "One\n\nC: 3\n"


@mark_cli
def test_no_trailer_allows_only_input(isolation: Path) -> None:
    result: Result = run_cli_in(
        isolation,
        ["interpret", "--trailer", "A=1", "--no-trailer", "--only-input"],
        input_text="One\n\nK: v\n",
    )
    assert_SUCCESS(result)
    assert result.stdout == "One\n\nK: v\n"
