"""Tests for output formatting."""

import json

from dtokit.output.formatters import OutputSettings, format_result
from dtokit.services.result import ServiceResult

_SUCCESS = ServiceResult(
    ok=True,
    op="hydrate",
    data={"dto": "tests.dtos.Tagged", "instance": {"groups": ["a", "b"]}},
)
_FAILURE = ServiceResult.failure(
    "hydrate",
    "VALIDATION_FAILED",
    "Validation for tests.dtos.Tagged failed. Error: The groups.0 must be a string.",
    dto="tests.dtos.Tagged",
    field="groups.0",
    errors={
        "groups.0": ["The groups.0 must be a string."],
        "groups.1": ["The groups.1 must be a string."],
    },
)


class TestHumanOutput:
    def test_success(self) -> None:
        assert format_result(_SUCCESS) == (
            'OK: hydrate\n  dto: tests.dtos.Tagged\n  instance: {"groups":["a","b"]}'
        )

    def test_success_without_data(self) -> None:
        assert format_result(ServiceResult(ok=True, op="noop")) == "OK: noop"

    def test_failure(self) -> None:
        output = format_result(_FAILURE)
        assert output.startswith("ERROR: hydrate - Validation for tests.dtos.Tagged failed.")
        assert "groups.1" not in output

    def test_verbose_failure_lists_field_errors(self) -> None:
        output = format_result(_FAILURE, settings=OutputSettings(verbose=True))
        assert output.splitlines()[1:] == [
            "  groups.0: The groups.0 must be a string.",
            "  groups.1: The groups.1 must be a string.",
        ]

    def test_verbose_failure_without_errors(self) -> None:
        result = ServiceResult.failure("hydrate", "DTO_NOT_FOUND", "nope", target="x")
        assert format_result(result, settings=OutputSettings(verbose=True)) == (
            "ERROR: hydrate - nope"
        )


class TestQuietOutput:
    def test_success_prints_instance(self) -> None:
        output = format_result(_SUCCESS, settings=OutputSettings(quiet=True))
        assert json.loads(output) == {"groups": ["a", "b"]}

    def test_success_without_instance_prints_data(self) -> None:
        result = ServiceResult(ok=True, op="describe", data={"dto": "x"})
        assert json.loads(format_result(result, settings=OutputSettings(quiet=True))) == {
            "dto": "x"
        }

    def test_failure_prints_message(self) -> None:
        output = format_result(_FAILURE, settings=OutputSettings(quiet=True))
        assert output == _FAILURE.error.message


class TestJsonOutput:
    def test_full_result(self) -> None:
        parsed = json.loads(format_result(_FAILURE, settings=OutputSettings(json_output=True)))
        assert parsed["ok"] is False
        assert parsed["error"]["detail"]["field"] == "groups.0"

    def test_json_wins_over_quiet(self) -> None:
        settings = OutputSettings(json_output=True, quiet=True)
        assert json.loads(format_result(_SUCCESS, settings=settings))["op"] == "hydrate"
