import pytest

from typing import List, Tuple

from textwrap import dedent

from cooklang_parser.diagnostics import DiagnosticKind, Severity, RecipeSyntaxError

from cooklang_parser.recipe import Text

from cooklang_parser.parser import parse


def errors(source: str) -> List[Tuple[DiagnosticKind, int, int]]:
    result = parse(source, strict=True)
    assert not result.success
    return [(e.kind, e.line, e.column) for e in result.errors]


@pytest.mark.parametrize(
    "source, exp_message, exp",
    [
        (
            "Add @ ingredient with space after @",
            "Invalid ingredient syntax: space not allowed after '@'",
            (DiagnosticKind.invalid_ingredient_syntax, 1, 6),
        ),
        (
            "Use # pan for cooking",
            "Invalid cookware syntax: space not allowed after '#'",
            (DiagnosticKind.invalid_cookware_syntax, 1, 6),
        ),
        (
            "Add @flour{200%g and @sugar{100",
            "Unterminated brace: missing '}'",
            (DiagnosticKind.unterminated_brace, 1, 11),
        ),
        (
            "Wait ~timer {5%minutes}",
            "Invalid timer syntax: space not allowed before '{'",
            (DiagnosticKind.invalid_timer_syntax, 1, 12),
        ),
        (
            "Wait ~{} for it",
            "Invalid timer syntax: timer must have either a name or duration",
            (DiagnosticKind.invalid_timer_syntax, 1, 6),
        ),
        (
            "Add @onion{1}(chopped",
            "Unterminated parenthesis: missing ')'",
            (DiagnosticKind.unterminated_parenthesis, 1, 14),
        ),
        (
            "Add @sugar{1/0%cups}",
            "Division by zero in fraction",
            (DiagnosticKind.invalid_quantity, 1, 12),
        ),
        (
            "Add @sugar{1/2/3}",
            "Invalid fraction format: '1/2/3'",
            (DiagnosticKind.invalid_quantity, 1, 12),
        ),
        (
            ">> invalid metadata line without colon",
            "Invalid metadata format. Expected '>> key: value'",
            (DiagnosticKind.invalid_metadata, 1, 1),
        ),
        (
            ">> : value",
            "Metadata key cannot be empty",
            (DiagnosticKind.invalid_metadata, 1, 1),
        ),
        (
            "---\ntitle: x",
            "Unterminated front matter: missing closing '---'",
            (DiagnosticKind.invalid_metadata, 1, 1),
        ),
    ],
)
def test_single_error(
    source: str, exp_message: str, exp: Tuple[DiagnosticKind, int, int]
) -> None:
    result = parse(source, strict=True)
    assert result.recipe is None
    (error,) = result.diagnostics
    assert error.severity == Severity.error
    assert error.message == exp_message
    assert (error.kind, error.line, error.column) == exp
    assert error.length >= 1
    assert error.column + error.length - 1 <= len(source.split("\n")[error.line - 1])
    assert error.context == source.split("\n")[error.line - 1]


def test_division_by_zero() -> None:
    result = parse("Add @flour{1/0%cups}", strict=True)
    assert not result.success
    (error,) = result.errors
    assert error.kind == DiagnosticKind.invalid_quantity
    assert error.message == "Division by zero in fraction"
    assert error.line == 1


def test_unterminated_brace() -> None:
    result = parse("Add @sugar{unterminated", strict=True)
    (error,) = result.errors
    assert error.kind == DiagnosticKind.unterminated_brace
    assert error.line == 1
    assert "{" in error.context
    assert error.length == len("{unterminated")


def test_multiple_errors_on_each_line() -> None:
    source = dedent(
        """\
        Mix @ flour{200%g} and # pot{}.
        Use ~ {5%minutes} to cook.
        Timer with ~{} empty duration.
        """
    )
    assert errors(source) == [
        (DiagnosticKind.invalid_ingredient_syntax, 1, 6),
        (DiagnosticKind.invalid_cookware_syntax, 1, 25),
        (DiagnosticKind.invalid_timer_syntax, 2, 6),
        (DiagnosticKind.invalid_timer_syntax, 3, 12),
    ]


def test_errors_on_continuation_lines() -> None:
    source = dedent(
        """\
        Mix @flour{200%g} and @water{100%ml}.
        Add @bananas{2 after mixing.
        Add @sugar{41/0%cups} to taste.
        """
    )
    assert errors(source) == [
        (DiagnosticKind.unterminated_brace, 2, 13),
        (DiagnosticKind.invalid_quantity, 3, 12),
    ]


def test_errors_across_separate_steps() -> None:
    source = "Add @sugar{1/0}.\n\n== Section ==\n\nUse # pan.\n\n> note\n\n~{}"
    assert errors(source) == [
        (DiagnosticKind.invalid_quantity, 1, 12),
        (DiagnosticKind.invalid_cookware_syntax, 5, 6),
        (DiagnosticKind.invalid_timer_syntax, 9, 1),
    ]


@pytest.mark.parametrize(
    "source, exp",
    [
        # Merged by a trailing comment
        (
            "Mix @flour{1/0} -- comment\nthen @sugar{2/0}",
            [
                (DiagnosticKind.invalid_quantity, 1, 12),
                (DiagnosticKind.invalid_quantity, 2, 13),
            ],
        ),
        # After a block comment
        (
            "[- note -] Add @sugar{1/0}",
            [(DiagnosticKind.invalid_quantity, 1, 23)],
        ),
        (
            "[- a long\nnote -] Add @sugar{1/0}",
            [(DiagnosticKind.invalid_quantity, 2, 20)],
        ),
        # After front matter
        (
            "---\ntitle: x\n---\nAdd @sugar{1/0}",
            [(DiagnosticKind.invalid_quantity, 4, 12)],
        ),
        # Windows line endings
        (
            "Mix.\r\nAdd @sugar{1/0}",
            [(DiagnosticKind.invalid_quantity, 2, 12)],
        ),
    ],
)
def test_positions_survive_preprocessing(
    source: str, exp: List[Tuple[DiagnosticKind, int, int]]
) -> None:
    assert errors(source) == exp


def test_unterminated_parenthesis_recovery() -> None:
    # Scanning continues on the next line
    source = "Add @onion{1}(chopped\nthen @sugar{1/0}"
    assert errors(source) == [
        (DiagnosticKind.unterminated_parenthesis, 1, 14),
        (DiagnosticKind.invalid_quantity, 2, 13),
    ]


class TestWarnings:
    def test_classic_metadata(self) -> None:
        result = parse(">> servings: 4\nMix.", strict=True)
        assert result.success
        (warning,) = result.diagnostics
        assert warning.severity == Severity.warning
        assert warning.kind == DiagnosticKind.invalid_metadata
        assert warning.message.startswith("Classic metadata format")
        assert (warning.line, warning.column) == (1, 1)
        assert result.unwrap().metadata == {"servings": "4"}

    def test_disabled(self) -> None:
        result = parse(">> servings: 4", strict=True, classic_metadata_warnings=False)
        assert result.success
        assert result.diagnostics == ()

    def test_tolerant(self) -> None:
        assert parse(">> servings: 4").diagnostics == ()

    def test_warnings_kept_on_failure(self) -> None:
        result = parse(">> servings: 4\nAdd @sugar{1/0}", strict=True)
        assert not result.success
        assert [d.severity for d in result.diagnostics] == [
            Severity.warning,
            Severity.error,
        ]

        with pytest.raises(RecipeSyntaxError) as exc_info:
            result.unwrap()
        assert len(exc_info.value.diagnostics) == 1


def test_strict_success() -> None:
    result = parse("Add @sugar{1/2%cup}(sifted) to a #bowl.", strict=True)
    assert result.success
    assert result.diagnostics == ()


def test_tolerant_never_fails() -> None:
    result = parse("Mix @ flour{200%g} and # pot{}.\nUse ~ {5%minutes} and ~{}.")
    assert result.success
    assert result.diagnostics == ()
    (step,) = result.unwrap().steps()
    assert step.items == (
        Text("Mix @ flour{200%g} and # pot{}. Use ~ {5%minutes} and ~{}."),
    )


def test_internal_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def explode(*args: object) -> None:
        raise RuntimeError("boom")

    monkeypatch.setattr("cooklang_parser.parser.assemble_sections", explode)
    for strict in (False, True):
        result = parse("Mix.", strict=strict)
        assert not result.success
        (error,) = result.diagnostics
        assert error.kind == DiagnosticKind.other
        assert error.message == "Unexpected error: boom"
        assert (error.line, error.column) == (1, 1)
