import pytest

from typing import Optional

from textwrap import dedent

from cooklang_parser.quantity import Regular

from cooklang_parser.recipe import Section, Step, Note, Text, Ingredient

from cooklang_parser.parser import parse

from cooklang_parser.parser.sections import parse_section_name, parse_note


@pytest.mark.parametrize(
    "text, exp",
    [
        ("= Dough", "Dough"),
        ("== Filling ==", "Filling"),
        ("  ===  Sauce  =", "Sauce"),
        ("=", None),
        ("==", None),
        ("====", None),
        ("= =", None),
    ],
)
def test_parse_section_name(text: str, exp: Optional[str]) -> None:
    assert parse_section_name(text) == exp


@pytest.mark.parametrize(
    "text, exp",
    [
        ("> A note", "A note"),
        (">   Note with extra spaces   ", "Note with extra spaces"),
        (">", ""),
        ("  >no space", "no space"),
    ],
)
def test_parse_note(text: str, exp: str) -> None:
    assert parse_note(text) == exp


class TestSections:
    def test_no_sections(self) -> None:
        recipe = parse("Mix @flour{200%g}.").unwrap()
        assert recipe.sections == (
            Section(
                None,
                (
                    Step(
                        (Text("Mix "), Ingredient("flour", Regular(200), "g"), Text(".")),
                        1,
                    ),
                ),
            ),
        )

    @pytest.mark.parametrize(
        "source",
        [
            "",
            "\n\n",
            "-- comment only",
            "[- a block\ncomment -]",
            "---\ntitle: x\n---",
        ],
    )
    def test_empty(self, source: str) -> None:
        recipe = parse(source).unwrap()
        assert recipe.sections == (Section(None, ()),)

    def test_named_sections(self) -> None:
        recipe = parse(
            "= Dough\n\nMix @flour{200%g}.\n\n== Filling ==\n\nMix @onion{1}."
        ).unwrap()
        assert [s.name for s in recipe.sections] == ["Dough", "Filling"]
        for section in recipe.sections:
            (step,) = section.content
            assert isinstance(step, Step)
            assert step.number == 1

    def test_default_then_named(self) -> None:
        recipe = parse("Intro\n\n== Part ==\nStep").unwrap()
        assert recipe.sections == (
            Section(None, (Step((Text("Intro"),), 1),)),
            Section("Part", (Step((Text("Step"),), 1),)),
        )

    def test_empty_sections_kept(self) -> None:
        recipe = parse("= Empty Section\n\n= Next Section\n\nDo something.").unwrap()
        assert recipe.sections == (
            Section("Empty Section", ()),
            Section("Next Section", (Step((Text("Do something."),), 1),)),
        )

        recipe = parse("= Only").unwrap()
        assert recipe.sections == (Section("Only", ()),)

    def test_unnamed_header(self) -> None:
        recipe = parse("===\nStep in unnamed section.").unwrap()
        assert recipe.sections == (
            Section(None, (Step((Text("Step in unnamed section."),), 1),)),
        )

    def test_step_numbering(self) -> None:
        recipe = parse(
            dedent(
                """
                One

                > A note

                Two

                = Next

                Three
                """
            )
        ).unwrap()
        assert recipe.sections == (
            Section(
                None,
                (
                    Step((Text("One"),), 1),
                    Note("A note"),
                    Step((Text("Two"),), 2),
                ),
            ),
            Section("Next", (Step((Text("Three"),), 1),)),
        )

    def test_notes(self) -> None:
        recipe = parse(
            "> Note one\n> Note two\n>   Note with extra spaces   \n>"
        ).unwrap()
        assert recipe.sections == (
            Section(
                None,
                (
                    Note("Note one"),
                    Note("Note two"),
                    Note("Note with extra spaces"),
                    Note(""),
                ),
            ),
        )


class TestMetadata:
    def test_classic_metadata(self) -> None:
        recipe = parse(
            ">> source: Grandma's cookbook\n>>cooking time    :30 mins\nMix.\n>> servings: 1|2|3"
        ).unwrap()
        assert recipe.metadata == {
            "source": "Grandma's cookbook",
            "cooking time": "30 mins",
            "servings": "1|2|3",
        }
        assert len(list(recipe.steps())) == 1

    def test_duplicate_key(self) -> None:
        recipe = parse(">> servings: 2\n>> servings: 4").unwrap()
        assert recipe.metadata == {"servings": "4"}

    def test_value_with_colon(self) -> None:
        recipe = parse(">> source: https://example.com").unwrap()
        assert recipe.metadata == {"source": "https://example.com"}

    def test_not_metadata(self) -> None:
        recipe = parse("hello >> sourced: babooshka").unwrap()
        assert recipe.metadata == {}
        (step,) = recipe.steps()
        assert step.items == (Text("hello >> sourced: babooshka"),)

    @pytest.mark.parametrize("source", [">> no colon here", ">> : value"])
    def test_invalid_dropped(self, source: str) -> None:
        result = parse(source)
        assert result.diagnostics == ()
        assert result.unwrap().metadata == {}

    def test_front_matter(self) -> None:
        source = dedent(
            """\
            ---
            title: Pancakes
            tags:
              - breakfast
              - sweet
            ---

            >> servings: 4
            Mix @flour{200%g}.
            """
        )
        recipe = parse(source).unwrap()
        assert recipe.front_matter == "title: Pancakes\ntags:\n  - breakfast\n  - sweet"
        assert recipe.metadata == {"servings": "4"}
        assert len(list(recipe.steps())) == 1

    def test_front_matter_only_on_first_line(self) -> None:
        recipe = parse("Mix.\n---\ntitle: x\n---").unwrap()
        assert recipe.front_matter == ""

    def test_crlf(self) -> None:
        recipe = parse("---\r\ntitle: x\r\nserves: 2\r\n---\r\nMix @a{1}\r\nand @b").unwrap()
        assert recipe.front_matter == "title: x\nserves: 2"
        (step,) = recipe.steps()
        assert step.items == (
            Text("Mix "),
            Ingredient("a", Regular(1)),
            Text("  and "),
            Ingredient("b"),
        )
