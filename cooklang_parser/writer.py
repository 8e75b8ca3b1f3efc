"""
Recipes may be converted back into Cooklang markup using:

.. autofunction:: to_cooklang

For recipes parsed from markup, parsing the generated markup again produces
an identical recipe (so long as the recipe's text does not itself contain
comment or component syntax).
"""

from typing import List, Optional

from cooklang_parser.recipe import (
    Recipe,
    Section,
    Note,
    Item,
    Text,
    Ingredient,
    Timer,
)

from cooklang_parser.quantity import Quantity


__all__ = ["to_cooklang"]


def format_amount(quantity: Optional[Quantity], units: str) -> str:
    text = str(quantity) if quantity is not None else ""
    if units:
        text += f"%{units}"
    return f"{{{text}}}"


def format_item(item: Item) -> str:
    if isinstance(item, Text):
        return item.value
    elif isinstance(item, Timer):
        return f"~{item.name}{format_amount(item.quantity, item.units)}"

    marker = "@" if isinstance(item, Ingredient) else "#"
    out = f"{marker}{item.name}{format_amount(item.quantity, item.units)}"
    if item.note is not None:
        out += f"({item.note})"
    return out


def format_section(section: Section, first: bool) -> List[str]:
    blocks = []
    if not first or section.name is not None:
        blocks.append(f"== {section.name} ==" if section.name is not None else "==")
    for content in section.content:
        if isinstance(content, Note):
            blocks.append(f"> {content.value}" if content.value else ">")
        else:
            blocks.append("".join(format_item(item) for item in content.items))
    return blocks


def to_cooklang(recipe: Recipe) -> str:
    """
    Render a :py:class:`~cooklang_parser.recipe.Recipe` as Cooklang markup.
    """
    blocks = []
    if recipe.front_matter:
        blocks.append(f"---\n{recipe.front_matter}\n---")
    for key, value in recipe.metadata.items():
        blocks.append(f">> {key}: {value}")
    for i, section in enumerate(recipe.sections):
        blocks.extend(format_section(section, i == 0))
    return "\n\n".join(blocks) + "\n"
