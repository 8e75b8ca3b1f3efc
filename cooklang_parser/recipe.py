"""
A parsed recipe is described by the following data structures. All of them
are immutable and compare by value.

A recipe at its root is a :py:class:`Recipe` which contains one or more
:py:class:`Section` objects:

.. autoclass:: Recipe
    :members:

.. autoclass:: Section
    :members:

Sections contain a series of numbered :py:class:`Step` objects interspersed
with :py:class:`Note` objects:

.. autoclass:: Step
    :members:

.. autoclass:: Note
    :members:

Each step is a sequence of items. Plain text is given by :py:class:`Text`,
while the marked-up components of a step are given by
:py:class:`Ingredient`, :py:class:`Cookware` and :py:class:`Timer`:

.. autoclass:: Text
    :members:

.. autoclass:: Ingredient
    :members:

.. autoclass:: Cookware
    :members:

.. autoclass:: Timer
    :members:

Quantities are described in :py:mod:`cooklang_parser.quantity`.
"""

from typing import Iterator, Mapping, Optional, Tuple, Union

from types import MappingProxyType

from dataclasses import dataclass, field

from cooklang_parser.quantity import Quantity, Regular, TextQuantity, SOME


__all__ = [
    "Text",
    "Ingredient",
    "Cookware",
    "Timer",
    "Item",
    "Step",
    "Note",
    "SectionContent",
    "Section",
    "Recipe",
]


@dataclass(frozen=True)
class Text:
    value: str


@dataclass(frozen=True)
class Ingredient:
    """An ingredient, e.g. ``@potato{2%kg}(peeled)``."""

    name: str

    quantity: Optional[Quantity] = SOME
    """
    The quantity of this ingredient. When not given in the recipe this is
    the text quantity 'some'.
    """

    units: str = ""
    """The units the quantity is given in. Empty when not given."""

    note: Optional[str] = None
    """
    The (opaque) text of a parenthesised note following the ingredient, if
    any.
    """


@dataclass(frozen=True)
class Cookware:
    """An item of cookware, e.g. ``#pot`` or ``#baking tray{2}``."""

    name: str

    quantity: Quantity = Regular(1)
    """Defaults to 1 when not given."""

    units: str = ""

    note: Optional[str] = None


@dataclass(frozen=True)
class Timer:
    """
    A timer, e.g. ``~{25%minutes}`` or ``~eggs{3%minutes}``. Anonymous
    timers have an empty name.
    """

    name: str = ""
    quantity: Quantity = TextQuantity("")
    units: str = ""


Item = Union[Text, Ingredient, Cookware, Timer]


@dataclass(frozen=True)
class Step:
    items: Tuple[Item, ...]

    number: Optional[int] = None
    """The 1-based number of this step within its section."""


@dataclass(frozen=True)
class Note:
    value: str


SectionContent = Union[Step, Note]


@dataclass(frozen=True)
class Section:
    name: Optional[str]
    """The section's name or None for an unnamed (default) section."""

    content: Tuple[SectionContent, ...] = ()


@dataclass(frozen=True)
class Recipe:
    sections: Tuple[Section, ...]
    """Always contains at least one section."""

    metadata: Mapping[str, str] = field(default_factory=dict, hash=False)
    """
    Key-value pairs given using classic ``>> key: value`` metadata lines.
    Compared but not hashed (the read-only mapping is unhashable).
    """

    front_matter: str = ""
    """
    The verbatim (unparsed) contents of the ``---`` delimited front matter
    block at the start of the recipe, or an empty string if none was given.
    """

    def __post_init__(self) -> None:
        # Keep a read-only copy
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def steps(self) -> Iterator[Step]:
        """Iterate over every step in the recipe, in order."""
        for section in self.sections:
            for content in section.content:
                if isinstance(content, Step):
                    yield content
