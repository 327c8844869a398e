"""Bar glyph sets.

A glyph set names the characters a count-bounded bar is drawn with: two
caps, a fill character, an empty character and an ordered run of partial
fill characters for the cell the progress front sits in.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from tickmeter.constants import (
    DEFAULT_EMPTY_GLYPH,
    DEFAULT_FILL_GLYPH,
    DEFAULT_INTERMEDIATE_GLYPHS,
    DEFAULT_LEFT_GLYPH,
    DEFAULT_RIGHT_GLYPH,
)
from tickmeter.exceptions import GlyphSpecError

GLYPH_SPEC_LENGTH = 5


@dataclass(frozen=True, slots=True)
class BarGlyphs:
    """Characters used to draw a progress bar.

    Attributes:
        left: Left cap
        fill: Fully filled cell
        intermediate: Partial cells, least to most filled
        empty: Unfilled cell
        right: Right cap

    """

    left: str
    fill: str
    intermediate: tuple[str, ...]
    empty: str
    right: str

    def __post_init__(self) -> None:
        """Validate every glyph is a single character."""
        # Accept any sequence of glyphs, store an immutable tuple
        object.__setattr__(self, "intermediate", tuple(self.intermediate))

        for field_name in ("left", "fill", "empty", "right"):
            value = getattr(self, field_name)
            if not isinstance(value, str) or len(value) != 1:
                msg = f"expected a single character, got {value!r}"
                raise GlyphSpecError(msg, target=field_name)

        if not self.intermediate:
            msg = "at least one partial glyph is required"
            raise GlyphSpecError(msg, target="intermediate")
        for glyph in self.intermediate:
            if not isinstance(glyph, str) or len(glyph) != 1:
                msg = f"expected single characters, got {glyph!r}"
                raise GlyphSpecError(msg, target="intermediate")


def default_glyphs() -> BarGlyphs:
    """Return the Unicode block glyph set used when none is configured."""
    return BarGlyphs(
        left=DEFAULT_LEFT_GLYPH,
        fill=DEFAULT_FILL_GLYPH,
        intermediate=DEFAULT_INTERMEDIATE_GLYPHS,
        empty=DEFAULT_EMPTY_GLYPH,
        right=DEFAULT_RIGHT_GLYPH,
    )


def parse_glyphs(spec: str | Sequence[str] | BarGlyphs | None) -> BarGlyphs:
    """Build a glyph set from a five character specification.

    The characters are read as left cap, fill, partial, empty and right cap,
    so ``"[=> ]"`` draws ``[=====>    ]``.

    Args:
        spec: Five characters, an existing BarGlyphs, or None for defaults

    Returns:
        The glyph set

    Raises:
        GlyphSpecError: If the specification does not hold five characters

    """
    if spec is None:
        return default_glyphs()
    if isinstance(spec, BarGlyphs):
        return spec

    chars = list(spec)
    if len(chars) != GLYPH_SPEC_LENGTH:
        msg = (
            f"expected {GLYPH_SPEC_LENGTH} characters "
            f"(left, fill, partial, empty, right), got {len(chars)}"
        )
        raise GlyphSpecError(msg, target="glyphs")

    left, fill, partial, empty, right = chars
    return BarGlyphs(
        left=left,
        fill=fill,
        intermediate=(partial,),
        empty=empty,
        right=right,
    )
