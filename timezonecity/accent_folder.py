"""Accent folding for place and country names.

Maps Latin-1 and Latin Extended accented characters (plus a few ligatures)
to their closest unaccented ASCII spelling so foreign names read and sort
predictably in plain-text contexts.
"""

from __future__ import annotations

# Each pair is (accented characters, replacements); both strings are zipped
# character by character unless a replacement is a multi-letter ligature,
# which is listed separately in _LIGATURES.
_SINGLE_CHAR_PAIRS: tuple[tuple[str, str], ...] = (
    ("ÀÁÂÃÄÅ", "AAAAAA"),
    ("ÇÈÉÊËÌÍÎÏÐÑÒÓÔÕÖØÙÚÛÜÝ", "CEEEEIIIIDNOOOOOOUUUUY"),
    ("ß", "s"),
    ("àáâãäå", "aaaaaa"),
    ("çèéêëìíîïñòóôõöøùúûüýÿ", "ceeeeiiiinoooooouuuuyy"),
    ("ĀāĂăĄąĆćĈĉĊċČčĎďĐđĒēĔĕĖėĘęĚě", "AaAaAaCcCcCcCcDdDdEeEeEeEeEe"),
    ("ĜĝĞğĠġĢģĤĥĦħĨĩĪīĬĭĮįİı", "GgGgGgGgHhHhIiIiIiIiIi"),
    ("ĴĵĶķĹĺĻļĽľĿŀŁłŃńŅņŇňŉ", "JjKkLlLlLlllLlNnNnNnn"),
    ("ŌōŎŏŐő", "OoOoOo"),
    ("ŔŕŖŗŘřŚśŜŝŞşŠšŢţŤťŦŧ", "RrRrRrSsSsSsSsTtTtTt"),
    ("ŨũŪūŬŭŮůŰűŲųŴŵŶŷŸŹźŻżŽž", "UuUuUuUuUuUuWwYyYZzZzZz"),
    ("ſƒƠơƯư", "sfOoUu"),
    ("ǍǎǏǐǑǒǓǔǕǖǗǘǙǚǛǜǺǻǾǿ", "AaIiOoUuUuUuUuUuAaOo"),
)

_LIGATURES: dict[str, str] = {
    "Æ": "AE",
    "æ": "ae",
    "Ĳ": "IJ",
    "ĳ": "ij",
    "Œ": "OE",
    "œ": "oe",
    "Ǽ": "AE",
    "ǽ": "ae",
}


def _build_table() -> dict[int, str]:
    table: dict[int, str] = {}
    for accented, plain in _SINGLE_CHAR_PAIRS:
        if len(accented) != len(plain):
            raise ValueError(f"accent table row is misaligned: {accented!r}")
        for src, dst in zip(accented, plain):
            table[ord(src)] = dst
    for src, dst in _LIGATURES.items():
        table[ord(src)] = dst
    return table


ACCENT_TABLE: dict[int, str] = _build_table()


def fold(text: str) -> str:
    """Replace accented characters with their closest ASCII equivalents.

    Characters outside the table pass through unchanged, so the function is
    the identity on plain ASCII input.

    Examples:
        >>> fold("Ångström café")
        'Angstrom cafe'
        >>> fold("Ærøskøbing")
        'AEroskobing'
    """
    return text.translate(ACCENT_TABLE)
