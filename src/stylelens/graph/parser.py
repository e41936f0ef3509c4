"""Extraction of import-like directives from stylesheet source.

Only the directives that create file dependencies are recognized; the rest
of the CSS/SCSS grammar is ignored.
"""

import re

# @import 'a'; / @import "a", 'b', "c";
_IMPORT_STATEMENT = re.compile(
    r"""@import\s+(['"])[^'"]+\1(?:\s*,\s*(['"])[^'"]+\2)*\s*;"""
)
_QUOTED = re.compile(r"""['"]([^'"]+)['"]""")

# @import url('a.css'); / @import url(a.css);
_CSS_URL_IMPORT = re.compile(r"""@import\s+url\(\s*['"]?([^'")]+?)['"]?\s*\)\s*;""")

_USE = re.compile(r"""@use\s+(['"])([^'"]+)\1""")
_FORWARD = re.compile(r"""@forward\s+(['"])([^'"]+)\1""")


def extract_import_specifiers(content: str) -> list[str]:
    """Return the import specifiers in ``content``, first-seen order, no duplicates.

    Example:
        >>> extract_import_specifiers("@import 'a', 'b';\\n@use 'c';")
        ['a', 'b', 'c']
    """
    found: dict[str, None] = {}

    for statement in _IMPORT_STATEMENT.finditer(content):
        for quoted in _QUOTED.finditer(statement.group(0)):
            found.setdefault(quoted.group(1), None)

    for match in _CSS_URL_IMPORT.finditer(content):
        found.setdefault(match.group(1).strip(), None)

    for match in _USE.finditer(content):
        found.setdefault(match.group(2), None)

    for match in _FORWARD.finditer(content):
        found.setdefault(match.group(2), None)

    return list(found)
