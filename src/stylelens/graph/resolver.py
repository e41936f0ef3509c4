"""Import resolution: map an @import/@use specifier to a stylesheet on disk.

Follows the Sass lookup conventions:
  - exact path, then ``.scss`` appended
  - partials (``_name.scss``)
  - directory index files (``_index.scss``, ``index.scss``)

Remote URLs and package-manager specifiers (``~pkg``) are never resolved.
"""

import os
from typing import Optional, Union

PathLike = Union[str, "os.PathLike[str]"]

_EXTERNAL_PREFIXES = ("http://", "https://", "~")


def normalize_path(path: PathLike) -> str:
    """Canonical identity of a stylesheet path.

    Absolute, with ``.``/``..`` collapsed. Case is folded only where the
    platform's ``normcase`` does it (Windows), so distinct names on
    case-sensitive filesystems never collide.
    """
    return os.path.normcase(os.path.abspath(os.fspath(path)))


def is_external(specifier: str) -> bool:
    """True for remote URLs and package-manager specifiers."""
    return specifier.startswith(_EXTERNAL_PREFIXES)


def import_candidates(from_dir: PathLike, specifier: str) -> list[str]:
    """Candidate file paths for ``specifier``, in lookup order."""
    base = os.path.normpath(os.path.join(os.fspath(from_dir), specifier))
    directory = os.path.dirname(base)
    name = os.path.basename(base)

    return [
        base,
        base + ".scss",
        os.path.join(directory, "_" + name + ".scss"),
        os.path.join(directory, "_" + name),
        os.path.join(base, "_index.scss"),
        os.path.join(base, "index.scss"),
    ]


def resolve_import(from_dir: PathLike, specifier: str) -> Optional[str]:
    """Resolve ``specifier`` relative to ``from_dir``.

    Returns:
        Normalized path of the first existing candidate, or None. A miss is
        an ordinary outcome, not an error.
    """
    specifier = specifier.strip()
    if not specifier or is_external(specifier):
        return None

    for candidate in import_candidates(from_dir, specifier):
        if os.path.isfile(candidate):
            return normalize_path(candidate)

    return None
