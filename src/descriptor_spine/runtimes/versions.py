"""Version satisfaction rules for runtime requirements.

A requirement value is one of:

* ``""`` or ``"*"``: any observed version
* a range: starts with a comparison operator (``>=2.0``, ``>=1.0, <2``,
  ``~=1.4``, ``!=1.2``); a lone ``=`` is read as ``==``
* anything else: an exact version (``"1.0.12"``)

R package versions use ``-`` as a separator (``1.0-12``); it is read as ``.``
before comparison. An unparseable version never matches and never raises.
"""

from __future__ import annotations

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version

ANY_VERSION = frozenset({"", "*"})
_OPERATOR_PREFIXES = ("<", ">", "=", "!", "~")


def normalize(version: str) -> str:
    return version.strip().replace("-", ".")


def parse_version(value: str | None) -> Version | None:
    if value is None:
        return None
    try:
        return Version(normalize(value))
    except InvalidVersion:
        return None


def is_range(required: str) -> bool:
    return required.strip().startswith(_OPERATOR_PREFIXES)


def to_specifier(required: str) -> SpecifierSet | None:
    """Parse a range requirement, or ``None`` if it is not a valid range."""
    clauses = []
    for clause in normalize(required).split(","):
        clause = clause.strip()
        if clause.startswith("=") and not clause.startswith("=="):
            clause = "=" + clause
        clauses.append(clause)
    try:
        return SpecifierSet(",".join(clauses))
    except InvalidSpecifier:
        return None


def satisfies(observed: str | None, required: str | None) -> bool:
    """Return True if ``observed`` meets ``required``.

    ``observed`` of ``None`` means the dependency is absent, which never
    satisfies a requirement, not even ``"*"``.
    """
    if observed is None:
        return False

    wanted = (required or "").strip()
    if wanted in ANY_VERSION:
        return True

    if is_range(wanted):
        specifier = to_specifier(wanted)
        version = parse_version(observed)
        if specifier is None or version is None:
            return False
        return specifier.contains(version, prereleases=True)

    if normalize(observed) == normalize(wanted):
        return True
    left, right = parse_version(observed), parse_version(wanted)
    return left is not None and right is not None and left == right
