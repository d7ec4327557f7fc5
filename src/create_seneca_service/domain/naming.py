"""Project name validation following npm package naming rules."""

from __future__ import annotations

import re
from collections.abc import Iterable
from urllib.parse import quote

MAX_NAME_LENGTH = 214

_SPECIAL_CHARS_RE = re.compile(r"[~'!()*]")


def validate_project_name(name: str, *, reserved: Iterable[str] = ()) -> list[str]:
    """Return a list of problems with *name* (empty when the name is usable).

    Examples:
        >>> validate_project_name("my-service")
        []
        >>> validate_project_name("My Service")
        ['name can no longer contain capital letters', 'name can only contain URL-friendly characters']
    """
    problems: list[str] = []
    if not name:
        return ["name length must be greater than zero"]

    if name.startswith("."):
        problems.append("name cannot start with a period")
    if name.startswith("_"):
        problems.append("name cannot start with an underscore")
    if name.strip() != name:
        problems.append("name cannot contain leading or trailing spaces")
    if len(name) > MAX_NAME_LENGTH:
        problems.append(f"name can no longer contain more than {MAX_NAME_LENGTH} characters")
    if name.lower() != name:
        problems.append("name can no longer contain capital letters")
    if _SPECIAL_CHARS_RE.search(name.split("/")[-1]):
        problems.append('name can no longer contain special characters ("~\'!()*")')
    if quote(name, safe="@/") != name:
        problems.append("name can only contain URL-friendly characters")

    if name in set(reserved):
        problems.append(f"a dependency with the same name ({name}) is already required")

    return problems
