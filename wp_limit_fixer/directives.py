"""
Directive upsert transforms.

Every function here takes an ordered list of lines (without line terminators)
and returns an EditResult holding a *new* list. Nothing touches the
filesystem; see config_file.py and tuning.py for that.

Two grammars are supported:
  • PHP ini directives:   key = value   (';' starts a comment)
  • PHP define statements: define('KEY', 'value');
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence

# ----------------------------------------------------------------
# Constants
# ----------------------------------------------------------------
INI_COMMENT = ";"
# Covers both "Happy blogging." and the newer "Happy publishing." variants.
SENTINEL_MARKER = "/* That's all, stop editing!"


# ----------------------------------------------------------------
# Data Structures
# ----------------------------------------------------------------
class EditAction(str, Enum):
    """What a transform did to the file."""

    UPDATED = "updated"
    APPENDED = "appended"
    INSERTED = "inserted"
    DEDUPLICATED = "deduplicated"
    UNCHANGED = "unchanged"


@dataclass
class EditResult:
    """
    Outcome of a line transform.

    Attributes:
        lines: The transformed lines.
        action: The kind of edit performed.
        count: Number of substitutions, insertions or removals made.
    """

    lines: List[str] = field(default_factory=list)
    action: EditAction = EditAction.UNCHANGED
    count: int = 0


# ----------------------------------------------------------------
# ini-style directives
# ----------------------------------------------------------------
def _ini_pattern(name: str) -> "re.Pattern[str]":
    # prefix may not contain ';', and the name must not be the tail of a longer key
    return re.compile(
        r"^(?P<prefix>[^;]*?)(?<![\w.])(?P<key>"
        + re.escape(name)
        + r"[ \t]*=).*$"
    )


def format_ini_directive(name: str, value: str) -> str:
    """Return the canonical ``name = value`` line."""
    return f"{name} = {value}"


def find_ini_directive(lines: Sequence[str], name: str) -> List[int]:
    """Return the indexes of every active (uncommented) line setting ``name``."""
    pattern = _ini_pattern(name)
    return [i for i, line in enumerate(lines) if pattern.match(line)]


def upsert_ini_directive(
    lines: Sequence[str], name: str, value: str, replace_all: bool = True
) -> EditResult:
    """
    Ensure an active ``name = value`` line exists.

    Active lines are rewritten in place, keeping whatever precedes the
    directive name and dropping everything after the old value. When no
    active line exists (commented lines do not count), ``name = value`` is
    appended.

    Args:
        lines: Current file lines.
        name: Directive name, matched literally.
        value: New value, inserted verbatim.
        replace_all: Rewrite every active occurrence (default) or only the first.

    Returns:
        EditResult with action UPDATED or APPENDED.
    """
    pattern = _ini_pattern(name)
    new_lines = list(lines)
    hits = find_ini_directive(new_lines, name)

    if not hits:
        new_lines.append(format_ini_directive(name, value))
        return EditResult(new_lines, EditAction.APPENDED, 1)

    targets = hits if replace_all else hits[:1]
    for index in targets:
        match = pattern.match(new_lines[index])
        new_lines[index] = f"{match.group('prefix')}{match.group('key')} {value}"
    return EditResult(new_lines, EditAction.UPDATED, len(targets))


# ----------------------------------------------------------------
# define-style statements
# ----------------------------------------------------------------
def define_token(name: str) -> str:
    """Opening token used to recognise a define statement for ``name``."""
    return f"define('{name}'"


def format_define(name: str, value: str) -> str:
    """Return the canonical ``define('NAME', 'value');`` statement."""
    return f"define('{name}', '{value}');"


def _define_pattern(name: str) -> "re.Pattern[str]":
    return re.compile(re.escape(define_token(name)) + r".*?;")


def find_defines(lines: Sequence[str], name: str) -> List[int]:
    """Return the indexes of lines containing a define statement for ``name``."""
    token = define_token(name)
    return [i for i, line in enumerate(lines) if token in line]


def find_sentinel(lines: Sequence[str], marker: str = SENTINEL_MARKER) -> Optional[int]:
    """Return the index of the first sentinel line, or None."""
    for index, line in enumerate(lines):
        if marker in line:
            return index
    return None


def upsert_define(
    lines: Sequence[str],
    name: str,
    value: str,
    replace_all: bool = True,
    marker: str = SENTINEL_MARKER,
) -> EditResult:
    """
    Ensure ``define('NAME', 'value');`` is present with the given value.

    Existing statements are replaced from ``define('NAME'`` up to the first
    following ``;``; text around the statement on the same line is kept.
    A missing statement is inserted before the sentinel line. Without a
    sentinel it is appended at the end of the file and the result action is
    APPENDED so callers can warn about it. A statement whose closing ``;``
    is not on the same line is left alone and reported as UNCHANGED.

    Args:
        lines: Current file lines.
        name: Constant name.
        value: New value, inserted verbatim between single quotes.
        replace_all: Rewrite every occurrence (default) or only the first.
        marker: Text identifying the sentinel line.

    Returns:
        EditResult with action UPDATED, UNCHANGED, INSERTED or APPENDED.
    """
    statement = format_define(name, value)
    new_lines = list(lines)
    hits = find_defines(new_lines, name)

    if hits:
        pattern = _define_pattern(name)
        targets = hits if replace_all else hits[:1]
        count = 0
        for index in targets:
            new_lines[index], replaced = pattern.subn(
                lambda _m: statement, new_lines[index]
            )
            count += replaced
        action = EditAction.UPDATED if count else EditAction.UNCHANGED
        return EditResult(new_lines, action, count)

    sentinel = find_sentinel(new_lines, marker)
    if sentinel is None:
        new_lines.append(statement)
        return EditResult(new_lines, EditAction.APPENDED, 1)

    new_lines.insert(sentinel, statement)
    return EditResult(new_lines, EditAction.INSERTED, 1)


def remove_duplicate_defines(lines: Sequence[str], name: str) -> EditResult:
    """
    Keep the first define statement for ``name`` and excise later ones.

    Only the ``define('NAME'`` ... ``;`` span is removed from later lines;
    the rest of each line stays. Statements using other quoting or spanning
    several lines are not recognised.
    """
    new_lines = list(lines)
    hits = find_defines(new_lines, name)
    if len(hits) < 2:
        return EditResult(new_lines, EditAction.UNCHANGED, 0)

    pattern = _define_pattern(name)
    removed = 0
    for index in hits[1:]:
        new_lines[index], count = pattern.subn("", new_lines[index])
        removed += count
    return EditResult(new_lines, EditAction.DEDUPLICATED, removed)


# ----------------------------------------------------------------
# Space-separated directives (Apache module configuration)
# ----------------------------------------------------------------
def rewrite_space_directives(lines: Sequence[str], values: Dict[str, str]) -> EditResult:
    """
    Rewrite ``Key <anything>`` to ``Key value`` for each key in ``values``.

    This is a fixed-pattern replacement: the first ``Key `` span on a line is
    replaced through the end of the line, and anything before it (indent,
    a ``#`` marker) is left alone. Keys absent from the file are not added.
    """
    new_lines = list(lines)
    count = 0
    for key, value in values.items():
        pattern = re.compile(re.escape(key) + r" .*")
        replacement = f"{key} {value}"
        for index, line in enumerate(new_lines):
            new_lines[index], replaced = pattern.subn(
                lambda _m: replacement, line, count=1
            )
            count += replaced
    action = EditAction.UPDATED if count else EditAction.UNCHANGED
    return EditResult(new_lines, action, count)
