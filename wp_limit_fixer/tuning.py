"""
File-level patch operations.

Each operation follows the same sequence: check the file exists, back it
up, load it, run the pure transforms from directives.py, save it, and
return a PatchReport describing what happened.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from wp_limit_fixer.config_file import ConfigFile, backup_file
from wp_limit_fixer.directives import (
    EditAction,
    EditResult,
    remove_duplicate_defines,
    rewrite_space_directives,
    upsert_define,
    upsert_ini_directive,
)
from wp_limit_fixer.errors import MissingFileError
from wp_limit_fixer.settings import EVASIVE_TUNING, WP_CACHE, LimitSettings

logger = logging.getLogger("wp_limit_fixer")


@dataclass
class PatchReport:
    """
    Outcome of patching one file.

    Attributes:
        path: The patched file.
        backup_path: Where the pre-patch copy was written.
        actions: Edit action per directive/constant name, in application order.
    """

    path: Path
    backup_path: Path
    actions: Dict[str, EditResult] = field(default_factory=dict)

    def names_with(self, action: EditAction) -> List[str]:
        """Names whose edit ended with the given action."""
        return [name for name, result in self.actions.items() if result.action == action]


def _patch_file(
    path: Union[str, Path],
    label: str,
    apply: Callable[[List[str], Dict[str, EditResult]], List[str]],
    now: Optional[datetime] = None,
) -> PatchReport:
    path = Path(path)
    if not path.is_file():
        raise MissingFileError(path, label)

    backup_path = backup_file(path, now)
    config = ConfigFile.load(path)
    actions: Dict[str, EditResult] = {}
    config.lines = apply(config.lines, actions)
    config.save()

    for name, result in actions.items():
        logger.info(f"{path}: {name} {result.action.value} ({result.count})")
    return PatchReport(path=path, backup_path=backup_path, actions=actions)


def patch_php_ini(
    path: Union[str, Path], settings: LimitSettings, now: Optional[datetime] = None
) -> PatchReport:
    """Upsert the five PHP limits into php.ini."""

    def apply(lines: List[str], actions: Dict[str, EditResult]) -> List[str]:
        for directive in settings.php_directives():
            result = upsert_ini_directive(lines, directive.name, directive.value)
            actions[directive.name] = result
            lines = result.lines
        return lines

    return _patch_file(path, "php.ini file", apply, now)


def patch_wp_config(
    path: Union[str, Path], settings: LimitSettings, now: Optional[datetime] = None
) -> PatchReport:
    """
    Remove duplicate WP_CACHE defines, then upsert the memory constants.

    An APPENDED action for a constant means the sentinel comment was missing
    and the define went to the end of the file.
    """

    def apply(lines: List[str], actions: Dict[str, EditResult]) -> List[str]:
        result = remove_duplicate_defines(lines, WP_CACHE)
        actions[WP_CACHE] = result
        lines = result.lines
        for define in settings.wp_defines():
            result = upsert_define(lines, define.name, define.value)
            actions[define.name] = result
            lines = result.lines
        return lines

    return _patch_file(path, "wp-config.php", apply, now)


def tune_evasive_conf(
    path: Union[str, Path],
    values: Optional[Dict[str, str]] = None,
    now: Optional[datetime] = None,
) -> PatchReport:
    """Rewrite the mod_evasive thresholds in its configuration file."""
    values = values or EVASIVE_TUNING

    def apply(lines: List[str], actions: Dict[str, EditResult]) -> List[str]:
        for key, value in values.items():
            result = rewrite_space_directives(lines, {key: value})
            actions[key] = result
            lines = result.lines
        return lines

    return _patch_file(path, "mod_evasive configuration file", apply, now)
