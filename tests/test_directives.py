"""Tests for the pure directive transforms."""

import pytest

from wp_limit_fixer.directives import (
    EditAction,
    find_ini_directive,
    find_sentinel,
    format_define,
    remove_duplicate_defines,
    rewrite_space_directives,
    upsert_define,
    upsert_ini_directive,
)

SENTINEL = "/* That's all, stop editing! Happy blogging. */"


# =============================================================================
# ini-style upsert
# =============================================================================


class TestUpsertIniDirective:
    def test_updates_existing_value_in_place(self):
        lines = ["[PHP]", "memory_limit = 128M", "max_input_time = 60"]
        result = upsert_ini_directive(lines, "memory_limit", "512M")

        assert result.action == EditAction.UPDATED
        assert result.lines == ["[PHP]", "memory_limit = 512M", "max_input_time = 60"]

    def test_input_is_not_mutated(self):
        lines = ["memory_limit = 128M"]
        upsert_ini_directive(lines, "memory_limit", "512M")
        assert lines == ["memory_limit = 128M"]

    def test_appends_when_absent(self):
        lines = ["[PHP]", "max_input_time = 60"]
        result = upsert_ini_directive(lines, "post_max_size", "256M")

        assert result.action == EditAction.APPENDED
        assert result.lines == ["[PHP]", "max_input_time = 60", "post_max_size = 256M"]
        assert result.lines.count("post_max_size = 256M") == 1

    def test_appends_to_empty_file(self):
        result = upsert_ini_directive([], "memory_limit", "512M")
        assert result.lines == ["memory_limit = 512M"]

    def test_commented_directive_is_left_alone(self):
        lines = ["; memory_limit = 128M", ";memory_limit=64M"]
        result = upsert_ini_directive(lines, "memory_limit", "512M")

        assert result.action == EditAction.APPENDED
        assert result.lines == ["; memory_limit = 128M", ";memory_limit=64M", "memory_limit = 512M"]

    def test_preserves_prefix_and_drops_trailing_text(self):
        lines = ["   upload_max_filesize = 2M ; old comment"]
        result = upsert_ini_directive(lines, "upload_max_filesize", "256M")
        assert result.lines == ["   upload_max_filesize = 256M"]

    def test_keeps_original_spacing_before_equals(self):
        result = upsert_ini_directive(["memory_limit=128M"], "memory_limit", "512M")
        assert result.lines == ["memory_limit= 512M"]

    def test_does_not_match_longer_key(self):
        lines = ["wp_memory_limit = 1G", "opcache.memory_limit = 64"]
        result = upsert_ini_directive(lines, "memory_limit", "512M")

        assert result.action == EditAction.APPENDED
        assert result.lines[:2] == lines

    def test_rewrites_every_active_occurrence_by_default(self):
        lines = ["memory_limit = 128M", "x = 1", "memory_limit = 256M"]
        result = upsert_ini_directive(lines, "memory_limit", "512M")

        assert result.count == 2
        assert result.lines == ["memory_limit = 512M", "x = 1", "memory_limit = 512M"]

    def test_first_only_when_replace_all_disabled(self):
        lines = ["memory_limit = 128M", "memory_limit = 256M"]
        result = upsert_ini_directive(lines, "memory_limit", "512M", replace_all=False)

        assert result.count == 1
        assert result.lines == ["memory_limit = 512M", "memory_limit = 256M"]

    @pytest.mark.parametrize(
        "lines",
        [
            ["memory_limit = 128M"],
            ["; memory_limit = 128M"],
            [],
            ["  memory_limit=1G ; note", "memory_limit = 2G"],
        ],
    )
    def test_idempotent(self, lines):
        once = upsert_ini_directive(lines, "memory_limit", "512M").lines
        twice = upsert_ini_directive(once, "memory_limit", "512M").lines
        assert twice == once

    def test_value_with_regex_characters_is_verbatim(self):
        result = upsert_ini_directive(["error_log = x"], "error_log", r"/var/log/php|\1.log")
        assert result.lines == [r"error_log = /var/log/php|\1.log"]

    def test_find_ini_directive_skips_comments(self):
        lines = ["; post_max_size = 8M", "post_max_size = 8M"]
        assert find_ini_directive(lines, "post_max_size") == [1]


# =============================================================================
# define-style upsert
# =============================================================================


class TestUpsertDefine:
    def test_replaces_existing_value_and_keeps_neighbours(self):
        lines = [
            "<?php",
            "define('WP_MEMORY_LIMIT', '64M');",
            "define('WP_DEBUG', false);",
        ]
        result = upsert_define(lines, "WP_MEMORY_LIMIT", "512M")

        assert result.action == EditAction.UPDATED
        assert result.lines == [
            "<?php",
            "define('WP_MEMORY_LIMIT', '512M');",
            "define('WP_DEBUG', false);",
        ]

    def test_replacement_stops_at_first_semicolon(self):
        lines = ["define('WP_MEMORY_LIMIT', '64M'); define('WP_DEBUG', false);"]
        result = upsert_define(lines, "WP_MEMORY_LIMIT", "512M")
        assert result.lines == ["define('WP_MEMORY_LIMIT', '512M'); define('WP_DEBUG', false);"]

    def test_inserts_before_sentinel(self):
        lines = ["<?php", "define('WP_CACHE', true);", "", SENTINEL, "require_once 'x';"]
        result = upsert_define(lines, "WP_MEMORY_LIMIT", "512M")

        assert result.action == EditAction.INSERTED
        index = result.lines.index(SENTINEL)
        assert result.lines[index - 1] == "define('WP_MEMORY_LIMIT', '512M');"
        assert len(result.lines) == len(lines) + 1

    def test_recognises_happy_publishing_sentinel(self):
        sentinel = "/* That's all, stop editing! Happy publishing. */"
        result = upsert_define(["<?php", sentinel], "WP_MEMORY_LIMIT", "256M")
        assert result.lines == ["<?php", "define('WP_MEMORY_LIMIT', '256M');", sentinel]

    def test_appends_when_sentinel_missing(self):
        lines = ["<?php", "require_once 'wp-settings.php';"]
        result = upsert_define(lines, "WP_MEMORY_LIMIT", "512M")

        assert result.action == EditAction.APPENDED
        assert result.lines[-1] == "define('WP_MEMORY_LIMIT', '512M');"

    def test_idempotent(self):
        lines = ["<?php", SENTINEL]
        once = upsert_define(lines, "WP_MEMORY_LIMIT", "512M").lines
        twice = upsert_define(once, "WP_MEMORY_LIMIT", "512M").lines
        assert twice == once

    def test_statement_split_over_lines_is_unchanged(self):
        lines = ["<?php", "define('WP_MEMORY_LIMIT',", "    '64M');", SENTINEL]
        result = upsert_define(lines, "WP_MEMORY_LIMIT", "512M")

        assert result.action == EditAction.UNCHANGED
        assert result.count == 0
        assert result.lines == lines

    def test_find_sentinel(self):
        assert find_sentinel(["a", SENTINEL, SENTINEL]) == 1
        assert find_sentinel(["a"]) is None

    def test_format_define(self):
        assert format_define("WP_MAX_MEMORY_LIMIT", "1G") == "define('WP_MAX_MEMORY_LIMIT', '1G');"


# =============================================================================
# duplicate removal
# =============================================================================


class TestRemoveDuplicateDefines:
    def test_three_occurrences_leave_one_intact(self):
        lines = [
            "<?php",
            "define('WP_CACHE', true);",
            "define('WP_CACHE', true); // added by plugin",
            "    define('WP_CACHE', false);",
        ]
        result = remove_duplicate_defines(lines, "WP_CACHE")

        assert result.action == EditAction.DEDUPLICATED
        assert result.count == 2
        assert result.lines == [
            "<?php",
            "define('WP_CACHE', true);",
            " // added by plugin",
            "    ",
        ]
        assert sum("define('WP_CACHE'" in line for line in result.lines) == 1

    def test_single_occurrence_unchanged(self):
        lines = ["define('WP_CACHE', true);"]
        result = remove_duplicate_defines(lines, "WP_CACHE")
        assert result.action == EditAction.UNCHANGED
        assert result.lines == lines

    def test_other_quoting_is_not_detected(self):
        lines = ["define('WP_CACHE', true);", 'define("WP_CACHE", true);']
        result = remove_duplicate_defines(lines, "WP_CACHE")
        assert result.action == EditAction.UNCHANGED


# =============================================================================
# space-separated directives
# =============================================================================


def test_rewrite_space_directives_keeps_indent():
    lines = ["<IfModule mod_evasive20.c>", "    DOSPageCount        2", "    DOSSiteCount 50", "</IfModule>"]
    result = rewrite_space_directives(lines, {"DOSPageCount": "50", "DOSSiteCount": "200"})

    assert result.action == EditAction.UPDATED
    assert result.lines == ["<IfModule mod_evasive20.c>", "    DOSPageCount 50", "    DOSSiteCount 200", "</IfModule>"]


def test_rewrite_space_directives_does_not_add_missing_keys():
    result = rewrite_space_directives(["DOSPageCount 2"], {"DOSBlockingPeriod": "10"})
    assert result.action == EditAction.UNCHANGED
    assert result.lines == ["DOSPageCount 2"]
