"""Unit tests for prompt path conventions."""

import datetime

import pytest

from prompt_mcp.paths import archive_path
from prompt_mcp.paths import export_path
from prompt_mcp.paths import format_timestamp
from prompt_mcp.paths import is_reserved_path
from prompt_mcp.paths import name_from_path
from prompt_mcp.paths import normalize_path
from prompt_mcp.paths import normalize_root
from prompt_mcp.paths import strip_extension


class TestNormalizeRoot:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("", "/"),
            (None, "/"),
            ("/", "/"),
            ("Prompts", "/Prompts"),
            ("/Prompts/", "/Prompts"),
            ("  /Apps/Prompts//  ", "/Apps/Prompts"),
        ],
    )
    def test_normalize_root(self, raw, expected):
        assert normalize_root(raw) == expected


class TestNormalizePath:
    def test_bare_root(self):
        assert normalize_path("sql_expert") == "/sql_expert.md"

    def test_nested_root(self):
        assert normalize_path("sql_expert", "/Prompts") == "/Prompts/sql_expert.md"

    def test_trims_whitespace_and_existing_extension(self):
        assert normalize_path("  sql_expert.md  ", "/Prompts") == "/Prompts/sql_expert.md"

    def test_leading_slashes_collapse(self):
        assert normalize_path("//sql_expert", "/Prompts") == "/Prompts/sql_expert.md"

    def test_already_rooted_path_is_not_prefixed_twice(self):
        assert normalize_path("/Prompts/sql_expert.md", "/Prompts") == "/Prompts/sql_expert.md"

    def test_root_prefix_must_match_whole_segment(self):
        assert normalize_path("/PromptsOld/x", "/Prompts") == "/Prompts/PromptsOld/x.md"

    def test_name_equal_to_root_is_joined(self):
        assert normalize_path("Prompts", "/Prompts") == "/Prompts/Prompts.md"

    def test_sub_folder_names(self):
        assert normalize_path("team/sql_expert", "/Prompts") == "/Prompts/team/sql_expert.md"

    def test_any_string_is_accepted(self):
        assert normalize_path("", "/Prompts") == "/Prompts/.md"

    @pytest.mark.parametrize("name", ["sql_expert", "a.md", "  spaced  ", "/Prompts/x", "team/deep/name", "Prompts"])
    @pytest.mark.parametrize("root", ["/", "/Prompts"])
    def test_idempotent(self, name, root):
        once = normalize_path(name, root)
        assert normalize_path(once, root) == once
        assert normalize_path(strip_extension(once), root) == once


class TestNameFromPath:
    def test_inverse_of_normalize(self):
        assert name_from_path(normalize_path("team/sql_expert", "/Prompts"), "/Prompts") == "team/sql_expert"

    def test_case_insensitive_root(self):
        assert name_from_path("/prompts/sql_expert.md", "/Prompts") == "sql_expert"

    def test_outside_root(self):
        assert name_from_path("/Other/sql_expert.md", "/Prompts") is None

    def test_requires_extension(self):
        assert name_from_path("/Prompts/notes.txt", "/Prompts") is None


class TestReservedPaths:
    @pytest.mark.parametrize(
        "path",
        ["/Prompts/_archive/a_2024-01-15T10-30-00.md", "/Prompts/_export/prompts_backup_x.zip"],
    )
    def test_reserved(self, path):
        assert is_reserved_path(path, "/Prompts")

    @pytest.mark.parametrize("path", ["/Prompts/a.md", "/Prompts/team/_archive/a.md", "/Prompts/_archived.md"])
    def test_not_reserved(self, path):
        assert not is_reserved_path(path, "/Prompts")


class TestTimestampedPaths:
    def test_format_timestamp(self):
        moment = datetime.datetime(2024, 1, 15, 10, 30, 5, tzinfo=datetime.timezone.utc)
        assert format_timestamp(moment) == "2024-01-15T10-30-05"

    def test_archive_path(self):
        assert archive_path("sql_expert", "/Prompts", "2024-01-15T10-30-05") == (
            "/Prompts/_archive/sql_expert_2024-01-15T10-30-05.md"
        )

    def test_archive_path_bare_root(self):
        assert archive_path("a", "/", "T") == "/_archive/a_T.md"

    def test_export_path(self):
        assert export_path("/Prompts", "2024-01-15T10-30-05") == (
            "/Prompts/_export/prompts_backup_2024-01-15T10-30-05.zip"
        )
