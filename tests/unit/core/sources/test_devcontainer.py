"""Tests for the devcontainer descriptor reader."""

from __future__ import annotations

from pathlib import Path

import pytest

from secrets_bootstrap.core.errors import ConfigSourceUnreadableError
from secrets_bootstrap.core.sources.devcontainer import (
    DevContainerSource,
    parse_jsonc,
    strip_json_comments,
    strip_trailing_commas,
)
from tests.factories import make_ref, write_devcontainer

# ---------------------------------------------------------------------------
# JSON with comments
# ---------------------------------------------------------------------------


class TestParseJsonc:
    def test_line_and_block_comments(self) -> None:
        text = """
        {
          // line comment
          "a": 1, /* block
          comment */ "b": 2
        }
        """
        assert parse_jsonc(text) == {"a": 1, "b": 2}

    def test_trailing_commas(self) -> None:
        assert parse_jsonc('{"a": [1, 2,], "b": {"c": 3,},}') == {"a": [1, 2], "b": {"c": 3}}

    def test_comment_markers_inside_strings_preserved(self) -> None:
        text = '{"url": "http://example.com/*x*/", "s": "a, }"}'
        assert parse_jsonc(text) == {"url": "http://example.com/*x*/", "s": "a, }"}

    def test_escaped_quote_inside_string(self) -> None:
        assert strip_json_comments('"say \\"hi\\" // not a comment"') == '"say \\"hi\\" // not a comment"'

    def test_trailing_comma_in_string_kept(self) -> None:
        assert strip_trailing_commas('["a,]"]') == '["a,]"]'

    def test_unterminated_block_comment(self) -> None:
        with pytest.raises(ValueError, match="unterminated"):
            strip_json_comments('{"a": 1 /* oops')


# ---------------------------------------------------------------------------
# DevContainerSource
# ---------------------------------------------------------------------------


class TestDevContainerSource:
    def test_source_name(self, tmp_path: Path) -> None:
        assert DevContainerSource(str(tmp_path / "x.json")).source_name == "devcontainer"

    def test_missing_file_returns_none(self, tmp_path: Path) -> None:
        assert DevContainerSource(str(tmp_path / "missing.json")).load() is None

    def test_flattens_sections_in_order(self, tmp_path: Path) -> None:
        path = write_devcontainer(
            tmp_path,
            {
                "name": "dev",
                "build": {"dockerfile": "Dockerfile", "args": {"SHARED": "build", "BUILD_ONLY": make_ref("b")}},
                "containerEnv": {"SHARED": "container", "DB": make_ref("db")},
                "remoteEnv": {"SHARED": "remote", "REMOTE_ONLY": "r"},
            },
        )

        values = DevContainerSource(str(path)).load()

        assert values == {
            "SHARED": "remote",
            "BUILD_ONLY": make_ref("b"),
            "DB": make_ref("db"),
            "REMOTE_ONLY": "r",
        }

    def test_load_sections_keeps_sections_apart(self, tmp_path: Path) -> None:
        path = write_devcontainer(tmp_path, {"containerEnv": {"A": "1"}, "remoteEnv": {"A": "2"}})
        sections = DevContainerSource(str(path)).load_sections()
        assert sections == {"build.args": {}, "containerEnv": {"A": "1"}, "remoteEnv": {"A": "2"}}

    def test_section_names_case_insensitive(self, tmp_path: Path) -> None:
        path = write_devcontainer(tmp_path, {"ContainerEnv": {"A": "1"}, "BUILD": {"Args": {"B": "2"}}})
        assert DevContainerSource(str(path)).load() == {"B": "2", "A": "1"}

    def test_scalars_stringified_and_nulls_dropped(self, tmp_path: Path) -> None:
        path = write_devcontainer(
            tmp_path,
            {"containerEnv": {"PORT": 5432, "DEBUG": True, "RATIO": 0.5, "UNSET": None, "LIST": [1]}},
        )
        assert DevContainerSource(str(path)).load() == {"PORT": "5432", "DEBUG": "true", "RATIO": "0.5"}

    def test_jsonc_descriptor(self, tmp_path: Path) -> None:
        path = write_devcontainer(
            tmp_path,
            """
            // devcontainer with comments
            {
              "containerEnv": {
                "API_KEY": "${arn:aws:secretsmanager:us-east-1:111111111111:secret:api}", // secret
              },
            }
            """,
        )
        assert DevContainerSource(str(path)).load() == {
            "API_KEY": "${arn:aws:secretsmanager:us-east-1:111111111111:secret:api}"
        }

    def test_no_sections(self, tmp_path: Path) -> None:
        path = write_devcontainer(tmp_path, {"name": "empty"})
        assert DevContainerSource(str(path)).load() == {}

    def test_non_object_section_ignored(self, tmp_path: Path) -> None:
        path = write_devcontainer(tmp_path, {"containerEnv": ["A=1"], "remoteEnv": {"B": "2"}})
        assert DevContainerSource(str(path)).load() == {"B": "2"}

    def test_unparsable_raises(self, tmp_path: Path) -> None:
        path = write_devcontainer(tmp_path, "{ not json")
        with pytest.raises(ConfigSourceUnreadableError) as exc_info:
            DevContainerSource(str(path)).load()
        assert exc_info.value.path == str(path)

    def test_top_level_array_raises(self, tmp_path: Path) -> None:
        path = write_devcontainer(tmp_path, "[]")
        with pytest.raises(ConfigSourceUnreadableError, match="not an object"):
            DevContainerSource(str(path)).load()
