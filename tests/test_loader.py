"""Unit tests for confstore.loader."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable

import pytest

from confstore.errors import ConfigError, ConfigNotFoundError, ConfigParseError
from confstore.loader import (
    default_search_dirs,
    find_config,
    load,
    read_file,
    read_from,
    resolve_filename,
)

# -- resolve_filename -----------------------------------------------------------


class TestResolveFilename:
    @pytest.mark.unit
    def test_default_name(self) -> None:
        assert resolve_filename({}) == "config.json"

    @pytest.mark.unit
    def test_environment_suffix(self) -> None:
        assert resolve_filename({"ENVIRONMENT": "production"}) == "config.production.json"

    @pytest.mark.unit
    def test_empty_environment_uses_default(self) -> None:
        assert resolve_filename({"ENVIRONMENT": ""}) == "config.json"

    @pytest.mark.unit
    def test_reads_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "staging")
        assert resolve_filename() == "config.staging.json"


# -- search ---------------------------------------------------------------------


class TestSearch:
    @pytest.mark.unit
    def test_default_dirs_program_then_cwd(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        program_dir = tmp_path / "bin"
        work_dir = tmp_path / "work"
        program_dir.mkdir()
        work_dir.mkdir()
        monkeypatch.setattr(sys, "argv", [str(program_dir / "app.py")])
        monkeypatch.chdir(work_dir)
        assert default_search_dirs() == [program_dir.resolve(), work_dir.resolve()]

    @pytest.mark.unit
    def test_default_dirs_without_program(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.setattr(sys, "argv", [""])
        monkeypatch.chdir(tmp_path)
        assert default_search_dirs() == [Path.cwd()]

    @pytest.mark.unit
    def test_default_dirs_deduplicated(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.setattr(sys, "argv", [str(tmp_path / "app.py")])
        monkeypatch.chdir(tmp_path)
        assert default_search_dirs() == [Path.cwd()]

    @pytest.mark.unit
    def test_first_match_wins(self, write_config: Callable[..., Path], tmp_path: Path) -> None:
        first = write_config({"from": "first"}, directory=tmp_path / "first")
        write_config({"from": "second"}, directory=tmp_path / "second")
        found = find_config("config.json", [tmp_path / "first", tmp_path / "second"])
        assert found == first

    @pytest.mark.unit
    def test_falls_back_to_later_dir(
        self, write_config: Callable[..., Path], tmp_path: Path
    ) -> None:
        second = write_config({}, directory=tmp_path / "second")
        (tmp_path / "first").mkdir()
        assert find_config("config.json", [tmp_path / "first", tmp_path / "second"]) == second

    @pytest.mark.unit
    def test_directory_named_like_file_is_skipped(self, tmp_path: Path) -> None:
        (tmp_path / "config.json").mkdir()
        with pytest.raises(ConfigNotFoundError):
            find_config("config.json", [tmp_path])

    @pytest.mark.unit
    def test_not_found_lists_candidates(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigNotFoundError, match="config.json") as exc_info:
            find_config("config.json", [tmp_path / "a", tmp_path / "b"])
        assert len(exc_info.value.searched) == 2
        assert isinstance(exc_info.value, FileNotFoundError)
        assert isinstance(exc_info.value, ConfigError)


# -- read_from ------------------------------------------------------------------


class TestReadFrom:
    @pytest.mark.unit
    def test_bytes(self) -> None:
        assert read_from(b'{"host": "google.com"}') == {"host": "google.com"}

    @pytest.mark.unit
    def test_str(self) -> None:
        assert read_from('{"n": 3.7}') == {"n": 3.7}

    @pytest.mark.unit
    def test_utf8_bom(self) -> None:
        assert read_from(b"\xef\xbb\xbf{\"a\": 1}") == {"a": 1}

    @pytest.mark.unit
    def test_invalid_json(self) -> None:
        with pytest.raises(ConfigParseError, match="invalid JSON"):
            read_from(b"{not json")

    @pytest.mark.unit
    def test_invalid_utf8(self) -> None:
        with pytest.raises(ConfigParseError, match="UTF-8"):
            read_from(b'{"a": "\xff"}')

    @pytest.mark.unit
    @pytest.mark.parametrize("text", ["[1, 2]", '"text"', "42", "null", "true"])
    def test_non_object_root(self, text: str) -> None:
        with pytest.raises(ConfigParseError, match="root value must be a JSON object"):
            read_from(text)

    @pytest.mark.unit
    @pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
    def test_non_standard_literals(self, literal: str) -> None:
        with pytest.raises(ConfigParseError, match=literal):
            read_from(f'{{"x": {literal}}}')

    @pytest.mark.unit
    def test_deeply_nested_document(self) -> None:
        depth = 100000
        text = '{"a": ' + "[" * depth + "]" * depth + "}"
        with pytest.raises(ConfigParseError, match="nesting too deep"):
            read_from(text)

    @pytest.mark.unit
    def test_deeply_nested_file_names_path(self, write_config: Callable[..., Path]) -> None:
        depth = 100000
        path = write_config('{"a": ' + "{\"b\": " * depth + "1" + "}" * depth + "}")
        with pytest.raises(ConfigParseError) as exc_info:
            read_file(path)
        assert exc_info.value.path == str(path)

    @pytest.mark.unit
    def test_parse_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            read_from("")


# -- read_file / load -----------------------------------------------------------


class TestLoad:
    @pytest.mark.unit
    def test_read_file(self, write_config: Callable[..., Path], sample_document: dict[str, Any]) -> None:
        path = write_config(sample_document)
        assert read_file(path) == sample_document

    @pytest.mark.unit
    def test_read_file_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigNotFoundError):
            read_file(tmp_path / "missing.json")

    @pytest.mark.unit
    def test_read_file_error_names_path(self, write_config: Callable[..., Path]) -> None:
        path = write_config("[]")
        with pytest.raises(ConfigParseError) as exc_info:
            read_file(path)
        assert exc_info.value.path == str(path)
        assert str(path) in str(exc_info.value)

    @pytest.mark.unit
    def test_load_returns_path_and_document(
        self, write_config: Callable[..., Path], tmp_path: Path
    ) -> None:
        path = write_config({"a": 1})
        assert load(search_dirs=[tmp_path], environ={}) == (path, {"a": 1})

    @pytest.mark.unit
    def test_load_environment_file(
        self, write_config: Callable[..., Path], tmp_path: Path
    ) -> None:
        write_config({"env": "default"})
        write_config({"env": "test"}, name="config.test.json")
        _, document = load(search_dirs=[tmp_path], environ={"ENVIRONMENT": "test"})
        assert document == {"env": "test"}

    @pytest.mark.unit
    def test_load_explicit_filename(
        self, write_config: Callable[..., Path], tmp_path: Path
    ) -> None:
        write_config({"name": "custom"}, name="custom.json")
        _, document = load("custom.json", [tmp_path])
        assert document == {"name": "custom"}

    @pytest.mark.unit
    def test_load_not_found(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigNotFoundError):
            load(search_dirs=[tmp_path], environ={})
