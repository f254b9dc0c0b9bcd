# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Tests for the command line entry point and its configuration."""
import io
import json

import pytest

from src import cli
from src.cli import main, setup_parser
from src.config import FormatterConfig
from src.types.format_types import ValidationResult


@pytest.fixture
def response_file(tmp_path, multi_json_response):
    path = tmp_path / "response.txt"
    path.write_text(multi_json_response, encoding="utf-8")
    return path


class TestFormatterConfig:
    def test_from_args(self):
        args = setup_parser().parse_args(
            [
                "format",
                "--format",
                "HTML",
                "--no-block-parsing",
                "--html-elements",
                "div, links",
                "--html-remove",
                "script",
                "--html-text-only",
                "--log-level",
                "debug",
            ]
        )
        config = FormatterConfig.from_args(args)

        assert config.command == "format"
        assert config.output_format == "html"
        assert config.enable_block_parsing is False
        assert config.html_elements == ["div", "links"]
        assert config.log_level == "DEBUG"
        assert not config.validate

        html_filter = config.html_filter()
        assert html_filter.element_list() == ["div", "links"]
        assert html_filter.removal_list() == ["script"]
        assert html_filter.text_only is True

    def test_defaults(self):
        config = FormatterConfig()
        assert config.html_elements == []
        assert config.html_filter().element_list() == []
        assert config.log_level == "WARNING"


def test_format_from_file(response_file, capsys):
    exit_code = main(["format", "--format", "json", "--input", str(response_file)])

    assert exit_code == 0
    assert json.loads(capsys.readouterr().out) == [{"a": 1}, {"b": 2}]


def test_format_from_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("hello world"))
    assert main(["format", "--format", "yml"]) == 0
    assert capsys.readouterr().out == "response: hello world\n\n"


def test_format_html_options(tmp_path, capsys, html_page):
    path = tmp_path / "page.html"
    path.write_text(html_page, encoding="utf-8")

    exit_code = main(["format", "--format", "html", "--input", str(path), "--html-elements", "links", "--html-text-only"])

    assert exit_code == 0
    assert capsys.readouterr().out.strip() == "Example"


def test_validate_prints_result(response_file, capsys):
    exit_code = main(["validate", "--format", "json", "--input", str(response_file)])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["is_valid"] is True
    assert payload["error"] is None


def test_validate_exits_non_zero_when_invalid(response_file, monkeypatch, capsys):
    monkeypatch.setattr(
        cli, "validate_response", lambda *args, **kwargs: ValidationResult(is_valid=False, content="x", error="bad")
    )
    assert main(["validate", "--format", "json", "--input", str(response_file)]) == 1
    assert json.loads(capsys.readouterr().out)["error"] == "bad"


def test_missing_input_file(tmp_path):
    assert main(["format", "--input", str(tmp_path / "missing.txt")]) == 1


def test_unknown_format_is_rejected_by_parser():
    with pytest.raises(SystemExit):
        main(["format", "--format", "xml"])
