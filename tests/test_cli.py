import json
import logging

import pytest

from config import ConfigurationManager
from invoice_parser.utils.logger import ROOT_LOGGER_NAME
from main import main, parse_arguments, run_extraction


@pytest.fixture(autouse=True)
def fresh_configuration():
    ConfigurationManager.reset()
    yield
    ConfigurationManager.reset()
    logging.getLogger(ROOT_LOGGER_NAME).handlers.clear()


def test_parse_arguments() -> None:
    args = parse_arguments(["-i", "invoice.txt", "--trace", "-q"])
    assert args.input == "invoice.txt"
    assert args.trace and args.quiet
    assert args.output is None


def test_single_file_to_output(tmp_path, single_line_text) -> None:
    source = tmp_path / "invoice.txt"
    source.write_text(single_line_text, encoding="utf-8")
    output = tmp_path / "out" / "results.json"

    assert main(["--input", str(source), "--output", str(output), "--quiet"]) == 0

    results = json.loads(output.read_text(encoding="utf-8"))
    assert len(results) == 1
    assert results[0]["invoice_number"] == "0001-00001234"
    assert results[0]["source_file"] == str(source)
    assert "trace" not in results[0]


def test_trace_printed_to_stdout(tmp_path, multi_line_text, capsys) -> None:
    source = tmp_path / "invoice.txt"
    source.write_text(multi_line_text, encoding="utf-8")

    assert main(["--input", str(source), "--trace", "--quiet"]) == 0

    results = json.loads(capsys.readouterr().out)
    assert results[0]["trace"]["item_strategy"] == "multi_line"


def test_directory_input_skips_unusable_files(tmp_path, single_line_text, multi_line_text) -> None:
    (tmp_path / "a.txt").write_text(single_line_text, encoding="utf-8")
    (tmp_path / "b.txt").write_text(multi_line_text, encoding="utf-8")
    (tmp_path / "c.txt").write_text("corto", encoding="utf-8")

    results = run_extraction(str(tmp_path))

    assert [r["invoice_number"] for r in results] == ["0001-00001234", "0003-00045678"]


def test_missing_input_fails(tmp_path, capsys) -> None:
    assert main(["--input", str(tmp_path / "missing.txt"), "--quiet"]) == 1
    assert "Input path not found" in capsys.readouterr().err


def test_nothing_processed_fails(tmp_path) -> None:
    (tmp_path / "empty.txt").write_text("", encoding="utf-8")
    assert main(["--input", str(tmp_path), "--quiet"]) == 1


def test_custom_configuration_file(tmp_path, single_line_text) -> None:
    settings = tmp_path / "settings.yaml"
    settings.write_text("input:\n  min_text_length: 500\n", encoding="utf-8")
    source = tmp_path / "invoice.txt"
    source.write_text(single_line_text, encoding="utf-8")

    assert main(["--input", str(source), "--config", str(settings), "--quiet"]) == 1
