import json
import logging

import numpy as np
import pytest

from scale_cli import data_range, main, parse_data


def test_parse_data_tab():
    text = "# x\ty\n1\t-10\n2\t100\n\nbad line\n3\tnot_a_number\n"
    values = parse_data(text, 1, "tab")
    assert values.tolist() == [-10, 100]


def test_parse_data_escaped_newlines():
    values = parse_data("1,2\\n3,4", 0, "comma")
    assert values.tolist() == [1, 3]


def test_parse_data_space_collapses_runs():
    values = parse_data("1    2\n3  \t 4", 1, "space")
    assert values.tolist() == [2, 4]


def test_parse_data_empty():
    assert parse_data("", 0, "tab").size == 0


def test_data_range_ignores_non_finite():
    interval = data_range(np.array([3.0, np.nan, -1.0, np.inf, 7.5]))
    assert interval.min == -1.0
    assert interval.max == 7.5


def test_data_range_empty():
    with pytest.raises(ValueError):
        data_range(np.array([]))


def test_main_json(capsys):
    assert main(["--min", "0", "--max", "155", "--offset_size", "264", "--json"]) == 0

    result = json.loads(capsys.readouterr().out)
    assert result["step"] == pytest.approx(50)
    assert result["limit"]["min"] == 0
    assert result["limit"]["max"] == pytest.approx(200)
    assert result["stepCount"] == pytest.approx(4)


def test_main_text_output(capsys):
    assert main(["--min", "5", "--max", "95", "--offset_size", "176"]) == 0

    out = capsys.readouterr().out
    assert "step: 50" in out
    assert "ticks: 0.00, 50.00, 100.00" in out


def test_main_custom_format(capsys):
    argv = ["--min", "0", "--max", "155", "--offset_size", "264", "--format", "{:.0f}"]
    assert main(argv) == 0
    assert "ticks: 0, 50, 100, 150, 200" in capsys.readouterr().out


def test_main_range_from_data_text(capsys):
    argv = [
        "--data_text",
        "1\t-10\n2\t40\n3\t100\n",
        "--column",
        "2",
        "--offset_size",
        "264",
        "--step_count",
        "5",
        "--json",
    ]
    assert main(argv) == 0

    result = json.loads(capsys.readouterr().out)
    assert result["limit"]["min"] == pytest.approx(-20)
    assert result["limit"]["max"] == pytest.approx(100)


def test_main_range_from_data_file(tmp_path, capsys):
    data_file = tmp_path / "data.csv"
    data_file.write_text("a,b\n0,5\n1,95\n", encoding="utf-8")

    argv = [
        "--data_file",
        str(data_file),
        "--data_delim",
        "comma",
        "--column",
        "2",
        "--offset_size",
        "176",
        "--json",
    ]
    assert main(argv) == 0

    result = json.loads(capsys.readouterr().out)
    assert result["limit"]["min"] == 0
    assert result["limit"]["max"] == pytest.approx(100)


def test_main_pixels_per_step(capsys):
    argv = [
        "--min", "0", "--max", "155", "--offset_size", "264",
        "--pixels_per_step", "44", "--json",
    ]
    assert main(argv) == 0
    assert json.loads(capsys.readouterr().out)["step"] == pytest.approx(20)


def test_main_rejects_invalid_offset(caplog):
    with caplog.at_level(logging.ERROR):
        assert main(["--min", "0", "--max", "1", "--offset_size", "0"]) == 2
    assert "offset_size" in caplog.text


def test_main_rejects_inverted_range(caplog):
    with caplog.at_level(logging.ERROR):
        assert main(["--min", "10", "--max", "1", "--offset_size", "100"]) == 2
    assert "greater than max" in caplog.text


def test_main_requires_range(caplog):
    with caplog.at_level(logging.ERROR):
        assert main(["--offset_size", "100"]) == 2
    assert "--min" in caplog.text


def test_main_data_without_numbers(caplog):
    with caplog.at_level(logging.ERROR):
        assert main(["--data_text", "a\tb\n", "--offset_size", "100"]) == 2
    assert "No numeric values" in caplog.text


def test_main_rejects_column_zero(caplog):
    with caplog.at_level(logging.ERROR):
        assert main(["--data_text", "1\t2\n", "--column", "0", "--offset_size", "100"]) == 2
    assert "--column" in caplog.text


def test_main_requires_min_and_max_together(caplog):
    with caplog.at_level(logging.ERROR):
        assert main(["--min", "0", "--data_text", "1\n5\n", "--offset_size", "100"]) == 2
    assert "together" in caplog.text


def test_main_rejects_fractional_step_count():
    with pytest.raises(SystemExit):
        main(["--min", "0", "--max", "1", "--offset_size", "100", "--step_count", "2.5"])
