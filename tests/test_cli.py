"""
Tests for the command line entry point.
"""

import csv

import pytest

from prominence.cli import build_parser, describe_grid, main
from prominence.config import DEFAULT_DEM_FILE, DEFAULT_TOP
from prominence.loader import load_csv
from prominence.peak import Peak


@pytest.fixture
def ridge_csv(write_csv):
    return write_csv([
        [0, 0, 0, 0, 0, 0, 0],
        [0, 5, 1, 2, 1, 8, 0],
        [0, 0, 0, 0, 0, 0, 0],
    ], name="ridge.csv")


def table_rows(out):
    """Peak rows printed after the table header."""
    lines = out.splitlines()
    start = lines.index("Peaks by prominence:")
    return lines[start + 3:]


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args([])

        assert args.dem_file == DEFAULT_DEM_FILE
        assert args.top == DEFAULT_TOP
        assert args.method == "union-find"
        assert not args.ascending

    def test_verbose_and_quiet_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["-v", "-q"])

    def test_negative_top_rejected(self, capsys):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--top", "-3"])
        assert "must be 0 or more" in capsys.readouterr().err


class TestMain:
    def test_prints_peak_table(self, write_csv, pattern_rows, capsys):
        path = write_csv(pattern_rows)

        assert main([str(path)]) == 0

        out = capsys.readouterr().out
        assert table_rows(out) == [str(Peak(2, 2, 5, 5))]

    def test_missing_file_exits_1(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.bin")]) == 1
        assert "Peaks by prominence:" not in capsys.readouterr().out

    def test_invalid_grid_exits_1(self, tmp_path):
        path = tmp_path / "ragged.csv"
        path.write_text("1,2\n3\n")

        assert main([str(path)]) == 1

    def test_undecodable_csv_exits_1(self, tmp_path, capsys):
        path = tmp_path / "latin.csv"
        path.write_bytes(b"1,2\n\xff\xfe,3\n")

        assert main([str(path), "-q"]) == 1
        assert "Peaks by prominence:" not in capsys.readouterr().out

    def test_unsupported_extension_exits_1(self, tmp_path):
        path = tmp_path / "grid.tif"
        path.write_bytes(b"\x00\x00")

        assert main([str(path)]) == 1

    def test_width_without_height_exits_1(self, write_bin):
        assert main([str(write_bin([1, 2, 3, 4])), "--width", "2"]) == 1

    def test_binary_input(self, write_bin, pattern_rows, capsys):
        path = write_bin([v for row in pattern_rows for v in row])

        assert main([str(path), "--width", "5", "--height", "5", "-q"]) == 0
        assert table_rows(capsys.readouterr().out) == [str(Peak(2, 2, 5, 5))]

    def test_thresholds(self, ridge_csv, capsys):
        assert main([str(ridge_csv), "--min-elevation", "1", "--min-prominence", "1"]) == 0

        rows = table_rows(capsys.readouterr().out)
        assert rows == [str(Peak(1, 5, 8, 7, 1, 2, 1))]

    def test_col_events_method(self, ridge_csv, capsys):
        assert main([str(ridge_csv), "--method", "col-events", "--min-elevation", "1"]) == 0

        rows = table_rows(capsys.readouterr().out)
        assert [int(row.split()[0]) for row in rows] == [8, 4, 1]

    def test_top_limits_rows(self, ridge_csv, capsys):
        assert main([str(ridge_csv), "--method", "col-events", "--min-elevation", "1", "--top", "1"]) == 0
        assert len(table_rows(capsys.readouterr().out)) == 1

    def test_top_zero_prints_all(self, ridge_csv, capsys):
        assert main([str(ridge_csv), "--method", "col-events", "--min-elevation", "1", "--top", "0"]) == 0
        assert len(table_rows(capsys.readouterr().out)) == 3

    def test_inspect(self, write_csv, pattern_rows, capsys):
        assert main([str(write_csv(pattern_rows)), "--inspect"]) == 0

        out = capsys.readouterr().out
        assert "DEM shape: (5, 5) (rows, cols)" in out
        assert "First row values: [0, 0, 0, 0, 0]" in out
        assert "Middle value at (row=2, col=2): 5" in out
        assert "Peaks by prominence:" not in out

    def test_output_csv(self, write_csv, pattern_rows, tmp_path):
        output = tmp_path / "peaks.csv"

        assert main([str(write_csv(pattern_rows)), "--output", str(output)]) == 0

        with open(output, newline="") as fh:
            rows = list(csv.reader(fh))
        assert rows[1] == ["5", "2", "2", "5", "", "", ""]

    def test_progress_bar(self, write_csv, pattern_rows, capsys):
        assert main([str(write_csv(pattern_rows)), "--progress"]) == 0
        assert table_rows(capsys.readouterr().out) == [str(Peak(2, 2, 5, 5))]

    def test_ascending(self, write_csv, pattern_rows, capsys):
        assert main([str(write_csv(pattern_rows)), "--ascending"]) == 0
        assert table_rows(capsys.readouterr().out) == [str(Peak(2, 2, 5, 5))]


class TestDescribeGrid:
    def test_wide_grid_shows_ten_values(self, write_csv):
        grid = load_csv(write_csv([list(range(12)), list(range(12))]))
        text = describe_grid(grid)

        assert "First row values: [0, 1, 2, 3, 4, 5, 6, 7, 8, 9]" in text
        assert "Middle value at (row=1, col=6): 6" in text
