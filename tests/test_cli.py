"""
コマンドラインインターフェースのテスト
"""

import pytest

from aco_tour.cli import build_parser, main


@pytest.fixture
def cifp_file(tmp_path, sample_lines, make_record):
    """空港レコードと他種のレコードを含む入力ファイル"""
    path = tmp_path / "FAACIFP18"
    lines = [
        "HDR01FAACIFP18      001P013203863791901",
        *sample_lines,
        make_record(identifier="KBAD", longitude="Q118242898"),
        make_record(section="D", identifier="LAX"),
    ]
    path.write_text("\r\n".join(lines) + "\r\n", encoding="latin-1")
    return path


def _args(path, *extra):
    return [str(path), "--ants", "5", "--iterations", "10", "--seed", "42", *extra]


class TestCli:
    """aco-tour コマンドのテスト"""

    def test_parser_defaults(self):
        args = build_parser().parse_args([])
        assert args.input == "-"
        assert args.ants is None
        assert args.excepts == []
        assert not args.print_aps

    def test_run(self, cifp_file, capsys):
        assert main(_args(cifp_file)) == 0
        out = capsys.readouterr().out
        assert "Selected cycle" in out
        assert "Total nodes: 4" in out
        assert "Total lengths" not in out

    def test_print_aps(self, cifp_file, capsys):
        assert main(_args(cifp_file, "--print-aps")) == 0
        out = capsys.readouterr().out
        assert "LOS ANGELES INTL" in out
        assert "Distance to next" in out
        assert "Total lengths: " in out

    def test_output_file(self, cifp_file, tmp_path):
        output = tmp_path / "report.txt"
        assert main(_args(cifp_file, "--print-aps", "--output", str(output))) == 0
        lines = output.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 5
        assert lines[-1].startswith("Total lengths: ")

    def test_filter(self, cifp_file, tmp_path, capsys):
        filter_path = tmp_path / "filter.txt"
        filter_path.write_text("KLAX\nKJFK\nKSEA\n", encoding="utf-8")
        assert main(_args(cifp_file, "--filter", str(filter_path))) == 0
        out = capsys.readouterr().out
        assert "Total nodes: 3" in out
        assert "KDEN" not in out

    def test_min_dist_with_exception(self, cifp_file, capsys):
        args = _args(cifp_file, "--min-dist", "1500", "--except", "KLAX-KDEN")
        assert main(args) == 0
        assert "Total nodes: 4" in capsys.readouterr().out

    def test_reproducible(self, cifp_file, capsys):
        main(_args(cifp_file))
        first = capsys.readouterr().out
        main(_args(cifp_file, "--workers", "2"))
        second = capsys.readouterr().out
        assert first == second

    def test_too_few_airports(self, cifp_file, tmp_path, capsys):
        """空港が1件だけなら終了ステータス2"""
        filter_path = tmp_path / "filter.txt"
        filter_path.write_text("KLAX\n", encoding="utf-8")
        assert main(_args(cifp_file, "--filter", str(filter_path))) == 2
        assert "error" in capsys.readouterr().err

    def test_invalid_parameter(self, cifp_file, capsys):
        assert main(_args(cifp_file, "--evaporation", "1.5")) == 2
        assert "evaporation_rate" in capsys.readouterr().err

    def test_invalid_exception_pair(self, cifp_file, capsys):
        assert main(_args(cifp_file, "--except", "KLAX")) == 2
        assert "ICAO-ICAO" in capsys.readouterr().err

    def test_missing_input(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing")]) == 2

    def test_images(self, cifp_file, tmp_path, capsys):
        images = tmp_path / "images"
        filter_path = tmp_path / "filter.txt"
        filter_path.write_text("KLAX\nKSEA\nKDEN\n", encoding="utf-8")
        args = _args(
            cifp_file, "--filter", str(filter_path), "--unfiltered", "--images", str(images)
        )
        assert main(args) == 0
        assert (images / "aco.png").is_file()
        assert (images / "convergence.png").is_file()
