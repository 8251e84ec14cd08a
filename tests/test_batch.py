"""
Tests for batch.py - input files, output files and the command line.
"""

import pandas as pd
import pytest

from bn_inference.batch import answer_line, compare_algorithms, main, read_input, run_batch, save_comparison
from bn_inference.config import InferenceConfig

QUIET = InferenceConfig(show_progress=False)


@pytest.fixture
def input_file(tmp_path, alarm_xml):
    (tmp_path / "alarm_net.xml").write_text(alarm_xml, encoding="utf-8")
    path = tmp_path / "input.txt"
    path.write_text(
        "alarm_net.xml\n"
        "P(B=T|J=T,M=T),1\n"
        "P(B=T|J=T,M=T),2\n"
        "P(B=T|J=T,M=T),3\n"
        "\n"
        "P(J=T|B=T),1\n"
        "P(J=T|B=T),2\n"
        "P(J=T|B=T),3\n",
        encoding="utf-8",
    )
    return path


EXPECTED = [
    "0.28417,7,32",
    "0.28417,7,16",
    "0.28417,7,16",
    "0.84902,15,64",
    "0.84902,7,12",
    "0.84902,5,8",
]


class TestReadInput:
    def test_network_path_relative_to_input(self, input_file):
        network_path, queries = read_input(input_file)
        assert network_path == input_file.parent / "alarm_net.xml"
        assert len(queries) == 6

    def test_empty_file(self, tmp_path):
        path = tmp_path / "input.txt"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ValueError):
            read_input(path)


class TestRunBatch:
    def test_answers_written_in_order(self, input_file, tmp_path):
        out = tmp_path / "output.txt"
        answers = run_batch(input_file, out, QUIET)
        assert answers == EXPECTED
        assert out.read_text(encoding="utf-8").splitlines() == EXPECTED

    def test_default_output_path_from_config(self, input_file, tmp_path):
        out = tmp_path / "answers.txt"
        run_batch(input_file, config=InferenceConfig(show_progress=False, output_path=str(out)))
        assert out.read_text(encoding="utf-8").splitlines() == EXPECTED

    def test_invalid_lines(self, input_file, tmp_path, capsys):
        text = input_file.read_text(encoding="utf-8")
        input_file.write_text(text + "P(B=T|J=T),4\nP(Q=T),1\nnot a query\n", encoding="utf-8")
        answers = run_batch(input_file, tmp_path / "output.txt", QUIET)
        assert answers == EXPECTED
        assert capsys.readouterr().out.count("Invalid input") == 3

    def test_missing_algorithm_uses_default(self, alarm):
        assert answer_line(alarm, "P(J=T|B=T)", InferenceConfig(default_algorithm=2)) == "0.84902,7,12"

    def test_precision(self, alarm):
        assert answer_line(alarm, "P(B=T|J=T,M=T),3", InferenceConfig(precision=2)) == "0.28,7,16"


class TestCompareAlgorithms:
    def test_table(self, alarm):
        df = compare_algorithms(alarm, ["P(B=T|J=T,M=T),1", "P(J=T|B=T)"])
        assert isinstance(df, pd.DataFrame)
        assert len(df) == 6
        assert list(df["formatted"]) == ["0.28417", "0.28417", "0.28417", "0.84902", "0.84902", "0.84902"]
        assert list(df["multiplications"]) == [32, 16, 16, 64, 12, 8]
        assert set(df["query"]) == {"P(B=T|J=T,M=T)", "P(J=T|B=T)"}

    def test_unanswerable_lines_are_skipped(self, alarm):
        df = compare_algorithms(alarm, ["P(Q=T),1", "not a query", "P(J=T|B=T)"])
        assert len(df) == 3
        assert set(df["query"]) == {"P(J=T|B=T)"}
        assert list(df["formatted"]) == ["0.84902"] * 3

    def test_save_csv(self, alarm, tmp_path):
        df = compare_algorithms(alarm, ["P(J=T|B=T)"])
        path = save_comparison(df, tmp_path / "cmp.csv")
        loaded = pd.read_csv(path)
        assert list(loaded["additions"]) == [15, 7, 5]


class TestMain:
    def test_cli_writes_output(self, input_file, tmp_path, capsys):
        out = tmp_path / "cli_output.txt"
        main([str(input_file), "-o", str(out), "--no-progress"])
        assert out.read_text(encoding="utf-8").splitlines() == EXPECTED
        assert "6 answers" in capsys.readouterr().out

    def test_cli_compare(self, input_file, tmp_path, capsys):
        out = tmp_path / "cmp.csv"
        main([str(input_file), "--compare", "--compare-out", str(out), "--no-progress"])
        printed = capsys.readouterr().out
        assert "ve_weight" in printed
        assert len(pd.read_csv(out)) == 18

    def test_cli_show_cpts(self, input_file, tmp_path, capsys):
        main([str(input_file), "--show-cpts", "-o", str(tmp_path / "o.txt"), "--no-progress"])
        printed = capsys.readouterr().out
        assert "A(T)" in printed
        assert "0.9400" in printed

    def test_cli_config_file(self, input_file, tmp_path):
        cfg = tmp_path / "run.yaml"
        out = tmp_path / "from_config.txt"
        cfg.write_text(f"precision: 2\nshow_progress: false\noutput_path: {out}\n", encoding="utf-8")
        main([str(input_file), "--config", str(cfg)])
        assert out.read_text(encoding="utf-8").splitlines()[0] == "0.28,7,32"
