"""Smoke tests for the command-line interface."""

import json
import os

import pytest
from skyscrapers.cli import main
from skyscrapers.core.board import SkyscrapersBoard


CYCLIC_GRID = [
    [1, 2, 3, 4],
    [2, 3, 4, 1],
    [3, 4, 1, 2],
    [4, 1, 2, 3],
]
CYCLIC_HINTS = "4,3,2,1;1,2,2,2;1,2,2,2;4,3,2,1"


@pytest.fixture
def board_file(tmp_path):
    path = tmp_path / "board.txt"
    SkyscrapersBoard.from_2d_list(CYCLIC_GRID).save_to_file(str(path))
    return str(path)


class TestCli:
    """End-to-end runs of the CLI subcommands."""

    def test_no_command(self):
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 1

    def test_solve(self, capsys, tmp_path):
        """Solving full hints prints and saves the unique board."""
        out_dir = tmp_path / "solutions"
        main(["solve", "--hints", CYCLIC_HINTS, "--output", str(out_dir)])

        output = capsys.readouterr().out
        assert "Found 1 board(s)" in output
        saved = SkyscrapersBoard.load_from_file(str(out_dir / "solution_1.txt"))
        assert saved == SkyscrapersBoard.from_2d_list(CYCLIC_GRID)

    def test_solve_parallel_threads(self, capsys):
        main([
            "solve", "--hints", "0,0,0;0,0,0;0,0,0;0,0,0",
            "--parallel", "--executor", "thread", "--workers", "2",
            "--quiet",
        ])
        assert "Found 12 board(s)" in capsys.readouterr().out

    def test_solve_limit(self, capsys):
        main(["solve", "--hints", "0,0,0;0,0,0;0,0,0;0,0,0", "--limit", "3", "--quiet"])
        assert "Found 3 board(s)" in capsys.readouterr().out

    def test_solve_bad_hints(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["solve", "--hints", "1,2;3"])
        assert exc.value.code == 1
        assert "Error reading hints" in capsys.readouterr().err

    def test_check_valid(self, capsys, board_file):
        main(["check", "--board", board_file, "--hints", CYCLIC_HINTS])
        output = capsys.readouterr().out
        assert "Latin square: yes" in output
        assert "Matches hints: yes" in output

    def test_check_without_hints(self, capsys, board_file):
        """Without hints the board is checked against its own."""
        main(["check", "--board", board_file])
        assert "Matches hints: yes" in capsys.readouterr().out

    def test_check_mismatch(self, capsys, board_file):
        with pytest.raises(SystemExit) as exc:
            main(["check", "--board", board_file, "--hints", "1,3,2,1;1,2,2,2;1,2,2,2;4,3,2,1"])
        assert exc.value.code == 1
        assert "Matches hints: no" in capsys.readouterr().out

    def test_check_size_mismatch(self, board_file):
        with pytest.raises(SystemExit):
            main(["check", "--board", board_file, "--hints", "0,0;0,0;0,0;0,0"])

    def test_generate(self, tmp_path):
        """Generated puzzles land in JSON and in the plain-text folder."""
        json_path = tmp_path / "puzzles.json"
        folder = tmp_path / "puzzles"
        main([
            "generate", "--size", "4", "--count", "2", "--difficulty", "easy",
            "--seed", "1", "--output", str(json_path), "--folder", str(folder),
        ])

        with open(json_path) as f:
            puzzles = json.load(f)
        assert len(puzzles) == 2
        assert puzzles[0]["size"] == 4
        assert len(puzzles[0]["solution"]) == 4

        files = sorted(os.listdir(folder / "easy"))
        assert files == [
            "puzzle_easy_1_hints.txt",
            "puzzle_easy_1_solution.txt",
            "puzzle_easy_2_hints.txt",
            "puzzle_easy_2_solution.txt",
        ]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
