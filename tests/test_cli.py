"""Tests for the command-line entry point."""

import pytest

from loan_allocator.cli import build_parser, main
from loan_allocator.exceptions import RecordParseError


@pytest.fixture
def input_dir(tmp_path):
    d = tmp_path / "data"
    d.mkdir()
    (d / "banks.csv").write_text("id,name\n1,Chase\n")
    (d / "facilities.csv").write_text(
        "amount,interest_rate,id,bank_id\n1000.0,0.05,1,1\n500.0,0.03,2,1\n"
    )
    (d / "covenants.csv").write_text(
        "facility_id,max_default_likelihood,bank_id,banned_state\n,0.5,1,\n"
    )
    (d / "loans.csv").write_text(
        "interest_rate,amount,id,default_likelihood,state\n"
        "0.10,400,1,0.1,CA\n"
        "0.10,9000,2,0.1,CA\n"
    )
    return d


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    d = tmp_path / "work"
    d.mkdir()
    monkeypatch.chdir(d)
    # Set before deleting so monkeypatch also removes values a .env file loads.
    for name in ("LOG_LEVEL", "ALLOCATOR_ALLOW_BANKS_WITHOUT_COVENANTS"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return d


class TestParser:

    def test_default_input_dir(self):
        args = build_parser().parse_args([])
        assert args.input_dir == "."

    def test_positional_input_dir(self):
        args = build_parser().parse_args(["some/dir"])
        assert args.input_dir == "some/dir"

    def test_rejects_extra_arguments(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["a", "b"])


class TestMain:

    def test_writes_reports_to_working_directory(self, input_dir, workdir, capsys):
        exit_code = main([str(input_dir)])

        assert exit_code == 0
        assert capsys.readouterr().out.strip() == "Processed 1 loan assignments"
        assert (workdir / "assignments.csv").read_text() == "loan_id,facility_id\n1,2\n"
        assert (workdir / "yields.csv").read_text() == "facility_id,expected_yield\n2,-16\n"

    def test_defaults_to_current_directory(self, input_dir, monkeypatch, capsys):
        monkeypatch.chdir(input_dir)
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        main([])

        assert "Processed 1 loan assignments" in capsys.readouterr().out
        assert (input_dir / "assignments.csv").exists()

    def test_parse_error_propagates(self, input_dir, workdir):
        (input_dir / "banks.csv").write_text("id,name\nx,Chase\n")

        with pytest.raises(RecordParseError):
            main([str(input_dir)])

    def test_reads_dotenv_from_working_directory(self, input_dir, workdir, capsys):
        (input_dir / "covenants.csv").write_text(
            "facility_id,max_default_likelihood,bank_id,banned_state\n"
        )
        (workdir / ".env").write_text("ALLOCATOR_ALLOW_BANKS_WITHOUT_COVENANTS=true\n")

        main([str(input_dir)])

        assert capsys.readouterr().out.strip() == "Processed 1 loan assignments"
        assert (workdir / "assignments.csv").read_text() == "loan_id,facility_id\n1,2\n"
