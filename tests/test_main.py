import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import main as cli
from config import get_settings


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    for name in ("PAYMENTS_SORTED_OUTPUT", "PAYMENTS_VERBOSE", "PAYMENTS_LOG_LEVEL", "PAYMENTS_SHARDS"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestMain:
    def test_no_arguments_prints_usage(self, capsys):
        assert cli.main([]) == 1
        assert "Usage" in capsys.readouterr().err

    def test_too_many_arguments_prints_usage(self, capsys):
        assert cli.main(["a.csv", "b.csv"]) == 1
        assert "Usage" in capsys.readouterr().err

    def test_missing_file(self, tmp_path):
        assert cli.main([str(tmp_path / "missing.csv")]) == 1

    def test_writes_report_to_stdout(self, tmp_path, capsys):
        csv_file = tmp_path / "input.csv"
        csv_file.write_text('\n'.join([
            "type, client, tx, amount",
            "deposit, 2, 1, 2.0",
            "deposit, 1, 2, 1.0",
            "dispute, 1, 2,",
        ]))

        assert cli.main([str(csv_file)]) == 0

        assert capsys.readouterr().out.splitlines() == [
            "client,available,held,total,locked",
            "1,0,1,1,false",
            "2,2,0,2,false",
        ]

    def test_sharded_from_environment(self, tmp_path, capsys, monkeypatch):
        monkeypatch.setenv("PAYMENTS_SHARDS", "2")
        csv_file = tmp_path / "input.csv"
        csv_file.write_text("type,client,tx,amount\ndeposit,1,1,5\ndeposit,2,2,7\n")

        assert cli.main([str(csv_file)]) == 0

        assert capsys.readouterr().out.splitlines()[1:] == ["1,5,0,5,false", "2,7,0,7,false"]

    def test_invalid_settings_exit_with_error(self, tmp_path, capsys, monkeypatch):
        monkeypatch.setenv("PAYMENTS_SHARDS", "0")
        csv_file = tmp_path / "input.csv"
        csv_file.write_text("type,client,tx,amount\ndeposit,1,1,5\n")

        assert cli.main([str(csv_file)]) == 1
        assert capsys.readouterr().out == ""

    def test_dotenv_file_is_ignored(self, tmp_path, capsys, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".env").write_text("PAYMENTS_SORTED_OUTPUT=false\nPAYMENTS_SHARDS=abc\n")
        csv_file = tmp_path / "input.csv"
        csv_file.write_text("type,client,tx,amount\ndeposit,2,1,5\ndeposit,1,2,7\n")

        assert cli.main([str(csv_file)]) == 0
        assert capsys.readouterr().out.splitlines()[1:] == ["1,7,0,7,false", "2,5,0,5,false"]
