"""Tests for the review-packets command line."""

import json

import pytest

from review_packets.cli import main


DIFF = "```diff\n@@ -1,0 +1,2 @@\n+one\n+two\n```"


@pytest.fixture
def inputs(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("REVIEW_PACKETS_METRICS", raising=False)
    data = tmp_path / "data.json"
    data.write_text(json.dumps({"files": [
        {"id": 1, "file": "a.py", "content": DIFF, "additions": 2},
    ]}), encoding="utf-8")
    requests = tmp_path / "requests.json"
    requests.write_text(json.dumps([
        {"id": 1, "file_id": 1, "start_line": 1, "end_line": 1},
    ]), encoding="utf-8")
    return str(data), str(requests)


class TestMain:
    def test_prints_packets(self, inputs, capsys):
        code = main([*inputs, "--no-log-file"])

        assert code == 0
        out = json.loads(capsys.readouterr().out)
        assert out["status"] == "ok"
        assert [p["part"] for p in out["packets"]] == ["1/2", "2/2"]

    def test_writes_output_file(self, inputs, tmp_path):
        target = tmp_path / "out.json"
        code = main([*inputs, "-o", str(target), "--no-log-file"])

        assert code == 0
        assert json.loads(target.read_text(encoding="utf-8"))["status"] == "ok"

    def test_error_exit_status(self, inputs, tmp_path, capsys):
        _, requests = inputs
        code = main([str(tmp_path / "missing.json"), requests, "--no-log-file"])

        assert code == 1
        out = json.loads(capsys.readouterr().out)
        assert out["status"] == "error"
        assert out["packets"] == []

    def test_context_lines_override(self, inputs, capsys):
        code = main([*inputs, "--context-lines", "0", "--no-log-file"])

        assert code == 0
        out = json.loads(capsys.readouterr().out)
        assert out["packets"][0]["hunks"][0]["header"] == "@@ -0,0 +1,1 @@"

    def test_stats(self, inputs, capsys):
        main([*inputs, "--metrics", "--no-log-file"])
        capsys.readouterr()

        assert main(["--stats"]) == 0
        stats = json.loads(capsys.readouterr().out)
        assert stats["total_runs"] == 1

    def test_missing_arguments(self):
        with pytest.raises(SystemExit):
            main(["only-one.json", "--no-log-file"])
