from __future__ import annotations

import json
from pathlib import Path

import pytest

from dbclient_gen import cli


def test_cli_generates_client_without_binaries(tmp_path: Path, sample_request, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PRISMA_CLI_BINARY_TARGETS", raising=False)
    monkeypatch.delenv("PRISMA_CLIENT_ENGINE_TYPE", raising=False)
    sample_request["generator"]["config"]["disableGoBinaries"] = "true"
    request = tmp_path / "request.json"
    request.write_text(json.dumps(sample_request), encoding="utf-8")

    code = cli.main(
        [str(request), "--output", str(tmp_path / "generated"), "--cache-dir", str(tmp_path / "cache")]
    )

    assert code == 0
    assert (tmp_path / "generated" / "db_gen.py").exists()
    assert not (tmp_path / "cache").exists()
    assert "db_gen.py" in capsys.readouterr().out


def test_cli_requires_config_argument() -> None:
    with pytest.raises(SystemExit):
        cli.main([])
