from logconv.cli import main


def test_cli_converts_file(tmp_path):
    src = tmp_path / "plant7.txt"
    src.write_text("E004:S1\nX:201701010800:H\nX:IGNORED:10:20:30:40\n", encoding="utf-8")

    assert main([str(src), str(tmp_path)]) == 0
    assert (tmp_path / "plant7_CONVERTED.txt").read_text(encoding="utf-8").splitlines() == [
        "201701010800;S1;10;20;",
        "201701010900;S1;30;40;",
    ]


def test_cli_reports_error_and_exit_code(tmp_path, capsys):
    src = tmp_path / "bad.txt"
    src.write_text("E004:S1\n", encoding="utf-8")

    assert main([str(src), str(tmp_path)]) == 2
    assert "malformed_bundle" in capsys.readouterr().err
    assert not (tmp_path / "bad_CONVERTED.txt").exists()


def test_cli_lenient_flag(tmp_path):
    src = tmp_path / "mixed.txt"
    src.write_text("E004:S0\nX:201701010800:Q\nX:1:2\nE004:S1\nX:201701010800:H\nX:-:5:6\n", encoding="utf-8")

    assert main([str(src), str(tmp_path), "--lenient"]) == 0
    assert (tmp_path / "mixed_CONVERTED.txt").read_text(encoding="utf-8") == "201701010800;S1;5;6;\n"


def test_cli_reports_date_overflow(tmp_path, capsys):
    src = tmp_path / "late.txt"
    src.write_text("E004:S1\nX:999912312300:H\nX:-:1:2:3:4\n", encoding="utf-8")

    assert main([str(src), str(tmp_path)]) == 2
    err = capsys.readouterr().err
    assert "invalid_timestamp" in err
    assert "line 1" in err
