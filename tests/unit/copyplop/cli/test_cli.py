# SPDX-License-Identifier: MPL-2.0
import io

import orjson
import pytest

from copyplop.cli import EXIT_ERROR, EXIT_ISSUES, EXIT_OK, CopyplopCLI, build_parser


@pytest.fixture
def project(tmp_path):
    (tmp_path / "main.go").write_text("package main\n", encoding="utf-8")
    return tmp_path


def _run(config, args):
    out = io.StringIO()
    code = CopyplopCLI(config=config, out=out).execute(args)
    return code, out.getvalue()


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_check_reports_issues(config, project):
    code, output = _run(config, ["-p", str(project), "check"])
    assert code == EXIT_ISSUES
    assert "main.go: missing copyright header" in output
    assert "Found 1 files with copyright issues" in output


def test_check_json_report(config, project):
    code, output = _run(config, ["-p", str(project), "check", "--format", "json"])
    payload = orjson.loads(output)
    assert code == EXIT_ISSUES
    assert payload["count"] == 1
    assert payload["issues"][0]["kind"] == "missing"
    assert payload["issues"][0]["file"].endswith("main.go")


def test_fix_then_check(config, project):
    code, output = _run(config, ["--path", str(project), "--jobs", "2", "fix"])
    assert code == EXIT_OK
    assert "✓ Added headers to 1 files" in output

    code, output = _run(config, ["-p", str(project), "fix"])
    assert code == EXIT_OK
    assert "✓ No files needed fixing" in output

    code, output = _run(config, ["-p", str(project), "check"])
    assert code == EXIT_OK
    assert "✓ All files have correct copyright headers" in output


def test_fix_reports_updated_files(config, tmp_path):
    (tmp_path / "old.go").write_text("// Copyright IBM Corp. 2014, 2020\n\npackage main\n", encoding="utf-8")
    code, output = _run(config, ["-p", str(tmp_path), "fix"])
    assert code == EXIT_OK
    assert "✓ Fixed 1 files" in output


def test_missing_config_file_is_an_error(tmp_path):
    code, output = _run(None, ["--config", str(tmp_path / "missing.yaml"), "check"])
    assert code == EXIT_ERROR
    assert output.startswith("Error: Could not read config file")


def test_config_loaded_from_path(tmp_path, project):
    config_file = tmp_path / "copyplop.yaml"
    config_file.write_text(
        "copyright:\n  holder: ACME\n  start_year: 2025\n  current_year: 2025\n"
        "files:\n  extensions: ['.go']\n",
        encoding="utf-8",
    )
    code, _output = _run(None, ["--config", str(config_file), "-p", str(project), "fix"])
    assert code == EXIT_OK
    assert (project / "main.go").read_text(encoding="utf-8") == "// Copyright ACME 2025\n\npackage main\n"


def test_unknown_path_is_an_error(config, tmp_path):
    code, output = _run(config, ["-p", str(tmp_path / "nowhere"), "check"])
    assert code == EXIT_ERROR
    assert "Path not found" in output


def test_version_command(config):
    code, output = _run(config, ["version"])
    assert code == EXIT_OK
    assert output.strip() == "v0.10.0"
