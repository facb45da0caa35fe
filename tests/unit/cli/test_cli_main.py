import yaml
from click.testing import CliRunner

from extsetup.cli.main import cli


def _write_host(path, **data):
    path.write_text(yaml.safe_dump(data), encoding="utf-8")


def test_status_reports_fresh_install(tmp_path):
    host_path = tmp_path / "host.yaml"
    result = CliRunner().invoke(
        cli, ["--config", str(host_path), "status", "--current-version", "5.0.0"]
    )
    assert result.exit_code == 0, result.output
    assert "fresh_install" in result.output
    assert "not installed" in result.output


def test_plan_for_upgrade_lists_four_actions(tmp_path):
    host_path = tmp_path / "host.yaml"
    _write_host(host_path, app_settings={"Formulate:Version": "4.9.0"})

    result = CliRunner().invoke(
        cli, ["--config", str(host_path), "plan", "--current-version", "5.0.0"]
    )
    assert result.exit_code == 0, result.output
    assert "upgrade" in result.output
    assert "apply-configuration-group" in result.output
    assert "grant-default-access" not in result.output


def test_plan_does_not_modify_host(tmp_path):
    host_path = tmp_path / "host.yaml"
    result = CliRunner().invoke(
        cli, ["--config", str(host_path), "plan", "--transition", "fresh_install"]
    )
    assert result.exit_code == 0, result.output
    assert "grant-default-access" in result.output
    assert not host_path.exists()


def test_plan_for_noop(tmp_path):
    host_path = tmp_path / "host.yaml"
    _write_host(host_path, app_settings={"Formulate:Version": "5.0.0"})
    result = CliRunner().invoke(
        cli, ["--config", str(host_path), "plan", "--current-version", "5.0.0"]
    )
    assert result.exit_code == 0, result.output
    assert "Nothing to do" in result.output


def test_startup_records_version(tmp_path):
    host_path = tmp_path / "host.yaml"
    _write_host(host_path, sections=["developer"])

    result = CliRunner().invoke(
        cli, ["--config", str(host_path), "startup", "--current-version", "5.0.0"]
    )
    assert result.exit_code == 0, result.output
    assert "Recorded version 5.0.0" in result.output

    data = yaml.safe_load(host_path.read_text(encoding="utf-8"))
    assert data["app_settings"]["Formulate:Version"] == "5.0.0"


def test_startup_exits_non_zero_on_fatal_failure(tmp_path):
    host_path = tmp_path / "host.json"
    host_path.write_text('{"sections": "broken"}', encoding="utf-8")

    result = CliRunner().invoke(
        cli, ["--config", str(host_path), "startup", "--current-version", "5.0.0"]
    )
    assert result.exit_code == 1
    assert "Setup failed" in result.output


def test_invalid_log_level_is_a_usage_error(tmp_path):
    result = CliRunner().invoke(
        cli, ["--config", str(tmp_path / "host.yaml"), "--log-level", "loud", "status"]
    )
    assert result.exit_code == 2
    assert "loud" in result.output


def test_log_level_is_case_insensitive(tmp_path):
    result = CliRunner().invoke(
        cli, ["--config", str(tmp_path / "host.yaml"), "--log-level", "debug", "status"]
    )
    assert result.exit_code == 0, result.output


def test_blank_current_version_is_a_usage_error(tmp_path):
    result = CliRunner().invoke(
        cli, ["--config", str(tmp_path / "host.yaml"), "plan", "--current-version", "  "]
    )
    assert result.exit_code == 2
    assert "must not be blank" in result.output
