# Copyright 2025 iGenius S.p.A
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from typer.testing import CliRunner

from sledgehammer.cli.main import app
from sledgehammer.exceptions import PrivilegeError

CLI_MODPATH = "sledgehammer.cli.main"

runner = CliRunner()


def _deny():
    raise PrivilegeError(1000)


def test_non_root_exits_1_without_provisioning(mocker):
    mocker.patch(f"{CLI_MODPATH}.require_root", side_effect=_deny)
    prov_cls = mocker.patch(f"{CLI_MODPATH}.Provisioner")

    result = runner.invoke(app, [])

    assert result.exit_code == 1
    prov_cls.assert_not_called()


def test_root_runs_provisioner_and_exits_0(mocker, monkeypatch):
    monkeypatch.setenv("SUDO_USER", "alice")
    monkeypatch.setenv("SLEDGEHAMMER_DOCKER_BIN", "/opt/bin/docker")
    mocker.patch(f"{CLI_MODPATH}.require_root", return_value=None)
    prov_cls = mocker.patch(f"{CLI_MODPATH}.Provisioner")

    result = runner.invoke(app, [])

    assert result.exit_code == 0, result.output
    prov_cls.return_value.run.assert_called_once_with()
    kwargs = prov_cls.call_args.kwargs
    assert kwargs["user"] == "alice"
    assert kwargs["runtime"].docker_bin == "/opt/bin/docker"


def test_step_failures_do_not_change_exit_code(mocker, make_runtime, tmp_path, monkeypatch):
    monkeypatch.setenv("SLEDGEHAMMER_COMPOSE_PATH", str(tmp_path / "compose.yml"))
    monkeypatch.setenv("SLEDGEHAMMER_SETTLE_DELAY_S", "0")
    monkeypatch.setenv("SLEDGEHAMMER_WAIT_FOR_READY", "false")
    mocker.patch(f"{CLI_MODPATH}.require_root", return_value=None)
    mocker.patch(f"{CLI_MODPATH}.DockerCLIRuntime", return_value=make_runtime(fail_run=["PSU"]))
    host = mocker.patch(f"{CLI_MODPATH}.HostSystem").return_value
    host.primary_ip.return_value = "10.0.0.9"
    host.user_in_group.return_value = True
    host.command_exists.return_value = True
    host.service_active.return_value = True

    result = runner.invoke(app, [])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "compose.yml").is_file()


def test_rejects_arguments():
    result = runner.invoke(app, ["--force"])
    assert result.exit_code != 0
