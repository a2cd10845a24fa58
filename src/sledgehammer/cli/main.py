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

import typer
from rich.console import Console
from rich.rule import Rule

from ..backends.docker_cli import DockerCLIRuntime
from ..config.settings import get_settings
from ..core.provision import Provisioner
from ..exceptions import PrivilegeError
from ..helpers.logger import setup_logger
from ..host.system import HostSystem, invoking_user, require_root

app = typer.Typer(name="sledgehammer", add_completion=False)

console = Console()
logger = setup_logger("sledgehammer.cli", console=console)


def _banner() -> None:
    console.print(Rule("[bold]Docker Services Installation Script", style="cyan"))
    console.print("Installing: Portainer, PowerShell Universal, and Rundeck", justify="center")
    console.print(Rule(style="cyan"))
    console.print()


@app.command(help="Install Docker plus Portainer, PowerShell Universal and Rundeck on this host.")
def install() -> None:
    """
    Provision this host.

    Needs root. Individual step failures are reported but never change the
    exit status; only a missing privilege exits non-zero.
    """
    _banner()
    try:
        require_root()
    except PrivilegeError as e:
        logger.error(str(e))
        raise typer.Exit(code=1)

    settings = get_settings()
    provisioner = Provisioner(
        runtime=DockerCLIRuntime(settings.docker_bin),
        host=HostSystem(),
        settings=settings,
        user=invoking_user(),
        console=console,
    )
    provisioner.run()


if __name__ == "__main__":
    app()
