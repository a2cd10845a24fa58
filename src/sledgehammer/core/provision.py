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

from collections.abc import Sequence
from functools import partial
import time
from typing import Callable

import jinja2
from rich.console import Console
from rich.markup import escape

from sledgehammer.config.services import DEFAULT_SERVICES, ServiceSpec
from sledgehammer.config.settings import Settings
from sledgehammer.core.installer import PortWaiter, install_all
from sledgehammer.exceptions import CommandError, ManifestError
from sledgehammer.helpers.logger import setup_logger
from sledgehammer.host.docker_install import DockerInstaller
from sledgehammer.host.system import HostSystem
from sledgehammer.manifest.compose import write_compose
from sledgehammer.platform.port_probe import wait_for_port
from sledgehammer.platform.protocols import ContainerRuntime
from sledgehammer.report.summary import ProvisionReport, collect_statuses, render_summary

logger = setup_logger(__name__)

DOCKER_GROUP = "docker"


class Provisioner:
    """Runs the whole install on this host, one step after another.

    Only the privilege check may abort; it happens before a Provisioner is
    built. Every later step reports its failure and lets the next one run.

    Typical flow:
    >>> prov = Provisioner(runtime=DockerCLIRuntime(), host=HostSystem(), settings=get_settings())
    >>> report = prov.run()
    """

    def __init__(
        self,
        *,
        runtime: ContainerRuntime,
        host: HostSystem,
        settings: Settings,
        installer: DockerInstaller | None = None,
        services: Sequence[ServiceSpec] = DEFAULT_SERVICES,
        user: str | None = None,
        console: Console | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.runtime = runtime
        self.host = host
        self.settings = settings
        self.installer = installer or DockerInstaller(host)
        self.services = list(services)
        self.user = user
        self.console = console or Console()
        self.sleep = sleep

    def _waiter(self) -> PortWaiter | None:
        if not self.settings.wait_for_ready:
            return None
        return partial(
            wait_for_port,
            max_attempts=self.settings.ready_max_attempts,
            poll_interval_s=self.settings.ready_poll_interval_s,
            sleep=self.sleep,
        )

    def ensure_runtime(self, report: ProvisionReport) -> None:
        try:
            report.runtime_installed = self.installer.ensure_installed()
            self.installer.ensure_running()
        except CommandError as e:
            report.runtime_error = str(e)
            logger.error(f"Docker installation failed: {escape(str(e))}")

    def grant_runtime_access(self, report: ProvisionReport) -> None:
        if not self.user:
            logger.debug("No invoking user found; skipping docker group setup")
            return
        if self.host.user_in_group(self.user, DOCKER_GROUP):
            return
        logger.info(f"Adding {self.user} to {DOCKER_GROUP} group...")
        try:
            self.host.add_user_to_group(self.user, DOCKER_GROUP)
        except CommandError as e:
            logger.error(f"Could not add {self.user} to {DOCKER_GROUP} group: {escape(str(e))}")
            return
        report.user_added_to_group = True
        report.needs_relogin = True
        logger.warning("You'll need to log out and back in for group changes to take effect")

    def write_manifest(self, report: ProvisionReport) -> None:
        path = self.settings.compose_path
        try:
            report.manifest_path = write_compose(self.services, path)
        except (OSError, jinja2.TemplateError, ManifestError) as e:
            logger.error(f"Could not write compose file to {path}: {escape(str(e))}")
            return
        self.console.print(
            f"You can use 'docker-compose -f {path} [command]' to manage all services",
            markup=False,
        )

    def run(self) -> ProvisionReport:
        report = ProvisionReport(user=self.user)

        self.ensure_runtime(report)
        self.grant_runtime_access(report)

        self.console.print()
        logger.info("Installing services...")
        report.services = install_all(self.runtime, self.services, waiter=self._waiter())

        # Give containers a moment to start before asking for their status
        self.sleep(self.settings.settle_delay_s)
        logger.info("Verifying all services...")
        report.statuses = collect_statuses(self.runtime, self.services)
        report.host_ip = self.host.primary_ip()
        render_summary(report, console=self.console, ascii=self.settings.ascii)

        if report.all_running:
            logger.info("[bold green]All services installed and running successfully!")
        else:
            logger.warning("Some services may not be running. Check the status above.")

        self.write_manifest(report)
        logger.info("[bold green]Installation complete!")

        if self.user and report.needs_relogin:
            logger.warning("Remember to log out and back in for docker group changes to take effect")
            logger.warning("This will allow you to run docker commands without sudo")
        return report
