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

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Callable

from rich.markup import escape

from sledgehammer.config.services import ServiceSpec
from sledgehammer.exceptions import SledgehammerError
from sledgehammer.helpers.logger import setup_logger
from sledgehammer.platform.protocols import CommandResult, ContainerRuntime

logger = setup_logger(__name__)

# (port, label) -> ready?
PortWaiter = Callable[[int, str], bool]


@dataclass
class ServiceInstallResult:
    """What happened while installing one service; fed to the summary."""

    spec: ServiceSpec
    launch: CommandResult
    replaced: bool = False
    cleanup: CommandResult | None = None
    pull: CommandResult | None = None
    volumes: dict[str, CommandResult] | None = None
    ready: bool | None = None  # None: not checked

    @property
    def ok(self) -> bool:
        return self.launch.ok


def install_service(
    runtime: ContainerRuntime,
    spec: ServiceSpec,
    *,
    waiter: PortWaiter | None = None,
) -> ServiceInstallResult:
    """Replace any existing `spec.container_name` container, running or stopped, with a fresh one.

    Stopping and removing the old container is best-effort: its result is
    logged and kept on the returned record but never fails the install.
    """
    name = spec.display_name
    logger.info(f"Installing {name}...")

    replaced = False
    cleanup = None
    if runtime.container_exists(spec.container_name):
        state = "" if runtime.is_running(spec.container_name) else " (stopped)"
        logger.warning(f"{name} container already exists{state}. Removing old container...")
        cleanup = runtime.stop_and_remove(spec.container_name)
        replaced = True
        if not cleanup.ok:
            logger.debug(f"Ignoring cleanup failure for {spec.container_name}: {cleanup.stderr}")

    pull = None
    if spec.pull_first:
        logger.info(f"Pulling {name} image...")
        pull = runtime.pull_image(spec.image)
        if not pull.ok:
            logger.debug(f"Pull of {spec.image} failed, docker run will retry: {pull.stderr}")

    volumes = {vol: runtime.create_volume_if_absent(vol) for vol in spec.named_volumes}
    for vol, res in volumes.items():
        if not res.ok:
            logger.debug(f"Volume {vol} could not be created: {res.stderr}")

    launch = runtime.run_container(spec)
    result = ServiceInstallResult(
        spec=spec,
        launch=launch,
        replaced=replaced,
        cleanup=cleanup,
        pull=pull,
        volumes=volumes,
    )
    if not launch.ok:
        detail = f": {escape(launch.stderr)}" if launch.stderr else ""
        logger.error(f"Failed to install {name}{detail}")
        return result

    logger.info(f"[bold green]{name} installed successfully!")
    if waiter is not None:
        result.ready = waiter(spec.access_port, name)
    return result


def install_all(
    runtime: ContainerRuntime,
    specs: Iterable[ServiceSpec],
    *,
    waiter: PortWaiter | None = None,
) -> list[ServiceInstallResult]:
    """Install every service in order; a failure is recorded against that service only."""
    results = []
    for spec in specs:
        try:
            results.append(install_service(runtime, spec, waiter=waiter))
        except (SledgehammerError, OSError) as e:
            logger.error(f"Failed to install {spec.display_name}: {escape(str(e))}")
            results.append(ServiceInstallResult(spec=spec, launch=CommandResult.failure(str(e))))
    return results
