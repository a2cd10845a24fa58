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
import subprocess

from sledgehammer.config.services import ServiceSpec
from sledgehammer.helpers.logger import setup_logger
from sledgehammer.platform.protocols import CommandResult

logger = setup_logger(__name__)


class DockerCLIRuntime:
    """`ContainerRuntime` backed by the docker command line client."""

    def __init__(self, docker_bin: str = "docker"):
        self.docker_bin = docker_bin

    def _run(self, *args: str) -> CommandResult:
        cmd = [self.docker_bin, *args]
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            proc = subprocess.run(
                cmd, capture_output=True, text=True, errors="replace", check=False
            )
        except FileNotFoundError as e:
            return CommandResult.failure(str(e), returncode=127)
        return CommandResult(
            returncode=proc.returncode,
            stdout=proc.stdout.strip(),
            stderr=proc.stderr.strip(),
        )

    def running_names(self) -> list[str]:
        res = self._run("ps", "--format", "{{.Names}}")
        if not res.ok:
            logger.debug(f"docker ps failed: {res.stderr}")
            return []
        return [line.strip() for line in res.stdout.splitlines() if line.strip()]

    def is_running(self, name: str) -> bool:
        return name in self.running_names()

    def container_exists(self, name: str) -> bool:
        # -a includes stopped containers, which still hold the name
        res = self._run("ps", "-a", "--filter", f"name=^/{name}$", "--format", "{{.Names}}")
        if not res.ok:
            logger.debug(f"docker ps -a failed: {res.stderr}")
            return False
        return name in [line.strip() for line in res.stdout.splitlines()]

    def stop_and_remove(self, name: str) -> CommandResult:
        return self._run("stop", name).merge(self._run("rm", name))

    def create_volume_if_absent(self, name: str) -> CommandResult:
        # `docker volume create` on an existing volume is a no-op success
        return self._run("volume", "create", name)

    def pull_image(self, image: str) -> CommandResult:
        return self._run("pull", image)

    def run_container(self, spec: ServiceSpec) -> CommandResult:
        return self._run(*run_args(spec))

    def container_status(self, name: str) -> str | None:
        res = self._run("ps", "--filter", f"name=^/{name}$", "--format", "{{.Status}}")
        if not res.ok or not res.stdout:
            return None
        return res.stdout.splitlines()[0].strip() or None


def run_args(spec: ServiceSpec) -> Sequence[str]:
    """Arguments after the docker binary that launch `spec` detached."""
    args = ["run", "-d", "--name", spec.container_name, "--restart", spec.restart]
    for port in spec.ports:
        args += ["-p", str(port)]
    for vol in spec.volumes:
        args += ["-v", str(vol)]
    args.append(spec.image)
    return args
