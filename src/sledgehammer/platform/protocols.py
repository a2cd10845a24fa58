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

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from sledgehammer.config.services import ServiceSpec


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one call against the container runtime or the host.

    A nonzero exit is data, not an exception: callers decide whether it matters.
    """

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @classmethod
    def success(cls, stdout: str = "") -> "CommandResult":
        return cls(returncode=0, stdout=stdout)

    @classmethod
    def failure(cls, stderr: str, returncode: int = 1) -> "CommandResult":
        return cls(returncode=returncode, stderr=stderr)

    def merge(self, other: "CommandResult") -> "CommandResult":
        """Combine two sequential steps; the first failing exit code wins."""
        return CommandResult(
            returncode=self.returncode or other.returncode,
            stdout="\n".join(s for s in (self.stdout, other.stdout) if s),
            stderr="\n".join(s for s in (self.stderr, other.stderr) if s),
        )


@runtime_checkable
class ContainerRuntime(Protocol):
    """Operations the provisioning flow needs from a container runtime.

    The core installer depends only on this; `DockerCLIRuntime` is the
    production implementation and tests supply an in-memory fake.
    """

    def is_running(self, name: str) -> bool: ...

    def container_exists(self, name: str) -> bool: ...

    def stop_and_remove(self, name: str) -> CommandResult: ...

    def create_volume_if_absent(self, name: str) -> CommandResult: ...

    def pull_image(self, image: str) -> CommandResult: ...

    def run_container(self, spec: ServiceSpec) -> CommandResult: ...

    def container_status(self, name: str) -> str | None: ...
