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

from typing import Literal

from pydantic import BaseModel, Field, field_validator

RestartPolicy = Literal["no", "always", "unless-stopped", "on-failure"]


class PortMapping(BaseModel):
    host: int = Field(ge=1, le=65535)
    container: int = Field(ge=1, le=65535)

    def __str__(self) -> str:
        return f"{self.host}:{self.container}"


class VolumeBinding(BaseModel):
    """A named volume or a host path mounted into the container."""

    source: str
    target: str

    @property
    def is_named(self) -> bool:
        # Host paths are absolute; anything else is a runtime-managed volume
        return not self.source.startswith("/")

    def __str__(self) -> str:
        return f"{self.source}:{self.target}"


class ServiceSpec(BaseModel):
    """Everything needed to launch one application container and describe it afterwards.

    Attributes
    ----------
    key: str
        Service name used in the compose manifest.
    container_name: str
        Name given to the container by the runtime; also the idempotence key.
    access_scheme / access_port:
        Used to build the URL printed in the summary and the port polled for readiness.
    pull_first: bool
        Pull the image explicitly before running it.
    """

    key: str
    display_name: str
    container_name: str
    image: str
    ports: list[PortMapping]
    volumes: list[VolumeBinding]
    restart: RestartPolicy = "unless-stopped"
    access_scheme: Literal["http", "https"] = "http"
    access_port: int = Field(ge=1, le=65535)
    note: str | None = None
    pull_first: bool = False

    @field_validator("ports")
    @classmethod
    def _at_least_one_port(cls, v: list[PortMapping]) -> list[PortMapping]:
        if not v:
            raise ValueError("a service must publish at least one port")
        return v

    @property
    def named_volumes(self) -> list[str]:
        return [v.source for v in self.volumes if v.is_named]

    def access_url(self, host: str) -> str:
        return f"{self.access_scheme}://{host}:{self.access_port}"


PORTAINER = ServiceSpec(
    key="portainer",
    display_name="Portainer",
    container_name="portainer",
    image="portainer/portainer-ce:latest",
    ports=[PortMapping(host=8000, container=8000), PortMapping(host=9443, container=9443)],
    volumes=[
        VolumeBinding(source="/var/run/docker.sock", target="/var/run/docker.sock"),
        VolumeBinding(source="portainer_data", target="/data"),
    ],
    restart="always",
    access_scheme="https",
    access_port=9443,
    note="First access will prompt you to create an admin user",
)

POWERSHELL_UNIVERSAL = ServiceSpec(
    key="powershell-universal",
    display_name="PowerShell Universal",
    container_name="PSU",
    image="ironmansoftware/universal:latest",
    ports=[PortMapping(host=5000, container=5000)],
    volumes=[VolumeBinding(source="psu_data", target="/root")],
    restart="unless-stopped",
    access_port=5000,
    note="Default login: username 'admin' (set password on first login)",
)

RUNDECK = ServiceSpec(
    key="rundeck",
    display_name="Rundeck",
    container_name="rundeck",
    image="rundeck/rundeck:5.12.0",
    ports=[PortMapping(host=4440, container=4440)],
    volumes=[VolumeBinding(source="rundeck_data", target="/home/rundeck/server/data")],
    restart="unless-stopped",
    access_port=4440,
    note="Default credentials: username 'admin', password 'admin'",
    pull_first=True,
)

DEFAULT_SERVICES: tuple[ServiceSpec, ...] = (PORTAINER, POWERSHELL_UNIVERSAL, RUNDECK)
