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

from pathlib import Path

from sledgehammer.helpers.logger import setup_logger
from sledgehammer.host.system import HostSystem, run_checked

logger = setup_logger(__name__)

DOCKER_GPG_URL = "https://download.docker.com/linux/ubuntu/gpg"
DOCKER_REPO_URL = "https://download.docker.com/linux/ubuntu"
KEYRING_PATH = Path("/usr/share/keyrings/docker-archive-keyring.gpg")
SOURCES_LIST_PATH = Path("/etc/apt/sources.list.d/docker.list")

PREREQUISITES = ("apt-transport-https", "ca-certificates", "curl", "software-properties-common")
DOCKER_PACKAGES = ("docker-ce", "docker-ce-cli", "containerd.io")


class DockerInstaller:
    """Install Docker from the upstream apt repository and keep the daemon running."""

    def __init__(
        self,
        host: HostSystem,
        *,
        keyring_path: Path = KEYRING_PATH,
        sources_list_path: Path = SOURCES_LIST_PATH,
    ):
        self.host = host
        self.keyring_path = keyring_path
        self.sources_list_path = sources_list_path

    def repo_line(self, arch: str, codename: str) -> str:
        return (
            f"deb [arch={arch} signed-by={self.keyring_path}] "
            f"{DOCKER_REPO_URL} {codename} stable"
        )

    def ensure_installed(self) -> bool:
        """Install Docker if the CLI is missing. Returns True when an install happened.

        Raises:
            CommandError: any installation step failed.
        """
        logger.info("Checking for Docker installation...")
        if self.host.command_exists("docker"):
            logger.info("Docker is already installed")
            return False

        logger.info("Docker not found. Installing Docker...")
        run_checked(["apt", "update", "-y"])
        run_checked(["apt", "install", "-y", *PREREQUISITES])

        key = run_checked(["curl", "-fsSL", DOCKER_GPG_URL])
        self.keyring_path.parent.mkdir(parents=True, exist_ok=True)
        run_checked(["gpg", "--batch", "--yes", "--dearmor", "-o", str(self.keyring_path)], input=key)

        arch = run_checked(["dpkg", "--print-architecture"])
        codename = run_checked(["lsb_release", "-cs"])
        self.sources_list_path.parent.mkdir(parents=True, exist_ok=True)
        self.sources_list_path.write_text(self.repo_line(arch, codename) + "\n")

        run_checked(["apt", "update", "-y"])
        run_checked(["apt", "install", "-y", *DOCKER_PACKAGES])

        self.host.start_service("docker")
        self.host.enable_service("docker")
        logger.info("[bold green]Docker installed successfully!")
        return True

    def ensure_running(self) -> None:
        if not self.host.service_active("docker"):
            logger.info("Starting Docker service...")
            self.host.start_service("docker")
