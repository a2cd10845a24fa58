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

from collections.abc import Mapping, Sequence
import os
import shutil
import subprocess
from typing import Callable

from sledgehammer.exceptions import CommandError, PrivilegeError
from sledgehammer.helpers.logger import setup_logger

logger = setup_logger(__name__)

FALLBACK_IP = "127.0.0.1"


def run_checked(cmd: Sequence[str], *, input: str | None = None) -> str:
    """Run `cmd`, returning stripped stdout; raise CommandError on a nonzero exit."""
    logger.debug(f"Running: {' '.join(cmd)}")
    try:
        proc = subprocess.run(
            list(cmd), input=input, capture_output=True, text=True, errors="replace"
        )
    except FileNotFoundError as e:
        raise CommandError(cmd, 127, str(e)) from e
    if proc.returncode != 0:
        raise CommandError(cmd, proc.returncode, proc.stderr)
    return proc.stdout.strip()


def require_root(geteuid: Callable[[], int] = os.geteuid) -> None:
    euid = geteuid()
    if euid != 0:
        raise PrivilegeError(euid)


def invoking_user(environ: Mapping[str, str] | None = None) -> str | None:
    """The account that called sudo, or the current one when not under sudo."""
    env = os.environ if environ is None else environ
    return env.get("SUDO_USER") or env.get("USER") or None


class HostSystem:
    """Read and change host state the provisioning flow depends on."""

    def command_exists(self, name: str) -> bool:
        return shutil.which(name) is not None

    def primary_ip(self) -> str:
        try:
            out = run_checked(["hostname", "-I"])
        except CommandError as e:
            logger.debug(f"Could not read host addresses: {e}")
            return FALLBACK_IP
        parts = out.split()
        return parts[0] if parts else FALLBACK_IP

    def user_in_group(self, user: str, group: str) -> bool:
        try:
            return group in run_checked(["id", "-nG", user]).split()
        except CommandError as e:
            logger.debug(f"Could not read groups for {user}: {e}")
            return False

    def add_user_to_group(self, user: str, group: str) -> None:
        run_checked(["usermod", "-aG", group, user])

    def service_active(self, unit: str) -> bool:
        try:
            run_checked(["systemctl", "is-active", "--quiet", unit])
        except CommandError:
            return False
        return True

    def start_service(self, unit: str) -> None:
        run_checked(["systemctl", "start", unit])

    def enable_service(self, unit: str) -> None:
        run_checked(["systemctl", "enable", unit])
