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

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from rich.box import HEAVY
from rich.console import Console, Group
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from sledgehammer.config.services import ServiceSpec
from sledgehammer.core.installer import ServiceInstallResult
from sledgehammer.platform.protocols import ContainerRuntime
from sledgehammer.report.theme import STATE_LABEL, state_glyph, state_style

USEFUL_COMMANDS = (
    ("View all running containers:", "docker ps"),
    ("View container logs:", "docker logs <container-name>"),
    ("Stop a container:", "docker stop <container-name>"),
    ("Start a container:", "docker start <container-name>"),
    ("Remove a container:", "docker rm <container-name>"),
)


@dataclass
class ProvisionReport:
    """Everything the final summary needs, gathered while provisioning."""

    services: list[ServiceInstallResult] = field(default_factory=list)
    statuses: dict[str, str | None] = field(default_factory=dict)
    host_ip: str = "127.0.0.1"
    user: str | None = None
    runtime_installed: bool = False
    runtime_error: str | None = None
    user_added_to_group: bool = False
    needs_relogin: bool = False
    manifest_path: Path | None = None

    @property
    def all_running(self) -> bool:
        return bool(self.services) and all(
            self.statuses.get(r.spec.key) for r in self.services
        )


def collect_statuses(
    runtime: ContainerRuntime, specs: Iterable[ServiceSpec]
) -> dict[str, str | None]:
    """Ask the runtime for each container's status line; empty answers become None."""
    return {spec.key: runtime.container_status(spec.container_name) or None for spec in specs}


def _kv_table() -> Table:
    t = Table.grid(padding=(0, 1))
    t.add_column("Field", style="bold dim", no_wrap=True, justify="right")
    t.add_column("Value", overflow="fold")
    return t


def state_badge(state: str, *, ascii: bool = False) -> Text:
    t = Text(f"{state_glyph(state, ascii=ascii)} {STATE_LABEL[state]}")
    t.stylize(state_style(state))
    return t


def _service_block(
    spec: ServiceSpec, status: str | None, host_ip: str, *, ascii: bool
) -> Table:
    t = _kv_table()
    if status:
        line = Text.assemble(state_badge("RUNNING", ascii=ascii), " - ", status)
        t.add_row(spec.display_name, line)
        url = spec.access_url(host_ip)
        t.add_row("Access URL", Text(url, style=f"link {url}"))
        if spec.note:
            t.add_row("Note", spec.note)
    else:
        t.add_row(spec.display_name, state_badge("NOT_RUNNING", ascii=ascii))
    return t


def _commands_table() -> Table:
    t = Table(title="Useful Commands", box=HEAVY, title_style="bold cyan", expand=False)
    t.add_column("Action", style="dim")
    t.add_column("Command", style="bold")
    for action, command in USEFUL_COMMANDS:
        t.add_row(action, command)
    return t


def render_summary(
    report: ProvisionReport,
    *,
    console: Console | None = None,
    ascii: bool = False,
) -> None:
    """Print the installation summary: one block per service, then handy docker commands.

    A service counts as running when the runtime reported a non-empty status
    for it; anything else is shown as "Not Running".
    """
    console = console or Console()

    blocks: list = []
    for result in report.services:
        spec = result.spec
        blocks.append(
            _service_block(spec, report.statuses.get(spec.key), report.host_ip, ascii=ascii)
        )
        blocks.append(Text())

    panel = Panel(
        Group(Rule(Text("Installation Summary", style="bold bright_cyan"), style="cyan"), *blocks),
        title="[b cyan]sledgehammer[/]",
        subtitle=report.host_ip,
        border_style="cyan",
        padding=(1, 2),
        box=HEAVY,
        expand=True,
    )
    console.print(panel)
    console.print(_commands_table())
