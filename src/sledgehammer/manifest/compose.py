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
from pathlib import Path
from typing import Any

import jinja2
import yaml

from sledgehammer.config.services import ServiceSpec
from sledgehammer.exceptions import ManifestError
from sledgehammer.helpers.logger import setup_logger

logger = setup_logger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
TEMPLATE_NAME = "compose.yml.j2"


def _external_volumes(specs: list[ServiceSpec]) -> list[str]:
    seen: list[str] = []
    for spec in specs:
        for vol in spec.named_volumes:
            if vol not in seen:
                seen.append(vol)
    return seen


def render_compose(specs: Iterable[ServiceSpec]) -> str:
    """Render a compose file describing `specs` with the same literals used by `docker run`.

    Named volumes are declared external, since they are created before the
    containers and not owned by the compose project.
    """
    specs = list(specs)
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(TEMPLATE_DIR),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=jinja2.StrictUndefined,
    )
    return env.get_template(TEMPLATE_NAME).render(
        services=specs,
        volumes=_external_volumes(specs),
    )


def check_compose(text: str, specs: Iterable[ServiceSpec]) -> dict[str, Any]:
    """Parse rendered compose text and make sure it declares exactly `specs`.

    Raises:
        ManifestError: the text is not valid YAML or its services and
            external volumes do not match the descriptors.
    """
    specs = list(specs)
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ManifestError(f"Rendered compose file is not valid YAML: {e}") from e
    if not isinstance(data, dict):
        raise ManifestError("Rendered compose file is not a mapping")

    declared = list((data.get("services") or {}).keys())
    expected = [spec.key for spec in specs]
    if declared != expected:
        raise ManifestError(f"Compose file declares services {declared}, expected {expected}")

    volumes = data.get("volumes") or {}
    if not isinstance(volumes, dict):
        raise ManifestError("Compose volumes section is not a mapping")
    for vol in _external_volumes(specs):
        if not (volumes.get(vol) or {}).get("external"):
            raise ManifestError(f"Volume {vol} is not declared external")
    return data


def write_compose(specs: Iterable[ServiceSpec], path: Path) -> Path:
    logger.info("Creating docker-compose.yml for easier management...")
    specs = list(specs)
    text = render_compose(specs)
    check_compose(text, specs)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    logger.info(f"Docker Compose file created at: {path}")
    return path
