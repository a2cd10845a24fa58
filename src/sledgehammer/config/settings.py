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

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized environment configuration for sledgehammer.

    Env var naming: SLEDGEHAMMER_<FIELD_NAME>.
    A .env file in CWD is read automatically.
    """

    model_config = SettingsConfigDict(
        env_prefix="SLEDGEHAMMER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # --- General -------------------------------------------------------------
    log_level: str = "INFO"
    docker_bin: str = Field(
        default="docker",
        description="Container runtime CLI used for every container operation",
    )  # SLEDGEHAMMER_DOCKER_BIN

    # --- Manifest ------------------------------------------------------------
    compose_path: Path = Field(
        default=Path("/opt/docker-services-compose.yml"),
        description="Where the compose manifest mirroring the installed services is written",
    )  # SLEDGEHAMMER_COMPOSE_PATH

    # --- Readiness -----------------------------------------------------------
    wait_for_ready: bool = Field(
        default=True,
        description="Poll each service port after a successful launch",
    )  # SLEDGEHAMMER_WAIT_FOR_READY
    ready_max_attempts: int = Field(default=30, ge=1)
    ready_poll_interval_s: float = Field(default=2.0, gt=0)

    # --- Summary -------------------------------------------------------------
    settle_delay_s: float = Field(
        default=5.0,
        ge=0,
        description="Seconds to let containers start before querying their status",
    )  # SLEDGEHAMMER_SETTLE_DELAY_S
    ascii: bool = Field(
        default=False,
        description="Use ASCII glyphs instead of Unicode symbols in the summary",
    )  # SLEDGEHAMMER_ASCII


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Cached accessor. Call this wherever you need settings.
    Tests can `cache_clear()` before reading to pick up monkeypatched env.
    """
    return Settings()


def reload_settings_cache() -> None:
    get_settings.cache_clear()  # type: ignore[attr-defined]
