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

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler


def _level_from_settings() -> int:
    from sledgehammer.config.settings import get_settings

    level = logging.getLevelName(get_settings().log_level.upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logger(
    name: str = "sledgehammer",
    level: int | None = None,
    console: Console | None = None,
    to_stderr: bool = False,
) -> logging.Logger:
    """Return a rich-backed logger; INFO and below on stdout, warnings and errors on stderr.

    Calling it again for a name that already has handlers returns the same
    logger untouched.
    """
    machine_mode = not sys.stdout.isatty()
    to_stderr = to_stderr or machine_mode

    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    if level is None:
        level = _level_from_settings()
    logger.setLevel(level)
    logger.propagate = False  # Avoid duplicate logs

    stdout_console = console or Console()
    stderr_console = Console(stderr=True)

    if to_stderr:
        logger.addHandler(
            RichHandler(
                level=level,
                console=stderr_console,
                rich_tracebacks=True,
                markup=True,
                show_time=False,
                show_level=True,
                show_path=False,
            )
        )
        return logger

    stdout_handler = RichHandler(
        level=logging.DEBUG,
        console=stdout_console,
        rich_tracebacks=False,
        markup=True,
        show_time=False,
        show_level=True,
        show_path=False,
    )
    stdout_handler.addFilter(lambda record: record.levelno <= logging.INFO)

    # [WARNING] and [ERROR] lines go to stderr
    stderr_handler = RichHandler(
        level=logging.WARNING,
        console=stderr_console,
        rich_tracebacks=True,
        markup=True,
        show_time=False,
        show_level=True,
        show_path=False,
    )

    logger.addHandler(stdout_handler)
    logger.addHandler(stderr_handler)

    return logger
