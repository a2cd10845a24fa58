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

import socket
import time
from typing import Callable

from sledgehammer.helpers.logger import setup_logger

logger = setup_logger(__name__)

DEFAULT_MAX_ATTEMPTS = 30
DEFAULT_POLL_INTERVAL_S = 2.0
CONNECT_TIMEOUT_S = 1.0


def tcp_connect(host: str, port: int, timeout: float = CONNECT_TIMEOUT_S) -> None:
    """Open and immediately close a TCP connection; raises OSError when nobody answers."""
    with socket.create_connection((host, port), timeout=timeout):
        pass


def wait_for_port(
    port: int,
    label: str,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    poll_interval_s: float = DEFAULT_POLL_INTERVAL_S,
    host: str = "localhost",
    connect_timeout_s: float = CONNECT_TIMEOUT_S,
    now: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
    connect: Callable[[str, int, float], None] = tcp_connect,
) -> bool:
    """Poll `host:port` until a TCP connect succeeds, giving up after `max_attempts` connects.

    The whole wait, connects included, stays within `max_attempts * poll_interval_s`
    seconds of wall-clock time: each connect timeout is capped by the time left.
    Refused and timed-out connects are treated the same. Running out of
    attempts or time is reported as a warning and a False return, never raised.
    """
    if not 1 <= port <= 65535:
        raise ValueError(f"Port must be in 1-65535, got {port}")
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be positive, got {max_attempts}")
    if poll_interval_s <= 0:
        raise ValueError(f"poll_interval_s must be positive, got {poll_interval_s}")

    logger.info(f"Waiting for {label} to be ready on port {port}...")
    deadline = now() + max_attempts * poll_interval_s
    attempt = 1
    while True:
        timeout = min(connect_timeout_s, deadline - now())
        if timeout <= 0:
            break
        try:
            connect(host, port, timeout)
        except OSError as e:
            logger.debug(f"{label}: attempt {attempt}/{max_attempts} on port {port} failed: {e}")
            remaining = deadline - now()
            if attempt >= max_attempts or remaining <= 0:
                break
            sleep(min(poll_interval_s, remaining))
            attempt += 1
            continue
        logger.info(f"[bold green]{label} is ready!")
        return True

    logger.warning(f"{label} may not be fully ready yet. You can check manually.")
    return False
