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

import pytest

from sledgehammer.platform.protocols import CommandResult


class FakeRuntime:
    """In-memory container runtime: containers by name, volumes, and a call log.

    Names in `stopped` exist but are not running, like after `docker stop`.
    """

    def __init__(self, fail_run=(), running=(), stopped=()):
        self.containers: dict[str, str] = {name: "Up 3 hours" for name in running}
        self.containers.update({name: "" for name in stopped})
        self.stopped: set[str] = set(stopped)
        self.volumes: set[str] = set()
        self.images: set[str] = set()
        self.fail_run = set(fail_run)
        self.calls: list[tuple] = []

    def is_running(self, name):
        self.calls.append(("is_running", name))
        return name in self.containers and name not in self.stopped

    def container_exists(self, name):
        self.calls.append(("exists", name))
        return name in self.containers

    def stop(self, name):
        self.stopped.add(name)
        self.containers[name] = ""

    def stop_and_remove(self, name):
        self.calls.append(("stop_and_remove", name))
        self.stopped.discard(name)
        if self.containers.pop(name, None) is None:
            return CommandResult.failure(f"No such container: {name}")
        return CommandResult.success(name)

    def create_volume_if_absent(self, name):
        self.calls.append(("create_volume", name))
        self.volumes.add(name)
        return CommandResult.success(name)

    def pull_image(self, image):
        self.calls.append(("pull", image))
        self.images.add(image)
        return CommandResult.success()

    def run_container(self, spec):
        self.calls.append(("run", spec.container_name))
        if spec.container_name in self.fail_run:
            return CommandResult.failure("simulated launch failure", returncode=125)
        if spec.container_name in self.containers:
            return CommandResult.failure(
                f'Conflict. The container name "/{spec.container_name}" is already in use',
                returncode=125,
            )
        self.containers[spec.container_name] = "Up 1 second"
        return CommandResult.success("deadbeef")

    def container_status(self, name):
        self.calls.append(("status", name))
        if name in self.stopped:
            return None
        return self.containers.get(name)


@pytest.fixture
def fake_runtime():
    return FakeRuntime()


@pytest.fixture
def make_runtime():
    return FakeRuntime


@pytest.fixture(autouse=True)
def clear_settings_cache_between_tests():
    from sledgehammer.config.settings import reload_settings_cache

    reload_settings_cache()
    yield
    reload_settings_cache()
