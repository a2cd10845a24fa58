from sledgehammer.config.services import DEFAULT_SERVICES, PORTAINER, POWERSHELL_UNIVERSAL, RUNDECK
from sledgehammer.core.installer import install_all, install_service
from sledgehammer.exceptions import SledgehammerError


def test_fresh_install_creates_volumes_and_runs(fake_runtime):
    res = install_service(fake_runtime, PORTAINER)

    assert res.ok
    assert res.replaced is False
    assert res.cleanup is None
    # The docker socket is a bind mount, not a volume
    assert fake_runtime.volumes == {"portainer_data"}
    assert fake_runtime.containers == {"portainer": "Up 1 second"}


def test_install_twice_leaves_exactly_one_container(fake_runtime):
    first = install_service(fake_runtime, POWERSHELL_UNIVERSAL)
    second = install_service(fake_runtime, POWERSHELL_UNIVERSAL)

    assert first.ok and second.ok
    assert second.replaced is True
    assert second.cleanup is not None and second.cleanup.ok
    assert list(fake_runtime.containers) == ["PSU"]
    assert [c for c in fake_runtime.calls if c[0] == "run"] == [("run", "PSU"), ("run", "PSU")]


def test_cleanup_failure_does_not_stop_install(make_runtime, mocker):
    rt = make_runtime()
    mocker.patch.object(rt, "container_exists", return_value=True)

    res = install_service(rt, RUNDECK)

    assert res.replaced is True
    assert not res.cleanup.ok
    assert res.ok


def test_stopped_container_is_replaced(make_runtime):
    rt = make_runtime()
    assert install_service(rt, POWERSHELL_UNIVERSAL).ok
    rt.stop("PSU")

    res = install_service(rt, POWERSHELL_UNIVERSAL)

    assert res.ok, res.launch.stderr
    assert res.replaced is True
    assert rt.containers == {"PSU": "Up 1 second"}
    assert rt.stopped == set()


def test_pull_first_only_for_rundeck(fake_runtime):
    install_service(fake_runtime, RUNDECK)
    install_service(fake_runtime, PORTAINER)

    assert fake_runtime.images == {"rundeck/rundeck:5.12.0"}


def test_order_is_cleanup_volume_run(make_runtime):
    rt = make_runtime(running=["rundeck"])
    install_service(rt, RUNDECK)

    kinds = [c[0] for c in rt.calls]
    assert kinds == ["exists", "is_running", "stop_and_remove", "pull", "create_volume", "run"]


def test_failed_launch_is_recorded_and_skips_waiter(make_runtime):
    rt = make_runtime(fail_run=["PSU"])
    waited = []

    res = install_service(rt, POWERSHELL_UNIVERSAL, waiter=lambda p, l: waited.append(p) or True)

    assert not res.ok
    assert res.launch.returncode == 125
    assert res.ready is None
    assert waited == []


def test_waiter_called_with_access_port(fake_runtime):
    seen = []

    def waiter(port, label):
        seen.append((port, label))
        return False

    res = install_service(fake_runtime, PORTAINER, waiter=waiter)

    assert seen == [(9443, "Portainer")]
    assert res.ready is False


def test_failure_in_one_service_does_not_block_others(make_runtime):
    rt = make_runtime(fail_run=["portainer"])

    results = install_all(rt, DEFAULT_SERVICES)

    assert [r.ok for r in results] == [False, True, True]
    assert set(rt.containers) == {"PSU", "rundeck"}


def test_adapter_exception_is_isolated(make_runtime, mocker):
    rt = make_runtime()
    original = rt.run_container

    def flaky(spec):
        if spec.container_name == "PSU":
            raise SledgehammerError("daemon went away")
        return original(spec)

    mocker.patch.object(rt, "run_container", side_effect=flaky)

    results = install_all(rt, DEFAULT_SERVICES)

    assert [r.ok for r in results] == [True, False, True]
    assert "daemon went away" in results[1].launch.stderr
