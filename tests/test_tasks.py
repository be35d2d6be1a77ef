"""Task pool tests."""

import threading

from udprelay.tasks import TaskPool


def test_spawn_runs_on_daemon_thread():
    seen = {}
    done = threading.Event()

    def work(value):
        seen["value"] = value
        seen["daemon"] = threading.current_thread().daemon
        done.set()

    pool = TaskPool("unit")
    task = pool.spawn(work, 42, name="work")
    assert done.wait(2.0)
    assert task.join(2.0)
    assert seen == {"value": 42, "daemon": True}
    assert task.name == "unit-work-1"
    assert "finished" in repr(task)


def test_alive_lists_running_tasks():
    release = threading.Event()
    pool = TaskPool()
    running = pool.spawn(release.wait)
    finished = pool.spawn(lambda: None)
    finished.join(2.0)
    assert pool.alive() == [running]
    release.set()
    assert running.join(2.0)
    assert pool.alive() == []
