import pytest

from jackbar import config
from jackbar.devices.base import DeviceSnapshot, SoundDevice


class FakeWatcher:
    def __init__(self, identity, dispatcher):
        self.identity = identity
        self.dispatcher = dispatcher
        self.started = False
        self.stopped = False

    def start(self):
        self.started = True
        self.dispatcher.request(self.identity)

    async def stop(self):
        self.stopped = True


class FakeDevice(SoundDevice):
    """Replays queued snapshots (or raises queued exceptions) on refresh."""

    def __init__(self, *results):
        super().__init__()
        self.results = list(results)
        self.created_watchers = []

    def read_snapshot(self):
        result = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        if isinstance(result, Exception):
            raise result
        return result

    def watchers(self, identity, dispatcher):
        self.created_watchers = [FakeWatcher(identity, dispatcher)]
        return self.created_watchers


@pytest.fixture
def fake_device():
    return FakeDevice(DeviceSnapshot(volume=55))


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch, tmp_path):
    """Isolate every test from real config files."""
    monkeypatch.setenv("JACKBAR_CONFIG", str(tmp_path / "missing.json"))
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(config, "_config", None)
    yield
    config._config = None
