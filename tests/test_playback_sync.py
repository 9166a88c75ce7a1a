from dataclasses import dataclass, field

from music_player.playback.sync import PlaybackSynchronizer, TransportEvent


@dataclass
class _FakeTransport:
    current_time: float = 0.0
    paused: bool = True
    seeks: list[float] = field(default_factory=list)

    def play(self) -> None:
        self.paused = False

    def pause(self) -> None:
        self.paused = True

    def seek(self, time: float) -> None:
        self.seeks.append(time)
        self.current_time = time


def test_drift_within_threshold_does_not_reseek() -> None:
    primary = _FakeTransport(current_time=10.0, paused=False)
    secondary = _FakeTransport(current_time=10.08, paused=False)
    sync = PlaybackSynchronizer(primary, secondary, drift_threshold=0.1)

    assert not sync.handle(TransportEvent.TIME_UPDATE)
    assert secondary.seeks == []


def test_drift_beyond_threshold_reseeks_secondary() -> None:
    primary = _FakeTransport(current_time=10.0, paused=False)
    secondary = _FakeTransport(current_time=9.7, paused=False)
    sync = PlaybackSynchronizer(primary, secondary, drift_threshold=0.1)

    assert sync.handle(TransportEvent.SEEKING)
    assert secondary.seeks == [10.0]
    assert sync.drift() == 0.0


def test_secondary_mirrors_play_and_pause() -> None:
    primary = _FakeTransport()
    secondary = _FakeTransport()
    sync = PlaybackSynchronizer(primary, secondary)

    primary.play()
    sync.handle(TransportEvent.PLAY)
    assert not secondary.paused

    primary.pause()
    sync.handle(TransportEvent.PAUSE)
    assert secondary.paused


def test_hidden_page_pauses_secondary_and_resyncs_on_return() -> None:
    primary = _FakeTransport(current_time=1.0, paused=False)
    secondary = _FakeTransport(current_time=1.0, paused=False)
    sync = PlaybackSynchronizer(primary, secondary)

    sync.set_page_visible(False)
    assert secondary.paused

    primary.current_time = 6.0
    assert not sync.handle(TransportEvent.TIME_UPDATE)
    assert secondary.paused
    assert secondary.seeks == []

    assert sync.set_page_visible(True)
    assert secondary.current_time == 6.0
    assert not secondary.paused
