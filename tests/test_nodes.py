import math

import pytest

from synthie.nodes import AttackRelease, AudioNode, SineWave


class ConstantNode(AudioNode):
    def __init__(self, value):
        super().__init__()
        self.value = value
        self.started = False

    def start(self):
        self.started = True

    def generate(self):
        self.frame = (self.value, -self.value)
        return True


def test_audio_node_is_abstract():
    with pytest.raises(TypeError):
        AudioNode()


def test_sample_rate_updates_period():
    wave = SineWave(freq=440, amplitude=0.1)
    wave.sample_rate = 8000
    assert wave.sample_rate == 8000
    assert wave.sample_period == pytest.approx(1 / 8000)


def test_default_sample_rate_is_44100():
    wave = SineWave(freq=440, amplitude=0.1)
    assert wave.sample_rate == 44100
    assert wave.sample_period == pytest.approx(1 / 44100)
    assert wave.frame == (0.0, 0.0)


def test_sine_wave_quarter_rate_pattern():
    wave = SineWave(freq=1000, amplitude=0.5)
    wave.sample_rate = 4000
    wave.start()
    samples = []
    for _ in range(4):
        assert wave.generate() is True
        samples.append(wave.frame[0])
    assert samples == pytest.approx([0.0, 0.5, 0.0, -0.5], abs=1e-12)


def test_sine_wave_channels_equal_and_bounded():
    wave = SineWave(freq=440, amplitude=0.3)
    wave.start()
    for _ in range(500):
        wave.generate()
        left, right = wave.frame
        assert left == right
        assert abs(left) <= 0.3 + 1e-12


def test_sine_wave_restart_repeats_output():
    wave = SineWave(freq=330, amplitude=0.2)
    wave.start()
    first = []
    for _ in range(50):
        wave.generate()
        first.append(wave.frame)
    wave.start()
    second = []
    for _ in range(50):
        wave.generate()
        second.append(wave.frame)
    assert any(frame[0] != 0 for frame in first)
    assert first == second


def _run_envelope(value):
    source = ConstantNode(value)
    env = AttackRelease(source, duration=2.0, attack=0.5, release=0.5)
    env.sample_rate = 4
    env.start()
    frames = []
    while True:
        more = env.generate()
        frames.append(env.frame)
        if not more:
            break
    return source, env, frames


def test_envelope_propagates_sample_rate_and_starts_source():
    source, env, _ = _run_envelope(1.0)
    assert source.started
    assert source.sample_rate == env.sample_rate


def test_envelope_frame_count_matches_duration():
    _, _, frames = _run_envelope(1.0)
    assert len(frames) == 8


def test_envelope_shape():
    value = 0.8
    _, _, frames = _run_envelope(value)
    left = [f[0] for f in frames]
    right = [f[1] for f in frames]
    assert left[0] == 0.0
    assert max(left) == pytest.approx(value)
    assert right == pytest.approx([-x for x in left])
    peak = left.index(max(left))
    assert all(a <= b for a, b in zip(left[:peak], left[1 : peak + 1]))
    assert all(a >= b for a, b in zip(left[peak:], left[peak + 1 :]))
    assert left[-1] < value


def test_envelope_silent_source_stays_silent():
    _, _, frames = _run_envelope(0.0)
    assert all(math.isclose(l, 0.0) and math.isclose(r, 0.0) for l, r in frames)