import xml.etree.ElementTree as ET

import pytest

from synthie.effects import Chorus, Flange, NoiseGate


def run(effect, frames):
    return [effect.process(frame) for frame in frames]


def impulse(count):
    return [(1.0, -1.0)] + [(0.0, 0.0)] * (count - 1)


def test_chorus_defaults_are_silent():
    assert Chorus().process((0.5, -0.5)) == (0.0, 0.0)


def test_chorus_dry_passes_and_clamps():
    chorus = Chorus()
    chorus.dry = 1.0
    assert chorus.process((0.3, -0.2)) == (0.3, -0.2)
    assert chorus.process((1.5, -2.0)) == (1.0, -1.0)


def test_chorus_zero_delay_wet_equals_input():
    chorus = Chorus()
    chorus.wet = 1.0
    assert chorus.process((0.4, -0.4)) == pytest.approx((0.4, -0.4))


def test_chorus_delayed_echo():
    chorus = Chorus(sample_rate=10.0)
    chorus.delay = 0.5
    chorus.wet = 1.0
    outputs = run(chorus, impulse(10))
    assert [left for left, _ in outputs] == [0.5, 0, 0, 0, 0, 0.5, 0, 0, 0, 0]
    assert [right for _, right in outputs] == [-left for left, _ in outputs]


def test_chorus_full_buffer_delay_reads_current_sample():
    chorus = Chorus()
    chorus.sample_rate = 10.0
    chorus.delay = 2.0
    chorus.wet = 1.0
    frames = [(0.1, 0.2), (0.3, -0.4), (-0.6, 0.7)]
    assert run(chorus, frames) == [pytest.approx(f) for f in frames]


def test_chorus_load_xml_clamps():
    chorus = Chorus()
    chorus.load_xml(ET.fromstring('<chorus delay="5" wet="3" dry="-1" range="0.25" rate="7"/>'))
    assert chorus.delay == 2.0
    assert chorus.wet == 1.0
    assert chorus.dry == 0.0
    assert chorus.mod_range == 0.25
    assert chorus.mod_rate == 7.0


def test_chorus_load_xml_rejects_bad_number():
    chorus = Chorus()
    with pytest.raises(ValueError):
        chorus.load_xml(ET.fromstring('<chorus wet="loud"/>'))


def test_flange_dry_is_not_clamped():
    flange = Flange()
    flange.dry = 1.0
    assert flange.process((1.5, -1.5)) == (1.5, -1.5)


def test_flange_echo_timing():
    flange = Flange(sample_rate=10.0)
    flange.delay = 0.5
    flange.wet = 1.0
    flange.level = 0.0
    outputs = [left for left, _ in run(flange, impulse(11))]
    assert outputs[0] > 0
    assert outputs[5] == pytest.approx(outputs[0])
    assert all(outputs[i] == 0 for i in (1, 2, 3, 4, 6, 7, 8, 9, 10))


def test_flange_feedback_repeats_echo():
    quiet = Flange(sample_rate=10.0)
    loud = Flange(sample_rate=10.0)
    for flange, level in ((quiet, 0.0), (loud, 1.0)):
        flange.delay = 0.5
        flange.wet = 1.0
        flange.level = level
    without = [left for left, _ in run(quiet, impulse(11))]
    with_feedback = [left for left, _ in run(loud, impulse(11))]
    assert without[10] == 0
    assert with_feedback[10] > 0
    assert with_feedback[5] > without[5]


def test_flange_negative_delay_acts_as_zero():
    negative = Flange()
    zero = Flange()
    for flange, delay in ((negative, -1.0), (zero, 0.0)):
        flange.delay = delay
        flange.wet = 1.0
    frames = [(0.1, 0.2), (0.3, -0.4), (-0.6, 0.7)]
    assert run(negative, frames) == run(zero, frames)


def test_flange_load_xml():
    flange = Flange()
    flange.load_xml(
        ET.fromstring(
            '<flange delay="0.002" wet="0.7" dry="0.3" range="0.001" rate="0.25" level="0.5"/>'
        )
    )
    assert flange.delay == 0.002
    assert flange.wet == 0.7
    assert flange.dry == 0.3
    assert flange.mod_range == 0.001
    assert flange.mod_rate == 0.25
    assert flange.level == 0.5


def test_gate_defaults_pass_through():
    assert NoiseGate().process((0.005, 0.5)) == (0.005, 0.5)


def wet_gate():
    gate = NoiseGate()
    gate.dry = 0.0
    gate.wet = 1.0
    return gate


def test_gate_lets_loud_signal_through():
    gate = wet_gate()
    assert gate.process((0.5, -0.5)) == (0.5, -0.5)


def test_gate_closes_on_quiet_signal():
    gate = wet_gate()
    outputs = [left for left, _ in run(gate, [(0.005, 0.005)] * 200)]
    assert outputs[0] < 0.005
    assert all(a >= b for a, b in zip(outputs, outputs[1:]))
    assert outputs[-1] == 0.0


def test_gate_channels_are_independent():
    gate = wet_gate()
    outputs = run(gate, [(0.5, 0.005)] * 200)
    assert outputs[-1] == (0.5, 0.0)


def test_gate_reopens_on_loud_signal():
    gate = wet_gate()
    run(gate, [(0.005, 0.005)] * 200)
    outputs = run(gate, [(0.5, -0.5)] * 200)
    assert outputs[0][0] < 0.5
    assert outputs[-1] == (0.5, -0.5)


def test_gate_load_xml():
    gate = NoiseGate()
    gate.load_xml(ET.fromstring('<gate threshold="2.4" wet="0.25" dry="0.75"/>'))
    assert gate.threshold == 2.0
    assert gate.wet == 0.25
    assert gate.dry == 0.75