# synthie

A small software synthesizer. It reads an XML score, plays the notes on
its instruments, optionally runs them through chorus, flange and
noise-gate effects, and writes the result as a 16-bit stereo WAVE file.
It can also write a plain sine test tone.

## Installation

```
pip install .
```

## Command line

The package installs one command, `synthie`, with two subcommands.

Render a score file:

```
synthie score song.score song.wav
synthie score song.score song.wav --rate 22050
```

Write a sine test tone (by default 1000 Hz for 5 seconds at 44100 Hz):

```
synthie tone tone.wav
synthie tone tone.wav --freq 440 --duration 2 --rate 48000
```

Both print the number of frames written. A file that cannot be read or
written, or a score that is not well-formed XML, is reported on standard
error with exit status 1; a sample rate that is not positive gives exit
status 2.

## Scores

A score is an XML document whose root element is `<score>`:

```xml
<score bpm="120" beatspermeasure="4">
  <instrument instrument="ToneInstrument">
    <note measure="1" beat="1" duration="1" note="A4"/>
    <note measure="1" beat="2" duration="1" note="C5"/>
  </instrument>
  <instrument instrument="AdditiveSynth" chorus="1">
    <note measure="2" beat="1" duration="1.5" note="E4"
          amplitudes="1 0.5 0.33" ADSR="0.05 0.1 0.8 0.1"
          vibrato="5 3"/>
  </instrument>
  <effect type="Chorus">
    <chorus delay="0.02" wet="0.5" dry="0.5" range="0.005" rate="0.25"/>
  </effect>
</score>
```

Measures and beats count from 1. Note names run from `A0` to `C8`, with
sharps (`C#4`) and flats (`Db4`); an unknown name plays at 0 Hz. Two
instruments are available, and notes for any other instrument name are
skipped:

* `ToneInstrument`: a sine tone shaped by an attack/release envelope;
  `duration` is given in beats.
* `AdditiveSynth`: up to eight harmonics, with `amplitudes`, `ADSR`,
  `crossFadeIn`, `crossFadeOut` and `vibrato` (rate and depth)
  attributes; `duration` is given in seconds.

An instrument element turns on effects with `noisegate="1"`,
`chorus="1"` or `flange="1"`; once on, an effect applies to every note
loaded after it. An `<effect>` element whose attribute names
`NoiseGate`, `Chorus` or `Flange` sets that effect's parameters from the
attributes of its first child element.

## Library use

```python
from synthie.synthesizer import Synthesizer
from synthie.wave import WaveWriter
from synthie.cli import synthesizer_frames

synth = Synthesizer(44100, 2)
synth.open_score("song.score")   # or synth.load_score_text(xml_text)

with WaveWriter("song.wav", 2, 16, 44100) as out:
    for frame in synthesizer_frames(synth):
        out.write_frame(frame)
```

`Synthesizer.frames()` yields floating-point frames, one value per
channel; `synthesizer_frames()` scales them by 32767 and clamps them to
16-bit integers. `synthie.cli.render_score()` does the whole job in one
call, and `synthie.cli.tone_frames()` yields the test tone.

Other modules:

* `synthie.wave`: `WaveReader` reads PCM WAVE files frame by frame
  (iterable, with `seek_frame` and `rewind`); `WaveWriter` writes them.
  Both are context managers and raise `WaveError` on failure.
* `synthie.effects`: `Chorus`, `Flange` and `NoiseGate`, each with
  `process(frame)` and `load_xml(element)`.
* `synthie.nodes`, `synthie.instrument`, `synthie.additive`: the audio
  nodes and instruments the synthesizer is built from.
* `synthie.notes`: `note_to_frequency(name)`.
* `synthie.waveform`: `WaveformBuffer`, which keeps the first seconds of
  generated audio and calls registered callables when it changes.

## What it does not do

synthie only writes files: it does not play audio through a sound
device, and it has no window or waveform display. `WaveformBuffer`
collects samples for such a display but draws nothing itself.

## Tests

```
pip install .[test]
pytest
```