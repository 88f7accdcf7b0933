"""
buzzline - composable intensity patterns for vibration actuators.

A pattern is a signal over time: sample it at any elapsed time and it
answers with an intensity.  Small shapes combine into large ones, and a
driver plays the result on real devices at a fixed tick rate.

What it provides:

- **Shapes.** Pauses, constants, linear ramps, and saw, triangle, square
  and sine waves, plus random generators: a fresh draw every tick, a
  value held for an interval, and a bounded random walk.
- **Combinators.** Scale time or intensity, add, subtract or average two
  patterns, clamp or squash into the valid range, shift, repeat,
  loop forever, chain, crossfade, and amplitude-modulate.  Every pattern
  has fluent methods, so trees read left to right.
- **Driver.** One global pattern for everything, with overrides per
  device and per actuator.  Samples at a fixed rate (10 Hz by default),
  re-enumerates devices every tick, and always sends stop-all when a run
  ends, however it ends.
- **MIDI output.** ``MidiDeviceClient`` drives anything that listens to
  control-change messages.  Any other transport plugs in by implementing
  ``buzzline.client.DeviceClient``.

Minimal example:

    ```python
    import asyncio
    import buzzline

    swell = buzzline.SineWave(1.0, 2.0).repeat(4)
    tease = buzzline.SquareWave(0.6, 0.5).crossfade(buzzline.Linear(0.6, 0.0, 3.0), 1.0)

    client = buzzline.MidiDeviceClient.open(controls=[1, 2])
    driver = buzzline.Driver(client, swell.chain(tease))
    driver.set_actuator_pattern(0, 1, buzzline.RandomWalk(0.2, 0.8, 0.05, 0.05, duration=12.0))

    asyncio.run(driver.run())
    ```

Package-level exports: ``Pattern``, ``CustomPattern``, the shapes and random
generators, ``Driver``, ``Device``, ``DeviceClient``, ``CommandError``,
``MidiDeviceClient``.
"""

import buzzline.pattern
import buzzline.client
import buzzline.driver
import buzzline.midi_client
import buzzline.randomness
import buzzline.shapes


Pattern = buzzline.pattern.Pattern
CustomPattern = buzzline.pattern.CustomPattern

Pause = buzzline.shapes.Pause
Constant = buzzline.shapes.Constant
Linear = buzzline.shapes.Linear
SawWave = buzzline.shapes.SawWave
TriangleWave = buzzline.shapes.TriangleWave
SquareWave = buzzline.shapes.SquareWave
SineWave = buzzline.shapes.SineWave

Random = buzzline.randomness.Random
RandomEvery = buzzline.randomness.RandomEvery
RandomWalk = buzzline.randomness.RandomWalk

Device = buzzline.client.Device
DeviceClient = buzzline.client.DeviceClient
CommandError = buzzline.client.CommandError
Driver = buzzline.driver.Driver
MidiDeviceClient = buzzline.midi_client.MidiDeviceClient
