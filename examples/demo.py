import asyncio
import logging
import random

import buzzline

logging.basicConfig(level=logging.INFO)

# Two actuators on one MIDI output: CC 1 and CC 2.
client = buzzline.MidiDeviceClient.open(controls=[1, 2])

rng = random.Random(7)

# Warm up with a slow swell, tease with a square wave that fades into a ramp down,
# then hold a wandering level until stopped.
swell = buzzline.SineWave(1.0, 4.0).repeat(2)
tease = buzzline.SquareWave(0.8, 0.5).repeat(8).crossfade(buzzline.Linear(0.8, 0.2, 4.0), 1.0)
wander = buzzline.RandomWalk(0.2, 0.9, 0.05, 0.05, duration=30.0, rng=rng).forever()

driver = buzzline.Driver(client, swell.chain(tease).chain(wander), tick_rate=20)

# The second actuator gets its own pulse, modulated by a slow triangle.
pulse = buzzline.SquareWave(1.0, 0.25).forever().multiply(buzzline.TriangleWave(1.0, 6.0).forever())
driver.set_actuator_pattern(0, 1, pulse)

try:
	asyncio.run(driver.run())
except KeyboardInterrupt:
	pass
finally:
	client.close()
