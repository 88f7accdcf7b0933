"""Shared constants.

Time is measured in seconds (``float``) everywhere in buzzline, and
intensities are scalars where ``0.0`` is off and ``1.0`` is full power:

- `DEFAULT_TICK_RATE = 10`: driver sampling rate in Hz.  Smooth enough for
  vibration without saturating the device transport.
- `FOREVER = sys.float_info.max`: the duration reported by patterns that
  never end.
- `MIN_INTENSITY` / `MAX_INTENSITY`: the range a device accepts.
- `MIDI_CC_MAX = 127`: top of a MIDI control-change value.
"""

import sys


DEFAULT_TICK_RATE = 10

FOREVER = sys.float_info.max

MIN_INTENSITY = 0.0
MAX_INTENSITY = 1.0

MIDI_CC_MAX = 127
