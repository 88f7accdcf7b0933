"""Deterministic shape primitives.

Each shape is a pure function of elapsed time.  The waves are defined for one
cycle of ``wavelength`` seconds; wrap them with `Pattern.repeat()` or
`Pattern.forever()` to run them longer.

Available shapes:

	Pause          Silence for a fixed duration.
	Constant       A flat level.
	Linear         A straight ramp from one level to another.
	SawWave        Rises from 0 to ``amplitude`` then drops.
	TriangleWave   Climbs from 0 to ``amplitude`` and back down.
	SquareWave     ``amplitude`` for the first half of the cycle, 0 for the second.
	SineWave       A smooth swell from 0 up to ``amplitude`` and back.
"""

import math

import buzzline.pattern


def _check_duration (duration: float) -> None:

	if duration < 0:
		raise ValueError("Duration cannot be negative")


def _check_wavelength (wavelength: float) -> None:

	if wavelength <= 0:
		raise ValueError("Wavelength must be positive")


class Pause (buzzline.pattern.Pattern):

	"""
	Zero intensity for ``duration`` seconds.
	"""

	def __init__ (self, duration: float) -> None:

		_check_duration(duration)
		self._duration = duration

	def sample (self, time: float) -> float:
		return 0.0

	def duration (self) -> float:
		return self._duration


class Constant (buzzline.pattern.Pattern):

	"""
	A fixed ``level`` for ``duration`` seconds.
	"""

	def __init__ (self, level: float, duration: float) -> None:

		_check_duration(duration)
		self.level = level
		self._duration = duration

	def sample (self, time: float) -> float:
		return self.level

	def duration (self) -> float:
		return self._duration


class Linear (buzzline.pattern.Pattern):

	"""
	A straight ramp from ``start`` to ``end`` over ``duration`` seconds.

	Unlike a looping ramp this does not hold ``end`` afterwards: past its
	duration the line simply keeps going.
	"""

	def __init__ (self, start: float, end: float, duration: float) -> None:

		if duration <= 0:
			raise ValueError("Linear duration must be positive")

		self.start = start
		self.end = end
		self._duration = duration

	def sample (self, time: float) -> float:
		return self.start + (self.end - self.start) * time / self._duration

	def duration (self) -> float:
		return self._duration


class SawWave (buzzline.pattern.Pattern):

	"""
	A sawtooth: ramps up over each wavelength, then drops back to zero.
	"""

	def __init__ (self, amplitude: float, wavelength: float) -> None:

		_check_wavelength(wavelength)
		self.amplitude = amplitude
		self.wavelength = wavelength

	def sample (self, time: float) -> float:

		# The modulo applies to the scaled value, so amplitudes above 1.0 wrap early.
		return (self.amplitude * (time / self.wavelength)) % 1.0

	def duration (self) -> float:
		return self.wavelength


class TriangleWave (buzzline.pattern.Pattern):

	"""
	A triangle between 0 and ``amplitude`` with period ``wavelength``.

	Starts at 0, peaks at ``amplitude`` half-way through the cycle and falls back.
	See https://en.wikipedia.org/wiki/Triangle_wave#Definition
	"""

	def __init__ (self, amplitude: float, wavelength: float) -> None:

		_check_wavelength(wavelength)
		self.amplitude = amplitude
		self.wavelength = wavelength

	def sample (self, time: float) -> float:

		half = self.wavelength / 2.0
		value = (2.0 * self.amplitude / self.wavelength) * abs(((time - half) % self.wavelength) - half)

		# Floating point error can overshoot the peak by a hair.
		return min(value, self.amplitude)

	def duration (self) -> float:
		return self.wavelength


class SquareWave (buzzline.pattern.Pattern):

	"""
	``amplitude`` for the first half of each wavelength, 0 for the second half.
	"""

	def __init__ (self, amplitude: float, wavelength: float) -> None:

		_check_wavelength(wavelength)
		self.amplitude = amplitude
		self.wavelength = wavelength

	def sample (self, time: float) -> float:

		if time % self.wavelength < self.wavelength / 2.0:
			return self.amplitude

		return 0.0

	def duration (self) -> float:
		return self.wavelength


class SineWave (buzzline.pattern.Pattern):

	"""
	A sine between 0 and ``amplitude`` with period ``wavelength``.

	The phase is shifted by half a cycle so the wave starts at its minimum
	and peaks half-way through, which makes it a natural swell.
	"""

	def __init__ (self, amplitude: float, wavelength: float) -> None:

		_check_wavelength(wavelength)
		self.amplitude = amplitude
		self.wavelength = wavelength

	def sample (self, time: float) -> float:

		half_amplitude = self.amplitude / 2.0
		angle = (2.0 * math.pi / self.wavelength) * (time + self.wavelength / 2.0)

		return half_amplitude * math.cos(angle) + half_amplitude

	def duration (self) -> float:
		return self.wavelength
