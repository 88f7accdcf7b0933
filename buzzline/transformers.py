"""Patterns that transform other patterns.

Most transformers are not built directly but through the fluent methods on
`buzzline.pattern.Pattern` (``wave.repeat(3)``, ``a.crossfade(b, 0.5)``).
Each holds its children exclusively and forwards `reset()` to them.
"""

import math

import buzzline.constants
import buzzline.pattern


# Nearest floats inside the open unit interval.
_VALID_LOW = math.nextafter(0.0, 1.0)
_VALID_HIGH = math.nextafter(1.0, 0.0)


class _Wrapper (buzzline.pattern.Pattern):

	"""
	A transformer around a single child that keeps the child's duration.
	"""

	def __init__ (self, pattern: buzzline.pattern.Pattern) -> None:
		self.pattern = pattern

	def duration (self) -> float:
		return self.pattern.duration()

	def reset (self) -> None:
		self.pattern.reset()


class _Pair (buzzline.pattern.Pattern):

	"""
	A transformer that samples two children at the same time.  Lasts as long as the longer child.
	"""

	def __init__ (self, a: buzzline.pattern.Pattern, b: buzzline.pattern.Pattern) -> None:
		self.a = a
		self.b = b

	def duration (self) -> float:
		return max(self.a.duration(), self.b.duration())

	def reset (self) -> None:
		self.a.reset()
		self.b.reset()


class ScaleTime (_Wrapper):

	"""
	Samples the child at ``scalar * time``.

	The duration is reported unchanged.
	"""

	def __init__ (self, pattern: buzzline.pattern.Pattern, scalar: float) -> None:

		if scalar <= 0:
			raise ValueError("Time scalar must be positive")

		super().__init__(pattern)
		self.scalar = scalar

	def sample (self, time: float) -> float:
		return self.pattern.sample(self.scalar * time)


class ScaleIntensity (_Wrapper):

	def __init__ (self, pattern: buzzline.pattern.Pattern, scalar: float) -> None:
		super().__init__(pattern)
		self.scalar = scalar

	def sample (self, time: float) -> float:
		return self.scalar * self.pattern.sample(time)


class Sum (_Pair):

	def sample (self, time: float) -> float:
		return self.a.sample(time) + self.b.sample(time)


class Subtract (_Pair):

	def sample (self, time: float) -> float:
		return self.a.sample(time) - self.b.sample(time)


class Average (_Pair):

	def sample (self, time: float) -> float:
		return (self.a.sample(time) + self.b.sample(time)) / 2.0


class Clamp (_Wrapper):

	def __init__ (self, pattern: buzzline.pattern.Pattern, floor: float, ceiling: float) -> None:

		if floor > ceiling:
			raise ValueError(f"Clamp floor ({floor}) must not exceed ceiling ({ceiling})")

		super().__init__(pattern)
		self.floor = floor
		self.ceiling = ceiling

	def sample (self, time: float) -> float:
		return max(self.floor, min(self.ceiling, self.pattern.sample(time)))


class ValidScale (_Wrapper):

	"""
	Maps samples through the logistic function, landing strictly inside ``(0, 1)``.

	Use this to normalise sums and other unbounded trees into levels a device accepts.
	"""

	def sample (self, time: float) -> float:

		value = self.pattern.sample(time)

		# Split on sign so math.exp never overflows.
		if value >= 0:
			result = 1.0 / (1.0 + math.exp(-value))
		else:
			exp_value = math.exp(value)
			result = exp_value / (1.0 + exp_value)

		# Large inputs round to exactly 0 or 1.
		return min(_VALID_HIGH, max(_VALID_LOW, result))


class Shift (_Wrapper):

	"""
	Starts the child ``time_shift`` seconds in.

	Shifting by more than the child's duration leaves nothing to play, so the
	duration bottoms out at zero.
	"""

	def __init__ (self, pattern: buzzline.pattern.Pattern, time_shift: float) -> None:

		if time_shift < 0:
			raise ValueError("Time shift cannot be negative")

		super().__init__(pattern)
		self.time_shift = time_shift

	def sample (self, time: float) -> float:
		return self.pattern.sample(time + self.time_shift)

	def duration (self) -> float:
		return max(0.0, self.pattern.duration() - self.time_shift)


class Repeat (_Wrapper):

	"""
	Plays the child ``count`` times.

	A fractional count ends part-way through the final cycle rather than
	padding it out.
	"""

	def __init__ (self, pattern: buzzline.pattern.Pattern, count: float) -> None:

		if count < 0:
			raise ValueError("Repeat count cannot be negative")

		super().__init__(pattern)
		self.count = count

	def sample (self, time: float) -> float:

		cycle = self.pattern.duration()

		if cycle <= 0:
			return self.pattern.sample(0.0)

		return self.pattern.sample(time % cycle)

	def duration (self) -> float:
		return self.count * self.pattern.duration()


class Forever (_Wrapper):

	"""
	Loops the child with no end.  Reports the largest representable duration.
	"""

	def sample (self, time: float) -> float:

		cycle = self.pattern.duration()

		if cycle <= 0:
			return self.pattern.sample(0.0)

		return self.pattern.sample(time % cycle)

	def duration (self) -> float:
		return buzzline.constants.FOREVER


class Chain (buzzline.pattern.Pattern):

	"""
	Plays ``first``, then ``then``.

	``then`` always sees time relative to its own start, so
	``Chain(a, b).sample(a.duration() + x) == b.sample(x)``.
	"""

	def __init__ (self, first: buzzline.pattern.Pattern, then: buzzline.pattern.Pattern) -> None:
		self.first = first
		self.then = then

	def sample (self, time: float) -> float:

		first_duration = self.first.duration()

		if time < first_duration:
			return self.first.sample(time)

		return self.then.sample(time - first_duration)

	def duration (self) -> float:
		return self.first.duration() + self.then.duration()

	def reset (self) -> None:
		self.first.reset()
		self.then.reset()


class Crossfade (Chain):

	"""
	Like `Chain`, but ``then`` fades in over the final ``overlap`` seconds of ``first``.

	During the overlap the output is ``first * (1 - p) + then * p``, where
	``p`` climbs linearly from 0 to 1.  ``then`` starts its own clock when the
	fade begins and carries on from there once ``first`` has finished, so an
	overlap of zero is exactly a `Chain`.
	"""

	def __init__ (self, first: buzzline.pattern.Pattern, then: buzzline.pattern.Pattern, overlap: float) -> None:

		if overlap < 0:
			raise ValueError("Crossfade overlap cannot be negative")

		if overlap > first.duration() or overlap > then.duration():
			raise ValueError("Crossfade overlap cannot be longer than either pattern")

		super().__init__(first, then)
		self.overlap = overlap

	def sample (self, time: float) -> float:

		first_duration = self.first.duration()
		fade_start = first_duration - self.overlap

		if time < fade_start:
			return self.first.sample(time)

		if time >= first_duration:
			return self.then.sample(time - fade_start)

		progress = (time - fade_start) / self.overlap

		return self.first.sample(time) * (1.0 - progress) + self.then.sample(time - fade_start) * progress

	def duration (self) -> float:
		return self.first.duration() + self.then.duration() - self.overlap


class AmplitudeModulator (buzzline.pattern.Pattern):

	"""
	Multiplies ``pattern`` by ``modulator`` sample by sample.

	Lasts as long as ``pattern``; the modulator is expected to outlast it or loop.
	"""

	def __init__ (self, pattern: buzzline.pattern.Pattern, modulator: buzzline.pattern.Pattern) -> None:
		self.pattern = pattern
		self.modulator = modulator

	def sample (self, time: float) -> float:
		return self.pattern.sample(time) * self.modulator.sample(time)

	def duration (self) -> float:
		return self.pattern.duration()

	def reset (self) -> None:
		self.pattern.reset()
		self.modulator.reset()
