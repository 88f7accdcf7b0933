"""Randomised pattern primitives.

These are the only leaves with state of their own.  Each accepts an optional
``rng`` (a ``random.Random``) so a run can be made repeatable:

	```python
	rng = random.Random(42)
	jitter = buzzline.randomness.RandomWalk(0.2, 0.8, 0.05, 0.05, duration=30, rng=rng)
	```
"""

import random
import time
import typing

import buzzline.pattern


def _check_range (low: float, high: float, duration: float) -> None:

	if low > high:
		raise ValueError(f"Range low ({low}) must not exceed high ({high})")

	if duration < 0:
		raise ValueError("Duration cannot be negative")


class Random (buzzline.pattern.Pattern):

	"""
	A fresh uniform draw from ``[low, high]`` on every sample.
	"""

	def __init__ (self, low: float, high: float, duration: float, rng: typing.Optional[random.Random] = None) -> None:

		_check_range(low, high, duration)

		self.low = low
		self.high = high
		self._duration = duration
		self.rng: random.Random = rng or random.Random()

	def sample (self, time: float) -> float:
		return self.rng.uniform(self.low, self.high)

	def duration (self) -> float:
		return self._duration


class RandomEvery (buzzline.pattern.Pattern):

	"""
	A random level that changes every ``interval`` seconds.

	The interval is measured in wall-clock time since the last draw, not in
	pattern time, so the value holds steady however often it is sampled.
	"""

	def __init__ (
		self,
		low: float,
		high: float,
		interval: float,
		duration: float,
		rng: typing.Optional[random.Random] = None,
		clock: typing.Callable[[], float] = time.monotonic
	) -> None:

		"""
		Parameters:
			low: Bottom of the range.
			high: Top of the range.
			interval: Seconds to hold each value before drawing another.
			duration: Length of the pattern in seconds.
			rng: Random source (default: a new unseeded ``random.Random``).
			clock: Wall-clock function returning seconds (default ``time.monotonic``).
		"""

		_check_range(low, high, duration)

		if interval <= 0:
			raise ValueError("Interval must be positive")

		self.low = low
		self.high = high
		self.interval = interval
		self._duration = duration
		self.rng: random.Random = rng or random.Random()
		self.clock = clock

		self.value = 0.0
		self.last_draw = 0.0
		self.reset()

	def _draw (self) -> None:

		self.value = self.rng.uniform(self.low, self.high)
		self.last_draw = self.clock()

	def sample (self, time: float) -> float:

		if self.clock() - self.last_draw >= self.interval:
			self._draw()

		return self.value

	def duration (self) -> float:
		return self._duration

	def reset (self) -> None:
		self._draw()


class RandomWalk (buzzline.pattern.Pattern):

	"""
	A value that wanders within ``[low, high]``.

	On every sample a candidate is drawn from the range.  If it lies above
	the current value the walk steps up by ``increase``, otherwise it steps
	down by ``decrease``; the result is clamped to the range.  The walk is
	pulled towards the middle of the range, drifting rather than jumping.
	"""

	def __init__ (
		self,
		low: float,
		high: float,
		increase: float,
		decrease: float,
		duration: float,
		rng: typing.Optional[random.Random] = None
	) -> None:

		_check_range(low, high, duration)

		if increase < 0 or decrease < 0:
			raise ValueError("Walk steps cannot be negative")

		self.low = low
		self.high = high
		self.increase = increase
		self.decrease = decrease
		self._duration = duration
		self.rng: random.Random = rng or random.Random()

		self.state = 0.0

	def sample (self, time: float) -> float:

		candidate = self.rng.uniform(self.low, self.high)

		if candidate > self.state:
			self.state += self.increase
		else:
			self.state -= self.decrease

		self.state = max(self.low, min(self.high, self.state))

		return self.state

	def duration (self) -> float:
		return self._duration

	def reset (self) -> None:
		self.state = 0.0
