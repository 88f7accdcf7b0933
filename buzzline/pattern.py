import types
import typing

if typing.TYPE_CHECKING:
	import buzzline.transformers


def _transformers () -> types.ModuleType:

	"""Transformers subclass Pattern, so they are imported on first use rather than at load time."""

	import buzzline.transformers

	return buzzline.transformers


class Pattern:

	"""
	Base class for everything that produces an intensity over time.

	A pattern answers three questions: how intense is it ``time`` seconds in
	(`sample`), how long is one cycle (`duration`), and how to get back to its
	starting state (`reset`).  Shapes and randomised generators are leaves;
	transformers wrap one or two child patterns.

	Behaviour when sampling past `duration()` is not specified.  Some shapes
	happen to keep producing sensible values, but use `repeat()`, `forever()`
	or `chain()` whenever a pattern needs to run longer than one cycle.

	Every pattern carries the fluent builder methods below, so trees read
	left to right:

		```python
		wave = buzzline.shapes.SineWave(1.0, 2.0).repeat(3).chain(buzzline.shapes.Pause(1.0))
		```
	"""

	def sample (self, time: float) -> float:

		"""
		Return the intensity at ``time`` seconds into the pattern.
		"""

		raise NotImplementedError

	def duration (self) -> float:

		"""
		Return the length of one cycle in seconds.

		Depends only on how the pattern was configured, never on its state, so
		schedules can be computed without sampling.
		"""

		raise NotImplementedError

	def reset (self) -> None:

		"""
		Return to the initial state.  Stateless patterns do nothing.
		"""

		return None

	def scale_time (self, scalar: float) -> "buzzline.transformers.ScaleTime":

		"""
		Scale the pattern in the time domain.

		The child is sampled at ``scalar * time``.
		"""

		return _transformers().ScaleTime(self, scalar)

	def scale_intensity (self, scalar: float) -> "buzzline.transformers.ScaleIntensity":

		"""
		Multiply every sample by ``scalar``.
		"""

		return _transformers().ScaleIntensity(self, scalar)

	def sum (self, other: "Pattern") -> "buzzline.transformers.Sum":

		"""
		Add two patterns together sample by sample.
		"""

		return _transformers().Sum(self, other)

	def subtract (self, other: "Pattern") -> "buzzline.transformers.Subtract":

		"""
		Subtract ``other`` from this pattern sample by sample.
		"""

		return _transformers().Subtract(self, other)

	def average (self, other: "Pattern") -> "buzzline.transformers.Average":

		"""
		Take the mean of two patterns sample by sample.
		"""

		return _transformers().Average(self, other)

	def clamp (self, floor: float, ceiling: float) -> "buzzline.transformers.Clamp":

		"""
		Limit samples to ``[floor, ceiling]``.

		Handy for making waves that clip at the edges of a range.
		"""

		return _transformers().Clamp(self, floor, ceiling)

	def clamp_valid (self) -> "buzzline.transformers.Clamp":

		"""
		Clamp to the range a device accepts, ``[0.0, 1.0]``.
		"""

		return self.clamp(0.0, 1.0)

	def scale_valid (self) -> "buzzline.transformers.ValidScale":

		"""
		Squash samples into ``(0.0, 1.0)`` with the logistic function ``1/(1+e^-x)``.
		"""

		return _transformers().ValidScale(self)

	def shift (self, time_shift: float) -> "buzzline.transformers.Shift":

		"""
		Skip the first ``time_shift`` seconds of the pattern.
		"""

		return _transformers().Shift(self, time_shift)

	def repeat (self, count: float) -> "buzzline.transformers.Repeat":

		"""
		Repeat the pattern ``count`` times.  Fractional counts such as ``1.5`` are allowed.
		"""

		return _transformers().Repeat(self, count)

	def forever (self) -> "buzzline.transformers.Forever":

		"""
		Loop the pattern with no end.
		"""

		return _transformers().Forever(self)

	def chain (self, then: "Pattern") -> "buzzline.transformers.Chain":

		"""
		Play ``then`` once this pattern's duration has passed.
		"""

		return _transformers().Chain(self, then)

	def crossfade (self, then: "Pattern", overlap: float) -> "buzzline.transformers.Crossfade":

		"""
		Chain ``then`` after this pattern, blending the two linearly over the last ``overlap`` seconds.
		"""

		return _transformers().Crossfade(self, then, overlap)

	def multiply (self, modulator: "Pattern") -> "buzzline.transformers.AmplitudeModulator":

		"""
		Modulate the amplitude of this pattern by ``modulator``.
		"""

		return _transformers().AmplitudeModulator(self, modulator)


class CustomPattern (Pattern):

	"""
	Wrap a plain function as a pattern.

	Useful for one-off shapes the library does not provide.  Anything that
	needs state of its own is better written as a `Pattern` subclass.

	Example:
		```python
		ramp_down = buzzline.pattern.CustomPattern(lambda t: 1.0 - t / 4.0, duration=4.0)
		```
	"""

	def __init__ (self, sample_fn: typing.Callable[[float], float], duration: float) -> None:

		if duration < 0:
			raise ValueError("Pattern duration cannot be negative")

		self.sample_fn = sample_fn
		self._duration = duration

	def sample (self, time: float) -> float:
		return self.sample_fn(time)

	def duration (self) -> float:
		return self._duration
