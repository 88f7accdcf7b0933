import math

import pytest

import buzzline.pattern
import buzzline.shapes


def test_pause_is_silent () -> None:

	"""Pause produces zero for its whole duration."""

	pause = buzzline.shapes.Pause(2.0)

	assert pause.sample(0.0) == 0.0
	assert pause.sample(1.5) == 0.0
	assert pause.duration() == 2.0


def test_constant_level () -> None:

	"""Constant holds its level."""

	constant = buzzline.shapes.Constant(0.4, 3.0)

	assert constant.sample(0.0) == 0.4
	assert constant.sample(2.9) == 0.4
	assert constant.duration() == 3.0


def test_linear_ramp () -> None:

	"""Linear interpolates between start and end over its duration."""

	ramp = buzzline.shapes.Linear(0.0, 1.0, 4.0)

	assert ramp.sample(0.0) == 0.0
	assert ramp.sample(1.0) == 0.25
	assert ramp.sample(2.0) == 0.5
	assert ramp.sample(4.0) == 1.0
	assert ramp.duration() == 4.0


def test_linear_ramp_down () -> None:

	"""Linear also ramps downwards."""

	ramp = buzzline.shapes.Linear(1.0, 0.2, 2.0)

	assert ramp.sample(1.0) == pytest.approx(0.6)


def test_saw_wave () -> None:

	"""Saw rises linearly through the cycle and drops back to zero."""

	saw = buzzline.shapes.SawWave(1.0, 4.0)

	assert saw.sample(0.0) == 0.0
	assert saw.sample(1.0) == 0.25
	assert saw.sample(2.0) == 0.5
	assert saw.sample(3.0) == 0.75
	assert saw.sample(4.0) == 0.0
	assert saw.duration() == 4.0


def test_saw_wave_amplitude () -> None:

	"""A smaller amplitude scales the ramp."""

	saw = buzzline.shapes.SawWave(0.5, 2.0)

	assert saw.sample(1.0) == 0.25


def test_triangle_wave () -> None:

	"""Triangle climbs to its amplitude half-way through and falls back."""

	triangle = buzzline.shapes.TriangleWave(1.0, 4.0)

	assert triangle.sample(0.0) == pytest.approx(0.0)
	assert triangle.sample(1.0) == pytest.approx(0.5)
	assert triangle.sample(2.0) == pytest.approx(1.0)
	assert triangle.sample(3.0) == pytest.approx(0.5)
	assert triangle.duration() == 4.0


def test_triangle_wave_never_exceeds_amplitude () -> None:

	"""Triangle stays within [0, amplitude] across the cycle."""

	triangle = buzzline.shapes.TriangleWave(0.8, 1.0)

	for step in range(101):
		value = triangle.sample(step / 100)
		assert 0.0 <= value <= 0.8


def test_square_wave () -> None:

	"""Square is on for the first half of the cycle and off for the second."""

	square = buzzline.shapes.SquareWave(0.7, 2.0)

	assert square.sample(0.0) == 0.7
	assert square.sample(0.99) == 0.7
	assert square.sample(1.0) == 0.0
	assert square.sample(1.5) == 0.0
	assert square.sample(2.5) == 0.7
	assert square.duration() == 2.0


def test_sine_wave_starts_at_minimum () -> None:

	"""Sine starts at 0, peaks half-way through and returns to 0."""

	sine = buzzline.shapes.SineWave(1.0, 4.0)

	assert sine.sample(0.0) == pytest.approx(0.0)
	assert sine.sample(1.0) == pytest.approx(0.5)
	assert sine.sample(2.0) == pytest.approx(1.0)
	assert sine.sample(3.0) == pytest.approx(0.5)
	assert sine.sample(4.0) == pytest.approx(0.0)
	assert sine.duration() == 4.0


def test_sine_wave_formula () -> None:

	"""Sine matches (a/2)cos(2pi/l * (t + l/2)) + a/2."""

	sine = buzzline.shapes.SineWave(0.6, 3.0)

	for t in (0.1, 0.7, 1.3, 2.9):
		expected = 0.3 * math.cos(2 * math.pi / 3.0 * (t + 1.5)) + 0.3
		assert sine.sample(t) == pytest.approx(expected)


def test_stateless_reset_is_noop () -> None:

	"""Resetting a stateless shape changes nothing."""

	sine = buzzline.shapes.SineWave(1.0, 2.0)
	before = sine.sample(0.3)
	sine.reset()

	assert sine.sample(0.3) == before


@pytest.mark.parametrize("factory", [
	lambda: buzzline.shapes.SawWave(1.0, 0.0),
	lambda: buzzline.shapes.TriangleWave(1.0, -1.0),
	lambda: buzzline.shapes.SquareWave(1.0, 0.0),
	lambda: buzzline.shapes.SineWave(1.0, 0.0),
	lambda: buzzline.shapes.Pause(-1.0),
	lambda: buzzline.shapes.Constant(0.5, -2.0),
	lambda: buzzline.shapes.Linear(0.0, 1.0, 0.0),
])
def test_invalid_configuration_rejected (factory) -> None:

	"""Bad wavelengths and durations are rejected at construction."""

	with pytest.raises(ValueError):
		factory()


def test_custom_pattern () -> None:

	"""CustomPattern wraps a plain function."""

	custom = buzzline.pattern.CustomPattern(lambda t: t * 2, duration=5.0)

	assert custom.sample(1.5) == 3.0
	assert custom.duration() == 5.0


def test_base_pattern_is_abstract () -> None:

	"""The base class has no sample or duration of its own."""

	pattern = buzzline.pattern.Pattern()

	with pytest.raises(NotImplementedError):
		pattern.sample(0.0)

	with pytest.raises(NotImplementedError):
		pattern.duration()
