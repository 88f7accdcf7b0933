"""Configuration files and declarative patterns.

A configuration file is YAML with three optional sections:

	```yaml
	driver:
	  tick_rate: 20
	  command_timeout: 0.05

	midi:
	  device_name: "Motor Controller"
	  channel: 0
	  controls: [1, 2]

	pattern:
	  type: chain
	  first: {type: linear, start: 0, end: 1, duration: 5}
	  then:
	    type: sine
	    amplitude: 1.0
	    wavelength: 2.0
	    forever: true
	```

Pattern nodes are mappings tagged with ``type``.  Any node may also carry
wrapper keys, applied in this order: ``scale_time``, ``scale_intensity``,
``shift``, ``repeat``, ``clamp`` (``[floor, ceiling]``), ``clamp_valid``,
``scale_valid``, ``forever``.
"""

import logging
import os
import typing

import yaml

import buzzline.constants
import buzzline.pattern
import buzzline.randomness
import buzzline.shapes


logger = logging.getLogger(__name__)


PatternNode = typing.Dict[str, typing.Any]


def load_config (config_path: str = "config.yaml") -> typing.Dict[str, typing.Any]:

	"""
	Load configuration from a YAML file.  A missing file yields an empty configuration.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return {}

	with open(config_path, "r") as f:
		config = yaml.safe_load(f)

	if config is None:
		return {}

	if not isinstance(config, dict):
		raise ValueError(f"Config file {config_path} must contain a mapping at the top level")

	return config


def driver_settings (config: typing.Dict[str, typing.Any]) -> typing.Dict[str, typing.Any]:

	"""
	Return ``tick_rate`` and ``command_timeout`` from the ``driver`` section, with defaults.
	"""

	section = config.get("driver") or {}

	return {
		"tick_rate": section.get("tick_rate", buzzline.constants.DEFAULT_TICK_RATE),
		"command_timeout": section.get("command_timeout"),
	}


def midi_settings (config: typing.Dict[str, typing.Any]) -> typing.Dict[str, typing.Any]:

	"""
	Return ``device_name``, ``channel`` and ``controls`` from the ``midi`` section, with defaults.
	"""

	section = config.get("midi") or {}

	return {
		"device_name": section.get("device_name"),
		"channel": section.get("channel", 0),
		"controls": list(section.get("controls", [1])),
	}


def _child (node: PatternNode, key: str) -> buzzline.pattern.Pattern:

	if key not in node:
		raise ValueError(f"Pattern type {node['type']!r} requires a {key!r} entry")

	return build_pattern(node[key])


def _pair (method: str) -> typing.Callable[[PatternNode], buzzline.pattern.Pattern]:

	"""Builder for the two-child combinators that read ``a`` and ``b``."""

	def build (node: PatternNode) -> buzzline.pattern.Pattern:
		return getattr(_child(node, "a"), method)(_child(node, "b"))

	return build


PATTERN_TYPES: typing.Dict[str, typing.Callable[[PatternNode], buzzline.pattern.Pattern]] = {
	"pause":         lambda n: buzzline.shapes.Pause(n["duration"]),
	"constant":      lambda n: buzzline.shapes.Constant(n["level"], n["duration"]),
	"linear":        lambda n: buzzline.shapes.Linear(n["start"], n["end"], n["duration"]),
	"saw":           lambda n: buzzline.shapes.SawWave(n.get("amplitude", 1.0), n["wavelength"]),
	"triangle":      lambda n: buzzline.shapes.TriangleWave(n.get("amplitude", 1.0), n["wavelength"]),
	"square":        lambda n: buzzline.shapes.SquareWave(n.get("amplitude", 1.0), n["wavelength"]),
	"sine":          lambda n: buzzline.shapes.SineWave(n.get("amplitude", 1.0), n["wavelength"]),
	"random":        lambda n: buzzline.randomness.Random(n.get("low", 0.0), n.get("high", 1.0), n["duration"]),
	"random_every":  lambda n: buzzline.randomness.RandomEvery(n.get("low", 0.0), n.get("high", 1.0), n["interval"], n["duration"]),
	"random_walk":   lambda n: buzzline.randomness.RandomWalk(n.get("low", 0.0), n.get("high", 1.0), n["increase"], n["decrease"], n["duration"]),
	"sum":           _pair("sum"),
	"subtract":      _pair("subtract"),
	"average":       _pair("average"),
	"multiply":      lambda n: _child(n, "pattern").multiply(_child(n, "modulator")),
	"chain":         lambda n: _child(n, "first").chain(_child(n, "then")),
	"crossfade":     lambda n: _child(n, "first").crossfade(_child(n, "then"), n["overlap"]),
}


def _apply_wrappers (pattern: buzzline.pattern.Pattern, node: PatternNode) -> buzzline.pattern.Pattern:

	if "scale_time" in node:
		pattern = pattern.scale_time(node["scale_time"])

	if "scale_intensity" in node:
		pattern = pattern.scale_intensity(node["scale_intensity"])

	if "shift" in node:
		pattern = pattern.shift(node["shift"])

	if "repeat" in node:
		pattern = pattern.repeat(node["repeat"])

	if "clamp" in node:
		floor, ceiling = node["clamp"]
		pattern = pattern.clamp(floor, ceiling)

	if node.get("clamp_valid"):
		pattern = pattern.clamp_valid()

	if node.get("scale_valid"):
		pattern = pattern.scale_valid()

	if node.get("forever"):
		pattern = pattern.forever()

	return pattern


def build_pattern (node: PatternNode) -> buzzline.pattern.Pattern:

	"""
	Build a pattern tree from a tagged mapping.

	Raises ``ValueError`` for an unknown ``type`` or a missing parameter.

	Example:
		```python
		pattern = build_pattern({"type": "square", "wavelength": 0.5, "repeat": 8})
		```
	"""

	if not isinstance(node, dict) or "type" not in node:
		raise ValueError(f"Pattern definition must be a mapping with a 'type': {node!r}")

	pattern_type = node["type"]

	if pattern_type not in PATTERN_TYPES:
		available = ", ".join(f'"{k}"' for k in sorted(PATTERN_TYPES))
		raise ValueError(f"Unknown pattern type {pattern_type!r}. Available types: {available}")

	try:
		pattern = PATTERN_TYPES[pattern_type](node)
	except KeyError as e:
		raise ValueError(f"Pattern type {pattern_type!r} is missing parameter {e.args[0]!r}") from e

	return _apply_wrappers(pattern, node)
