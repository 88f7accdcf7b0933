"""A device-control client that speaks MIDI control change.

Each open MIDI output port is one device.  Its actuators are the
control-change numbers it was configured with, indexed from 0 in the order
given.  Levels in ``[0.0, 1.0]`` are sent as CC values ``0..127``, so any
synth, lighting desk or motor controller that maps CCs can be driven by a
pattern.
"""

import logging
import typing

import mido

import buzzline.client
import buzzline.constants


logger = logging.getLogger(__name__)


def select_output_device (device_name: typing.Optional[str] = None) -> typing.Tuple[typing.Optional[str], typing.Optional[typing.Any]]:

	"""
	Find and open a MIDI output port.

	With ``device_name``, opens that port.  Without it, opens the only
	available port; when several exist the choice is ambiguous and nothing is
	opened.

	Returns:
		``(name, port)``, or ``(None, None)`` when no port could be opened.
	"""

	try:
		outputs = mido.get_output_names()
		logger.info(f"Available MIDI outputs: {outputs}")

		if not outputs:
			logger.error("No MIDI output devices found.")
			return None, None

		if device_name is not None:

			if device_name not in outputs:
				logger.error(f"MIDI output device '{device_name}' not found. Available devices: {outputs}")
				return None, None

			port = mido.open_output(device_name)
			logger.info(f"Opened MIDI output: {device_name}")
			return device_name, port

		if len(outputs) == 1:
			port = mido.open_output(outputs[0])
			logger.info(f"One MIDI output found - using '{outputs[0]}'")
			return outputs[0], port

		logger.error(f"Several MIDI outputs found, pass a device name to choose one: {outputs}")
		return None, None

	except Exception as e:
		logger.error(f"Failed to open MIDI output: {e}")
		return None, None


def level_to_cc (level: float) -> int:

	"""
	Convert a level in ``[0.0, 1.0]`` to a CC value.  Out of range levels are clamped.
	"""

	level = max(buzzline.constants.MIN_INTENSITY, min(buzzline.constants.MAX_INTENSITY, level))

	return int(round(level * buzzline.constants.MIDI_CC_MAX))


class MidiDeviceClient:

	"""
	`buzzline.client.DeviceClient` over one or more MIDI output ports.
	"""

	def __init__ (self, ports: typing.Sequence[typing.Any], controls: typing.Sequence[int] = (1,), channel: int = 0) -> None:

		"""
		Parameters:
			ports: Open mido output ports.  Port ``i`` becomes device ``i``.
			controls: CC numbers, one per actuator (default: just the mod wheel, CC 1).
			channel: MIDI channel, 0-15.
		"""

		if not controls:
			raise ValueError("At least one control number is required")

		for control in controls:
			if not 0 <= control <= 127:
				raise ValueError(f"Control number {control} is outside 0-127")

		if not 0 <= channel <= 15:
			raise ValueError(f"MIDI channel {channel} is outside 0-15")

		self.ports = list(ports)
		self.controls = list(controls)
		self.channel = channel

	@classmethod
	def open (cls, device_name: typing.Optional[str] = None, controls: typing.Sequence[int] = (1,), channel: int = 0) -> "MidiDeviceClient":

		"""
		Open a single output port by name (or the only one available) and wrap it.
		"""

		name, port = select_output_device(device_name)

		if port is None:
			raise ValueError(f"Could not open a MIDI output (requested: {device_name!r})")

		return cls([port], controls=controls, channel=channel)

	def devices (self) -> typing.List[buzzline.client.Device]:

		actuators = list(range(len(self.controls)))

		return [
			buzzline.client.Device(index=index, name=getattr(port, "name", ""), actuators=list(actuators))
			for index, port in enumerate(self.ports)
			if not getattr(port, "closed", False)
		]

	def _port (self, device_index: int) -> typing.Any:

		if not 0 <= device_index < len(self.ports):
			raise ValueError(f"No MIDI device with index {device_index}")

		return self.ports[device_index]

	def _send_level (self, port: typing.Any, actuator_index: int, level: float) -> None:

		if not 0 <= actuator_index < len(self.controls):
			raise ValueError(f"No actuator with index {actuator_index}")

		port.send(mido.Message("control_change", channel=self.channel, control=self.controls[actuator_index], value=level_to_cc(level)))

	async def send_scalar (self, device_index: int, level: float) -> None:

		port = self._port(device_index)

		for actuator_index in range(len(self.controls)):
			self._send_level(port, actuator_index, level)

	async def send_intensities (self, device_index: int, levels: typing.Dict[int, float]) -> None:

		port = self._port(device_index)

		for actuator_index, level in levels.items():
			self._send_level(port, actuator_index, level)

	async def stop_all (self) -> None:

		for device in self.devices():
			await self.send_scalar(device.index, 0.0)

	def close (self) -> None:

		"""
		Close every port.  The owning application calls this, never the driver.
		"""

		for port in self.ports:
			port.close()
