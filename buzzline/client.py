"""The boundary between the driver and whatever talks to the hardware.

The driver never opens connections or speaks a wire protocol itself.  It
works against anything that satisfies `DeviceClient`: enumerate devices,
send levels, stop everything.  `buzzline.midi_client.MidiDeviceClient` is
one such client; tests use an in-memory fake.
"""

import dataclasses
import typing


@dataclasses.dataclass
class Device:

	"""
	A connected device and the actuators it exposes.

	``index`` is stable for as long as the device stays connected.  Actuator
	indices are scoped to their device.
	"""

	index: int
	name: str = ""
	actuators: typing.List[int] = dataclasses.field(default_factory=list)


class CommandError (Exception):

	"""
	Sending a command to a device failed or timed out.

	Ends the current run.  The underlying error is chained as ``__cause__``.
	"""

	def __init__ (self, message: str, device_index: typing.Optional[int] = None) -> None:

		super().__init__(message)
		self.device_index = device_index


@typing.runtime_checkable
class DeviceClient (typing.Protocol):

	"""
	Protocol for device-control clients the driver can command.

	The client is shared with the owning application, which may keep using it
	for its own commands.  The driver never closes it.
	"""

	def devices (self) -> typing.List[Device]:

		"""
		Return the devices connected right now.
		"""

		...

	async def send_scalar (self, device_index: int, level: float) -> None:

		"""
		Set every actuator of a device to ``level`` in ``[0.0, 1.0]``.
		"""

		...

	async def send_intensities (self, device_index: int, levels: typing.Dict[int, float]) -> None:

		"""
		Set each actuator of a device to its own level, keyed by actuator index.
		"""

		...

	async def stop_all (self) -> None:

		"""
		Zero every actuator on every connected device.
		"""

		...
