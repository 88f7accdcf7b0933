import typing

import mido
import pytest

import buzzline.client
import buzzline.driver
import buzzline.midi_client
import buzzline.shapes

from conftest import FakeMidiOut


def _values (port: FakeMidiOut) -> typing.List[typing.Tuple[int, int]]:

	"""Return (control, value) for every CC the port was sent."""

	return [(message.control, message.value) for message in port.sent if message.type == "control_change"]


@pytest.mark.parametrize("level, value", [(0.0, 0), (1.0, 127), (0.5, 64), (-0.3, 0), (1.7, 127)])
def test_level_to_cc (level: float, value: int) -> None:

	"""Levels map onto 0-127, clamped at the ends."""

	assert buzzline.midi_client.level_to_cc(level) == value


def test_devices_one_per_port () -> None:

	"""Each port is a device with one actuator per control."""

	client = buzzline.midi_client.MidiDeviceClient([FakeMidiOut("A"), FakeMidiOut("B")], controls=[1, 74])

	assert client.devices() == [
		buzzline.client.Device(index=0, name="A", actuators=[0, 1]),
		buzzline.client.Device(index=1, name="B", actuators=[0, 1]),
	]


def test_closed_ports_are_not_listed () -> None:

	"""A closed port no longer shows up as a device."""

	closed = FakeMidiOut("Gone")
	closed.close()
	client = buzzline.midi_client.MidiDeviceClient([closed, FakeMidiOut("Here")])

	assert [device.name for device in client.devices()] == ["Here"]


@pytest.mark.asyncio
async def test_send_intensities () -> None:

	"""Each actuator's level goes out on its own CC."""

	port = FakeMidiOut()
	client = buzzline.midi_client.MidiDeviceClient([port], controls=[1, 74], channel=3)

	await client.send_intensities(0, {0: 1.0, 1: 0.0})

	assert _values(port) == [(1, 127), (74, 0)]
	assert all(message.channel == 3 for message in port.sent)


@pytest.mark.asyncio
async def test_send_scalar_and_stop_all () -> None:

	"""A scalar goes to every control; stop_all zeroes every control on every port."""

	ports = [FakeMidiOut("A"), FakeMidiOut("B")]
	client = buzzline.midi_client.MidiDeviceClient(ports, controls=[1, 2])

	await client.send_scalar(1, 0.5)
	assert _values(ports[1]) == [(1, 64), (2, 64)]

	await client.stop_all()
	assert _values(ports[0]) == [(1, 0), (2, 0)]
	assert _values(ports[1])[-2:] == [(1, 0), (2, 0)]


@pytest.mark.asyncio
async def test_unknown_device_or_actuator () -> None:

	"""Commands for devices or actuators that do not exist raise ValueError."""

	client = buzzline.midi_client.MidiDeviceClient([FakeMidiOut()])

	with pytest.raises(ValueError):
		await client.send_scalar(3, 0.5)

	with pytest.raises(ValueError):
		await client.send_intensities(0, {4: 0.5})


@pytest.mark.parametrize("kwargs", [{"controls": []}, {"controls": [128]}, {"channel": 16}])
def test_invalid_configuration_rejected (kwargs: typing.Dict[str, typing.Any]) -> None:

	"""Bad control numbers and channels are rejected."""

	with pytest.raises(ValueError):
		buzzline.midi_client.MidiDeviceClient([FakeMidiOut()], **kwargs)


def test_open_single_port (patch_midi: typing.List[FakeMidiOut]) -> None:

	"""open() picks the only available port."""

	client = buzzline.midi_client.MidiDeviceClient.open(controls=[5])

	assert len(patch_midi) == 1
	assert client.ports == patch_midi
	assert client.controls == [5]


def test_open_unknown_port_fails (patch_midi: typing.List[FakeMidiOut]) -> None:

	"""Asking for a port that does not exist is an error."""

	with pytest.raises(ValueError):
		buzzline.midi_client.MidiDeviceClient.open("Not There")

	assert patch_midi == []


def test_select_output_device_ambiguous (monkeypatch: pytest.MonkeyPatch) -> None:

	"""With several ports and no name, nothing is opened."""

	monkeypatch.setattr(mido, "get_output_names", lambda: ["One", "Two"])
	monkeypatch.setattr(mido, "open_output", lambda name: pytest.fail("should not open"))

	assert buzzline.midi_client.select_output_device() == (None, None)


def test_close_closes_ports () -> None:

	"""close() closes every port."""

	ports = [FakeMidiOut(), FakeMidiOut()]
	buzzline.midi_client.MidiDeviceClient(ports).close()

	assert all(port.closed for port in ports)


@pytest.mark.asyncio
async def test_driver_over_midi () -> None:

	"""The driver runs a pattern through the MIDI client and zeroes it at the end."""

	port = FakeMidiOut()
	client = buzzline.midi_client.MidiDeviceClient([port], controls=[1])
	driver = buzzline.driver.Driver(client, buzzline.shapes.Linear(0.0, 1.0, 0.5), tick_rate=4)

	await driver.run(realtime=False)

	assert _values(port) == [(1, 0), (1, 64), (1, 0)]
