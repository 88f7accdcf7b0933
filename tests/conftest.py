import asyncio
import typing

import mido
import pytest

import buzzline.client


class FakeClient:

	"""In-memory device client that records every command it receives."""

	def __init__ (self, devices: typing.Optional[typing.List[buzzline.client.Device]] = None) -> None:

		"""Start with the given devices (default: one device with two actuators)."""

		if devices is None:
			devices = [buzzline.client.Device(index=0, name="Fake", actuators=[0, 1])]

		self.connected = devices
		self.commands: typing.List[typing.Tuple[int, typing.Dict[int, float]]] = []
		self.scalars: typing.List[typing.Tuple[int, float]] = []
		self.stop_all_count = 0
		self.fail_on_send: typing.Optional[Exception] = None
		self.fail_on_stop: typing.Optional[Exception] = None
		self.send_delay: float = 0.0

	def devices (self) -> typing.List[buzzline.client.Device]:

		"""Return the currently connected devices."""

		return list(self.connected)

	async def send_scalar (self, device_index: int, level: float) -> None:

		"""Record a scalar command."""

		self.scalars.append((device_index, level))

	async def send_intensities (self, device_index: int, levels: typing.Dict[int, float]) -> None:

		"""Record a per-actuator command, or fail if told to."""

		if self.send_delay:
			await asyncio.sleep(self.send_delay)

		if self.fail_on_send is not None:
			raise self.fail_on_send

		self.commands.append((device_index, dict(levels)))

	async def stop_all (self) -> None:

		"""Count stop-all commands."""

		self.stop_all_count += 1

		if self.fail_on_stop is not None:
			raise self.fail_on_stop


class FakeMidiOut:

	"""Minimal MIDI output stub that keeps what it was sent."""

	def __init__ (self, name: str = "Dummy MIDI") -> None:

		"""Start with no messages."""

		self.name = name
		self.sent: typing.List[mido.Message] = []
		self.closed = False

	def send (self, message: mido.Message) -> None:

		"""Keep the message for inspection."""

		self.sent.append(message)

	def close (self) -> None:

		"""Mark the port closed."""

		self.closed = True


@pytest.fixture
def fake_client () -> FakeClient:

	"""A fake client with one two-actuator device."""

	return FakeClient()


@pytest.fixture
def patch_midi (monkeypatch: pytest.MonkeyPatch) -> typing.List[FakeMidiOut]:

	"""Patch mido so opening an output returns a FakeMidiOut.  Yields the list of opened ports."""

	opened: typing.List[FakeMidiOut] = []

	def fake_get_output_names () -> typing.List[str]:
		return ["Dummy MIDI"]

	def fake_open_output (name: str) -> FakeMidiOut:
		port = FakeMidiOut(name)
		opened.append(port)
		return port

	monkeypatch.setattr(mido, "get_output_names", fake_get_output_names)
	monkeypatch.setattr(mido, "open_output", fake_open_output)

	return opened
