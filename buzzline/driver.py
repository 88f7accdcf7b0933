import asyncio
import collections
import logging
import time
import typing

import buzzline.client
import buzzline.constants
import buzzline.event_emitter
import buzzline.pattern


logger = logging.getLogger(__name__)


class Driver:

	"""
	Samples patterns at a fixed tick rate and sends the levels to every device.

	One global pattern covers every actuator.  Overrides take precedence for
	a whole device or for a single actuator, most specific first:

		1. the actuator's own pattern, if one is set,
		2. otherwise the device's pattern, if one is set,
		3. otherwise the global pattern.

	The global pattern is sampled once per tick and shared, so a random
	global pattern drives every actuator with the same value on that tick.
	Override patterns are sampled fresh for each actuator they cover.

	A run ends when the global pattern's duration has elapsed, when
	`stop()` is called, or when the ``keep_running`` callable given to
	`run_while()` returns false.  However it ends, every device is sent a
	stop-all command exactly once.

	Example:
		```python
		driver = buzzline.driver.Driver(client, buzzline.shapes.SineWave(1.0, 2.0).repeat(5))
		driver.set_actuator_pattern(0, 1, buzzline.shapes.Constant(0.3, 10.0))
		await driver.run()
		```
	"""

	def __init__ (
		self,
		client: buzzline.client.DeviceClient,
		pattern: buzzline.pattern.Pattern,
		tick_rate: int = buzzline.constants.DEFAULT_TICK_RATE,
		command_timeout: typing.Optional[float] = None
	) -> None:

		"""
		Parameters:
			client: Device-control client.  Shared with the caller and never closed here.
			pattern: The global pattern.
			tick_rate: Samples per second, a positive whole number (default 10).
			command_timeout: Seconds to wait for each device command before
				giving up with a `CommandError`.  ``None`` (default) waits
				indefinitely, so one unresponsive device stalls the whole run.
		"""

		if command_timeout is not None and command_timeout <= 0:
			raise ValueError("Command timeout must be positive")

		self.client = client
		self.pattern = pattern
		self.device_patterns: typing.Dict[int, buzzline.pattern.Pattern] = {}
		self.actuator_patterns: typing.Dict[typing.Tuple[int, int], buzzline.pattern.Pattern] = {}
		self.command_timeout = command_timeout

		self.running = False
		self.tick_count = 0
		self.events = buzzline.event_emitter.EventEmitter()

		# Changes made while running wait here until the next tick boundary.
		self._pending: typing.Deque[typing.Callable[[], None]] = collections.deque()
		self._stop_requested = False

		self.tick_rate: int = 0
		self.set_tick_rate(tick_rate)

	def _submit (self, change: typing.Callable[[], None]) -> None:

		"""Apply a change now, or at the next tick boundary if a run is in progress."""

		if self.running:
			self._pending.append(change)
		else:
			change()

	def _apply_pending (self) -> None:

		while self._pending:
			change = self._pending.popleft()
			change()

	def set_tick_rate (self, tick_rate: int) -> None:

		"""
		Change how many times per second patterns are sampled.
		"""

		if isinstance(tick_rate, bool) or not isinstance(tick_rate, int):
			raise ValueError(f"Tick rate must be a whole number of Hz, not {tick_rate!r}")

		if tick_rate <= 0:
			raise ValueError("Tick rate must be positive")

		def change () -> None:
			self.tick_rate = tick_rate
			logger.info(f"Tick rate set to {tick_rate} Hz")

		self._submit(change)

	def set_pattern (self, pattern: buzzline.pattern.Pattern) -> None:

		"""
		Replace the global pattern.

		The run length follows the global pattern, so replacing it mid-run
		also changes when the run ends.
		"""

		def change () -> None:
			if self.running:
				pattern.reset()
			self.pattern = pattern

		self._submit(change)

	def set_device_pattern (self, device_index: int, pattern: buzzline.pattern.Pattern) -> None:

		"""
		Drive every actuator of one device with ``pattern`` instead of the global pattern.
		"""

		def change () -> None:
			if self.running:
				pattern.reset()
			self.device_patterns[device_index] = pattern

		self._submit(change)

	def clear_device_pattern (self, device_index: int) -> None:

		"""
		Remove a device override.  Does nothing if none is set.
		"""

		self._submit(lambda: self.device_patterns.pop(device_index, None))

	def set_actuator_pattern (self, device_index: int, actuator_index: int, pattern: buzzline.pattern.Pattern) -> None:

		"""
		Drive a single actuator with ``pattern``, ahead of any device or global pattern.
		"""

		def change () -> None:
			if self.running:
				pattern.reset()
			self.actuator_patterns[(device_index, actuator_index)] = pattern

		self._submit(change)

	def clear_actuator_pattern (self, device_index: int, actuator_index: int) -> None:

		"""
		Remove an actuator override.  Does nothing if none is set.
		"""

		self._submit(lambda: self.actuator_patterns.pop((device_index, actuator_index), None))

	def stop (self) -> None:

		"""
		Ask the current run to end at the next tick boundary.

		Commands already in flight for the current tick still complete.
		"""

		if self.running:
			self._stop_requested = True

	def resolve (self, device_index: int, actuator_index: int, global_level: float, elapsed: float) -> float:

		"""
		Return the level for one actuator on the current tick.

		``global_level`` is the tick's shared sample of the global pattern.
		"""

		pattern = self.actuator_patterns.get((device_index, actuator_index))

		if pattern is None:
			pattern = self.device_patterns.get(device_index)

		if pattern is None:
			return global_level

		return pattern.sample(elapsed)

	async def run (self, realtime: bool = True) -> None:

		"""
		Run until the global pattern's duration has elapsed, or until `stop()` is called.

		Parameters:
			realtime: When False, simulate time instead of sleeping between
				ticks.  Tick ``n`` is sampled at exactly ``n / tick_rate``
				seconds and the run finishes as fast as the client allows.

		Raises:
			CommandError: A device command failed.  Devices have already
				been sent stop-all by the time this propagates.
		"""

		await self._run(None, realtime)

	async def run_while (self, keep_running: typing.Callable[[], bool], realtime: bool = True) -> None:

		"""
		Like `run()`, but also stop once ``keep_running()`` returns false.

		The flag is checked once per tick, at the tick boundary.
		"""

		await self._run(keep_running, realtime)

	async def _run (self, keep_running: typing.Optional[typing.Callable[[], bool]], realtime: bool) -> None:

		if self.running:
			raise RuntimeError("Driver is already running")

		self._apply_pending()
		self.running = True
		self._stop_requested = False
		self.tick_count = 0

		self._reset_patterns()

		duration = self.pattern.duration()
		if duration >= buzzline.constants.FOREVER:
			logger.info(f"Driver running at {self.tick_rate} Hz until stopped")
		else:
			logger.info(f"Driver running at {self.tick_rate} Hz for {duration:.2f}s")

		try:
			await self.events.emit_async("start")
			reason = await self._tick_loop(keep_running, realtime)

		except asyncio.CancelledError:
			await self._finish("cancelled", failed=True)
			raise

		except Exception:
			await self._finish("error", failed=True)
			raise

		await self._finish(reason, failed=False)

	def _reset_patterns (self) -> None:

		"""Put every pattern back in its starting state before a run."""

		self.pattern.reset()

		for pattern in self.device_patterns.values():
			pattern.reset()

		for pattern in self.actuator_patterns.values():
			pattern.reset()

	async def _tick_loop (self, keep_running: typing.Optional[typing.Callable[[], bool]], realtime: bool) -> str:

		"""Tick until the run should end.  Returns the reason it ended."""

		start_time = time.perf_counter()
		tick = 0

		# Tick times are measured from the last tick rate change so a new rate takes effect cleanly.
		rate = self.tick_rate
		epoch_tick = 0
		epoch_offset = 0.0

		while True:

			self._apply_pending()

			if self.tick_rate != rate:
				epoch_offset += (tick - epoch_tick) / rate
				epoch_tick = tick
				rate = self.tick_rate

			if realtime:
				elapsed = time.perf_counter() - start_time
			else:
				elapsed = epoch_offset + (tick - epoch_tick) / rate

			if elapsed >= self.pattern.duration():
				logger.info(f"Pattern complete after {self.tick_count} ticks")
				return "complete"

			if self._stop_requested or (keep_running is not None and not keep_running()):
				logger.info(f"Driver cancelled after {self.tick_count} ticks")
				return "cancelled"

			levels = await self._tick(elapsed)
			self.tick_count += 1

			await self.events.emit_async("tick", tick, elapsed, levels)

			tick += 1

			if realtime:
				next_tick_time = start_time + epoch_offset + (tick - epoch_tick) / rate
				sleep_time = next_tick_time - time.perf_counter()

				if sleep_time > 0:
					await asyncio.sleep(sleep_time)
			else:
				# Still yield so other tasks (and stop requests) get a look in.
				await asyncio.sleep(0)

	async def _tick (self, elapsed: float) -> typing.Dict[int, typing.Dict[int, float]]:

		"""Sample every actuator and send one command per device."""

		global_level = self.pattern.sample(elapsed)
		sent: typing.Dict[int, typing.Dict[int, float]] = {}

		# Re-enumerated every tick: devices come and go.
		for device in self.client.devices():

			if not device.actuators:
				continue

			levels: typing.Dict[int, float] = {}

			for actuator_index in device.actuators:
				level = self.resolve(device.index, actuator_index, global_level, elapsed)
				levels[actuator_index] = max(buzzline.constants.MIN_INTENSITY, min(buzzline.constants.MAX_INTENSITY, level))

			await self._command(device.index, self.client.send_intensities(device.index, levels))
			sent[device.index] = levels

		logger.debug(f"Tick at {elapsed:.3f}s: {sent}")

		return sent

	async def _command (self, device_index: typing.Optional[int], command: typing.Awaitable[None]) -> None:

		"""Await a client command, turning any failure into a `CommandError`."""

		target = "all devices" if device_index is None else f"device {device_index}"

		try:
			if self.command_timeout is None:
				await command
			else:
				await asyncio.wait_for(command, self.command_timeout)

		except asyncio.TimeoutError as e:
			raise buzzline.client.CommandError(f"Command to {target} timed out after {self.command_timeout}s", device_index) from e

		except Exception as e:
			raise buzzline.client.CommandError(f"Command to {target} failed: {e}", device_index) from e

	async def _finish (self, reason: str, failed: bool) -> None:

		"""
		Send stop-all and leave the running state.

		When the run already failed, a stop-all failure or a failing "stop"
		listener is only logged so the original error reaches the caller.
		"""

		self.running = False
		self._stop_requested = False
		self._apply_pending()

		try:
			await self._command(None, self.client.stop_all())

		except buzzline.client.CommandError:
			if not failed:
				logger.error("Stop-all failed after the run ended")
				await self.events.emit_guarded("stop", "error")
				raise

			logger.exception("Stop-all failed while handling an earlier error")

		logger.info(f"Driver stopped ({reason})")

		if failed:
			await self.events.emit_guarded("stop", reason)
		else:
			await self.events.emit_async("stop", reason)
