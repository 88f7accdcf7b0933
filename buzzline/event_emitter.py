"""Lifecycle notifications for the driver.

`Driver` emits these events on ``driver.events``:

	"start"  ()                                   A run has begun.
	"tick"   (tick, elapsed, levels)              A tick's commands were sent.
	                                              ``levels`` maps device index to
	                                              ``{actuator: level}``.
	"stop"   (reason)                             A run has ended; ``reason`` is
	                                              "complete", "cancelled" or "error".

Listeners may be plain functions or coroutine functions.  A listener that
raises during a clean run ends the run with that exception.  When the run has
already failed, listener errors are logged instead so the original failure
reaches the caller.
"""

import asyncio
import collections
import inspect
import logging
import typing


logger = logging.getLogger(__name__)


Listener = typing.Callable[..., typing.Any]


class EventEmitter:

	"""
	Named events with sync and async listeners.
	"""

	def __init__ (self) -> None:
		self._listeners: typing.DefaultDict[str, typing.List[Listener]] = collections.defaultdict(list)

	def on (self, event_name: str, listener: Listener) -> None:

		"""
		Call ``listener`` whenever ``event_name`` is emitted.
		"""

		self._listeners[event_name].append(listener)

	async def emit_async (self, event_name: str, *args: typing.Any) -> None:

		"""
		Call plain listeners in order, then await every coroutine listener together.

		The first exception from any listener propagates.
		"""

		pending: typing.List[typing.Awaitable[typing.Any]] = []

		for listener in list(self._listeners.get(event_name, [])):

			if inspect.iscoroutinefunction(listener):
				pending.append(listener(*args))
			else:
				listener(*args)

		if pending:
			await asyncio.gather(*pending)

	async def emit_guarded (self, event_name: str, *args: typing.Any) -> None:

		"""
		Like `emit_async`, but every listener runs and none of their exceptions propagate.

		Used while the driver is already unwinding from an error, where a
		failing listener must not replace that error.
		"""

		pending: typing.List[typing.Awaitable[typing.Any]] = []

		for listener in list(self._listeners.get(event_name, [])):

			if inspect.iscoroutinefunction(listener):
				pending.append(listener(*args))
				continue

			try:
				listener(*args)
			except Exception:
				logger.exception(f"Listener for {event_name!r} failed")

		if not pending:
			return

		results = await asyncio.gather(*pending, return_exceptions=True)

		for result in results:
			if isinstance(result, Exception):
				logger.error(f"Listener for {event_name!r} failed: {result!r}", exc_info=result)
