import asyncio
import logging
import signal
import sys

import buzzline.config
import buzzline.driver
import buzzline.midi_client


# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


DEFAULT_PATTERN = {"type": "sine", "amplitude": 1.0, "wavelength": 4.0, "forever": True}


async def run (config_path: str) -> None:

	"""
	Drive the configured MIDI output with the configured pattern until interrupted.
	"""

	config = buzzline.config.load_config(config_path)

	pattern = buzzline.config.build_pattern(config.get("pattern") or DEFAULT_PATTERN)
	midi = buzzline.config.midi_settings(config)

	client = buzzline.midi_client.MidiDeviceClient.open(midi["device_name"], controls=midi["controls"], channel=midi["channel"])
	driver = buzzline.driver.Driver(client, pattern, **buzzline.config.driver_settings(config))

	loop = asyncio.get_running_loop()

	for sig in (signal.SIGINT, signal.SIGTERM):
		loop.add_signal_handler(sig, driver.stop)

	logger.info("Driving pattern. Press Ctrl+C to stop.")

	try:
		await driver.run()
	finally:
		client.close()


def main () -> None:

	"""
	Entry point for ``python -m buzzline [config.yaml]``.
	"""

	config_path = sys.argv[1] if len(sys.argv) > 1 else "config.yaml"

	try:
		asyncio.run(run(config_path))

	except KeyboardInterrupt:
		pass


if __name__ == "__main__":
	main()
