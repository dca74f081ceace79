"""Command-line host: run the speech detector on a live microphone."""

import argparse
import logging
import signal
from pathlib import Path
from typing import Optional

import sounddevice as sd

from .audio.input import AudioInput, AudioInputConfig
from .config.settings import create_example_env_file, load_config, setup_logging
from .core.events import DetectorEvent, RecordedChunk, TICK_EVENTS
from .core.shutdown import GracefulShutdown

logger = logging.getLogger("SpeechDetector")


def log_event(event: DetectorEvent) -> None:
    level = logging.DEBUG if event.type in TICK_EVENTS else logging.INFO
    details = []
    if event.volume is not None:
        details.append(f"volume={event.volume:.4f}")
    if event.segment_id is not None:
        details.append(f"segment={event.segment_id}")
    if event.items is not None:
        details.append(f"items={event.items}")
    if event.duration_ms is not None:
        details.append(f"duration={event.duration_ms:.0f}ms")
    if event.average_volume is not None:
        details.append(f"average={event.average_volume:.4f}")
    if event.reason:
        details.append(f"reason={event.reason}")
    logger.log(level, "%s %s", event.type.value, " ".join(details))


class ChunkWriter:
    """Writes accepted recordings as segment-<id>.wav files."""

    def __init__(self, output_dir: Path):
        self._output_dir = output_dir
        self._output_dir.mkdir(parents=True, exist_ok=True)

    def __call__(self, chunk: RecordedChunk) -> None:
        path = self._output_dir / f"segment-{chunk.segment_id}.wav"
        path.write_bytes(chunk.data)
        logger.info(f"Saved {len(chunk.data)} bytes to {path}")


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Volume-threshold speech detector")
    parser.add_argument("--config", type=str, help="Path to config file", default=".env")
    parser.add_argument("--create-config", action="store_true", help="Create example config file")
    parser.add_argument("--list-devices", action="store_true", help="List audio devices and exit")
    parser.add_argument("--device", type=int, help="Input device index", default=None)
    parser.add_argument("--output-dir", type=str, help="Directory for accepted speech segments", default=None)

    args = parser.parse_args(argv)

    if args.create_config:
        create_example_env_file()
        print("Example configuration file created at .env.example")
        print("Copy it to .env and adjust the thresholds for your microphone.")
        return 0

    if args.list_devices:
        print(sd.query_devices())
        return 0

    try:
        config = load_config(Path(args.config) if args.config else None)
    except ValueError as e:
        print(f"Configuration error: {e}")
        return 2

    setup_logging(config.log_level)

    shutdown = GracefulShutdown()
    audio_input = AudioInput(
        shutdown_signal=shutdown,
        detector_cfg=config,
        cfg=AudioInputConfig(input_device=args.device),
        on_event=log_event,
        on_speech=ChunkWriter(Path(args.output_dir)) if args.output_dir else None,
    )

    signal.signal(signal.SIGINT, lambda signum, frame: shutdown.stop())
    signal.signal(signal.SIGTERM, lambda signum, frame: shutdown.stop())

    audio_input.start()
    logger.info("Listening, press Ctrl-C to stop")
    while not shutdown.wait(0.5):
        pass

    audio_input.join(timeout=2.0)
    print("\nGoodbye!")
    return 0
