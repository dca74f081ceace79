import os
from pathlib import Path
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, model_validator
from dotenv import load_dotenv
import logging

logger = logging.getLogger(__name__)

class DetectorConfig(BaseModel):
    tick_interval_ms: int = Field(default=50, gt=0, description="Nominal interval between volume samples (ms)")
    pre_roll_window_ms: int = Field(default=600, ge=0, description="Cadence of pre-roll hints while no segment is open (ms)")
    speech_min_volume: float = Field(default=0.02, ge=0.0, description="Volume above which a sample counts as signal")
    silence_max_volume: float = Field(default=0.001, ge=0.0, description="Upper bound of background silence, documented only")
    mute_max_volume: float = Field(default=0.0001, ge=0.0, description="Volume below which the microphone is considered muted")
    max_inter_segment_silence_ms: int = Field(default=600, gt=0, description="Trailing silence that closes a segment (ms)")
    min_segment_duration_ms: int = Field(default=400, ge=0, description="Shorter segments are aborted as clicks")
    min_average_segment_volume: float = Field(default=0.04, ge=0.0, description="Quieter segments are aborted as background noise")
    recording_enabled: bool = Field(default=True, description="Process ticks from session start")
    log_level: str = Field(default="INFO", description="Logging level")

    model_config = ConfigDict(frozen=True)

    @property
    def max_silence_ticks(self) -> int:
        # half-up, not banker's rounding
        return int(self.max_inter_segment_silence_ms / self.tick_interval_ms + 0.5)

    @model_validator(mode="after")
    def _check_timing(self) -> "DetectorConfig":
        if self.max_silence_ticks < 1:
            raise ValueError(
                "max_inter_segment_silence_ms must span at least one tick "
                f"({self.max_inter_segment_silence_ms}ms < {self.tick_interval_ms}ms)"
            )
        if not self.mute_max_volume < self.silence_max_volume < self.speech_min_volume:
            logger.warning(
                "Volume thresholds out of order: mute=%s silence=%s speech=%s",
                self.mute_max_volume, self.silence_max_volume, self.speech_min_volume,
            )
        return self

def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")

def load_config(config_path: Optional[Path] = None) -> DetectorConfig:
    if config_path is None:
        config_path = Path(".env")

    if config_path.exists():
        load_dotenv(config_path)
        logger.info(f"Loaded environment variables from {config_path}")
    else:
        logger.warning(f"Config file {config_path} not found, using environment variables only")

    try:
        return DetectorConfig(
            tick_interval_ms=int(os.getenv("DETECTOR_TICK_INTERVAL_MS", "50")),
            pre_roll_window_ms=int(os.getenv("DETECTOR_PRE_ROLL_WINDOW_MS", "600")),
            speech_min_volume=float(os.getenv("DETECTOR_SPEECH_MIN_VOLUME", "0.02")),
            silence_max_volume=float(os.getenv("DETECTOR_SILENCE_MAX_VOLUME", "0.001")),
            mute_max_volume=float(os.getenv("DETECTOR_MUTE_MAX_VOLUME", "0.0001")),
            max_inter_segment_silence_ms=int(os.getenv("DETECTOR_MAX_INTER_SEGMENT_SILENCE_MS", "600")),
            min_segment_duration_ms=int(os.getenv("DETECTOR_MIN_SEGMENT_DURATION_MS", "400")),
            min_average_segment_volume=float(os.getenv("DETECTOR_MIN_AVERAGE_SEGMENT_VOLUME", "0.04")),
            recording_enabled=_env_bool("DETECTOR_RECORDING_ENABLED", "true"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    except Exception as e:
        logger.error(f"Failed to load configuration: {e}")
        raise

def create_example_env_file(path: Path = Path(".env.example")):
    example_content = """# Interval between volume samples (ms)
DETECTOR_TICK_INTERVAL_MS=50

# Emit a pre-roll hint this often while no segment is open (ms)
DETECTOR_PRE_ROLL_WINDOW_MS=600

# Volume thresholds (smoothed RMS, 0..1): mute < silence < speech
DETECTOR_SPEECH_MIN_VOLUME=0.02
DETECTOR_SILENCE_MAX_VOLUME=0.001
DETECTOR_MUTE_MAX_VOLUME=0.0001

# Trailing silence that ends a segment (ms)
DETECTOR_MAX_INTER_SEGMENT_SILENCE_MS=600

# Segments shorter or quieter than this are aborted
DETECTOR_MIN_SEGMENT_DURATION_MS=400
DETECTOR_MIN_AVERAGE_SEGMENT_VOLUME=0.04

# Process volume samples as soon as the session starts (true/false)
DETECTOR_RECORDING_ENABLED=true

# Logging level
LOG_LEVEL=INFO
"""

    with open(path, "w") as f:
        f.write(example_content)

    logger.info(f"Created example environment file at {path}")

def setup_logging(log_level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
