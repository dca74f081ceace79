from .settings import DetectorConfig, load_config, create_example_env_file, setup_logging

__all__ = ["DetectorConfig", "load_config", "create_example_env_file", "setup_logging"]
