from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    log_level: str = "INFO"
    default_tz: str = "UTC"
    clock_24h: bool = True  # "%H:%M" vs "%I:%M" for the time label

    # Directory for the persisted settings/lifetime records (one file per key)
    storage_dir: str = ".ruckcore"

    # Engine tuning
    simulated_time_scale: int = 10  # Elapsed-time multiplier while simulated steps are on
    resample_interval_s: int = 5  # Minimum scaled seconds between speed resamples
    max_speed_mmps: int = 5000  # 18 km/h
    pandolf_velocity_correction: bool = True  # False = plain Pandolf term3

    # Event loop
    tick_interval_s: float = 1.0

    model_config = {"env_prefix": "RUCK_", "env_file": ".env", "extra": "ignore"}


settings = Settings()
