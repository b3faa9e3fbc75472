"""Engine configuration using pydantic-settings."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Find .env file: check package dir first, then project root
_PACKAGE_DIR = Path(__file__).parent
_PROJECT_ROOT = _PACKAGE_DIR.parent
_ENV_FILE = _PACKAGE_DIR / ".env" if (_PACKAGE_DIR / ".env").exists() else _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Engine settings loaded from environment variables.

    The coding systems and codes default to the HL7 terminology values the
    surrounding application writes when it records observations. They are
    configurable so a deployment with a local code system can remap them
    without touching the extraction code.
    """

    model_config = SettingsConfigDict(
        env_prefix="OBSENGINE_",
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Interpretation (abnormal flag)
    interpretation_system: str = (
        "http://terminology.hl7.org/CodeSystem/v3-ObservationInterpretation"
    )
    abnormal_interpretation_code: str = "A"

    # Reference range meaning
    reference_range_system: str = "http://terminology.hl7.org/CodeSystem/referencerange-meaning"
    normal_reference_range_code: str = "normal"

    # Display
    date_parse_error_key: str = "DATE_ERROR_PARSE"
    recorded_by_key: str = "OBSERVATIONS_RECORDED_BY"
    unknown_encounter_type: str = "Unknown"
    date_time_display_format: str = "%d %b, %Y %I:%M %p"


settings = Settings()
