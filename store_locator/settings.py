from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LOCATOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Full SQLAlchemy URL, e.g. "sqlite:///data/locations.db". Overrides the db_* parts when set.
    database_url: str = ""
    db_username: str = ""
    db_password: str = ""
    db_name: str = ""
    db_host: str = "localhost"
    db_type: str = "mysql+pymysql"  # SQLAlchemy driver name; bare "mysql" also maps to PyMySQL

    locations_table: str = "locations"
    lat_column: str = "lat"
    lng_column: str = "lng"
    radius: int = 50
    units: str = "english"  # "english" or "metric"
    distance_adjustment: float = 1.2
    distance_decimals: int = 1

    log_level: str = "INFO"


def get_settings() -> Settings:
    return Settings()
