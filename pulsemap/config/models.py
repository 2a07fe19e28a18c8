"""Configuration models."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class PostgresConfig(BaseModel):
    """Postgres configuration."""

    host: str = Field("localhost", description="Database host")
    port: int = Field(5432, description="Database port")
    database: str = Field("postgres", description="Database name")
    user: str = Field("postgres", description="Database user")
    password: Optional[str] = Field(None, description="Database password")
    password_env: Optional[str] = Field(None, description="Environment variable for password")
    sslmode: Optional[str] = Field(None, description="libpq sslmode (e.g. require for hosted Postgres)")


class WHOConfig(BaseModel):
    """WHO Disease Outbreak News API."""

    enabled: bool = Field(True, description="Whether the WHO source is fetched")
    base_url: str = Field(
        "https://www.who.int/api/hubs/diseaseoutbreaknews",
        description="DON API endpoint",
    )
    item_url_base: str = Field(
        "https://www.who.int/emergencies/disease-outbreak-news/item/",
        description="Prefix for public bulletin links",
    )
    top: int = Field(50, description="Latest bulletins fetched per run", ge=1, le=500)
    timeout: float = Field(30.0, description="Request timeout in seconds", gt=0)
    user_agent: str = Field("PulseMap/1.0 (health-surveillance-dashboard)")


class ReliefWebConfig(BaseModel):
    """ReliefWeb RSS source."""

    # The ReliefWeb API needs a registered appname, so the source is opt-in.
    enabled: bool = Field(False, description="Whether the ReliefWeb source is fetched")
    feed_url: str = Field(
        "https://reliefweb.int/disasters/rss.xml?advancedSearch=%28TY4642%29",
        description="RSS feed of epidemic disasters",
    )
    timeout: float = Field(30.0, description="Request timeout in seconds", gt=0)
    user_agent: str = Field("PulseMap/1.0 (health-surveillance-dashboard)")


class GeocoderConfig(BaseModel):
    """Geocoder configuration."""

    mapbox_url: str = Field(
        "https://api.mapbox.com/geocoding/v5/mapbox.places",
        description="Mapbox forward geocoding endpoint",
    )
    mapbox_token: Optional[str] = Field(None, description="Mapbox token (prefer mapbox_token_env)")
    mapbox_token_env: Optional[str] = Field(
        "MAPBOX_TOKEN", description="Environment variable for the Mapbox token"
    )
    timeout: float = Field(10.0, description="Request timeout in seconds", gt=0)


class BackfillDefaults(BaseModel):
    """Backfill limits."""

    default_limit: int = Field(200, description="Bulletins fetched when no limit is given", ge=1)
    max_limit: int = Field(500, description="Hard cap on bulletins per backfill", ge=1)

    @field_validator("max_limit")
    @classmethod
    def validate_max_limit(cls, v: int, info) -> int:
        """Validate that the cap is not below the default."""
        default_limit = info.data.get("default_limit", 200)
        if v < default_limit:
            raise ValueError(f"max_limit ({v}) must be >= default_limit ({default_limit})")
        return v


class ConfigModel(BaseModel):
    """Main configuration model."""

    postgres: PostgresConfig = Field(default_factory=PostgresConfig)
    who: WHOConfig = Field(default_factory=WHOConfig)
    reliefweb: ReliefWebConfig = Field(default_factory=ReliefWebConfig)
    geocoder: GeocoderConfig = Field(default_factory=GeocoderConfig)
    backfill: BackfillDefaults = Field(default_factory=BackfillDefaults)
