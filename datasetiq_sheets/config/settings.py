"""Configuration settings for the DataSetIQ client."""

from dataclasses import dataclass, field
from pathlib import Path
import os

from dotenv import load_dotenv


load_dotenv()


# Upstream providers browsable from the companion panel
SOURCES: dict[str, str] = {
    "FRED": "FRED (Federal Reserve)",
    "BLS": "BLS (Bureau of Labor Statistics)",
    "BEA": "BEA (Bureau of Economic Analysis)",
    "CENSUS": "US Census Bureau",
    "EIA": "EIA (Energy Information)",
    "IMF": "IMF (International Monetary Fund)",
    "OECD": "OECD",
    "WORLDBANK": "World Bank",
    "ECB": "ECB (European Central Bank)",
    "EUROSTAT": "Eurostat",
    "BOE": "Bank of England",
    "ONS": "ONS (UK Office for National Statistics)",
    "STATCAN": "StatCan (Statistics Canada)",
    "RBA": "RBA (Reserve Bank of Australia)",
    "BOJ": "BOJ (Bank of Japan)",
}


def free_tier_notice(limit: int) -> list[list[str]]:
    """Rows appended under an anonymous table that hits the observation cap."""
    return [
        ["", ""],
        [f"Free tier limited to {limit} most recent observations", ""],
        ["Upgrade for full access: datasetiq.com/pricing", ""],
    ]


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "")
    try:
        return float(raw) if raw else default
    except ValueError:
        return default


@dataclass
class Settings:
    """Application settings."""

    base_url: str = field(
        default_factory=lambda: os.getenv("DATASETIQ_BASE_URL", "https://datasetiq.com")
    )
    api_key: str = field(default_factory=lambda: os.getenv("DATASETIQ_API_KEY", ""))
    timeout: float = field(default_factory=lambda: _env_float("DATASETIQ_TIMEOUT", 30.0))
    anonymous_limit: int = 100
    keyed_limit: int = 1000
    data_dir: Path = field(
        default_factory=lambda: Path(
            os.getenv("DATASETIQ_DATA_DIR", Path.home() / ".datasetiq")
        )
    )
    db_path: Path = field(init=False)

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")
        self.data_dir = Path(self.data_dir)
        self.db_path = self.data_dir / "user_properties.db"

    def validate(self) -> None:
        """Validate required settings."""
        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError(
                f"DATASETIQ_BASE_URL must be an http(s) origin, got: {self.base_url!r}"
            )
        if self.timeout <= 0:
            raise ValueError("DATASETIQ_TIMEOUT must be positive")

    def limit_for(self, has_credential: bool) -> int:
        """Observation cap requested from the server."""
        return self.keyed_limit if has_credential else self.anonymous_limit
