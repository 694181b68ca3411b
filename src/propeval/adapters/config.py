from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    # App & logging
    ENV: str = Field(default="dev")
    LOG_LEVEL: str = Field(default="INFO")

    # persistence
    DB_URI: str = Field(default="sqlite:///propeval.db")

    # share links are built as {PUBLIC_BASE_URL}/property/{id}
    PUBLIC_BASE_URL: str = Field(default="http://localhost:8000")

    # -----------------------------
    # "New Property" starting scenario
    # -----------------------------
    DEFAULT_PURCHASE_PRICE: float = Field(default=500_000.0)
    DEFAULT_MONTHLY_RENT: float = Field(default=1_000.0)
    DEFAULT_INSURANCE: float = Field(default=1_200.0)
    DEFAULT_TAXES_YEARLY: float = Field(default=7_500.0)
    DEFAULT_CLOSING: float = Field(default=10_000.0)
    DEFAULT_TOTAL_REHAB_COST: float = Field(default=15_000.0)
    DEFAULT_POST_REHAB_VALUE: float = Field(default=650_000.0)
    DEFAULT_MONTHS: int = Field(default=360)

    # percent-scaled (6.5 means 6.5%)
    DEFAULT_LOAN_RATE: float = Field(default=6.5)
    DEFAULT_LTV: float = Field(default=80.0)
    DEFAULT_VACANCY_RATE: float = Field(default=5.0)
    DEFAULT_MANAGEMENT_RATE: float = Field(default=0.0)
    DEFAULT_CAPEX_RATE: float = Field(default=5.0)
    DEFAULT_REPAIR_RATE: float = Field(default=5.0)

    # -----------------------------
    # KPI tiers
    # -----------------------------
    COCROI_WARNING_MIN: float = Field(default=0.0)

    # -----------------------------
    # URL preview scraper
    # -----------------------------
    OG_CACHE_TTL_S: float = Field(default=86_400.0)
    SCRAPE_TIMEOUT_S: float = Field(default=12.0)
    SCRAPE_MAX_RETRIES: int = Field(default=2)
    SCRAPE_BACKOFF_BASE_S: float = Field(default=0.5)
    SCRAPE_USER_AGENT: str = Field(default="Mozilla/5.0 (PropertyEvaluator preview)")

    model_config = SettingsConfigDict(
        env_prefix="PROPEVAL_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator(
        "DEFAULT_LOAN_RATE",
        "DEFAULT_LTV",
        "DEFAULT_VACANCY_RATE",
        "DEFAULT_MANAGEMENT_RATE",
        "DEFAULT_CAPEX_RATE",
        "DEFAULT_REPAIR_RATE",
        mode="before",
    )
    @classmethod
    def _to_percent(cls, v: Any) -> Any:
        if v is None:
            return v
        if isinstance(v, str):
            v = v.strip().replace("%", "")
        try:
            f = float(v)
        except Exception as err:
            raise ValueError("rate must be numeric or percent-like") from err
        if not (0.0 <= f <= 100.0):
            raise ValueError("rate must be between 0 and 100")
        return f

    @field_validator("DEFAULT_MONTHS", mode="before")
    @classmethod
    def _months_positive(cls, v: Any) -> Any:
        n = int(v)
        if n <= 0:
            raise ValueError("DEFAULT_MONTHS must be > 0")
        return n

    def default_property_fields(self) -> dict[str, Any]:
        return {
            "mode": "ltr",
            "purchase_price": self.DEFAULT_PURCHASE_PRICE,
            "monthly_rent": self.DEFAULT_MONTHLY_RENT,
            "insurance": self.DEFAULT_INSURANCE,
            "loan_rate": self.DEFAULT_LOAN_RATE,
            "ltv": self.DEFAULT_LTV,
            "months": self.DEFAULT_MONTHS,
            "total_rehab_cost": self.DEFAULT_TOTAL_REHAB_COST,
            "post_rehab_value": self.DEFAULT_POST_REHAB_VALUE,
            "taxes_yearly": self.DEFAULT_TAXES_YEARLY,
            "closing": self.DEFAULT_CLOSING,
            "average_nightly_rent": 0.0,
            "occupancy_rate": 0.0,
            "vacancy_rate": self.DEFAULT_VACANCY_RATE,
            "management_rate": self.DEFAULT_MANAGEMENT_RATE,
            "capital_expenditures_rate": self.DEFAULT_CAPEX_RATE,
            "repair_rate": self.DEFAULT_REPAIR_RATE,
        }


config = AppConfig()
