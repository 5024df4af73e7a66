from __future__ import annotations

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # unrelated ENV keys are ignored
    )

    DATABASE_URL: str = Field("sqlite:///./data/real_estate.db", alias="DATABASE_URL")

    # MOI open data download endpoint (plvr.land.moi.gov.tw)
    LVR_BASE_URL: str = Field("https://plvr.land.moi.gov.tw/DownloadSeason", alias="LVR_BASE_URL")
    LVR_CITY_CODES: str = Field("", alias="LVR_CITY_CODES")  # "A,B,F" / empty = all

    CRAWL_DELAY_SECONDS: float = Field(1.0, alias="CRAWL_DELAY_SECONDS")
    HTTP_TIMEOUT_SECONDS: float = Field(30.0, alias="HTTP_TIMEOUT_SECONDS")
    HTTP_USER_AGENT: str = Field(
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
        alias="HTTP_USER_AGENT",
    )
    LEGACY_ENCODING: str = Field("cp950", alias="LEGACY_ENCODING")
    CSV_ARCHIVE_DIR: Optional[str] = Field(None, alias="CSV_ARCHIVE_DIR")

    API_ALLOWED_ORIGINS: str = Field("", alias="API_ALLOWED_ORIGINS")
    LOG_LEVEL: str = Field("INFO", alias="LOG_LEVEL")

    @property
    def city_codes(self) -> List[str]:
        return _split_csv(self.LVR_CITY_CODES)

    @property
    def allowed_origins(self) -> List[str]:
        return _split_csv(self.API_ALLOWED_ORIGINS)


def _split_csv(raw: str) -> List[str]:
    return [x.strip() for x in (raw or "").split(",") if x.strip()]


settings = Settings()
