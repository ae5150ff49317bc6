from pydantic import Field
from pydantic_settings import SettingsConfigDict

from configs.common import HttpClientConfig
from configs.feature import LoggingConfig


class AppConfig(HttpClientConfig, LoggingConfig):
    PROJECT_NAME: str = Field(default="easy-http")

    model_config = SettingsConfigDict(
        # read from dotenv format config file
        env_file=".env",
        env_file_encoding="utf-8",
        # ignore extra attributes
        extra="ignore",
    )


app_config: AppConfig = AppConfig()

__all__ = ["app_config"]
