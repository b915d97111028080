"""
Environment-based configuration.

Every setting can be overridden with a `PYGRAFT_` prefixed environment
variable, or from a `.env` file:

    PYGRAFT_SECRET_KEY=... PYGRAFT_PAGE_SIZE=10 python -m examples.feed.app
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pygraft.pagination import Pagination


class Settings(BaseSettings):

    # Application
    APP_NAME: str = 'pygraft'
    DEBUG: bool = False
    LOG_LEVEL: str = 'INFO'
    GRAPHQL_PATH: str = '/graphql'

    # Bearer tokens
    SECRET_KEY: str = 'somesupersecretsecret'
    TOKEN_ALGORITHM: str = 'HS256'
    TOKEN_EXPIRY_HOURS: int = 1

    # Paginated list fields
    PAGE_SIZE: int = 2
    DEFAULT_PAGE: int = 1

    model_config = SettingsConfigDict(
        env_prefix='PYGRAFT_',
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
    )

    @property
    def pagination(self) -> Pagination:
        return Pagination(
            page_size=self.PAGE_SIZE, default_page=self.DEFAULT_PAGE
        )


def get_settings(**overrides) -> Settings:
    return Settings(**overrides)
