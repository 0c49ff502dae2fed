"""Configuration for the graphdrive client library.

Values are read from environment variables prefixed with ``GRAPHDRIVE_`` and,
when present, from a ``.env`` file in the working directory.

Example:
    from graphdrive.core.config import settings
    print(settings.GRAPH_ROOT_URL)
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed library settings.

    Attributes:
        GRAPH_ROOT_URL (str): Versioned Microsoft Graph root all resource paths append to.
        OAUTH_URL (str): Microsoft identity platform OAuth 2.0 root.
        HTTP_TIMEOUT (float): Timeout in seconds for the default httpx client.
        LOG_LEVEL (str): Level for the library logger.
        LOCAL_DEVELOPMENT (bool): Use rich console logging instead of the plain formatter.
        SEARCH_MAX_RESULTS (int): Upper bound for search page size.
        SUBSCRIPTION_MAX_DAYS (int): Longest subscription lifetime the upstream allows.
    """

    GRAPH_ROOT_URL: str = "https://graph.microsoft.com/v1.0"
    OAUTH_URL: str = "https://login.microsoftonline.com/common/oauth2/v2.0"
    HTTP_TIMEOUT: float = 60.0
    LOG_LEVEL: str = "INFO"
    LOCAL_DEVELOPMENT: bool = False

    # Search returns duplicate hits when size is over 25
    SEARCH_MAX_RESULTS: int = 25
    SUBSCRIPTION_MAX_DAYS: int = 30

    model_config = SettingsConfigDict(env_prefix="GRAPHDRIVE_", env_file=".env", extra="ignore")


settings = Settings()
