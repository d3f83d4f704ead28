from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PATH = Path(__file__).resolve().parent.parent / ".env.local"


class Settings(BaseSettings):
    # Environment settings
    environment: str = "development"
    debug: bool = False
    LOG_LEVEL: str = "INFO"

    # Upstream endpoints
    GOOGLE_USERINFO_URL: str = "https://www.googleapis.com/userinfo/v2/me"
    GOOGLE_FITNESS_AGGREGATE_URL: str = (
        "https://www.googleapis.com/fitness/v1/users/me/dataset:aggregate"
    )
    DAY_WINDOW_URL: str = "https://riot-rpc-server.adaptable.app/time-util-midnight-timmestamp"

    # Transport timeout in seconds, applied by httpx to every outbound call
    REQUEST_TIMEOUT: float = 30.0

    # OAuth access token for local simulation only. The web surface takes the
    # credential from the request instead.
    ACCESS_TOKEN: str | None = None

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def get_http_client_config(self) -> dict:
        """
        Get keyword arguments for the shared httpx.AsyncClient.
        Development uses a shorter timeout so hung upstreams surface quickly.
        """
        timeout = self.REQUEST_TIMEOUT
        if self.environment == "development":
            timeout = min(timeout, 15.0)

        return {"timeout": timeout}


settings = Settings()
