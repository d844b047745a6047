from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    keyalg: str = "rsa"
    keysize: int = 2048
    curve: str = "secp256r1"
    prvout: str = "zprv.key"
    pubout: str = "zpub.key"
    pkcs: int = 1
    hex: bool = False
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="PEMKEYGEN_", env_file=".env", extra="ignore"
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
