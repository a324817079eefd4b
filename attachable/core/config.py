from enum import StrEnum
from functools import lru_cache

from attachable.core.settings import base, local, production, staging


class Environment(StrEnum):
    LOCAL = "local"
    STAGING = "staging"
    PRODUCTION = "production"


SETTINGS_BY_ENVIRONMENT: dict[Environment, type[base.Settings]] = {
    Environment.LOCAL: local.Settings,
    Environment.STAGING: staging.Settings,
    Environment.PRODUCTION: production.Settings,
}


@lru_cache
def get_settings() -> base.Settings:
    """
    Settings of the environment named by ``ATTACHABLE_ENVIRONMENT`` (or
    ``.env``), built once per process.

    Raises:
        ValueError: If the environment isn't one of ``Environment``
    """
    environment = Environment(base.Settings().ENVIRONMENT.lower())
    return SETTINGS_BY_ENVIRONMENT[environment]()


settings = get_settings()
