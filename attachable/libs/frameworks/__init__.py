from .interface import ProviderInterface  # noqa: F401
from .providers import PlainProvider, SQLModelProvider  # noqa: F401
