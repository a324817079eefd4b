from .plain import PlainProvider  # noqa: F401
from .sqlmodel import SQLModelProvider  # noqa: F401
