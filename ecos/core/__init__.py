__all__ = [
    "di",
    "EcosContainer",
    "LoggingProvider",
    "Settings",
    "Secrets",
]


from . import di
from .config import Secrets, Settings
from .container import EcosContainer
from .provider import LoggingProvider
