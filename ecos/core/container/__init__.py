__all__ = ["EcosContainer"]

from .ecos import EcosContainer
