from halp.providers.base import BaseProvider
from halp.providers.registry import PROVIDER_CLASSES, create_provider

__all__ = ["BaseProvider", "PROVIDER_CLASSES", "create_provider"]
