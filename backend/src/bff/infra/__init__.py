"""CDK constructs and stacks for the BFF gateway."""

from bff.infra.bff_stack import BffStack
from bff.infra.config import BffSettings
from bff.infra.config import load_settings
from bff.infra.project_stack import BffProjectStack

__all__ = [
    "BffProjectStack",
    "BffSettings",
    "BffStack",
    "load_settings",
]
