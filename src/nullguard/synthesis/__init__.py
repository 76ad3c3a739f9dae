"""Guard class synthesis: the type-building backend and the synthesizer."""

from .backend import GuardedInstance, TypeBuilder, type_name_for
from .synthesizer import WrapperFactory, synthesize

__all__ = [
    "GuardedInstance",
    "TypeBuilder",
    "WrapperFactory",
    "synthesize",
    "type_name_for",
]
