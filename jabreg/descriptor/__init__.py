from . import codec
from .jingle import JingleNodeDescriptor
from .stun import StunServerDescriptor

__all__ = ["codec", "JingleNodeDescriptor", "StunServerDescriptor"]
