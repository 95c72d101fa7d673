"""
Runtime: the turn loop and its streaming channel.
"""

from agentloop.runtime.session import EmbedFunction, ModelSession, Session
from agentloop.runtime.wire import Wire

__all__ = ["Session", "ModelSession", "EmbedFunction", "Wire"]
