"""Presentation layer."""

from ollachat.presentation.bridge import PresentationBridge, Sender
from ollachat.presentation.messages import decode_inbound

__all__ = ["PresentationBridge", "Sender", "decode_inbound"]
