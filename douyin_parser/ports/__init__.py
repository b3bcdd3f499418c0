"""Port interfaces (Hexagonal Architecture)."""

from douyin_parser.ports.inbound import InboundMessage
from douyin_parser.ports.outbound import ForwardNode, MediaSourcePort, MessagePort

__all__ = [
    "InboundMessage",
    "ForwardNode",
    "MediaSourcePort",
    "MessagePort",
]
