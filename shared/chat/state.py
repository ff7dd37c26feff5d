from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from shared.protocol.messages import DEFAULT_PROTOCOL, Identity, Message, ProtocolConfig


class SessionState(Enum):
    AWAITING_RECEIVE = "awaiting_receive"
    DISPATCH_INBOUND = "dispatch_inbound"
    AWAITING_SEND_INPUT = "awaiting_send_input"
    DISPATCH_OUTBOUND = "dispatch_outbound"
    CLOSED = "closed"


class TurnAction(Enum):
    """What an inbound dispatch leaves for the rest of the loop body."""

    AWAIT_INPUT = "await_input"  # the floor is ours, read the keyboard
    REPLIED = "replied"  # an automatic reply already used our turn
    TERMINATE = "terminate"


@dataclass
class ConversationState:
    """Per-session mutable state. Nothing here outlives the session."""

    local: Identity
    remote: Identity
    last_message: Message = field(default_factory=Message)
    terminated: bool = False

    @classmethod
    def initial(cls, config: ProtocolConfig = DEFAULT_PROTOCOL) -> "ConversationState":
        return cls(
            local=Identity(name=config.local_name),
            remote=Identity(name=config.unknown_name),
        )

    def terminate(self) -> None:
        self.terminated = True
