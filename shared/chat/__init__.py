from .connection import PeerConnection, is_usable
from .console import ChatConsole
from .interpreter import CommandInterpreter
from .router import CommandRouter
from .session import ChatSession
from .state import ConversationState, SessionState, TurnAction

__all__ = [
    "PeerConnection",
    "is_usable",
    "ChatConsole",
    "CommandInterpreter",
    "CommandRouter",
    "ChatSession",
    "ConversationState",
    "SessionState",
    "TurnAction",
]
