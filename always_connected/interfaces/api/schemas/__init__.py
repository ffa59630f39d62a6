from .auth import LoginRequest, LoginResponse, LoginUser
from .frames import (
    FrameError,
    HistoryFetchFrame,
    InboundFrame,
    PingFrame,
    SendFrame,
    parse_frame,
)
from .message import MessageRead
from .push import (
    PushResponse,
    PushSubscriptionKeys,
    PushSubscriptionPayload,
    SubscribeRequest,
    UnsubscribeRequest,
    VapidPublicKeyResponse,
)

__all__ = [
    "FrameError",
    "HistoryFetchFrame",
    "InboundFrame",
    "LoginRequest",
    "LoginResponse",
    "LoginUser",
    "MessageRead",
    "PingFrame",
    "PushResponse",
    "PushSubscriptionKeys",
    "PushSubscriptionPayload",
    "SendFrame",
    "SubscribeRequest",
    "UnsubscribeRequest",
    "VapidPublicKeyResponse",
    "parse_frame",
]
