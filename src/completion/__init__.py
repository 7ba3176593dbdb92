"""Completion signaling: chime, system notification, and UI flag channels."""

from .chime import ChimeChannel
from .contracts import Completion, SignalChannel
from .errors import AudioOutputError
from .notification import NotificationChannel, notification_text
from .signaler import CompletionSignaler
from .tone import synthesize_chime
from .ui_flag import UIFlagChannel

__all__ = [
    "AudioOutputError",
    "ChimeChannel",
    "Completion",
    "CompletionSignaler",
    "NotificationChannel",
    "SignalChannel",
    "UIFlagChannel",
    "notification_text",
    "synthesize_chime",
]
