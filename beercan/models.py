"""
Data models for the delete monitor.

CapturedMessage is a frozen snapshot of a Telegram message taken when the
dispatcher hands it over; the monitor never touches the live
telegram.Message again. MonitorConfig is fixed at construction.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from telegram import Message


class ContentKind(Enum):
    """What a captured message carried."""
    TEXT = "text"
    PHOTO_CAPTION = "photo_caption"
    DOCUMENT_CAPTION = "document_caption"
    VIDEO_CAPTION = "video_caption"
    OTHER = "other"


@dataclass(frozen=True)
class CapturedMessage:
    """Immutable snapshot of one observed chat message."""

    message_id: int
    chat_id: int
    author_id: int
    author_first_name: str
    author_username: Optional[str] = None
    kind: ContentKind = ContentKind.OTHER
    content: Optional[str] = None

    @classmethod
    def from_message(cls, message: "Message") -> "CapturedMessage":
        """
        Capture a Telegram message.

        Args:
            message: Incoming message with a sender.

        Returns:
            Snapshot with the content kind resolved.
        """
        if message.text is not None:
            kind, content = ContentKind.TEXT, message.text
        elif message.photo:
            kind, content = ContentKind.PHOTO_CAPTION, message.caption
        elif message.document is not None:
            kind, content = ContentKind.DOCUMENT_CAPTION, message.caption
        elif message.video is not None:
            kind, content = ContentKind.VIDEO_CAPTION, message.caption
        else:
            kind, content = ContentKind.OTHER, None

        author = message.from_user
        return cls(
            message_id=message.message_id,
            chat_id=message.chat_id,
            author_id=author.id,
            author_first_name=author.first_name,
            author_username=author.username,
            kind=kind,
            content=content,
        )

    @property
    def author_display_name(self) -> str:
        """@username when the author has one, first name otherwise."""
        if self.author_username:
            return f"@{self.author_username}"
        return self.author_first_name

    @property
    def quotable_text(self) -> Optional[str]:
        """Text or caption worth quoting back, None for media without one."""
        if self.kind is ContentKind.OTHER or not self.content:
            return None
        return self.content


@dataclass(frozen=True)
class MonitorConfig:
    """
    Delete monitor configuration.

    Attributes:
        source_chat_id: Group being watched; call-outs are posted here.
        forward_chat_id: Private group used as the probe target.
        capacity: Window size, oldest messages are evicted beyond it.
        check_interval: Seconds between the end of one drain pass and the
            start of the next.
        carry_over: Put messages that survived a probe back into the window.
        respawn: Restart the background task after an unexpected crash.
        respawn_base_delay: First respawn backoff in seconds.
        respawn_max_delay: Backoff ceiling in seconds.
    """

    source_chat_id: int
    forward_chat_id: int
    capacity: int = 32
    check_interval: float = 60.0
    carry_over: bool = False
    respawn: bool = True
    respawn_base_delay: float = 1.0
    respawn_max_delay: float = 300.0

    def __post_init__(self) -> None:
        if self.capacity <= 0:
            raise ValueError(f"capacity must be positive, got {self.capacity}")
        if self.check_interval <= 0:
            raise ValueError(f"check_interval must be positive, got {self.check_interval}")
        if self.respawn_base_delay < 0 or self.respawn_max_delay < self.respawn_base_delay:
            raise ValueError("respawn delays must satisfy 0 <= base <= max")
