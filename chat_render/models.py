"""Data models for chat messages, users and viewer configuration.

Messages are immutable dataclasses forming a closed set of kinds, each
tagged with a ``MessageKind``. Rendering lives in ``renderer.py`` and
dispatches on that tag.

The chat-log entry models at the bottom are Pydantic models for the JSONL
log format read by ``loader.py``.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from re import Pattern
from typing import Annotated, Any, ClassVar, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .theme import Theme, get_theme


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class User:
    """A chat participant.

    ``id`` keys the user's color and defaults to the name.
    """

    name: str
    id: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            object.__setattr__(self, "id", self.name)


class MessageKind(str, Enum):
    """Message kind classification.

    Using str as base class keeps string comparisons working.
    """

    MSG = "msg"
    PUBLIC = "public"
    EMOTE = "emote"
    PRIVATE = "private"
    SYSTEM = "system"
    ANNOUNCE = "announce"
    MOTD = "motd"
    COMMAND = "command"


# =============================================================================
# Messages
# =============================================================================


@dataclass(frozen=True)
class Msg:
    """Base message: a body and the time it was created."""

    kind: ClassVar[MessageKind] = MessageKind.MSG

    body: str
    timestamp: datetime = field(default_factory=_now, kw_only=True)

    @property
    def command(self) -> str:
        return ""

    def __str__(self) -> str:
        from .renderer import message_string

        return message_string(self)


class _SenderDefaults:
    """Fills in ``original_from`` for the kinds that have a sender."""

    from_user: User
    original_from: Optional[User]

    def __post_init__(self) -> None:
        if self.original_from is None:
            object.__setattr__(self, "original_from", self.from_user)


@dataclass(frozen=True)
class PublicMsg(_SenderDefaults, Msg):
    """A message from a user sent to the room."""

    kind: ClassVar[MessageKind] = MessageKind.PUBLIC

    from_user: User
    # Sender before any aliasing; defaults to from_user
    original_from: Optional[User] = None


@dataclass(frozen=True)
class CommandMsg(PublicMsg):
    """A public message whose body is a ``/command`` with arguments."""

    kind: ClassVar[MessageKind] = MessageKind.COMMAND

    name: str = ""
    args: tuple[str, ...] = ()

    @property
    def command(self) -> str:
        return self.name


@dataclass(frozen=True)
class EmoteMsg(_SenderDefaults, Msg):
    """A /me message sent to the room."""

    kind: ClassVar[MessageKind] = MessageKind.EMOTE

    from_user: User
    original_from: Optional[User] = None


@dataclass(frozen=True)
class PrivateMsg(_SenderDefaults, Msg):
    """A message sent to one user, not shown to anyone else."""

    kind: ClassVar[MessageKind] = MessageKind.PRIVATE

    from_user: User
    to: User
    original_from: Optional[User] = None


@dataclass(frozen=True)
class SystemMsg(Msg):
    """A server response sent directly to one user, e.g. for /help."""

    kind: ClassVar[MessageKind] = MessageKind.SYSTEM

    to: Optional[User] = None


@dataclass(frozen=True)
class AnnounceMsg(Msg):
    """A server message to everyone, like a join or leave event."""

    kind: ClassVar[MessageKind] = MessageKind.ANNOUNCE


@dataclass(frozen=True)
class MOTDMsg(Msg):
    """Message of the day."""

    kind: ClassVar[MessageKind] = MessageKind.MOTD


Message = Union[
    Msg,
    PublicMsg,
    CommandMsg,
    EmoteMsg,
    PrivateMsg,
    SystemMsg,
    AnnounceMsg,
    MOTDMsg,
]

SENDER_KINDS = frozenset(
    {MessageKind.PUBLIC, MessageKind.COMMAND, MessageKind.EMOTE, MessageKind.PRIVATE}
)
SYSTEM_KINDS = frozenset({MessageKind.SYSTEM, MessageKind.ANNOUNCE, MessageKind.MOTD})


# =============================================================================
# Viewer configuration
# =============================================================================


class UserConfig(BaseModel):
    """Per-viewer rendering configuration.

    ``theme`` accepts a built-in theme name, and ``highlight`` a regular
    expression string; both are resolved on validation.
    """

    model_config = ConfigDict(frozen=True)

    highlight: Optional[Pattern[str]] = None
    bell: bool = False
    # Raw passthrough for API clients: no markup, no highlighting
    api_mode: bool = False
    theme: Optional[Theme] = None

    @field_validator("theme", mode="before")
    @classmethod
    def _resolve_theme(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                return get_theme(value)
            except KeyError as e:
                raise ValueError(e.args[0]) from None
        return value


# =============================================================================
# Chat log entries
# =============================================================================


class BaseChatEntry(BaseModel):
    """Fields shared by every chat log line."""

    model_config = ConfigDict(populate_by_name=True)

    body: str
    timestamp: Optional[datetime] = None


class PublicEntry(BaseChatEntry):
    type: Literal["public"]
    sender: str = Field(alias="from")


class EmoteEntry(BaseChatEntry):
    type: Literal["emote"]
    sender: str = Field(alias="from")


class PrivateEntry(BaseChatEntry):
    type: Literal["private"]
    sender: str = Field(alias="from")
    to: str


class SystemEntry(BaseChatEntry):
    type: Literal["system"]
    to: Optional[str] = None


class AnnounceEntry(BaseChatEntry):
    type: Literal["announce"]


class MOTDEntry(BaseChatEntry):
    type: Literal["motd"]


ChatEntry = Annotated[
    Union[
        PublicEntry,
        EmoteEntry,
        PrivateEntry,
        SystemEntry,
        AnnounceEntry,
        MOTDEntry,
    ],
    Field(discriminator="type"),
]
