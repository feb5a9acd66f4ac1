"""Result values produced by the Discord coordinators."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

ERROR_DELIMITER = " | "


class BackendMode(str, Enum):
    BOT = "bot"
    WEBHOOK = "webhook"
    BOTH = "bot+webhook"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class AttachmentDescriptor:
    url: str
    filename: str
    size: Optional[int]
    content_type: Optional[str]
    attachment_id: Optional[str]
    channel_id: Optional[str] = None
    message_id: Optional[str] = None


@dataclass(frozen=True)
class BackendError:
    """One backend's failure, labelled with the backend that produced it."""
    mode: Optional[BackendMode]
    message: str

    def __str__(self) -> str:
        if self.mode is None:
            return self.message
        return f"{self.mode.label}: {self.message}"


def join_errors(errors: List[BackendError]) -> str:
    return ERROR_DELIMITER.join(str(error) for error in errors)


@dataclass(frozen=True)
class UploadResult:
    success: bool
    descriptor: Optional[AttachmentDescriptor] = None
    mode: Optional[BackendMode] = None
    errors: List[BackendError] = field(default_factory=list)

    @classmethod
    def succeeded(cls, descriptor: AttachmentDescriptor, mode: BackendMode) -> "UploadResult":
        return cls(success=True, descriptor=descriptor, mode=mode)

    @classmethod
    def failed(cls, errors: List[BackendError]) -> "UploadResult":
        return cls(success=False, errors=list(errors))

    @property
    def configured(self) -> bool:
        """False when the failure is a missing configuration, not a backend refusal."""
        return self.success or any(error.mode is not None for error in self.errors)

    @property
    def error(self) -> Optional[str]:
        return join_errors(self.errors) if self.errors else None


class LookupStatus(str, Enum):
    FOUND = "found"
    ABSENT = "absent"
    NOT_CONFIGURED = "not_configured"
    FAILED = "failed"


@dataclass(frozen=True)
class LookupResult:
    status: LookupStatus
    descriptor: Optional[AttachmentDescriptor] = None
    mode: Optional[BackendMode] = None
    errors: List[BackendError] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND

    @property
    def error(self) -> Optional[str]:
        return join_errors(self.errors) if self.errors else None


@dataclass(frozen=True)
class ConnectionStatus:
    connected: bool
    mode: Optional[BackendMode] = None
    name: Optional[str] = None
    channel_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "connected": self.connected,
            "mode": self.mode.value if self.mode else None,
            "name": self.name,
            "channelId": self.channel_id,
        }
