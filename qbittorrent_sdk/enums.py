"""
Enumerations mirroring the string values used by the qBittorrent Web API.
"""

from enum import Enum


class TorrentState(str, Enum):
    ERROR = "error"
    MISSING_FILES = "missingFiles"
    UPLOADING = "uploading"
    PAUSED_UP = "pausedUP"
    QUEUED_UP = "queuedUP"
    STALLED_UP = "stalledUP"
    CHECKING_UP = "checkingUP"
    FORCED_UP = "forcedUP"
    ALLOCATING = "allocating"
    DOWNLOADING = "downloading"
    META_DL = "metaDL"
    PAUSED_DL = "pausedDL"
    QUEUED_DL = "queuedDL"
    STALLED_DL = "stalledDL"
    CHECKING_DL = "checkingDL"
    FORCED_DL = "forcedDL"
    CHECKING_RESUME_DATA = "checkingResumeData"
    MOVING = "moving"
    UNKNOWN = "unknown"

    @classmethod
    def from_string(cls, value: str) -> "TorrentState":
        """Map an API state string to a member, falling back to UNKNOWN."""
        # qBittorrent 5 renamed paused* to stopped*
        value = {"stoppedUP": "pausedUP", "stoppedDL": "pausedDL"}.get(value, value)
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN

    @property
    def display_name(self) -> str:
        return _STATE_DISPLAY_NAMES[self]

    def is_active(self) -> bool:
        return self in _ACTIVE_STATES

    def is_completed(self) -> bool:
        return self in _COMPLETED_STATES

    def is_downloading(self) -> bool:
        return self in _DOWNLOADING_STATES

    def is_uploading(self) -> bool:
        return self in _UPLOADING_STATES

    def is_paused(self) -> bool:
        return self in (TorrentState.PAUSED_UP, TorrentState.PAUSED_DL)

    def is_queued(self) -> bool:
        return self in (TorrentState.QUEUED_UP, TorrentState.QUEUED_DL)

    def is_checking(self) -> bool:
        return self in (TorrentState.CHECKING_UP, TorrentState.CHECKING_DL, TorrentState.CHECKING_RESUME_DATA)

    def is_stalled(self) -> bool:
        return self in (TorrentState.STALLED_UP, TorrentState.STALLED_DL)

    def is_error(self) -> bool:
        return self in (TorrentState.ERROR, TorrentState.MISSING_FILES)

    def can_start(self) -> bool:
        return self.is_paused() or self.is_error()

    def can_pause(self) -> bool:
        return self.is_active() or self.is_queued()


_ACTIVE_STATES = frozenset({
    TorrentState.DOWNLOADING,
    TorrentState.UPLOADING,
    TorrentState.STALLED_DL,
    TorrentState.STALLED_UP,
    TorrentState.FORCED_DL,
    TorrentState.FORCED_UP,
    TorrentState.META_DL,
    TorrentState.CHECKING_DL,
    TorrentState.CHECKING_UP,
    TorrentState.ALLOCATING,
    TorrentState.MOVING,
})

_COMPLETED_STATES = frozenset({
    TorrentState.UPLOADING,
    TorrentState.PAUSED_UP,
    TorrentState.QUEUED_UP,
    TorrentState.STALLED_UP,
    TorrentState.CHECKING_UP,
    TorrentState.FORCED_UP,
})

_DOWNLOADING_STATES = frozenset({
    TorrentState.DOWNLOADING,
    TorrentState.STALLED_DL,
    TorrentState.FORCED_DL,
    TorrentState.META_DL,
    TorrentState.ALLOCATING,
})

_UPLOADING_STATES = frozenset({
    TorrentState.UPLOADING,
    TorrentState.STALLED_UP,
    TorrentState.FORCED_UP,
})

_STATE_DISPLAY_NAMES = {
    TorrentState.ERROR: "Error",
    TorrentState.MISSING_FILES: "Missing Files",
    TorrentState.UPLOADING: "Uploading",
    TorrentState.PAUSED_UP: "Paused (Upload)",
    TorrentState.QUEUED_UP: "Queued (Upload)",
    TorrentState.STALLED_UP: "Stalled (Upload)",
    TorrentState.CHECKING_UP: "Checking (Upload)",
    TorrentState.FORCED_UP: "Forced (Upload)",
    TorrentState.ALLOCATING: "Allocating",
    TorrentState.DOWNLOADING: "Downloading",
    TorrentState.META_DL: "Downloading Metadata",
    TorrentState.PAUSED_DL: "Paused (Download)",
    TorrentState.QUEUED_DL: "Queued (Download)",
    TorrentState.STALLED_DL: "Stalled (Download)",
    TorrentState.CHECKING_DL: "Checking (Download)",
    TorrentState.FORCED_DL: "Forced (Download)",
    TorrentState.CHECKING_RESUME_DATA: "Checking Resume Data",
    TorrentState.MOVING: "Moving",
    TorrentState.UNKNOWN: "Unknown",
}


class TorrentFilter(str, Enum):
    """Values accepted by the ``filter`` parameter of /torrents/info."""

    ALL = "all"
    DOWNLOADING = "downloading"
    SEEDING = "seeding"
    COMPLETED = "completed"
    STOPPED = "stopped"
    ACTIVE = "active"
    INACTIVE = "inactive"
    RUNNING = "running"
    STALLED = "stalled"
    STALLED_UPLOADING = "stalled_uploading"
    STALLED_DOWNLOADING = "stalled_downloading"
    ERRORED = "errored"

    @classmethod
    def from_string(cls, value: str) -> "TorrentFilter":
        try:
            return cls(value)
        except ValueError:
            return cls.ALL


class TorrentSortField(str, Enum):
    """Client-side sort keys understood by TorrentCollection.sort_by_field."""

    NAME = "name"
    SIZE = "size"
    PROGRESS = "progress"
    DOWNLOAD_SPEED = "dlspeed"
    UPLOAD_SPEED = "upspeed"
    ADDED_ON = "added_on"
    RATIO = "ratio"
    PRIORITY = "priority"
    ETA = "eta"


class SearchStatus(str, Enum):
    RUNNING = "Running"
    STOPPED = "Stopped"
