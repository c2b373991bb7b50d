from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class LyricsSource(str, Enum):
    LOCAL = "local"  # cached lyrics file
    REMOTE = "remote"  # fetched from a provider


class LyricsStatus:
    """
    What the UI may offer for the lyrics currently shown.

    Save/edit need lyrics from a non-local source without error; refresh is
    offered for local lyrics or after an error.
    """

    has_lyrics: bool = False
    has_error: bool = False
    source: LyricsSource | None = None

    @property
    def can_save(self) -> bool:
        return False

    @property
    def can_edit(self) -> bool:
        return False

    @property
    def can_refresh(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class EmptyStatus(LyricsStatus):
    pass


@dataclass(frozen=True, slots=True)
class LocalStatus(LyricsStatus):
    has_lyrics = True
    source = LyricsSource.LOCAL

    @property
    def can_refresh(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class RemoteStatus(LyricsStatus):
    provider: str | None = None
    edit_uri: str | None = None

    has_lyrics = True
    source = LyricsSource.REMOTE

    @property
    def can_save(self) -> bool:
        return True

    @property
    def can_edit(self) -> bool:
        return bool(self.edit_uri)


@dataclass(frozen=True, slots=True)
class ErrorStatus(LyricsStatus):
    message: str = ""
    source: LyricsSource | None = None

    has_error = True

    @property
    def can_refresh(self) -> bool:
        return True


def status_for(
    lyrics: str | None,
    source: LyricsSource | str | None,
    *,
    error: str | None = None,
    edit_uri: str | None = None,
    provider: str | None = None,
) -> LyricsStatus:
    if error:
        src = LyricsSource(source) if source else None
        return ErrorStatus(message=error, source=src)
    if not lyrics:
        return EmptyStatus()
    # anything not known to be local counts as remote
    if source is not None and LyricsSource(source) is LyricsSource.LOCAL:
        return LocalStatus()
    return RemoteStatus(provider=provider, edit_uri=edit_uri)
