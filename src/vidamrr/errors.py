from __future__ import annotations


class CatalogError(Exception):
    """Base for failures that end a workflow and surface on the status line."""

    default_message = "Operation failed."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class InvalidUrl(CatalogError):
    default_message = "Invalid URL. It must be a YouTube link."


class MetadataFetchFailed(CatalogError):
    default_message = "Could not fetch video metadata."


class IncompleteMetadata(CatalogError):
    default_message = "Incomplete response from YouTube."


class DuplicateVideo(CatalogError):
    default_message = "That video is already in the list."


class ClipboardUnavailable(CatalogError):
    default_message = "Could not copy to the clipboard."


class PersistenceFailure(CatalogError):
    default_message = "Could not save the video list."
