"""
Upload notice models.

This module defines the payload the upload side places on the notification
queue and the transport envelope the queue adapters hand to the relay.
"""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from imagesync.core.errors import DeserializationFailure

NOTICE_TEMPLATE = (
    "An image has been uploaded:\n\n"
    "Name: {name}\n"
    "Size: {size} bytes\n"
    "Extension: {extension}\n"
    "Download Link: {link}"
)


class UploadNotice(BaseModel):
    """
    Notice describing a completed image upload.

    On the wire the keys are PascalCase (``Name``, ``Size``, ``FileExtension``,
    ``DownloadLink``); the snake_case field names are accepted as well.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = Field(..., alias="Name", min_length=1)
    size_bytes: int = Field(..., alias="Size", ge=0)
    file_extension: str = Field(..., alias="FileExtension")
    download_link: str = Field(..., alias="DownloadLink")

    @classmethod
    def from_message_body(cls, body: str) -> "UploadNotice":
        """
        Parse a queue message body.

        Args:
            body: JSON message body

        Returns:
            The parsed notice

        Raises:
            DeserializationFailure: If the body is not a valid notice
        """
        try:
            return cls.model_validate_json(body)
        except ValidationError as e:
            raise DeserializationFailure(
                f"Invalid upload notice: {e.error_count()} validation error(s)",
                body=body,
            ) from e

    def to_message_body(self) -> str:
        """Serialize the notice in the wire format the relay consumes."""
        return self.model_dump_json(by_alias=True)

    def format_text(self) -> str:
        """Render the human-readable text published to subscribers."""
        return NOTICE_TEMPLATE.format(
            name=self.name,
            size=self.size_bytes,
            extension=self.file_extension,
            link=self.download_link,
        )


@dataclass(frozen=True)
class QueueMessage:
    """A message received from the notification queue."""

    id: str
    receipt_token: str
    body: str
