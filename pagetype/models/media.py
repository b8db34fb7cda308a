from typing import Optional

from pydantic import BaseModel, computed_field

# Area reported when width or height is missing or unparsable
UNKNOWN_AREA = -1


def _parse_dimension(value) -> Optional[int]:
    """Return *value* as an int, or None for missing / blank / non-numeric input."""
    if value is None:
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return None


class _Media(BaseModel):
    src: str
    width: Optional[int] = None
    height: Optional[int] = None

    @classmethod
    def from_attributes(cls, src: str, width=None, height=None, **extra):
        """Build a record from raw HTML attribute strings.

        Width and height that are blank or not plain integers (``"100%"``,
        ``"auto"``) are treated as unknown.
        """
        return cls(
            src=src,
            width=_parse_dimension(width),
            height=_parse_dimension(height),
            **extra,
        )

    @computed_field
    @property
    def area(self) -> int:
        if self.width is None or self.height is None:
            return UNKNOWN_AREA
        return self.width * self.height

    def set_dimensions(self, width: int, height: int) -> None:
        self.width = width
        self.height = height


class Image(_Media):
    """An image referenced from the content regions of a page."""

    alt: Optional[str] = None


class Video(_Media):
    """An embedded video player (``<video>``, ``<iframe>``, ``<object>``/``<embed>``)."""

    @property
    def has_dimensions(self) -> bool:
        return (self.width or 0) > 0 and (self.height or 0) > 0
