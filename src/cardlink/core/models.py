"""Link metadata record shared by the provider and the block codec."""

from dataclasses import dataclass, replace

from cardlink.exceptions import ValidationError

# Keys in the order they are written to a card block
FIELD_NAMES = ("url", "title", "description", "host", "image")
OPTIONAL_FIELDS = ("description", "host", "image")


@dataclass(frozen=True)
class LinkMetadata:
    """
    Canonical card record for one link.

    Optional fields use None for "absent"; an empty string is a present value.

    Attributes
    ----------
    url : str
        Resolvable address, never empty.
    title : str
        Card title.
    description : str or None
        Prose summary of the page.
    host : str or None
        Display name of the origin (e.g. "example.com").
    image : str or None
        URL of a preview image.
    indent : int
        Nesting depth in an outline or list, 0 for top level.
    """

    url: str
    title: str
    description: str | None = None
    host: str | None = None
    image: str | None = None
    indent: int = 0

    def __post_init__(self):
        if not isinstance(self.url, str) or not self.url:
            raise ValidationError("LinkMetadata.url must be a non-empty string")
        if not isinstance(self.title, str):
            raise ValidationError("LinkMetadata.title must be a string", {"url": self.url})
        for name in OPTIONAL_FIELDS:
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise ValidationError(
                    f"LinkMetadata.{name} must be a string or None", {"url": self.url}
                )
        if isinstance(self.indent, bool) or not isinstance(self.indent, int) or self.indent < 0:
            raise ValidationError(
                "LinkMetadata.indent must be a non-negative integer",
                {"url": self.url, "indent": self.indent},
            )

    @classmethod
    def from_url(cls, url: str, indent: int = 0) -> "LinkMetadata":
        """Build the record used when no metadata could be discovered."""
        return cls(url=url, title=url, indent=indent)

    def with_indent(self, indent: int) -> "LinkMetadata":
        return replace(self, indent=indent)

    def to_dict(self) -> dict:
        """
        Convert to a plain dict of populated fields.

        Returns
        -------
        dict
            Fields in block key order (absent optional fields dropped),
            followed by ``indent``.
        """
        data = {}
        for name in FIELD_NAMES:
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        data["indent"] = self.indent
        return data
