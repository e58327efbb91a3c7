"""Sidecar schemas for human-authored overlay content."""

from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator

from apiwiki.constants import EXTERNAL_LINK_PREFIXES


class SeeAlsoRef(BaseModel):
    """A "see also" reference: either a UID or an external link.

    In frontmatter a plain string is a UID unless it looks like a URL; a
    mapping may carry ``uid`` or ``url`` plus an optional ``title``.
    """

    model_config = {"frozen": True}

    uid: Optional[str] = Field(None, description="Referenced entity UID")
    url: Optional[str] = Field(None, description="External link target")
    title: Optional[str] = Field(None, description="Link text for external links")

    @model_validator(mode="before")
    @classmethod
    def _from_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            text = data.strip()
            if text.startswith(EXTERNAL_LINK_PREFIXES):
                return {"url": text}
            return {"uid": text}
        return data

    @model_validator(mode="after")
    def _exactly_one_target(self) -> "SeeAlsoRef":
        if bool(self.uid) == bool(self.url):
            raise ValueError("see also entry needs exactly one of uid or url")
        return self

    @property
    def key(self) -> str:
        """Identity used for de-duplication."""
        return self.uid or self.url or ""

    @property
    def is_external(self) -> bool:
        return self.url is not None


class SidecarSection(BaseModel):
    """A named markdown section of a sidecar."""

    heading: str = Field(..., min_length=1, description="Section heading text")
    content: str = Field("", description="Markdown body below the heading")
    order: Optional[int] = Field(None, description="Render order hint, ascending")


class SidecarEntry(BaseModel):
    """Human-authored content for one UID."""

    uid: Optional[str] = Field(None, description="UID the overlay belongs to")
    title: Optional[str] = Field(None, description="Page title when the sidecar was created")
    description: Optional[str] = Field(None, description="One-line description")
    preamble: str = Field("", description="Markdown before the first section heading")
    sections: list[SidecarSection] = Field(default_factory=list)
    see_also: list[SeeAlsoRef] = Field(default_factory=list)

    @property
    def has_content(self) -> bool:
        """True when a human has written anything renderable."""
        return bool(
            (self.description and self.description.strip())
            or self.preamble.strip()
            or any(section.content.strip() for section in self.sections)
            or self.see_also
        )
