"""Backend Contract v1.

Canonical payloads exchanged with the two consumed capabilities:
  - Catalog search (CatalogItem, CatalogPreview)
  - Web search (WebHit)

Adapters may return these models or plain mappings with the same keys;
the orchestrator coerces both through ``model_validate``.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class CatalogItemKind(StrEnum):
    INSTRUCTION = "instruction"
    PROMPT = "prompt"
    CHATMODE = "chatmode"


class CatalogItem(BaseModel):
    """One indexed entry of the curated catalog."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str
    path: str = Field(description="Repository-relative path, used for preview lookups")
    raw_url: str | None = Field(default=None, alias="rawUrl")
    kind: str | None = Field(
        default=None,
        alias="type",
        description="Item kind: instruction | prompt | chatmode (free-form for other catalogs)",
    )
    description: str = Field(default="")


class CatalogPreview(BaseModel):
    """Raw content fetched for a single catalog item."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str
    content: str
    raw_url: str | None = Field(default=None, alias="rawUrl")


# ---------------------------------------------------------------------------
# Web
# ---------------------------------------------------------------------------


class WebHit(BaseModel):
    """One general web search hit."""

    model_config = ConfigDict(extra="ignore")

    title: str = Field(default="No Title")
    url: str = Field(default="#")
    summary: str = Field(default="")
