"""Domain models for arXiv search requests and results."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .constants import ABS_MARKER, ALL_FIELDS_PREFIX, NEW_STYLE_ID_PREFIX


class Author(BaseModel):
    """A paper author.

    The name is always "First Middle Last"; First and Middle may be
    abbreviated to "F. M.".
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="", description="Author name")
    affiliation: str = Field(default="", description="Affiliation, empty if absent")


class Paper(BaseModel):
    """Metadata of a paper returned by an arXiv search."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(default="", description="Atom id URL of the abstract page")
    doi: str = Field(default="", description="DOI, empty if absent")
    updated: datetime | None = Field(default=None, description="Last update time")
    published: datetime | None = Field(default=None, description="First version time")
    title: str = Field(default="", description="Whitespace-normalized title")
    summary: str = Field(default="", description="Whitespace-normalized abstract")
    categories: list[str] = Field(
        default_factory=list, description="Category terms in document order"
    )
    journal: str = Field(default="", description="Journal reference")
    authors: list[Author] = Field(default_factory=list, description="Authors in order")
    # Typically the number of pages and figures and the document format
    comment: str = Field(default="", description="Author comment")
    pages: int = Field(default=0, ge=0, description="Number of pages, 0 if unknown")

    @property
    def arxiv_id(self) -> str:
        """Short arXiv identifier derived from the URL.

        New-style identifiers ("1706.03762v5") get an "arXiv:" prefix,
        old-style ones ("math/0309136v1") are returned as is. Returns an empty
        string when the URL is not an abstract URL.
        """
        index = self.url.find(ABS_MARKER)
        if index < 0:
            return ""

        identifier = self.url[index + len(ABS_MARKER) :]
        if "/" not in identifier:
            identifier = NEW_STYLE_ID_PREFIX + identifier
        return identifier


class Query(BaseModel):
    """An arXiv API search request.

    See https://arxiv.org/help/api/user-manual#query_details for the syntax of
    ``query``. ``max_results`` must satisfy 0 < max_results <= 30000; the API
    enforces it, this client does not.
    """

    model_config = ConfigDict(frozen=True)

    query: str = Field(default="", description="search_query expression")
    id_list: list[str] | None = Field(default=None, description="arXiv IDs")
    start: int = Field(default=0, ge=0, description="Index of the first result")
    max_results: int = Field(default=10, ge=0, description="Maximum number of results")

    @classmethod
    def for_terms(cls, search: str, start: int, max_results: int) -> "Query":
        """Build a query matching ``search`` against all fields."""
        return cls(
            query=ALL_FIELDS_PREFIX + search,
            id_list=None,
            start=start,
            max_results=max_results,
        )
