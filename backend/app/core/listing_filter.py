"""Listing Filter — pure parameter handling for the paginated order listing.

Invariants:
    - page >= 1 and limit >= 1, otherwise ValidationError with field detail
    - Search term normalized once (stripped, lower-cased) and used for both
      the filter and the cache key, so equivalent searches share an entry
    - Empty term compiles to NoFilter and yields the canonical key suffix "q="
    - Every listing key starts with LISTING_CACHE_PREFIX

Design Decisions:
    - Tagged variant NoFilter | SearchFilter over an optional predicate tree:
      the store adapter compiles each variant explicitly
    - Key scheme kept byte-compatible with existing deployments:
      orders:list:p=<page>:l=<limit>:q=<term>
"""

from dataclasses import dataclass

from app.core.errors import FieldIssue, ValidationError

LISTING_CACHE_PREFIX = "orders:list:"


@dataclass(frozen=True)
class NoFilter:
    """Match every order."""


@dataclass(frozen=True)
class SearchFilter:
    """Match orders whose user email or any product name contains term."""
    term: str


ListingFilter = NoFilter | SearchFilter


@dataclass(frozen=True)
class ListingParams:
    """Validated listing request."""
    page: int
    limit: int
    term: str = ""

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def filter(self) -> ListingFilter:
        return SearchFilter(self.term) if self.term else NoFilter()

    @property
    def cache_key(self) -> str:
        return listing_cache_key(self.page, self.limit, self.term)


def normalize_search_term(raw: str | None) -> str:
    return (raw or "").strip().lower()


def listing_cache_key(page: int, limit: int, term: str) -> str:
    return f"{LISTING_CACHE_PREFIX}p={page}:l={limit}:q={term}"


def build_listing_params(
    page: int, limit: int, search: str | None = "",
) -> ListingParams:
    """Validate page/limit and normalize the search term."""
    issues = []
    if isinstance(page, bool) or not isinstance(page, int) or page < 1:
        issues.append(FieldIssue("page", "page must be an integer >= 1"))
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        issues.append(FieldIssue("limit", "limit must be an integer >= 1"))
    if issues:
        raise ValidationError(issues)
    return ListingParams(page, limit, normalize_search_term(search))
