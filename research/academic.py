"""Scholarly works through the CrossRef REST API (no credential required)."""

from models.research import SearchResult, SourceId

from .base import SourceAdapter, strip_markup

CROSSREF_WORKS_URL = "https://api.crossref.org/works"


def _authors(item: dict) -> str | None:
    names = []
    for author in item.get("author") or []:
        name = " ".join(part for part in (author.get("given"), author.get("family")) if part)
        if name:
            names.append(name)
    return ", ".join(names) or None


class CrossRefAcademicAdapter(SourceAdapter):
    source = SourceId.ACADEMIC
    provider_name = "crossref"
    requires_credential = False

    async def _search(self, topic: str, max_results: int) -> list[SearchResult]:
        payload = await self._get_json(
            CROSSREF_WORKS_URL, params={"query": topic, "rows": max_results}
        )
        items = (payload.get("message") or {}).get("items") or []

        results = []
        for item in items[:max_results]:
            titles = item.get("title") or []
            journals = item.get("container-title") or []
            description = strip_markup(item.get("abstract")) or (
                f"Published in: {journals[0] if journals else 'Unknown journal'}"
            )
            results.append(
                SearchResult(
                    title=(strip_markup(titles[0]) if titles else None) or "No title",
                    description=description,
                    url=item.get("URL"),
                    date=(item.get("created") or {}).get("date-time"),
                    author=_authors(item),
                    source=self.source,
                )
            )
        return results
