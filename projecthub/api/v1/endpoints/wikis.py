"""Wiki API: pages, hierarchy, publication and revision history."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Query, Request

from projecthub.api.v1.dependencies import (
    CurrentActor,
    Gate,
    Listing,
    Revisions,
    Validation,
    Wikis,
)
from projecthub.api.v1.endpoints.common import load_or_404
from projecthub.application.requests import CreateWikiRequest, UpdateWikiRequest
from projecthub.core.config import get_settings
from projecthub.core.limiter import limit_writes
from projecthub.domain.exceptions import ResourceNotFoundException
from projecthub.schemas.common import DeletedResponse, PageResponse
from projecthub.schemas.wiki import (
    CleanupResponse,
    RevisionComparison,
    WikiResponse,
    WikiRevisionResponse,
    WikiTreeNode,
)

router = APIRouter()


async def _revision_or_404(service: Revisions, wiki, revision_id: int):
    revision = await service.get_revision(wiki, revision_id)
    if revision is None:
        raise ResourceNotFoundException("WikiRevision", revision_id)
    return revision


@router.get("", response_model=PageResponse[WikiResponse])
async def list_wikis(listing: Listing, repo: Wikis):
    page = await repo.list(listing.filters, per_page=listing.per_page, page=listing.page)
    return PageResponse.from_page(page, WikiResponse)


@router.get("/tree", response_model=list[WikiTreeNode])
async def wiki_tree(workspace_id: Annotated[int, Query()], repo: Wikis):
    """Root pages of the workspace with nested children."""
    return [
        WikiTreeNode.model_validate(node, from_attributes=True)
        for node in await repo.get_tree(workspace_id)
    ]


@router.get("/published", response_model=list[WikiResponse])
async def published_wikis(workspace_id: Annotated[int, Query()], repo: Wikis):
    return [WikiResponse.model_validate(w) for w in await repo.get_published(workspace_id)]


@router.get("/search", response_model=list[WikiResponse])
async def search_wikis(
    workspace_id: Annotated[int, Query()],
    q: Annotated[str, Query(min_length=1)],
    repo: Wikis,
):
    return [WikiResponse.model_validate(w) for w in await repo.search(workspace_id, q)]


@router.get("/slug/{slug}", response_model=WikiResponse)
async def get_wiki_by_slug(slug: str, workspace_id: Annotated[int, Query()], repo: Wikis):
    wiki = await repo.get_by_slug(workspace_id, slug)
    if wiki is None:
        raise ResourceNotFoundException("Wiki", slug)
    return WikiResponse.model_validate(wiki)


@router.post("", response_model=WikiResponse, status_code=201)
@limit_writes
async def create_wiki(
    request: Request,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: Wikis,
):
    """Create a page; an initial revision is recorded when content is present."""
    data = await CreateWikiRequest(body, context).validate()
    gate.authorize(actor, "create", "wiki")
    return WikiResponse.model_validate(await repo.create(data, user_id=actor.user_id))


@router.get("/{wiki_id}", response_model=WikiResponse)
async def get_wiki(wiki_id: int, repo: Wikis):
    return WikiResponse.model_validate(await load_or_404(repo, wiki_id, "Wiki"))


@router.get("/{wiki_id}/breadcrumb", response_model=list[WikiResponse])
async def wiki_breadcrumb(wiki_id: int, repo: Wikis):
    wiki = await load_or_404(repo, wiki_id, "Wiki")
    return [WikiResponse.model_validate(w) for w in await repo.get_breadcrumb(wiki)]


@router.patch("/{wiki_id}", response_model=WikiResponse)
@limit_writes
async def update_wiki(
    request: Request,
    wiki_id: int,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: Wikis,
):
    """Partial update; a revision is appended when title or content changes."""
    wiki = await load_or_404(repo, wiki_id, "Wiki")
    data = await UpdateWikiRequest(body, context, current=wiki).validate()
    gate.authorize(actor, "update", wiki)
    return WikiResponse.model_validate(await repo.update(wiki, data, user_id=actor.user_id))


@router.post("/{wiki_id}/toggle-publication", response_model=WikiResponse)
@limit_writes
async def toggle_publication(
    request: Request, wiki_id: int, actor: CurrentActor, gate: Gate, repo: Wikis
):
    wiki = await load_or_404(repo, wiki_id, "Wiki")
    gate.authorize(actor, "update", wiki)
    return WikiResponse.model_validate(await repo.toggle_publication(wiki))


@router.delete("/{wiki_id}", response_model=DeletedResponse)
@limit_writes
async def delete_wiki(
    request: Request, wiki_id: int, actor: CurrentActor, gate: Gate, repo: Wikis
):
    """Delete a page; its children move up to its parent."""
    wiki = await load_or_404(repo, wiki_id, "Wiki")
    gate.authorize(actor, "delete", wiki)
    return DeletedResponse(deleted=await repo.delete(wiki))


@router.get("/{wiki_id}/revisions", response_model=list[WikiRevisionResponse])
async def list_revisions(wiki_id: int, repo: Wikis, service: Revisions):
    wiki = await load_or_404(repo, wiki_id, "Wiki")
    return [WikiRevisionResponse.model_validate(r) for r in await service.list_revisions(wiki)]


@router.get("/{wiki_id}/revisions/compare", response_model=RevisionComparison)
async def compare_revisions(
    wiki_id: int,
    old: Annotated[int, Query()],
    new: Annotated[int, Query()],
    repo: Wikis,
    service: Revisions,
):
    wiki = await load_or_404(repo, wiki_id, "Wiki")
    older = await _revision_or_404(service, wiki, old)
    newer = await _revision_or_404(service, wiki, new)
    return RevisionComparison(**service.compare_revisions(older, newer))


@router.post("/{wiki_id}/revisions/cleanup", response_model=CleanupResponse)
@limit_writes
async def cleanup_revisions(
    request: Request,
    wiki_id: int,
    actor: CurrentActor,
    gate: Gate,
    repo: Wikis,
    service: Revisions,
    keep: Annotated[int | None, Query(ge=1)] = None,
):
    """Delete all but the newest revisions (default keep from settings)."""
    wiki = await load_or_404(repo, wiki_id, "Wiki")
    gate.authorize(actor, "update", wiki)
    kept = keep or get_settings().wiki_revision_keep
    return CleanupResponse(deleted=await service.cleanup_old_revisions(wiki, kept))


@router.get("/{wiki_id}/revisions/{revision_id}", response_model=WikiRevisionResponse)
async def get_revision(wiki_id: int, revision_id: int, repo: Wikis, service: Revisions):
    wiki = await load_or_404(repo, wiki_id, "Wiki")
    return WikiRevisionResponse.model_validate(
        await _revision_or_404(service, wiki, revision_id)
    )


@router.post("/{wiki_id}/revisions/{revision_id}/restore", response_model=WikiResponse)
@limit_writes
async def restore_revision(
    request: Request,
    wiki_id: int,
    revision_id: int,
    actor: CurrentActor,
    gate: Gate,
    repo: Wikis,
    service: Revisions,
):
    """Copy the revision back onto the page and record a restore revision."""
    wiki = await load_or_404(repo, wiki_id, "Wiki")
    revision = await _revision_or_404(service, wiki, revision_id)
    gate.authorize(actor, "update", wiki)
    restored = await service.restore_to_revision(wiki, revision, user_id=actor.user_id)
    return WikiResponse.model_validate(restored)


@router.delete("/{wiki_id}/revisions/{revision_id}", response_model=DeletedResponse)
@limit_writes
async def delete_revision(
    request: Request,
    wiki_id: int,
    revision_id: int,
    actor: CurrentActor,
    gate: Gate,
    repo: Wikis,
    service: Revisions,
):
    """Delete one revision; the last remaining revision cannot be deleted (409)."""
    wiki = await load_or_404(repo, wiki_id, "Wiki")
    revision = await _revision_or_404(service, wiki, revision_id)
    gate.authorize(actor, "delete", revision)
    return DeletedResponse(deleted=await service.delete_revision(revision))
