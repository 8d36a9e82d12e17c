"""Conversation API: conversations, membership and direct messages."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Query, Request

from projecthub.api.v1.dependencies import (
    Conversations,
    CurrentActor,
    Gate,
    Listing,
    Validation,
)
from projecthub.api.v1.endpoints.common import load_or_404
from projecthub.application.requests import (
    ConversationMembersRequest,
    CreateConversationRequest,
    DirectConversationRequest,
    UpdateConversationRequest,
    UpdateMemberRoleRequest,
)
from projecthub.core.limiter import limit_writes
from projecthub.domain.exceptions import ResourceNotFoundException
from projecthub.schemas.common import DeletedResponse, PageResponse
from projecthub.schemas.conversation import (
    ConversationDetailResponse,
    ConversationMember,
    ConversationResponse,
    MembershipChange,
)

router = APIRouter()


async def _detail(repo: Conversations, conversation) -> ConversationDetailResponse:
    response = ConversationDetailResponse.model_validate(conversation)
    response.members = [
        ConversationMember.model_validate(m) for m in await repo.get_members(conversation)
    ]
    return response


@router.get("", response_model=PageResponse[ConversationResponse])
async def list_conversations(listing: Listing, repo: Conversations):
    """List conversations. Filters: workspace_id, type, is_private, user_id, search."""
    page = await repo.list(listing.filters, per_page=listing.per_page, page=listing.page)
    return PageResponse.from_page(page, ConversationResponse)


@router.get("/mine", response_model=list[ConversationResponse])
async def my_conversations(
    actor: CurrentActor,
    repo: Conversations,
    workspace_id: Annotated[int | None, Query()] = None,
):
    """Conversations the acting user belongs to, most recently updated first."""
    conversations = await repo.get_for_user(actor.user_id, workspace_id)
    return [ConversationResponse.model_validate(c) for c in conversations]


@router.post("", response_model=ConversationDetailResponse, status_code=201)
@limit_writes
async def create_conversation(
    request: Request,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: Conversations,
):
    """Create a conversation owned by the acting user; user_ids join as members."""
    data = await CreateConversationRequest(body, context).validate()
    gate.authorize(actor, "create", "conversation")
    user_ids = data.pop("user_ids", None) or []
    conversation = await repo.create(data, owner_id=actor.user_id, user_ids=user_ids)
    return await _detail(repo, conversation)


@router.post("/direct", response_model=ConversationDetailResponse)
@limit_writes
async def direct_conversation(
    request: Request,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: Conversations,
):
    """Return the direct conversation between the acting user and user_id, creating it once."""
    data = await DirectConversationRequest(body, context).validate()
    gate.authorize(actor, "create", "conversation")
    conversation = await repo.find_or_create_direct_conversation(
        data["workspace_id"], actor.user_id, data["user_id"]
    )
    return await _detail(repo, conversation)


@router.get("/{conversation_id}", response_model=ConversationDetailResponse)
async def get_conversation(conversation_id: int, repo: Conversations):
    conversation = await load_or_404(repo, conversation_id, "Conversation")
    return await _detail(repo, conversation)


@router.patch("/{conversation_id}", response_model=ConversationDetailResponse)
@limit_writes
async def update_conversation(
    request: Request,
    conversation_id: int,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: Conversations,
):
    conversation = await load_or_404(repo, conversation_id, "Conversation")
    data = await UpdateConversationRequest(body, context, current=conversation).validate()
    gate.authorize(actor, "update", conversation)
    return await _detail(repo, await repo.update(conversation, data))


@router.delete("/{conversation_id}", response_model=DeletedResponse)
@limit_writes
async def delete_conversation(
    request: Request,
    conversation_id: int,
    actor: CurrentActor,
    gate: Gate,
    repo: Conversations,
):
    conversation = await load_or_404(repo, conversation_id, "Conversation")
    gate.authorize(actor, "delete", conversation)
    return DeletedResponse(deleted=await repo.delete(conversation))


@router.post("/{conversation_id}/members", response_model=MembershipChange)
@limit_writes
async def add_members(
    request: Request,
    conversation_id: int,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: Conversations,
):
    conversation = await load_or_404(repo, conversation_id, "Conversation")
    data = await ConversationMembersRequest(body, context).validate()
    gate.authorize(actor, "update", conversation)
    return MembershipChange(changed=await repo.add_users(conversation, data["user_ids"]))


@router.delete("/{conversation_id}/members", response_model=MembershipChange)
@limit_writes
async def remove_members(
    request: Request,
    conversation_id: int,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: Conversations,
):
    """Remove members; removing the last owner is refused (409)."""
    conversation = await load_or_404(repo, conversation_id, "Conversation")
    data = await ConversationMembersRequest(body, context).validate()
    gate.authorize(actor, "update", conversation)
    return MembershipChange(changed=await repo.remove_users(conversation, data["user_ids"]))


@router.patch("/{conversation_id}/members/{user_id}", response_model=ConversationDetailResponse)
@limit_writes
async def update_member_role(
    request: Request,
    conversation_id: int,
    user_id: int,
    body: Annotated[dict[str, Any], Body()],
    actor: CurrentActor,
    gate: Gate,
    context: Validation,
    repo: Conversations,
):
    """Change a member's role; demoting the last owner is refused (409)."""
    conversation = await load_or_404(repo, conversation_id, "Conversation")
    data = await UpdateMemberRoleRequest(body, context).validate()
    gate.authorize(actor, "update", conversation)
    if not await repo.update_user_role(conversation, user_id, data["role"]):
        raise ResourceNotFoundException("ConversationMember", user_id)
    return await _detail(repo, conversation)


@router.post("/{conversation_id}/read", response_model=MembershipChange)
@limit_writes
async def mark_read(
    request: Request, conversation_id: int, actor: CurrentActor, repo: Conversations
):
    """Stamp last_read_at for the acting user."""
    conversation = await load_or_404(repo, conversation_id, "Conversation")
    marked = await repo.mark_as_read(conversation, actor.user_id)
    return MembershipChange(changed=int(marked))
