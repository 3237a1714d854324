"""Proof-related endpoints: posts, images, hearts and comments."""

from typing import Annotated

from fastapi import APIRouter, File, Form, Query, UploadFile, status

from seed_mission.api.v1.dependencies import (
    CurrentMemberDep,
    OptionalMemberDep,
    SessionDep,
    StorageDep,
    read_uploads,
)
from seed_mission.core.settings import settings
from seed_mission.models import Member
from seed_mission.schemas.common import to_page_index
from seed_mission.schemas.proof import (
    CommentCreate,
    CommentResponse,
    HeartToggleResult,
    ProofCount,
    ProofSummary,
)
from seed_mission.services import heart_service, proof_service

router = APIRouter(tags=["proofs"])


def _caller_id(member: Member | None) -> int | None:
    return member.id if member is not None else None


@router.get("/communities/{community_id}/proofs", response_model=list[ProofSummary])
async def list_proofs(
    community_id: int,
    db: SessionDep,
    caller: OptionalMemberDep,
    page: int = Query(1, description="1-based page number"),
    size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
) -> list[ProofSummary]:
    """List a community's proofs, newest first.

    Args:
        community_id: Community whose proofs are listed
        db: Database session
        caller: Authenticated member, if any
        page: 1-based page number
        size: Page size

    Returns:
        One page of proofs annotated for the caller
    """
    return proof_service.list_proofs(
        db,
        community_id,
        to_page_index(page),
        size,
        caller_id=_caller_id(caller),
    )


@router.post(
    "/communities/{community_id}/proofs",
    response_model=ProofSummary,
    status_code=status.HTTP_201_CREATED,
)
async def create_proof(
    community_id: int,
    current_member: CurrentMemberDep,
    db: SessionDep,
    storage: StorageDep,
    title: Annotated[str, Form(min_length=1, max_length=100)],
    content: Annotated[str, Form(min_length=1)],
    files: Annotated[list[UploadFile] | None, File()] = None,
) -> ProofSummary:
    """Post a proof with optional images; only participants may post."""
    payloads = await read_uploads(files)
    return proof_service.create_proof(
        db,
        storage,
        community_id=community_id,
        author_id=current_member.id,
        author_nickname=current_member.nickname,
        title=title,
        content=content,
        files=payloads,
    )


@router.get("/communities/{community_id}/proofs/counts", response_model=list[ProofCount])
async def count_community_proofs(community_id: int, db: SessionDep) -> list[ProofCount]:
    return proof_service.count_all_proofs(db, community_id)


@router.get("/proofs/{proof_id}", response_model=ProofSummary)
async def get_proof(proof_id: int, db: SessionDep, caller: OptionalMemberDep) -> ProofSummary:
    return proof_service.get_proof(db, proof_id, caller_id=_caller_id(caller))


@router.patch("/proofs/{proof_id}", response_model=ProofSummary)
async def update_proof(
    proof_id: int,
    current_member: CurrentMemberDep,
    db: SessionDep,
    storage: StorageDep,
    title: Annotated[str, Form(min_length=1, max_length=100)],
    content: Annotated[str, Form(min_length=1)],
    image_ids: Annotated[list[int] | None, Form()] = None,
    files: Annotated[list[UploadFile] | None, File()] = None,
) -> ProofSummary:
    """Edit a proof; `files[i]` replaces the image `image_ids[i]`.

    Raises:
        ForbiddenError: If the caller did not write the proof
        InvalidInputError: If the image ids and files do not pair up
    """
    payloads = await read_uploads(files)
    return proof_service.update_proof(
        db,
        storage,
        proof_id=proof_id,
        caller_id=current_member.id,
        title=title,
        content=content,
        image_ids=image_ids or [],
        files=payloads,
    )


@router.delete("/proofs/{proof_id}", response_model=bool)
async def delete_proof(
    proof_id: int,
    db: SessionDep,
    storage: StorageDep,
    caller: OptionalMemberDep,
) -> bool:
    """Delete a proof; responds `false` when the caller is not its author."""
    return proof_service.delete_proof(db, proof_id, _caller_id(caller), storage=storage)


@router.get("/proofs/{proof_id}/counts", response_model=ProofCount)
async def count_proof(proof_id: int, db: SessionDep) -> ProofCount:
    return proof_service.count_proof(db, proof_id)


@router.patch("/proofs/{proof_id}/heart", response_model=HeartToggleResult)
async def toggle_heart(
    proof_id: int,
    current_member: CurrentMemberDep,
    db: SessionDep,
) -> HeartToggleResult:
    """Flip the caller's heart on a proof."""
    return heart_service.toggle_heart(db, proof_id, current_member.id)


@router.get("/proofs/{proof_id}/comments", response_model=list[CommentResponse])
async def list_comments(proof_id: int, db: SessionDep) -> list[CommentResponse]:
    return proof_service.list_comments(db, proof_id)


@router.post(
    "/proofs/{proof_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    proof_id: int,
    comment: CommentCreate,
    current_member: CurrentMemberDep,
    db: SessionDep,
) -> CommentResponse:
    return proof_service.add_comment(
        db,
        proof_id=proof_id,
        author_id=current_member.id,
        nickname=current_member.nickname,
        content=comment.content,
    )


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    comment_id: int,
    current_member: CurrentMemberDep,
    db: SessionDep,
) -> None:
    proof_service.delete_comment(db, comment_id, current_member.id)
