"""Proof posts: listing, authoring, editing and deleting.

A proof owns its images, comments and hearts. Authorship checks and the
mutation they guard happen inside the same request transaction; uploads
are staged before any row is written so a storage failure never leaves a
half-built proof behind.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from seed_mission.core.errors import ForbiddenError, InvalidInputError, NotFoundError
from seed_mission.models import Comment, Heart, Image, Proof
from seed_mission.schemas.proof import (
    CommentResponse,
    ImageResponse,
    ProofCount,
    ProofSummary,
)
from seed_mission.services.community_service import get_community_or_404
from seed_mission.services.membership import is_participant
from seed_mission.services.storage import (
    FilePayload,
    ObjectStorage,
    StoredObject,
    discard_quietly,
)

logger = logging.getLogger(__name__)

__all__ = [
    "list_proofs",
    "get_proof",
    "create_proof",
    "update_proof",
    "delete_proof",
    "count_all_proofs",
    "count_proof",
    "add_comment",
    "list_comments",
    "delete_comment",
    "to_proof_summary",
]

_AGGREGATE_LOADS = (
    selectinload(Proof.images),
    selectinload(Proof.comments),
    selectinload(Proof.hearts),
)


def get_proof_or_404(db: Session, proof_id: int) -> Proof:
    stmt = (
        select(Proof)
        .where(Proof.id == proof_id)
        .options(*_AGGREGATE_LOADS)
        .execution_options(populate_existing=True)
    )
    proof = db.scalar(stmt)
    if proof is None:
        raise NotFoundError("Proof not found")
    return proof


def _liked_proof_ids(db: Session, proof_ids: Iterable[int], caller_id: int | None) -> set[int]:
    ids = list(proof_ids)
    if caller_id is None or not ids:
        return set()
    stmt = select(Heart.proof_id).where(Heart.member_id == caller_id, Heart.proof_id.in_(ids))
    return set(db.scalars(stmt))


def to_proof_summary(proof: Proof, caller_id: int | None, liked_ids: set[int]) -> ProofSummary:
    """Assemble the caller-specific view of a proof."""
    return ProofSummary(
        proof_id=proof.id,
        nickname=proof.nickname,
        title=proof.title,
        content=proof.content,
        images=[
            ImageResponse(image_id=image.id, url=image.url, file_name=image.file_name)
            for image in proof.images
        ],
        comment_count=len(proof.comments),
        heart_count=len(proof.hearts),
        is_writer=proof.is_written_by(caller_id),
        has_liked=caller_id is not None and proof.id in liked_ids,
        created_at=proof.created_at,
    )


def list_proofs(
    db: Session,
    community_id: int,
    page_index: int,
    size: int,
    caller_id: int | None = None,
) -> list[ProofSummary]:
    """Return one page of a community's proofs, newest first.

    Args:
        db: Database session
        community_id: Community whose proofs are listed
        page_index: Zero-based page index
        size: Page size
        caller_id: Authenticated member id, or None for anonymous callers

    Raises:
        NotFoundError: If the community does not exist.
        InvalidInputError: If the page index or size is out of range.
    """
    if page_index < 0 or size < 1:
        raise InvalidInputError("Invalid page request")
    get_community_or_404(db, community_id)

    stmt = (
        select(Proof)
        .where(Proof.community_id == community_id)
        .order_by(Proof.created_at.desc(), Proof.id.desc())
        .offset(page_index * size)
        .limit(size)
        .options(*_AGGREGATE_LOADS)
        .execution_options(populate_existing=True)
    )
    proofs = list(db.scalars(stmt))
    liked = _liked_proof_ids(db, (proof.id for proof in proofs), caller_id)
    return [to_proof_summary(proof, caller_id, liked) for proof in proofs]


def get_proof(db: Session, proof_id: int, caller_id: int | None = None) -> ProofSummary:
    """Return a single proof as seen by `caller_id`."""
    proof = get_proof_or_404(db, proof_id)
    return to_proof_summary(proof, caller_id, _liked_proof_ids(db, [proof.id], caller_id))


def _stage_uploads(storage: ObjectStorage, files: Sequence[FilePayload]) -> list[StoredObject]:
    """Upload every file in order; on failure remove what was already stored."""
    staged: list[StoredObject] = []
    try:
        for file in files:
            staged.append(storage.upload(file))
    except Exception:
        discard_quietly(storage, [obj.file_name for obj in staged])
        raise
    return staged


def create_proof(
    db: Session,
    storage: ObjectStorage,
    *,
    community_id: int,
    author_id: int,
    author_nickname: str,
    title: str,
    content: str,
    files: Sequence[FilePayload] = (),
) -> ProofSummary:
    """Create a proof with its images on behalf of a participant.

    Raises:
        NotFoundError: If the community does not exist.
        ForbiddenError: If the author is not a participant; nothing is uploaded.
        ExternalIOError: If storage fails; no rows are written.
    """
    community = get_community_or_404(db, community_id)
    if not is_participant(db, community.id, author_id):
        raise ForbiddenError("Only community participants can post proofs")

    staged = _stage_uploads(storage, files)

    proof = Proof(
        community_id=community.id,
        author_id=author_id,
        nickname=author_nickname,
        title=title,
        content=content,
    )
    for stored in staged:
        proof.images.append(Image(url=stored.url, file_name=stored.file_name))
    db.add(proof)
    try:
        db.commit()
    except Exception:
        db.rollback()
        discard_quietly(storage, [obj.file_name for obj in staged])
        raise
    db.refresh(proof)
    logger.info(
        "Member %s created proof %s in community %s with %d image(s)",
        author_id, proof.id, community.id, len(staged),
    )
    return to_proof_summary(proof, author_id, set())


def update_proof(
    db: Session,
    storage: ObjectStorage,
    *,
    proof_id: int,
    caller_id: int | None,
    title: str,
    content: str,
    image_ids: Sequence[int] = (),
    files: Sequence[FilePayload] = (),
) -> ProofSummary:
    """Edit a proof's text and replace images in place.

    `files[i]` replaces the image whose id is `image_ids[i]`; the image keeps
    its id and position.

    Raises:
        NotFoundError: If the proof does not exist.
        ForbiddenError: If the caller is not the author.
        InvalidInputError: If the id and file lists do not pair up, or an id
            does not belong to this proof.
    """
    proof = get_proof_or_404(db, proof_id)
    if not proof.is_written_by(caller_id):
        raise ForbiddenError("Only the author can edit this proof")

    if len(image_ids) != len(files):
        raise InvalidInputError("Each replacement file needs exactly one image id")
    owned = {image.id: image for image in proof.images}
    unknown = [image_id for image_id in image_ids if image_id not in owned]
    if unknown:
        raise InvalidInputError(f"Images {unknown} do not belong to proof {proof.id}")
    if len(set(image_ids)) != len(image_ids):
        raise InvalidInputError("An image can only be replaced once per edit")

    staged = _stage_uploads(storage, files)
    replaced: list[str] = []
    for image_id, stored in zip(image_ids, staged, strict=True):
        image = owned[image_id]
        replaced.append(image.file_name)
        image.url = stored.url
        image.file_name = stored.file_name

    proof.title = title
    proof.content = content
    try:
        db.commit()
    except Exception:
        db.rollback()
        discard_quietly(storage, [obj.file_name for obj in staged])
        raise
    discard_quietly(storage, replaced)
    db.refresh(proof)
    logger.info("Member %s edited proof %s (%d image(s) replaced)", caller_id, proof.id, len(staged))
    return to_proof_summary(proof, caller_id, _liked_proof_ids(db, [proof.id], caller_id))


def delete_proof(
    db: Session,
    proof_id: int,
    caller_id: int | None,
    storage: ObjectStorage | None = None,
) -> bool:
    """Delete a proof and everything it owns.

    Returns False, without changing anything, when the caller is anonymous or
    not the author. This is the one authorization failure reported as a value
    rather than an error.

    Raises:
        NotFoundError: If the proof does not exist.
    """
    proof = get_proof_or_404(db, proof_id)
    if not proof.is_written_by(caller_id):
        logger.info("Member %s may not delete proof %s", caller_id, proof_id)
        return False

    file_names = [image.file_name for image in proof.images]
    db.delete(proof)
    db.commit()
    if storage is not None:
        discard_quietly(storage, file_names)
    logger.info("Member %s deleted proof %s", caller_id, proof_id)
    return True


def _counts_by_proof(
    db: Session,
    model: type[Comment] | type[Heart],
    proof_ids: list[int],
) -> dict[int, int]:
    if not proof_ids:
        return {}
    stmt = (
        select(model.proof_id, func.count(model.id))
        .where(model.proof_id.in_(proof_ids))
        .group_by(model.proof_id)
    )
    return {proof_id: int(total) for proof_id, total in db.execute(stmt)}


def count_all_proofs(db: Session, community_id: int) -> list[ProofCount]:
    """Comment and heart totals for every proof of a community, newest first."""
    get_community_or_404(db, community_id)
    proof_ids = list(
        db.scalars(
            select(Proof.id)
            .where(Proof.community_id == community_id)
            .order_by(Proof.created_at.desc(), Proof.id.desc())
        )
    )
    comments = _counts_by_proof(db, Comment, proof_ids)
    hearts = _counts_by_proof(db, Heart, proof_ids)
    return [
        ProofCount(
            proof_id=proof_id,
            comment_count=comments.get(proof_id, 0),
            heart_count=hearts.get(proof_id, 0),
        )
        for proof_id in proof_ids
    ]


def count_proof(db: Session, proof_id: int) -> ProofCount:
    """Comment and heart totals for a single proof."""
    proof = get_proof_or_404(db, proof_id)
    return ProofCount(
        proof_id=proof.id,
        comment_count=len(proof.comments),
        heart_count=len(proof.hearts),
    )


def add_comment(
    db: Session,
    *,
    proof_id: int,
    author_id: int,
    nickname: str,
    content: str,
) -> CommentResponse:
    """Attach a comment to a proof."""
    proof = get_proof_or_404(db, proof_id)
    comment = Comment(author_id=author_id, nickname=nickname, content=content)
    proof.comments.append(comment)
    db.commit()
    db.refresh(comment)
    return CommentResponse.model_validate(comment)


def list_comments(db: Session, proof_id: int) -> list[CommentResponse]:
    """Return a proof's comments, oldest first."""
    proof = get_proof_or_404(db, proof_id)
    return [CommentResponse.model_validate(comment) for comment in proof.comments]


def delete_comment(db: Session, comment_id: int, caller_id: int) -> None:
    """Remove a comment written by the caller.

    Raises:
        NotFoundError: If the comment does not exist.
        ForbiddenError: If the caller did not write it.
    """
    comment = db.get(Comment, comment_id)
    if comment is None:
        raise NotFoundError("Comment not found")
    if comment.author_id != caller_id:
        raise ForbiddenError("Only the author can delete this comment")
    db.delete(comment)
    db.commit()
