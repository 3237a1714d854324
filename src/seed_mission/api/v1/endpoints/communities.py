"""Community endpoints for creating, viewing and joining group missions."""

from fastapi import APIRouter, status

from seed_mission.api.v1.dependencies import CurrentMemberDep, OptionalMemberDep, SessionDep
from seed_mission.schemas.community import CommunityCreate, CommunityProgress, JoinResponse
from seed_mission.services import community_service

router = APIRouter(prefix="/communities", tags=["communities"])


@router.post("", response_model=CommunityProgress, status_code=status.HTTP_201_CREATED)
async def create_community(
    community_data: CommunityCreate,
    current_member: CurrentMemberDep,
    db: SessionDep,
) -> CommunityProgress:
    """Create a new community with the caller as its first participant.

    Args:
        community_data: Title, capacity, score target and date window
        current_member: Authenticated member creating the community
        db: Database session

    Returns:
        The new community with its progress figures

    Raises:
        InvalidInputError: If the end date precedes the start date
    """
    return community_service.create_community(db, current_member, community_data)


@router.get("/{community_id}", response_model=CommunityProgress)
async def get_community(
    community_id: int,
    db: SessionDep,
    caller: OptionalMemberDep,
) -> CommunityProgress:
    caller_id = caller.id if caller is not None else None
    return community_service.get_community(db, community_id, caller_id)


@router.post("/{community_id}/join", response_model=JoinResponse)
async def join_community(
    community_id: int,
    current_member: CurrentMemberDep,
    db: SessionDep,
) -> JoinResponse:
    """Join a community that has not ended and still has room."""
    return community_service.join_community(db, community_id, current_member)
