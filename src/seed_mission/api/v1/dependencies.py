"""Shared API dependencies for authentication, storage and token handling."""

from typing import Annotated

from fastapi import Depends, HTTPException, UploadFile, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from seed_mission.core.security import TokenError, decode_token, member_id_from
from seed_mission.db.session import get_db
from seed_mission.models import Member
from seed_mission.services import storage as storage_module
from seed_mission.services import token_store as token_store_module
from seed_mission.services.storage import FilePayload, ObjectStorage
from seed_mission.services.token_store import RefreshTokenStore

# HTTP Bearer schemes for JWT authentication
bearer_scheme = HTTPBearer()
optional_bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def _unauthorized(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _member_from_token(token: str, db: Session) -> Member:
    try:
        payload = decode_token(token, expected_type="access")
    except TokenError as err:
        raise _unauthorized() from err

    member = db.get(Member, member_id_from(payload))
    if member is None:
        raise _unauthorized("Member not found")
    return member


def get_current_member(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> Member:
    """Get the current authenticated member from the access token.

    Args:
        credentials: HTTP Bearer token credentials
        db: Database session

    Returns:
        Member object for the authenticated caller

    Raises:
        HTTPException: If the token is invalid or the member no longer exists
    """
    return _member_from_token(credentials.credentials, db)


def get_optional_member(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(optional_bearer_scheme)],
    db: SessionDep,
) -> Member | None:
    """Like `get_current_member`, but anonymous callers resolve to None.

    A token that is present but invalid is still rejected.
    """
    if credentials is None:
        return None
    return _member_from_token(credentials.credentials, db)


def get_storage() -> ObjectStorage:
    """Return the shared object storage."""
    return storage_module.get_storage()


def get_token_store() -> RefreshTokenStore:
    """Return the shared refresh-token store."""
    return token_store_module.get_token_store()


async def read_uploads(files: list[UploadFile] | None) -> list[FilePayload]:
    """Read multipart uploads into storage payloads, skipping empty parts."""
    payloads: list[FilePayload] = []
    for upload in files or []:
        content = await upload.read()
        if not upload.filename and not content:
            continue
        payloads.append(
            FilePayload(
                filename=upload.filename or "upload",
                content=content,
                content_type=upload.content_type,
            )
        )
    return payloads


# Type aliases for common dependencies
CurrentMemberDep = Annotated[Member, Depends(get_current_member)]
OptionalMemberDep = Annotated[Member | None, Depends(get_optional_member)]
StorageDep = Annotated[ObjectStorage, Depends(get_storage)]
TokenStoreDep = Annotated[RefreshTokenStore, Depends(get_token_store)]
