"""Track submission endpoints."""

import logging

from fastapi import APIRouter, Depends, Query, status

from focustracks.api.dependencies import (
    CurrentUser,
    get_current_user,
    get_submission_service,
    parse_id,
    require_admin,
)
from focustracks.api.schemas.submissions import (
    SubmissionCreateRequest,
    SubmissionResponse,
    SubmissionReviewRequest,
)
from focustracks.application.services.submission_service import SubmissionService
from focustracks.domain.value_objects import SubmissionId, SubmissionStatus

logger = logging.getLogger(__name__)

router = APIRouter()


# Yo, same route, two views: admins see the whole queue (optionally by status), users
# only ever see their own submissions and the status filter is ignored for them.
@router.get("", response_model=list[SubmissionResponse])
async def list_submissions(
    status_filter: SubmissionStatus | None = Query(None, alias="status"),
    user: CurrentUser = Depends(get_current_user),
    service: SubmissionService = Depends(get_submission_service),
) -> list[SubmissionResponse]:
    """List submissions."""
    if user.is_admin:
        submissions = await service.list_submissions(status=status_filter)
    else:
        submissions = await service.list_own_submissions(user.user_id)
    return [SubmissionResponse.from_entity(s) for s in submissions]


@router.post("", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
async def submit_track(
    request: SubmissionCreateRequest,
    user: CurrentUser = Depends(get_current_user),
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionResponse:
    """Submit a track for admin review."""
    submission = await service.submit(
        user_id=user.user_id,
        title=request.title,
        artist=request.artist,
        genre=request.genre,
        duration=request.duration,
        description=request.description,
        youtube_url=request.youtube_url,
        spotify_url=request.spotify_url,
    )
    return SubmissionResponse.from_entity(submission)


@router.patch("/{submission_id}", response_model=SubmissionResponse)
async def review_submission(
    submission_id: str,
    request: SubmissionReviewRequest,
    _admin: CurrentUser = Depends(require_admin),
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionResponse:
    """Approve or reject a submission. Approving publishes it to the catalog once."""
    submission = await service.review(
        parse_id(SubmissionId, submission_id, "submission"),
        request.status,
        request.admin_notes,
    )
    return SubmissionResponse.from_entity(submission)
