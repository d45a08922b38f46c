"""Public endpoint streaming stored images."""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from notification_server.application.use_cases import get_stored_image as get_stored_image_uc
from notification_server.domain.exceptions import ImageNotFoundError
from notification_server.infrastructure.database import get_db
from notification_server.infrastructure.image_storage import ImageStorage
from notification_server.interfaces.api.dependencies import get_image_storage

router = APIRouter(prefix="/image", tags=["images"])


@router.get("/{image_uuid}", response_class=FileResponse)
def read_image(
    image_uuid: str,
    db: Session = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage),
) -> FileResponse:
    """Stream the image identified by ``image_uuid``."""

    try:
        image, path = get_stored_image_uc(db, storage, image_uuid)
    except ImageNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return FileResponse(
        path,
        media_type=image.content_type,
        headers={"Content-Length": str(image.size)},
    )


__all__ = ["router"]
