"""
REST endpoints for the Auto aggregate.

GET    /rest                  search (criteria as query parameters)
GET    /rest/{id}             single Auto, ETag = version
POST   /rest                  create (roles admin, user)
PUT    /rest/{id}             update, requires If-Match (roles admin, user)
DELETE /rest/{id}             delete (role admin)
POST   /rest/{id}/file        replace attachment (roles admin, user)
GET    /rest/file/{id}        download attachment
"""

from typing import Any

from fastapi import (
    APIRouter,
    BackgroundTasks,
    Depends,
    File,
    Header,
    Query,
    Request,
    Response,
    UploadFile,
    status,
)
from sqlalchemy.orm import Session

from auto_api.routers._common import PAGING_PARAMS, create_base_uri, get_pageable
from auto_api.schemas import AutoCreate, AutoFileOutput, AutoOutput, AutoPage, AutoUpdate, PageMeta
from auto_api.services.domain import (
    AutoReadService,
    AutoWriteService,
    Pageable,
    format_version_token,
)
from auto_api.services.notification import MailService
from shared.config.constants import DELETE_ROLES, ErrorMessages, Limits, WRITE_ROLES
from shared.config.logging import auto_api_logger as logger
from shared.infrastructure.db import get_db
from shared.security.auth import current_user_context, require_roles
from shared.utils.exceptions import NotFoundError, PreconditionRequiredError, ValidationError

router = APIRouter(prefix="/rest", tags=["auto"])


@router.get("", response_model=AutoPage)
def find_autos(
    request: Request,
    pageable: Pageable = Depends(get_pageable),
    db: Session = Depends(get_db),
) -> AutoPage:
    """Search Autos. Every query parameter except size and page is a criterion."""
    criteria = {
        key: value
        for key, value in request.query_params.items()
        if key not in PAGING_PARAMS
    }
    page = AutoReadService(db).find(criteria, pageable)
    return AutoPage(
        content=[AutoOutput.from_entity(a) for a in page.content],
        page=PageMeta(**page.to_dict()),
    )


@router.get("/file/{auto_id}", name="get_auto_file")
def get_file(
    auto_id: int,
    db: Session = Depends(get_db),
) -> Response:
    """Download the attachment of an Auto."""
    auto_file = AutoReadService(db).find_file_by_auto_id(auto_id)
    if auto_file is None:
        raise NotFoundError(ErrorMessages.FILE_NOT_FOUND.format(id=auto_id), entity_id=auto_id)

    return Response(
        content=auto_file.data,
        media_type=auto_file.mimetype or "application/octet-stream",
        headers={"Content-Disposition": f'inline; filename="{auto_file.filename}"'},
    )


@router.get("/{auto_id}", response_model=AutoOutput)
def get_auto(
    auto_id: int,
    response: Response,
    repairs: bool = Query(default=False, description="Include the repairs"),
    if_none_match: str | None = Header(default=None, alias="If-None-Match"),
    db: Session = Depends(get_db),
) -> Any:
    """Get one Auto. Answers 304 when If-None-Match carries the current version."""
    auto = AutoReadService(db).find_by_id(auto_id, include_repairs=repairs)

    etag = format_version_token(auto.version)
    if if_none_match is not None and if_none_match.strip() == etag:
        logger.debug("Auto not modified", auto_id=auto_id, etag=etag)
        return Response(status_code=status.HTTP_304_NOT_MODIFIED, headers={"ETag": etag})

    response.headers["ETag"] = etag
    return AutoOutput.from_entity(auto, include_repairs=repairs)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_auto(
    body: AutoCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    ctx: dict = Depends(current_user_context),
) -> Response:
    """Create an Auto with its Engine and Repairs. Requires role admin or user."""
    require_roles(ctx, WRITE_ROLES)

    service = AutoWriteService(db, notifier=MailService(background_tasks))
    auto_id = service.create(body.to_entity())

    location = f"{create_base_uri(request)}/{auto_id}"
    return Response(status_code=status.HTTP_201_CREATED, headers={"Location": location})


@router.put("/{auto_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_auto(
    auto_id: int,
    body: AutoUpdate,
    if_match: str | None = Header(default=None, alias="If-Match"),
    db: Session = Depends(get_db),
    ctx: dict = Depends(current_user_context),
) -> Response:
    """Update the scalar fields of an Auto. Requires If-Match with the version."""
    require_roles(ctx, WRITE_ROLES)

    if if_match is None:
        raise PreconditionRequiredError(auto_id=auto_id)

    new_version = AutoWriteService(db).update(auto_id, body.model_dump(), if_match)
    return Response(
        status_code=status.HTTP_204_NO_CONTENT,
        headers={"ETag": format_version_token(new_version)},
    )


@router.delete("/{auto_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_auto(
    auto_id: int,
    db: Session = Depends(get_db),
    ctx: dict = Depends(current_user_context),
) -> Response:
    """Delete an Auto with everything it owns. Requires role admin."""
    require_roles(ctx, DELETE_ROLES)

    AutoWriteService(db).delete(auto_id)
    logger.info("Auto deleted", auto_id=auto_id, username=ctx.get("sub"))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{auto_id}/file",
    response_model=AutoFileOutput,
    status_code=status.HTTP_201_CREATED,
)
def upload_file(
    auto_id: int,
    request: Request,
    response: Response,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    ctx: dict = Depends(current_user_context),
) -> AutoFileOutput:
    """Replace the attachment of an Auto. Requires role admin or user."""
    require_roles(ctx, WRITE_ROLES)

    data = file.file.read(Limits.MAX_FILE_SIZE + 1)
    if len(data) > Limits.MAX_FILE_SIZE:
        raise ValidationError(
            f"Die Datei ist zu gross (maximal {Limits.MAX_FILE_SIZE} Bytes)",
            auto_id=auto_id,
        )

    auto_file = AutoWriteService(db).add_file(
        auto_id,
        data,
        file.filename or "upload",
        file.content_type,
    )
    response.headers["Location"] = str(request.url_for("get_auto_file", auto_id=auto_id))
    return AutoFileOutput.model_validate(auto_file)
