from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from themekit.api.deps import get_file_resolver
from themekit.services.files import FileResolver

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/files/{token}")
async def download_file(
    token: str,
    files: FileResolver = Depends(get_file_resolver),
) -> FileResponse:
    reference = files.load_reference(token)
    path = files.path_for(reference) if reference is not None else None
    if path is None or not path.is_file():
        logger.info("files.download_rejected", extra={"event": "files.download_rejected"})
        raise HTTPException(status_code=404, detail="file not found")
    return FileResponse(path)
