import io
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, status
from fastapi.responses import Response

from api.deps import get_backup_service
from core.config import settings
from core.exceptions import MalformedDocument, SourceUnreadable
from schemas.backup import BackupResultRead, ProgressRead
from services.backup_service import BackupService, ProgressState, backup_progress, restore_progress

router = APIRouter()

# Restore failures caused by the uploaded file rather than by the server
CLIENT_ERRORS = {SourceUnreadable.kind, MalformedDocument.kind}


def progress_read(state: ProgressState) -> ProgressRead:
    return ProgressRead(progress=state.value, phase=state.phase.value)


@router.get("/backup/export")
def export_backup(service: BackupService = Depends(get_backup_service)):
    sink = io.BytesIO()
    result = service.export_backup(sink)
    if not result:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": result.error, "message": result.message},
        )

    filename = f"{settings.BACKUP_FILENAME_PREFIX}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"
    return Response(
        content=sink.getvalue(),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )

@router.post("/backup/restore", response_model=BackupResultRead)
def restore_backup(
    file: UploadFile = File(...),
    service: BackupService = Depends(get_backup_service),
):
    result = service.restore_backup(file.file)
    if not result:
        status_code = (
            status.HTTP_400_BAD_REQUEST if result.error in CLIENT_ERRORS
            else status.HTTP_500_INTERNAL_SERVER_ERROR
        )
        raise HTTPException(status_code=status_code, detail={"error": result.error, "message": result.message})
    return BackupResultRead(**vars(result))

@router.get("/backup/progress", response_model=ProgressRead)
def get_backup_progress():
    return progress_read(backup_progress)

@router.get("/restore/progress", response_model=ProgressRead)
def get_restore_progress():
    return progress_read(restore_progress)
