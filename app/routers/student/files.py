from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status, Path

from app.db.models import Profile
from app.middlewares.auth_middleware import require_student
from app.services.storage_service import StorageService, get_storage_service
from app.schemas.storage_schemas import FileKind
from app.utils.responses import ResponseBuilder

files_router = APIRouter()


@files_router.post(
    "/files",
    response_model=None,
    status_code=status.HTTP_201_CREATED,
    summary="Upload an essay or transcript",
    description="Stored as `{user_id}/{kind}-{filename}`; uploading the same name again replaces the file.",
)
async def upload_file(
    request: Request,
    kind: FileKind = Form(..., description="essay or transcript"),
    file: UploadFile = File(..., description="File to upload"),
    student: Profile = Depends(require_student),
    storage_service: StorageService = Depends(get_storage_service),
):
    uploaded = await storage_service.upload_student_file(student.user_id, kind, file)
    return ResponseBuilder.success(
        request=request,
        data=uploaded,
        message="File uploaded successfully",
        status_code=status.HTTP_201_CREATED,
    )


@files_router.get(
    "/files",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="List the caller's files",
)
async def list_files(
    request: Request,
    student: Profile = Depends(require_student),
    storage_service: StorageService = Depends(get_storage_service),
):
    files = await storage_service.list_student_files(student.user_id)
    return ResponseBuilder.success(request=request, data=files)


@files_router.delete(
    "/files/{object_name}",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="Delete one of the caller's files",
)
async def delete_file(
    request: Request,
    object_name: str = Path(..., description="Object name as listed, e.g. essay-draft.pdf"),
    student: Profile = Depends(require_student),
    storage_service: StorageService = Depends(get_storage_service),
):
    await storage_service.delete_student_file(student.user_id, object_name)
    return ResponseBuilder.success(request=request, message="File deleted successfully")
