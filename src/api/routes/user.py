from typing import Optional
from urllib.parse import quote
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, UploadFile, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, EmailStr, Field, TypeAdapter, ValidationError

from config import ApplicationConfig
from libs.result import Error
from src.api.error import ClientError, raise_for_error
from src.app.services.notifications import AccountNotifier
from src.app.services.object_storage import IObjectStorage
from src.app.services.password_hasher import PasswordHasher
from src.app.services.token_issuer import ITokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.users import (
    AvatarImage,
    ChangePasswordUseCase,
    DeleteAccountResponse,
    DeleteAccountUseCase,
    DownloadAccountDataUseCase,
    GetProfileUseCase,
    LogoutUseCase,
    MessageResponse,
    RequestEmailVerificationUseCase,
    UpdateProfileCommand,
    UpdateProfileUseCase,
    UploadAvatarUseCase,
    UserProfile,
)
from src.depends import (
    CurrentUser,
    get_current_user,
    get_notifier,
    get_object_storage,
    get_password_hasher,
    get_token_issuer,
    get_unit_of_work,
)

router = APIRouter(prefix="/users", tags=["User"])

email_adapter = TypeAdapter(EmailStr)


def validate_form_email(email: Optional[str]) -> Optional[str]:
    """Blank means unchanged; anything else must be a valid address"""
    if email is None or not email.strip():
        return None
    try:
        return email_adapter.validate_python(email.strip())
    except ValidationError:
        raise ClientError(
            Error("VALIDATION_ERROR", "Invalid email address"),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )


def attachment_disposition(filename: str) -> str:
    """Header values must be latin-1, so non-ASCII names go in filename*"""
    if filename.isascii() and '"' not in filename:
        return f'attachment; filename="{filename}"'
    fallback = filename.encode("ascii", "replace").decode("ascii").replace("?", "_").replace('"', "_")
    return f"attachment; filename=\"{fallback}\"; filename*=utf-8''{quote(filename)}"


async def read_image(upload: UploadFile) -> AvatarImage:
    content = await upload.read()
    return AvatarImage(
        filename=upload.filename or "",
        content_type=upload.content_type or "",
        content=content,
    )


@router.post("/{user_id}/logout", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def logout(
    user_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
):
    """
    Logout

    Session tokens are stateless; the client drops its token.
    """
    result = await LogoutUseCase().execute(current_user.id, user_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get("/{user_id}", status_code=status.HTTP_200_OK, response_model=UserProfile)
async def get_profile(
    user_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Get Profile

    Raises:
        - 401 Unauthorized: Missing or invalid session token
        - 403 Forbidden: Token belongs to another account
        - 404 Not Found: No such user
    """
    use_case = GetProfileUseCase(uow)
    result = await use_case.execute(current_user.id, user_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.patch("/{user_id}", status_code=status.HTTP_200_OK, response_model=UserProfile)
async def update_profile(
    user_id: UUID,
    background_tasks: BackgroundTasks,
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    phone_number: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    tokens: ITokenIssuer = Depends(get_token_issuer),
    notifier: AccountNotifier = Depends(get_notifier),
    storage: IObjectStorage = Depends(get_object_storage),
):
    """
    Update Profile

    Multipart form; omitted or blank fields keep their value. A new email
    address must be verified again.

    Raises:
        - 400 Bad Request: Unsupported or oversized image
        - 403 Forbidden: Token belongs to another account
        - 409 Conflict: Email or phone number already taken
        - 422 Unprocessable Entity: Invalid email address
        - 502 Bad Gateway: Image could not be stored
    """
    command = UpdateProfileCommand(
        name=name, email=validate_form_email(email), phone_number=phone_number
    )
    avatar = await read_image(image) if image is not None else None

    use_case = UpdateProfileUseCase(
        uow,
        tokens,
        notifier,
        storage,
        max_image_bytes=ApplicationConfig.AVATAR_MAX_BYTES,
    )
    result = await use_case.execute(
        current_user.id, user_id, command, image=avatar, background_tasks=background_tasks
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.put("/{user_id}/avatar", status_code=status.HTTP_200_OK, response_model=UserProfile)
async def upload_avatar(
    user_id: UUID,
    image: UploadFile = File(...),
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    storage: IObjectStorage = Depends(get_object_storage),
):
    """
    Upload Profile Photo

    Accepts JPEG or PNG up to AVATAR_MAX_BYTES.
    """
    use_case = UploadAvatarUseCase(uow, storage, max_bytes=ApplicationConfig.AVATAR_MAX_BYTES)
    result = await use_case.execute(current_user.id, user_id, await read_image(image))

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class ChangePasswordRequest(BaseModel):
    old_password: str = Field(..., min_length=1, description="Current password")
    new_password: str = Field(..., min_length=6, description="New password (min 6 chars)")


@router.put("/{user_id}/password", status_code=status.HTTP_200_OK, response_model=UserProfile)
async def change_password(
    user_id: UUID,
    request: ChangePasswordRequest,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    """
    Change Password

    Raises:
        - 401 Unauthorized: Current password does not match
        - 403 Forbidden: Token belongs to another account
    """
    use_case = ChangePasswordUseCase(uow, hasher)
    result = await use_case.execute(
        current_user.id, user_id, request.old_password, request.new_password
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post("/{user_id}/verification", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def request_email_verification(
    user_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    tokens: ITokenIssuer = Depends(get_token_issuer),
    notifier: AccountNotifier = Depends(get_notifier),
):
    """
    Request Email Verification

    Raises:
        - 409 Conflict: Email already verified
        - 502 Bad Gateway: The email could not be delivered
    """
    use_case = RequestEmailVerificationUseCase(uow, tokens, notifier)
    result = await use_case.execute(current_user.id, user_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get("/{user_id}/export", status_code=status.HTTP_200_OK)
async def download_account_data(
    user_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Download Account Data

    Served as an attachment named after the account email.
    """
    use_case = DownloadAccountDataUseCase(uow)
    result = await use_case.execute(current_user.id, user_id)

    if result.is_err():
        raise_for_error(result.error)

    export = result.value
    return JSONResponse(
        content=export.account.model_dump(mode="json"),
        headers={"Content-Disposition": attachment_disposition(export.filename)},
    )


@router.delete("/{user_id}", status_code=status.HTTP_200_OK, response_model=DeleteAccountResponse)
async def delete_account(
    user_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    storage: IObjectStorage = Depends(get_object_storage),
):
    """
    Delete Account

    Raises:
        - 403 Forbidden: Token belongs to another account
        - 502 Bad Gateway: Stored photo could not be removed; nothing deleted
    """
    use_case = DeleteAccountUseCase(uow, storage)
    result = await use_case.execute(current_user.id, user_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
