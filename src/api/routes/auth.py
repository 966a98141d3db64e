from datetime import timedelta

from fastapi import APIRouter, BackgroundTasks, Depends, status
from pydantic import BaseModel, EmailStr, Field

from config import ApplicationConfig
from src.api.error import raise_for_error
from src.app.services.clock import Clock
from src.app.services.notifications import AccountNotifier
from src.app.services.password_hasher import PasswordHasher
from src.app.services.token_issuer import ITokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    AuthResponse,
    LoginUseCase,
    RegisterCommand,
    RegisterUseCase,
    RequestPasswordResetUseCase,
    ResetPasswordUseCase,
    ValidateResetCodeUseCase,
    VerifyEmailResponse,
    VerifyEmailUseCase,
)
from src.app.use_cases.users import MessageResponse
from src.depends import (
    get_clock,
    get_notifier,
    get_password_hasher,
    get_token_issuer,
    get_unit_of_work,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


class RegisterRequest(BaseModel):
    """
    Register HTTP request payload

    Validates incoming HTTP request before converting to RegisterCommand.
    """

    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    email: EmailStr = Field(..., description="User email address")
    phone_number: str | None = Field(None, max_length=32, description="Phone number")
    password: str = Field(..., min_length=6, description="Password (min 6 chars)")


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=AuthResponse)
async def register(
    request: RegisterRequest,
    background_tasks: BackgroundTasks,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: ITokenIssuer = Depends(get_token_issuer),
    notifier: AccountNotifier = Depends(get_notifier),
):
    """
    Register

    Creates the account and returns a session token with the public profile.
    The verification email is sent after the response.

    Raises:
        - 409 Conflict: Email or phone number already taken
        - 422 Unprocessable Entity: Invalid input
    """
    command = RegisterCommand(
        name=request.name,
        email=request.email,
        phone_number=request.phone_number,
        password=request.password,
    )

    use_case = RegisterUseCase(uow, hasher, tokens, notifier)
    result = await use_case.execute(command, background_tasks=background_tasks)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class LoginRequest(BaseModel):
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=1, description="User password")


@router.post("/login", status_code=status.HTTP_200_OK, response_model=AuthResponse)
async def login(
    request: LoginRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: ITokenIssuer = Depends(get_token_issuer),
):
    """
    Login

    Raises:
        - 401 Unauthorized: Unknown email or wrong password (same error for both)
    """
    use_case = LoginUseCase(uow, hasher, tokens)
    result = await use_case.execute(request.email, request.password)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class ForgotPasswordRequest(BaseModel):
    email: EmailStr = Field(..., description="User email address")


@router.post("/forgot-password", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def forgot_password(
    request: ForgotPasswordRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    notifier: AccountNotifier = Depends(get_notifier),
    clock: Clock = Depends(get_clock),
):
    """
    Request Password Reset

    Emails a one-time reset code valid for one hour. The code is only ever
    delivered by email.

    Raises:
        - 404 Not Found: No account with this email
        - 502 Bad Gateway: The email could not be delivered
    """
    use_case = RequestPasswordResetUseCase(
        uow,
        notifier,
        clock,
        code_length=ApplicationConfig.RESET_CODE_LENGTH,
        code_ttl=timedelta(minutes=ApplicationConfig.RESET_CODE_MINUTES),
    )
    result = await use_case.execute(request.email)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class ValidateResetCodeRequest(BaseModel):
    email: EmailStr = Field(..., description="User email address")
    reset_code: str = Field(..., min_length=1, max_length=16, description="Code from the email")


@router.post("/validate-reset-code", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def validate_reset_code(
    request: ValidateResetCodeRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
):
    """
    Validate Reset Code

    Checks the code without consuming it.

    Raises:
        - 400 Bad Request: Email or reset code is invalid
        - 410 Gone: Reset code has expired
    """
    use_case = ValidateResetCodeUseCase(uow, clock)
    result = await use_case.execute(request.email, request.reset_code)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class ResetPasswordRequest(BaseModel):
    email: EmailStr = Field(..., description="User email address")
    reset_code: str = Field(..., min_length=1, max_length=16, description="Code from the email")
    new_password: str = Field(..., min_length=6, description="New password (min 6 chars)")


@router.post("/reset-password", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def reset_password(
    request: ResetPasswordRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: PasswordHasher = Depends(get_password_hasher),
    clock: Clock = Depends(get_clock),
):
    """
    Reset Password

    Sets a new password and consumes the reset code.

    Raises:
        - 400 Bad Request: Email or reset code is invalid (including reuse)
        - 410 Gone: Reset code has expired
    """
    use_case = ResetPasswordUseCase(uow, hasher, clock)
    result = await use_case.execute(request.email, request.reset_code, request.new_password)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get("/verify-email/{token}", status_code=status.HTTP_200_OK, response_model=VerifyEmailResponse)
async def verify_email(
    token: str,
    uow: UnitOfWork = Depends(get_unit_of_work),
    tokens: ITokenIssuer = Depends(get_token_issuer),
):
    """
    Email Verification

    Target of the link sent by email.

    Raises:
        - 400 Bad Request: Invalid token or already used
        - 410 Gone: Expired token
    """
    use_case = VerifyEmailUseCase(uow, tokens)
    result = await use_case.execute(token)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
