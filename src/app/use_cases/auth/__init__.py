"""
Authentication Use Cases

Registration, login, password reset and email verification.
"""

from .register_use_case import RegisterUseCase
from .login_use_case import LoginUseCase
from .request_password_reset_use_case import RequestPasswordResetUseCase
from .validate_reset_code_use_case import ValidateResetCodeUseCase
from .reset_password_use_case import ResetPasswordUseCase
from .verify_email_use_case import VerifyEmailUseCase
from .dtos import AuthResponse, RegisterCommand, VerifyEmailResponse

__all__ = [
    # Use Cases
    "RegisterUseCase",
    "LoginUseCase",
    "RequestPasswordResetUseCase",
    "ValidateResetCodeUseCase",
    "ResetPasswordUseCase",
    "VerifyEmailUseCase",
    # DTOs
    "RegisterCommand",
    "AuthResponse",
    "VerifyEmailResponse",
]
