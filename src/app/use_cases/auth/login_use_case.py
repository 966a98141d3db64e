"""
Login Use Case

Checks email and password and issues a session token.
"""

from libs.result import Error, Result, Return
from src.app.services.password_hasher import PasswordHasher
from src.app.services.token_issuer import ITokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.users.dtos import UserProfile
from .dtos import AuthResponse


class LoginUseCase:
    """
    Use case for user login.

    Business Rules:
    - Unknown email and wrong password give the same INVALID_CREDENTIALS error
    - A dummy bcrypt check runs for unknown emails so both paths cost the same
    - Unverified emails may still log in
    - Each login issues a fresh session token
    """

    def __init__(self, uow: UnitOfWork, hasher: PasswordHasher, tokens: ITokenIssuer):
        self.uow = uow
        self.hasher = hasher
        self.tokens = tokens

    async def execute(self, email: str, password: str) -> Result[AuthResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_email(email.strip().lower())

            if user is None:
                self.hasher.burn(password)
                return Return.err(Error("INVALID_CREDENTIALS", "Invalid email or password"))

            if not self.hasher.verify(password, user.password_hash):
                return Return.err(Error("INVALID_CREDENTIALS", "Invalid email or password"))

            token = self.tokens.issue_session(user.id)
            return Return.ok(AuthResponse(token=token, user=UserProfile.from_entity(user)))
