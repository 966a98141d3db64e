from uuid import UUID

from libs.result import Error, Result, Return


def authorize_self(acting_user_id: UUID, target_user_id: UUID) -> Result[None]:
    """Accounts may only be read or changed by their owner"""
    if acting_user_id != target_user_id:
        return Return.err(Error("FORBIDDEN", "Not authorized to access this account"))
    return Return.ok(None)
