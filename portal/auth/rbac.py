from fastapi import Depends, HTTPException, status

from portal.auth.dependencies import get_current_user
from portal.auth.schemas import CurrentUser
from portal.core.enums import UserRole


def require_roles(*roles: UserRole):
    """
    Dependency factory to restrict a route to the given roles. Admin always passes.

    Example:
        Depends(require_roles(UserRole.CLASS_ADVISOR, UserRole.CHAIRMAN))
    """
    allowed = {r.value for r in roles}

    async def _checker(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.role == UserRole.ADMIN.value:
            return current_user
        if current_user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return current_user

    return _checker


require_admin = require_roles(UserRole.ADMIN)
