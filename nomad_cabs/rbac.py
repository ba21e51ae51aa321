from .errors import Forbidden
from .models import User

ROLES = ("rider", "driver", "admin")


def require_role(user: User, allowed_roles: list[str]):
    allowed = {r.lower() for r in allowed_roles}

    if (user.role or "").lower() not in allowed:
        raise Forbidden("Access forbidden for this role")
