# Authentication module

from sentinel.modules.auth.dependencies import (
    get_current_user,
    get_project_service,
    get_user_project,
)

__all__ = [
    "get_current_user",
    "get_project_service",
    "get_user_project",
]
