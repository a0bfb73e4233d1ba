from __future__ import annotations

from typing import Annotated, Any, Optional

from fastapi import Depends, Request

from user_directory.app.core.auth import get_deps
from user_directory.app.dependencies import AppDependencies


def admin_only(
    request: Request,
    deps: AppDependencies = Depends(get_deps),
) -> Optional[dict[str, Any]]:
    return deps.access_policy.check(request.headers, deps.account_service)


AdminOnly = Annotated[Optional[dict[str, Any]], Depends(admin_only)]
