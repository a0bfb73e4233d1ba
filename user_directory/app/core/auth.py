from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from user_directory.app.dependencies import AppDependencies
from user_directory.services.accounts import AccountService


def get_deps(request: Request) -> AppDependencies:
    return request.app.state.deps


def get_account_service(deps: AppDependencies = Depends(get_deps)) -> AccountService:
    return deps.account_service


AccountServiceDep = Annotated[AccountService, Depends(get_account_service)]
