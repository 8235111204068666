from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from .auth.decorators import make_admin_required
from .auth.service import AdminUserService, AuthService
from .auth.sql_repository import SQLAdminSessionRepository, SQLAdminUserRepository
from .catalog.service import CatalogService
from .catalog.sql_repository import SQLNamedItemRepository
from .database.connection import Database
from .steps.service import StepsService
from .steps.sql_repository import SQLStepRepository


@dataclass(frozen=True)
class Container:
    db: Database

    employees_repo: SQLNamedItemRepository
    locations_repo: SQLNamedItemRepository
    steps_repo: SQLStepRepository
    admin_users_repo: SQLAdminUserRepository
    admin_sessions_repo: SQLAdminSessionRepository

    employee_service: CatalogService
    location_service: CatalogService
    steps_service: StepsService
    auth_service: AuthService
    admin_user_service: AdminUserService

    admin_required: Callable[[Any], Any]


def build_container(*, db: Database) -> Container:
    employees_repo = SQLNamedItemRepository(db, table="employees")
    locations_repo = SQLNamedItemRepository(db, table="locations")
    steps_repo = SQLStepRepository(db)
    admin_users_repo = SQLAdminUserRepository(db)
    admin_sessions_repo = SQLAdminSessionRepository(db)

    auth_service = AuthService(admin_users_repo, admin_sessions_repo, transaction=db.transaction)

    return Container(
        db=db,
        employees_repo=employees_repo,
        locations_repo=locations_repo,
        steps_repo=steps_repo,
        admin_users_repo=admin_users_repo,
        admin_sessions_repo=admin_sessions_repo,
        employee_service=CatalogService(employees_repo, label="Employee"),
        location_service=CatalogService(locations_repo, label="Location"),
        steps_service=StepsService(steps_repo),
        auth_service=auth_service,
        admin_user_service=AdminUserService(admin_users_repo, transaction=db.transaction),
        admin_required=make_admin_required(auth_service),
    )
