"""Admin router: global settings, packages, users, admins and analytics."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from routers.auth_scope import AuthContext, get_admin_context
from services.accounts import serialize_account
from services.admin import (
    list_user_accounts,
    provider_analytics,
    register_admin,
    update_user_account,
)
from services.global_settings import (
    get_global_settings,
    serialize_global_settings,
    update_global_settings,
)
from services.packages import delete_package, list_packages, save_package, serialize_package

router = APIRouter()


class GlobalSettingsUpdate(BaseModel):
    defaultProvider: Optional[str] = None
    internalWidgetProvider: Optional[str] = None


class PackageUpsertRequest(BaseModel):
    id: Optional[str] = None
    name: str = Field(min_length=1)
    price: float = Field(ge=0)
    credits: int = Field(gt=0)
    description: str = ""
    features: List[str] = Field(default_factory=list)


class UserUpdateRequest(BaseModel):
    uid: str = Field(min_length=1)
    account_type: Optional[str] = None
    credit_balance: Optional[int] = None
    assigned_provider: Optional[str] = None


class AdminCreateRequest(BaseModel):
    email: str = Field(min_length=3)
    role: str = "user_admin"


@router.get("/settings")
async def read_settings(
    _admin: AuthContext = Depends(get_admin_context),
    db: AsyncSession = Depends(get_db),
):
    return serialize_global_settings(await get_global_settings(db))


@router.post("/settings")
async def write_settings(
    request: GlobalSettingsUpdate,
    _admin: AuthContext = Depends(get_admin_context),
    db: AsyncSession = Depends(get_db),
):
    row = await update_global_settings(
        db,
        default_provider=request.defaultProvider,
        internal_widget_provider=request.internalWidgetProvider,
    )
    return {"success": True, **serialize_global_settings(row)}


@router.get("/packages")
async def read_packages(
    _admin: AuthContext = Depends(get_admin_context),
    db: AsyncSession = Depends(get_db),
):
    return [serialize_package(package) for package in await list_packages(db)]


@router.post("/packages")
async def upsert_package(
    request: PackageUpsertRequest,
    _admin: AuthContext = Depends(get_admin_context),
    db: AsyncSession = Depends(get_db),
):
    package = await save_package(
        db,
        package_id=request.id,
        name=request.name,
        price=request.price,
        credits=request.credits,
        description=request.description,
        features=request.features,
    )
    return {"success": True, "id": package.id}


@router.delete("/packages/{package_id}")
async def remove_package(
    package_id: str,
    _admin: AuthContext = Depends(get_admin_context),
    db: AsyncSession = Depends(get_db),
):
    await delete_package(db, package_id)
    return {"success": True}


@router.get("/users")
async def read_users(
    _admin: AuthContext = Depends(get_admin_context),
    db: AsyncSession = Depends(get_db),
):
    return [serialize_account(account) for account in await list_user_accounts(db)]


@router.post("/users/update")
async def write_user(
    request: UserUpdateRequest,
    _admin: AuthContext = Depends(get_admin_context),
    db: AsyncSession = Depends(get_db),
):
    account = await update_user_account(
        db,
        request.uid,
        account_type=request.account_type,
        credit_balance=request.credit_balance,
        assigned_provider=request.assigned_provider,
    )
    return {"success": True, "user": serialize_account(account)}


@router.post("/admins")
async def create_admin(
    request: AdminCreateRequest,
    admin: AuthContext = Depends(get_admin_context),
    db: AsyncSession = Depends(get_db),
):
    record = await register_admin(
        db,
        email=request.email,
        role=request.role,
        created_by=admin.email or admin.user_id,
    )
    return {"success": True, "email": record.email, "role": record.role}


@router.get("/analytics")
async def read_analytics(
    _admin: AuthContext = Depends(get_admin_context),
    db: AsyncSession = Depends(get_db),
):
    return await provider_analytics(db)
