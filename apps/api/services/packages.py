"""Package catalogue management."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from models.package import Package
from services.errors import NotFoundError


async def list_packages(db: AsyncSession, *, order_by_price: bool = False) -> List[Package]:
    query = select(Package)
    query = query.order_by(Package.price.asc(), Package.name.asc()) if order_by_price else query.order_by(Package.created_at.asc())
    result = await db.execute(query)
    return list(result.scalars().all())


async def save_package(
    db: AsyncSession,
    *,
    package_id: Optional[str],
    name: str,
    price: float,
    credits: int,
    description: str = "",
    features: Optional[List[str]] = None,
) -> Package:
    """Create a package, or update it in place when ``package_id`` is given.

    Past purchase ledger entries keep their own snapshot and are not touched.
    """
    if package_id:
        result = await db.execute(select(Package).where(Package.id == package_id))
        package = result.scalar_one_or_none()
        if package is None:
            raise NotFoundError("Package not found")
    else:
        package = Package()
        db.add(package)

    package.name = name
    package.price = float(price)
    package.credits = int(credits)
    package.description = description or ""
    package.features = list(features or [])
    await db.commit()
    await db.refresh(package)
    return package


async def delete_package(db: AsyncSession, package_id: str) -> None:
    result = await db.execute(select(Package).where(Package.id == package_id))
    package = result.scalar_one_or_none()
    if package is None:
        raise NotFoundError("Package not found")
    await db.delete(package)
    await db.commit()


def serialize_package(package: Package) -> Dict[str, Any]:
    return {
        "id": package.id,
        "name": package.name,
        "price": package.price,
        "credits": package.credits,
        "description": package.description or "",
        "features": list(package.features or []),
    }
