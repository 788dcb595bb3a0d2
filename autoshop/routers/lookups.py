"""
Checks for ids referenced in request bodies.

A reference to a missing row is bad input (400), not a database error.
"""
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional


async def ensure_exists(db: AsyncSession, model, entity_id: Optional[int], label: str) -> None:
    """Raise 400 unless ``entity_id`` is None or names an existing ``model`` row."""
    if entity_id is None:
        return
    result = await db.execute(select(model.id).where(model.id == entity_id))
    if result.scalar_one_or_none() is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{label} does not exist"
        )
