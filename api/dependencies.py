"""API Dependencies - Tenant scoping"""
from typing import Optional

from fastapi import Depends, Header, HTTPException

from infrastructure.config import Settings, get_settings

MAX_TENANT_ID_LENGTH = 128


async def get_tenant_id(
    x_tenant_id: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings)
) -> str:
    """Tenant the season rule list belongs to, from the X-Tenant-ID header"""
    tenant_id = (x_tenant_id or "").strip() or settings.default_tenant_id
    if len(tenant_id) > MAX_TENANT_ID_LENGTH:
        raise HTTPException(status_code=400, detail="Tenant ID is too long")
    return tenant_id
