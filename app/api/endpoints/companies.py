import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncConnection

from app.core.database import get_db
from app.core.deps import TokenUser, get_admin_user
from app.crud import company as company_crud
from app.schemas.company import (
    CompanyCreateRequest,
    CompanyEnvelope,
    CompanyListResponse,
    CompanyUpdateRequest,
)

router = APIRouter(prefix="/companies", tags=["Companies"])
logger = logging.getLogger(__name__)


@router.post("", status_code=201, response_model=CompanyEnvelope, response_model_exclude_unset=True)
async def create_company(
    request: CompanyCreateRequest,
    db: AsyncConnection = Depends(get_db),
    admin: TokenUser = Depends(get_admin_user)
):
    """
    Create a company.

    Authorization required: admin
    """
    company = await company_crud.create(db, request.model_dump(by_alias=True))
    return {"company": company}


@router.get("", response_model=CompanyListResponse, response_model_exclude_unset=True)
async def list_companies(
    min_employees: Optional[int] = Query(None, alias="minEmployees", ge=0),
    max_employees: Optional[int] = Query(None, alias="maxEmployees", ge=0),
    name_like: Optional[str] = Query(None, alias="nameLike"),
    db: AsyncConnection = Depends(get_db)
):
    """
    List companies, optionally filtered.

    - minEmployees / maxEmployees: employee count bounds (inclusive)
    - nameLike: case-insensitive substring of the name

    `numEmployees` is only included when an employee bound is given or no
    filter is used at all.

    Authorization required: none
    """
    filters = {
        "minEmployees": min_employees,
        "maxEmployees": max_employees,
        "nameLike": name_like,
    }
    companies = await company_crud.find_all(db, filters)
    return {"companies": companies}


@router.get("/{handle}", response_model=CompanyEnvelope, response_model_exclude_unset=True)
async def get_company(handle: str, db: AsyncConnection = Depends(get_db)):
    """
    Get a company and its jobs.

    Authorization required: none
    """
    company = await company_crud.get(db, handle)
    return {"company": company}


@router.patch("/{handle}", response_model=CompanyEnvelope, response_model_exclude_unset=True)
async def update_company(
    handle: str,
    request: CompanyUpdateRequest,
    db: AsyncConnection = Depends(get_db),
    admin: TokenUser = Depends(get_admin_user)
):
    """
    Partially update a company: {name, description, numEmployees, logoUrl}.

    Authorization required: admin
    """
    data = request.model_dump(by_alias=True, exclude_unset=True)
    company = await company_crud.update(db, handle, data)
    return {"company": company}


@router.delete("/{handle}")
async def delete_company(
    handle: str,
    db: AsyncConnection = Depends(get_db),
    admin: TokenUser = Depends(get_admin_user)
):
    """
    Delete a company.

    Authorization required: admin
    """
    await company_crud.remove(db, handle)
    logger.info(f"{admin.username} deleted company {handle}")
    return {"deleted": handle}
