import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncConnection

from app.core.database import get_db
from app.core.deps import TokenUser, get_admin_user
from app.crud import job as job_crud
from app.schemas.job import JobCreateRequest, JobEnvelope, JobListResponse, JobUpdateRequest

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)


@router.post("", status_code=201, response_model=JobEnvelope)
async def create_job(
    request: JobCreateRequest,
    db: AsyncConnection = Depends(get_db),
    admin: TokenUser = Depends(get_admin_user)
):
    """
    Create a job posting for an existing company.

    Authorization required: admin
    """
    job = await job_crud.create(db, request.model_dump(by_alias=True))
    return {"job": job}


@router.get("", response_model=JobListResponse)
async def list_jobs(
    title: Optional[str] = None,
    min_salary: Optional[int] = Query(None, alias="minSalary", ge=0),
    has_equity: Optional[bool] = Query(None, alias="hasEquity"),
    db: AsyncConnection = Depends(get_db)
):
    """
    List jobs ordered by title.

    Args:
        title: Case-insensitive substring of the title
        minSalary: Only jobs paying more than this
        hasEquity: If true, only jobs with non-zero equity

    Authorization required: none
    """
    filters = {
        "title": title,
        "minSalary": min_salary,
        "hasEquity": has_equity,
    }
    jobs = await job_crud.find_all(db, filters)
    return {"jobs": jobs}


@router.get("/{title}", response_model=JobEnvelope)
async def get_job(title: str, db: AsyncConnection = Depends(get_db)):
    """
    Retrieve a job by title.

    Authorization required: none
    """
    job = await job_crud.get(db, title)
    return {"job": job}


@router.patch("/{title}", response_model=JobEnvelope)
async def update_job(
    title: str,
    request: JobUpdateRequest,
    db: AsyncConnection = Depends(get_db),
    admin: TokenUser = Depends(get_admin_user)
):
    """
    Partially update a job: {title, salary, equity}.

    Null values leave the field unchanged.

    Authorization required: admin
    """
    data = request.model_dump(by_alias=True, exclude_unset=True)
    job = await job_crud.update(db, title, data)
    return {"job": job}


@router.delete("/{title}")
async def delete_job(
    title: str,
    db: AsyncConnection = Depends(get_db),
    admin: TokenUser = Depends(get_admin_user)
):
    """
    Delete a job by title.

    Authorization required: admin
    """
    await job_crud.remove(db, title)
    logger.info(f"{admin.username} deleted job {title}")
    return {"deleted": title}
