"""
Pydantic schemas for Company API requests/responses.
"""

from typing import List, Optional
from pydantic import Field, field_validator
from app.schemas.base import CamelModel

URL_PATTERN = r"^https?://\S+$"


class CompanyCreateRequest(CamelModel):
    """Schema for creating a company"""
    handle: str = Field(..., min_length=1, max_length=25)
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    num_employees: Optional[int] = Field(None, ge=0)
    logo_url: Optional[str] = Field(None, pattern=URL_PATTERN)

    class Config:
        extra = "forbid"


class CompanyUpdateRequest(CamelModel):
    """
    Schema for a partial company update.

    Explicit nulls clear the field, except `name`, which may be omitted but
    never set to null.
    """
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    num_employees: Optional[int] = Field(None, ge=0)
    logo_url: Optional[str] = Field(None, pattern=URL_PATTERN)

    @field_validator("name")
    @classmethod
    def name_not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("name cannot be null")
        return v

    class Config:
        extra = "forbid"


class CompanyJob(CamelModel):
    """Job summary nested in a company"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[str] = None


class CompanyResponse(CamelModel):
    """
    Company as returned by the API.

    Filtered listings may leave out num_employees; responses are serialized
    with exclude_unset so absent fields stay absent.
    """
    handle: str
    name: str
    description: Optional[str] = None
    num_employees: Optional[int] = None
    logo_url: Optional[str] = None


class CompanyDetail(CompanyResponse):
    """Single company; `jobs` only appears when the company has jobs"""
    jobs: Optional[List[CompanyJob]] = None


class CompanyEnvelope(CamelModel):
    company: CompanyDetail


class CompanyListResponse(CamelModel):
    companies: List[CompanyResponse]
