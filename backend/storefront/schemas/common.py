"""
storefront/schemas/common.py - Envelope shared by every response.
"""
from pydantic import BaseModel, Field


class ActionResult(BaseModel):
    success: bool = Field(True, description="False when the operation was rejected")
    message: str = Field("", description="Human readable outcome")


class ErrorResult(ActionResult):
    success: bool = False
    code: str = Field(..., description="Machine readable error category")


class PageInfo(BaseModel):
    page: int
    total_count: int
    total_pages: int
