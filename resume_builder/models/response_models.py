"""Response models for API endpoints."""

from typing import List
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error response model."""
    
    detail: str = Field(
        ...,
        description="Error message describing what went wrong",
        example="Resume not found: 1760779200000"
    )


class HealthResponse(BaseModel):
    """Health check response model."""
    
    status: str = Field(
        ...,
        description="Service status",
        example="ok"
    )


class RootResponse(BaseModel):
    """Root endpoint response model."""
    
    message: str = Field(
        ...,
        description="API name",
        example="Resume Builder API"
    )
    version: str = Field(
        ...,
        description="API version",
        example="1.0.0"
    )


class DeleteResponse(BaseModel):
    """Resume deletion response model."""
    
    success: bool = Field(
        ...,
        description="Always true; deleting a missing resume is not an error",
        example=True
    )


class ValidationResponse(BaseModel):
    """Advisory validation result for a resume."""
    
    isValid: bool = Field(
        ...,
        description="True when no problems were found"
    )
    errors: List[str] = Field(
        default_factory=list,
        description="Human readable problems, in check order",
        example=["Name is required."]
    )
