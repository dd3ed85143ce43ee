"""Request models for API endpoints."""

from typing import List, Optional
from pydantic import BaseModel, Field
from resume_builder.models.resume_models import Profile, ResumeStyle, Section


class ResumeCreateRequest(BaseModel):
    """Request model for resume creation.
    
    Every field is optional; missing parts are filled from the default
    skeleton. Any id or timestamps in the body are ignored.
    """
    
    title: Optional[str] = Field(
        None,
        description="Resume title shown in the resume picker",
        example="Backend Engineer 2026"
    )
    profile: Optional[Profile] = Field(
        None,
        description="Profile header. Defaults to a placeholder profile."
    )
    sections: Optional[List[Section]] = Field(
        None,
        description="Ordered sections. Defaults to experience, projects, education and activities."
    )
    styles: Optional[ResumeStyle] = Field(
        None,
        description="Style configuration. Defaults to the built-in theme."
    )
