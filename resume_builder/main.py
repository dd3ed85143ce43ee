"""FastAPI application for Resume Builder."""

import logging
from typing import List
from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from resume_builder.core.config import get_settings
from resume_builder.core.errors import (
    InvalidResumeIdError,
    ResumeNotFoundError,
    ResumeStorageError,
)
from resume_builder.models.request_models import ResumeCreateRequest
from resume_builder.models.response_models import (
    DeleteResponse,
    ErrorResponse,
    HealthResponse,
    RootResponse,
    ValidationResponse,
)
from resume_builder.models.resume_models import Resume, ResumeMeta
from resume_builder.services.resume_store import ResumeStore, get_resume_store
from resume_builder.utils.validation import validate_resume

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    description="""API for storing resumes edited in the resume builder.

## Features

* **Resume listing**: Lightweight metadata (id, title, timestamps) for the resume picker, most recently updated first
* **Resume documents**: Create, read, replace and delete whole resume documents
* **Advisory validation**: Check profile and link fields without saving

Each resume is stored as one JSON file named after its id.""",
    version=settings.version,
    license_info={
        "name": "MIT",
        "url": "https://opensource.org/licenses/MIT"
    },
    servers=[
        {
            "url": "http://localhost:8000",
            "description": "Local development server"
        }
    ],
    openapi_tags=[
        {
            "name": "health",
            "description": "Health check and status endpoints"
        },
        {
            "name": "resumes",
            "description": "Resume document storage"
        }
    ]
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get(
    "/",
    response_model=RootResponse,
    status_code=status.HTTP_200_OK,
    summary="Root endpoint",
    description="Returns API information including name and version",
    tags=["health"]
)
async def root():
    """
    Root endpoint.

    Returns basic API information including name and version.
    """
    return RootResponse(message=settings.app_name, version=settings.version)


@app.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
    description="Checks if the API service is running and healthy",
    tags=["health"]
)
async def health():
    """
    Health check endpoint.

    Use this endpoint to verify the service is running correctly.
    """
    return HealthResponse(status="ok")


@app.get(
    "/resumes",
    response_model=List[ResumeMeta],
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="List resumes",
    description="Returns metadata of every stored resume, most recently updated first",
    tags=["resumes"],
    responses={
        500: {
            "description": "Internal server error - storage could not be read",
            "model": ErrorResponse
        }
    }
)
def list_resumes(store: ResumeStore = Depends(get_resume_store)):
    """
    List resume metadata.

    Resumes without an update timestamp are listed last.
    """
    try:
        return store.list_resumes()
    except ResumeStorageError as e:
        logger.error("Failed to list resumes: %s", e)
        raise HTTPException(status_code=500, detail="Failed to list resumes")


@app.post(
    "/resumes",
    response_model=Resume,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create resume",
    description="""
    Creates a resume from a partial document.

    Missing profile, sections or styles are filled from the default skeleton.
    The id and both timestamps are always generated by the server.
    Responds with 201 Created and the stored resume.
    """,
    tags=["resumes"],
    responses={
        500: {
            "description": "Internal server error - resume could not be written",
            "model": ErrorResponse
        }
    }
)
def create_resume(
    request: ResumeCreateRequest,
    store: ResumeStore = Depends(get_resume_store)
):
    """
    Create a resume.

    **Example:**
    ```json
    {
      "title": "Backend Engineer 2026"
    }
    ```
    """
    try:
        return store.create_resume(request)
    except ResumeStorageError as e:
        logger.error("Failed to create resume: %s", e)
        raise HTTPException(status_code=500, detail="Failed to create resume")


@app.post(
    "/resumes/validate",
    response_model=ValidationResponse,
    status_code=status.HTTP_200_OK,
    summary="Validate resume",
    description="Runs advisory checks on a resume without storing it",
    tags=["resumes"]
)
async def validate(resume: Resume):
    """
    Validate a resume.

    Checks required profile fields, email and phone formats, and link URLs.
    """
    result = validate_resume(resume)
    return ValidationResponse(isValid=result.is_valid, errors=result.errors)


@app.get(
    "/resumes/{resume_id}",
    response_model=Resume,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Get resume",
    tags=["resumes"],
    responses={
        400: {
            "description": "Bad request - Invalid resume id",
            "model": ErrorResponse
        },
        404: {
            "description": "Not found - No resume with this id",
            "model": ErrorResponse
        },
        500: {
            "description": "Internal server error - resume could not be read",
            "model": ErrorResponse
        }
    }
)
def get_resume(resume_id: str, store: ResumeStore = Depends(get_resume_store)):
    """
    Get a full resume document.
    """
    try:
        return store.get_resume(resume_id)
    except InvalidResumeIdError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ResumeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ResumeStorageError as e:
        logger.error("Failed to retrieve resume %s: %s", resume_id, e)
        raise HTTPException(status_code=500, detail="Failed to retrieve resume")


@app.put(
    "/resumes/{resume_id}",
    response_model=Resume,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Replace resume",
    description="""
    Replaces a stored resume with the given document.

    The id in the body is ignored in favour of the path id, and updatedAt is
    refreshed. Replacing a resume that does not exist fails with 404.
    """,
    tags=["resumes"],
    responses={
        400: {
            "description": "Bad request - Invalid resume id",
            "model": ErrorResponse
        },
        404: {
            "description": "Not found - No resume with this id",
            "model": ErrorResponse
        },
        500: {
            "description": "Internal server error - resume could not be written",
            "model": ErrorResponse
        }
    }
)
def update_resume(
    resume_id: str,
    resume: Resume,
    store: ResumeStore = Depends(get_resume_store)
):
    """
    Replace a resume document.
    """
    try:
        return store.update_resume(resume_id, resume)
    except InvalidResumeIdError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ResumeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ResumeStorageError as e:
        logger.error("Failed to update resume %s: %s", resume_id, e)
        raise HTTPException(status_code=500, detail="Failed to update resume")


@app.delete(
    "/resumes/{resume_id}",
    response_model=DeleteResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete resume",
    description="Deletes a resume. Deleting a resume that does not exist also succeeds.",
    tags=["resumes"],
    responses={
        400: {
            "description": "Bad request - Invalid resume id",
            "model": ErrorResponse
        },
        500: {
            "description": "Internal server error - resume could not be deleted",
            "model": ErrorResponse
        }
    }
)
def delete_resume(resume_id: str, store: ResumeStore = Depends(get_resume_store)):
    """
    Delete a resume.
    """
    try:
        store.delete_resume(resume_id)
    except InvalidResumeIdError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ResumeStorageError as e:
        logger.error("Failed to delete resume %s: %s", resume_id, e)
        raise HTTPException(status_code=500, detail="Failed to delete resume")
    return DeleteResponse(success=True)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "resume_builder.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
