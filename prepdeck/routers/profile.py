import asyncio

from fastapi import APIRouter, Depends, HTTPException, status, UploadFile, File
from sqlalchemy.orm import Session
from prepdeck.database import get_db
from prepdeck.dependencies import get_current_user
from prepdeck.exceptions import CVAnalysisError, ProfileStoreError
from prepdeck.models.user import User
from prepdeck.schemas.profile import ResumeSaveRequest, ResumeResponse
from prepdeck.services.cv_parser import CVParser, get_cv_parser
from prepdeck.services.profile_store import get_resume, save_resume, delete_resume

router = APIRouter(prefix="/api/profile", tags=["profile"])

PDF_NOT_SUPPORTED = "PDF processing is not yet implemented. Please copy and paste your CV text instead."


async def _analyze_and_save(db: Session, user: User, content: str, parser: CVParser) -> dict:
    content = content.strip()
    if not content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="CV text cannot be empty",
        )

    try:
        # Gemini retries sleep, so parse off the event loop
        parsed_data, ai_result = await asyncio.to_thread(parser.parse, content)
    except CVAnalysisError:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to analyze CV",
        )

    fallback_used = bool(ai_result and ai_result.fallback_used)
    try:
        resume = save_resume(
            db=db,
            user_id=user.id,
            content=content,
            parsed_data=parsed_data.model_dump(),
            fallback_used=fallback_used,
        )
    except ProfileStoreError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )

    return {
        "success": True,
        "message": "CV saved and analyzed successfully",
        "parser": parser.name,
        "fallback_used": fallback_used,
        "resume": ResumeResponse.model_validate(resume),
    }


@router.get("/cv")
async def get_cv(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get the current user's saved CV. ``resume`` is null for new users."""
    resume = get_resume(db, current_user.id)
    return {"resume": ResumeResponse.model_validate(resume) if resume else None}


@router.put("/cv")
async def put_cv(
    request: ResumeSaveRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    parser: CVParser = Depends(get_cv_parser),
):
    """Analyze CV text and replace the stored CV with it."""
    return await _analyze_and_save(db, current_user, request.content, parser)


@router.delete("/cv")
async def remove_cv(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete the current user's CV."""
    try:
        deleted = delete_resume(db, current_user.id)
    except ProfileStoreError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No CV found",
        )
    return {"success": True, "message": "CV deleted successfully"}


@router.post("/cv/upload")
async def upload_cv(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    parser: CVParser = Depends(get_cv_parser),
):
    """Upload a CV file. Plain text is saved like pasted text; PDF is not supported yet."""
    filename = (file.filename or "").lower()
    content_type = file.content_type or ""

    if content_type == "application/pdf" or filename.endswith(".pdf"):
        print(f"[Profile] PDF uploaded: {file.filename}")
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=PDF_NOT_SUPPORTED,
        )

    if not (content_type.startswith("text/") or filename.endswith(".txt")):
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail="Only plain text CV uploads are supported",
        )

    contents = await file.read()
    try:
        text = contents.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="CV file must be UTF-8 text",
        )

    return await _analyze_and_save(db, current_user, text, parser)
