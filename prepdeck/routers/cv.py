import asyncio

from fastapi import APIRouter, Depends, HTTPException, status
from typing import Optional
from prepdeck.dependencies import get_current_user_optional
from prepdeck.exceptions import CVAnalysisError
from prepdeck.models.user import User
from prepdeck.schemas.profile import CVAnalysisRequest, CVAnalysisResponse
from prepdeck.services.cv_parser import CVParser, get_cv_parser

router = APIRouter(prefix="/api/cv", tags=["cv"])


@router.post("/analyze", response_model=CVAnalysisResponse)
async def analyze_cv_text(
    request: CVAnalysisRequest,
    current_user: Optional[User] = Depends(get_current_user_optional),
    parser: CVParser = Depends(get_cv_parser),
):
    """Parse CV text into profile fields without saving it."""
    user_id = request.user_id or (current_user.id if current_user else None)
    if not request.cv_text or not request.cv_text.strip() or not user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing required parameters: cv_text and user_id",
        )

    print(f"[CV] Starting {parser.name} CV analysis for user: {user_id}")
    try:
        parsed_data, ai_result = await asyncio.to_thread(parser.parse, request.cv_text.strip())
    except CVAnalysisError:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to analyze CV",
        )

    return CVAnalysisResponse(
        parser=parser.name,
        fallback_used=bool(ai_result and ai_result.fallback_used),
        parsed_data=parsed_data,
        ai_analysis=ai_result.analysis if ai_result else None,
    )
