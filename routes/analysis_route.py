from fastapi import APIRouter, Request, HTTPException
from pydantic import BaseModel

from controllers.analysis_controller import run_analysis
from models.language import Language

router = APIRouter()


class AnalysisRequest(BaseModel):
    image_data_url: str
    lang: Language = Language.EN


@router.post("/analysis")
async def post_analysis(request: Request, payload: AnalysisRequest):
    """Analyze a captured medicine image section by section."""
    try:
        result = await run_analysis(request, payload.image_data_url, payload.lang)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))
    return result
