from fastapi import Request, HTTPException
from typing import Dict, Any

from models.language import Language
from services.analysis.section_orchestrator import SectionOrchestrator
from services.errors import AnalysisError


async def run_analysis(request: Request, image_data_url: str, lang: Language) -> Dict[str, Any]:
    """Run the multi-section analysis for a captured image.

    Args:
        request: FastAPI Request (used to access the shared completion client).
        image_data_url: Captured image as a base64 data URL.
        lang: Language for prompts, section titles and error lines.

    Returns:
        A dict with `lang`, the settled `sections` in catalog order, the
        assembled `report` text and the keys of any `failed_sections`.

    Raises:
        HTTPException(400) if the image cannot be read.
    """
    orchestrator = SectionOrchestrator(request.app.state.completion_client)
    try:
        result = await orchestrator.analyze(image_data_url, lang)
    except AnalysisError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    payload = result.to_dict()
    payload["failed_sections"] = list(result.failed_sections)
    return payload
