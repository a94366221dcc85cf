from fastapi import APIRouter
from fastapi.responses import JSONResponse

from .schemas import AnalyzeRequest, AnalyzeResponse, ErrorResponse
from .service import (
    AnalysisInputError,
    public_error_message,
    run_analysis,
    validate_analysis_request,
)

router = APIRouter(
    prefix="/api",
    tags=["analyze"],
)


@router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def analyze(request: AnalyzeRequest):
    """
    Analyze a code snippet, npm package, or URL for security risk.

    Validation failures return 400 before any preprocessing runs. Every
    other failure in preprocessing or the model call is reported as 500.

    Example:
        POST /api/analyze
        {
            "type": "url",
            "content": "bit.ly/xyz"
        }

        Response:
        {
            "error": false,
            "type": "url",
            "result": {
                "risk_score": 72,
                "risk_level": "High",
                "summary": "Shortened link resolves to a credential phishing page",
                "key_findings": [...]
            }
        }
    """
    try:
        validate_analysis_request(request.type, request.content)
    except AnalysisInputError as e:
        return JSONResponse(
            status_code=400, content=ErrorResponse(message=str(e)).model_dump()
        )

    try:
        verdict = await run_analysis(request.type, request.content)
    except Exception as e:
        print(f"[analyze] ERROR: Analysis failed for type {request.type}: {e!r}")
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(message=public_error_message(e)).model_dump(),
        )

    return AnalyzeResponse(type=request.type, result=verdict)
