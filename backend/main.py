from datetime import datetime, timezone
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import env
from api.analyze.router import router as analyze_router

app = FastAPI(
    title="ThreatLens API",
    description="AI-assisted security triage for code, packages and URLs",
    version="1.0.0",
)

# Include routers
app.include_router(analyze_router)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure this appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies in the API's error envelope."""
    return JSONResponse(
        status_code=400,
        content={"error": True, "message": "Request body must be a JSON object."},
    )


@app.on_event("startup")
async def startup_event():
    """Print the service banner."""
    api_key_status = "set" if os.getenv("OPENROUTER_API_KEY") else "MISSING"
    print(f"ThreatLens API running on http://{env.HOST}:{env.PORT}")
    print(f"   Model: {env.THREATLENS_MODEL}")
    print(f"   API Key: {api_key_status}")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Welcome to ThreatLens API",
        "version": "1.0.0",
        "description": "Security triage for code snippets, npm packages and URLs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint. Does not call the model."""
    return {
        "status": "healthy",
        "model": env.THREATLENS_MODEL,
        "api_key_configured": bool(os.getenv("OPENROUTER_API_KEY")),
        "timestamp": datetime.now(timezone.utc),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=env.HOST, port=env.PORT)
