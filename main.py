import uvicorn
from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.core.logging_config import LoggingConfig
from app.services.quiz_submission.quiz_submission_route import method_not_allowed_handler
from app.services.quiz_submission.quiz_submission_route import router as quiz_submission_router

LoggingConfig.configure()

app = FastAPI(
    title="Quiz Relay",
    description="Forwards graded quiz submissions to a Telegram chat.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.include_router(quiz_submission_router)
app.add_exception_handler(StarletteHTTPException, method_not_allowed_handler)


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint for health checks"""
    return {
        "message": "Welcome to Quiz Relay!",
        "status": "healthy",
        "version": "1.0.0"
    }

@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for Docker/monitoring"""
    return {
        "status": "healthy",
        "service": get_settings().app_name
    }

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
