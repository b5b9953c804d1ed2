"""
Entry point for running the API with `python -m workout_program_ingestor`.
"""
import uvicorn

from workout_program_ingestor.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "workout_program_ingestor.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.ENVIRONMENT == "development",
    )
