import uvicorn
from app.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "hub:application",
        host=settings.HOST,
        port=settings.PORT,
        workers=settings.WORKERS,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
    )
