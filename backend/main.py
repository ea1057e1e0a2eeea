import uvicorn
from rallypoint.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "rallypoint.server:application",
        host="0.0.0.0",
        port=settings.PORT,
        workers=settings.WORKERS,
        reload=settings.DEBUG,
    )
