# backend/run.py
import sys
import uvicorn
from bidding.config import settings
from bidding.utils.logging import api_logger

def main():
    api_logger.info(f"Starting Bidding System API on {settings.HOST}:{settings.PORT}")
    try:
        uvicorn.run(
            "bidding.main:app",
            host=settings.HOST,
            port=settings.PORT,
            reload=True
        )
    except Exception as e:
        api_logger.error("Error starting the server", extra={"error": str(e)}, exc_info=True)
        sys.exit(1)

if __name__ == "__main__":
    main()
