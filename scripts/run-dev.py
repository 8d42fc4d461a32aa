"""
FastAPI Development Server

Run the Multi-Assistant Audit Chat API in development mode.

Usage:
    python scripts/run-dev.py
    # OR
    uv run python scripts/run-dev.py
"""

import sys
import os
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
os.chdir(project_root)

import uvicorn
from loguru import logger

from src.config.settings import settings


def main():
    """Start the FastAPI development server"""
    logger.info("="*80)
    logger.info("Multi-Assistant Audit Chat - API Server")
    logger.info("="*80)
    logger.info("")
    logger.info(f"Server will be available at: http://localhost:{settings.port}")
    logger.info(f"API Documentation: http://localhost:{settings.port}/docs")
    logger.info(f"Health Check: http://localhost:{settings.port}/api/health")
    logger.info(f"Chat: POST http://localhost:{settings.port}/api/assistants/{{name}}/chat")
    logger.info("")
    logger.info("Press CTRL+C to stop the server")
    logger.info("="*80)

    uvicorn.run(
        "src.api.app:app",
        host=settings.host,
        port=settings.port,
        reload=True,
        log_level="info",
        access_log=True,
        reload_dirs=[str(project_root / "src")]
    )


if __name__ == "__main__":
    main()
