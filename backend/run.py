#!/usr/bin/env python3
# backend/run.py
"""
Development server runner.

Creates the tables on the configured database, then serves the API with
auto-reload.
"""
import logging
import os
from pathlib import Path
import sys

# Add backend to path
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))
os.chdir(backend_dir)

import uvicorn  # noqa: E402

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    from studio_booking.init_db import init_db

    init_db()
    logger.info("Starting development server at http://localhost:8000 (docs at /docs)")
    uvicorn.run("studio_booking.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
