#!/usr/bin/env python3
"""
Run the Workers AI image gateway (FastAPI).
Example:
  CF_ACCOUNT_LIST='[{"account_id": "...", "token": "..."}]' python run_image_gateway.py
"""
from __future__ import annotations

import uvicorn
from image_gateway.config import get_settings
from image_gateway.main import app

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        workers=1,
        log_level=settings.log_level.lower(),
    )
