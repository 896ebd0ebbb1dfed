#!/usr/bin/env python3
"""Run script for the taskrestore API."""

import logging
import os

import uvicorn

from taskrestore.database.database import init_db

if __name__ == "__main__":
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
    init_db()
    uvicorn.run(
        "taskrestore.api.app:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
