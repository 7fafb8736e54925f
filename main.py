"""Entrypoint for running the finance_tracker FastAPI backend locally."""
from __future__ import annotations

import uvicorn


if __name__ == "__main__":
    uvicorn.run(
        "finance_tracker.api:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
