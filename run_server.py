"""Entry point for running the FastAPI application with Uvicorn."""
from __future__ import annotations

import os

import uvicorn


def main() -> None:
  port = int(os.getenv("PIXELNIMBUS_PORT", "8000"))
  reload = os.getenv("UVICORN_RELOAD", "false").lower() == "true"
  uvicorn.run("pixelnimbus.main:app", host="0.0.0.0", port=port, reload=reload)


if __name__ == "__main__":
  main()
