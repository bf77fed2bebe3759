#!/usr/bin/env python3
"""
overview-content-studio Web App 入口

Usage:
    python app.py
    python app.py --port 8000
    python app.py --no-open
"""

from __future__ import annotations

import argparse
import threading
import time
import webbrowser

import uvicorn
from fastapi import FastAPI

from web.api import router as api_router


app = FastAPI(title="overview-content-studio", docs_url="/docs")

# Mount API routes
app.include_router(api_router)


@app.get("/")
async def index():
    """Service info"""
    return {"name": "overview-content-studio", "docs": "/docs", "api": "/api"}


def open_browser(port: int, delay: float = 1.5):
    """Delayed browser open"""
    time.sleep(delay)
    webbrowser.open(f"http://localhost:{port}/docs")


def main():
    parser = argparse.ArgumentParser(description="overview-content-studio Web App")
    parser.add_argument("--port", "-p", type=int, default=8000, help="端口 (默认: 8000)")
    parser.add_argument("--host", type=str, default="127.0.0.1", help="主机 (默认: 127.0.0.1)")
    parser.add_argument("--no-open", action="store_true", help="不自动打开浏览器")
    args = parser.parse_args()

    if not args.no_open:
        threading.Thread(target=open_browser, args=(args.port,), daemon=True).start()

    print(f"\n  overview-content-studio Web App")
    print(f"  http://{args.host}:{args.port}\n")

    uvicorn.run(app, host=args.host, port=args.port, log_level="info")


if __name__ == "__main__":
    main()
