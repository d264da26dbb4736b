#!/usr/bin/env python3
"""Run the pkgshape web application with auto-reload for local development."""

import uvicorn

if __name__ == "__main__":
    uvicorn.run("apps.web.main:app", host="127.0.0.1", port=8000, reload=True)
