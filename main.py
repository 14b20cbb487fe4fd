"""
Completion Dispatch Service - Root Entry Point.

For development: python main.py
For production: uvicorn main:app (or completion_dispatch.main:get_application --factory)
"""

from completion_dispatch.main import get_application, run_development_server

# ASGI entry point for uvicorn, gunicorn, etc.
app = get_application()

if __name__ == "__main__":
    run_development_server()
