"""Presentation layer: FastAPI application and routers."""
