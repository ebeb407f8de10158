"""
FastAPI Task Backend package.

The ASGI application lives in ``src.api.main`` (``uvicorn src.api.main:app``);
``create_app`` builds additional instances, e.g. one per test.
"""
