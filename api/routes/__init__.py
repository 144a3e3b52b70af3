"""api/routes/ -- FastAPI routers, mounted under /api by api/main.py."""
