"""
FastAPI routers grouped by domain (users, chirps, hooks, admin).

Each file inside this package exposes an APIRouter that is included in the
main application (app.py).
"""
