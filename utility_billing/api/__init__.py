"""HTTP layer: FastAPI routers and error handlers."""
