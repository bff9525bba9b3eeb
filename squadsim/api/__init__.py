"""HTTP API: FastAPI app, routes, and the simulation service."""
