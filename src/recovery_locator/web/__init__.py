"""FastAPI application, routers and page template."""
