"""API routers, one per tool family."""
