"""HTTP layer: routers, request/response contracts and dependency wiring."""
