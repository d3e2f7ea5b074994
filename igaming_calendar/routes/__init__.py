"""HTTP routes, discovered and mounted by ``core.route_discovery``."""
