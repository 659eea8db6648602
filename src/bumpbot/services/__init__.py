"""Service layer — dispatch, reporting, routing, and build triggering.

Services may import from domain, infrastructure, and handlers.
They must never import from commands or the console transport.
"""
