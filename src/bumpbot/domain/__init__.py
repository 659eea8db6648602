"""Domain layer — invocation identity and the error taxonomy.

This layer depends only on the stdlib.
It must never import from services, infrastructure, handlers, or commands.
"""
