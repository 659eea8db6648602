"""Infrastructure layer — sandbox directories, Jenkins HTTP, shell execution.

This layer depends on stdlib and third-party libs (httpx).
It must never import from services, handlers, or commands.
"""
