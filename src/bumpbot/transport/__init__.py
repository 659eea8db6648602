"""Chat transport seams.

The engine talks to chat through the protocols in :mod:`bumpbot.transport.ports`.
:mod:`bumpbot.transport.console` is the terminal implementation used by the CLI.
"""
