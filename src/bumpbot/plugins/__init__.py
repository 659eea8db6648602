"""Extension layer — plugin system via pluggy.

INVARIANT: Lifecycle hook failures are warnings, never errors.
"""

from bumpbot.plugins.manager import PluginManager

__all__ = ["PluginManager"]
