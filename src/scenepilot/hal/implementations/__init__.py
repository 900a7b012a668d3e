"""HAL implementations.

Modules here import their backend libraries at import time; use
``scenepilot.hal.initialization`` to load them lazily.
"""
