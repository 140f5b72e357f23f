"""
burrow: hierarchical resource engine.

Clients address entities by slash-delimited paths (``/account/1/order/77``).
burrow parses paths into keys, enforces which kinds may nest under which,
and drives payloads through their lifecycle hooks around a small set of
storage primitives.

- ``burrow.core``     keys, kind registry, payloads, errors, settings, logging
- ``burrow.engine``   Resources, actions, ancestry checks, list pagination
- ``burrow.storage``  storage contract, in-memory and SQLite backends
- ``burrow.api``      FastAPI adapter
- ``burrow.cli``      Typer CLI
"""

__version__ = "0.1.0"
