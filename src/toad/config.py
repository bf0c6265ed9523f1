"""Router configuration.

RouterConfig is a frozen dataclass: immutable after creation, shared by
a root router and every sub-router forked from it.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        router = create_router(RouterConfig(not_found_message="Nope"))
    """

    # Dispatch
    not_found_message: str = "Not found"

    # ASGI adapter
    debug: bool = False  # Include exception text in 500 bodies
    internal_error_message: str = "Internal server error"
