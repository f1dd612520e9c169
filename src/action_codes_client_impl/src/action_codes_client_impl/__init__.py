"""Public exports for the Action Codes HTTP client implementation package."""

from action_codes_client_impl.client_impl import register as _register_client
from action_codes_client_impl.models_impl import register as _register_models


def register() -> None:
    """Register the HTTP client and model implementations."""
    _register_client()
    _register_models()


register()
