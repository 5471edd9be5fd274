"""Payment widget factory.

Provides get_widget_factory() / set_widget_factory() to swap implementations.
``None`` means the gateway library is not available in this runtime, which the
adapter reports as "gateway unavailable".

Selected with the CHECKOUT_GATEWAY_WIDGET environment variable (``fake`` or ``none``).
"""

import os

from checkout.gateway.port import WidgetFactory

_UNSET = object()
_current_factory = _UNSET


def get_widget_factory() -> WidgetFactory | None:
    """Return the configured widget factory, or None when no gateway library is loaded."""
    global _current_factory
    if _current_factory is _UNSET:
        adapter = os.environ.get("CHECKOUT_GATEWAY_WIDGET", "fake")
        if adapter == "fake":
            from checkout.gateway.fake_widget import FakeWidgetFactory

            _current_factory = FakeWidgetFactory()
        elif adapter == "none":
            _current_factory = None
        else:
            raise ValueError(f"Unknown gateway widget: {adapter}")
    return _current_factory


def set_widget_factory(factory: WidgetFactory | None) -> None:
    """Override the active widget factory (useful for tests)."""
    global _current_factory
    _current_factory = factory


def reset_widget_factory() -> None:
    """Reset to the default widget factory."""
    global _current_factory
    _current_factory = _UNSET
