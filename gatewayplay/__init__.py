"""gatewayplay - same-origin gateway invoker and delegating gateway server."""

__version__ = "0.1.0"
__logo__ = "🚪"
