"""Gateway invoker: client side of the /gateway endpoint."""

from gatewayplay.invoker.client import ClickEvent, GatewayInvoker
from gatewayplay.invoker.models import (
    GatewayRequest,
    GatewayResponse,
    Outcome,
    RenderedResult,
    ResultStyle,
)
from gatewayplay.invoker.sinks import ConsoleSink, MemorySink, OutputSink

__all__ = [
    "ClickEvent",
    "GatewayInvoker",
    "GatewayRequest",
    "GatewayResponse",
    "Outcome",
    "RenderedResult",
    "ResultStyle",
    "ConsoleSink",
    "MemorySink",
    "OutputSink",
]
