"""Map gateway outcomes to the status fragment shown in the result element."""

from __future__ import annotations

import html

from gatewayplay.invoker.models import GatewayResponse, Outcome, RenderedResult, ResultStyle

TRANSPORT_FAILURE_PREFIX = "Gateway invocation failed with status: "


def _field(value: object, escape: bool) -> str:
    text = "" if value is None else str(value)
    return html.escape(text) if escape else text


def _fragment(style: ResultStyle, content: str) -> str:
    return f"<p class='bg-{style.value} result'>{content}</p>"


def style_for_status(status_code: int | None) -> ResultStyle:
    """Success below 400, warning otherwise (a missing code counts as a warning)."""
    if status_code is not None and status_code < 400:
        return ResultStyle.SUCCESS
    return ResultStyle.WARNING


def render_response(response: GatewayResponse, *, escape: bool = True) -> RenderedResult:
    """Render a parsed gateway envelope, branching on its success flag."""
    if not response.success:
        text = f"{response.error or ''}: {response.reason or ''}"
        return RenderedResult(
            outcome=Outcome.STRUCTURED_ERROR,
            style=ResultStyle.DANGER,
            text=text,
            html=_fragment(
                ResultStyle.DANGER,
                f"{_field(response.error, escape)}: {_field(response.reason, escape)}",
            ),
            response=response,
        )

    style = style_for_status(response.status_code)
    code = "" if response.status_code is None else str(response.status_code)
    status_line = f"{code} {response.status_message or ''}".rstrip()
    headers = response.headers or {}

    text_lines = [f"Status: {status_line}", "Headers:"]
    text_lines.extend(f"{name}: {value}" for name, value in headers.items())
    text_lines.extend(["Content:", response.body or ""])

    header_html = "".join(
        f"{_field(name, escape)}: {_field(value, escape)}<br/>" for name, value in headers.items()
    )
    content = (
        f"<strong>Status:</strong> {_field(response.status_code, escape)} "
        f"{_field(response.status_message, escape)}"
        f"<br/><strong>Headers:</strong><br/>{header_html}"
        f"<br/><strong>Content:</strong><br/>{_field(response.body, escape)}"
    )
    return RenderedResult(
        outcome=Outcome.SUCCESS,
        style=style,
        text="\n".join(text_lines),
        html=_fragment(style, content),
        response=response,
    )


def render_transport_failure(status_text: str, *, escape: bool = True) -> RenderedResult:
    """Render a failure where no usable gateway envelope was received."""
    text = f"{TRANSPORT_FAILURE_PREFIX}{status_text}"
    return RenderedResult(
        outcome=Outcome.TRANSPORT_ERROR,
        style=ResultStyle.DANGER,
        text=text,
        html=_fragment(ResultStyle.DANGER, f"{TRANSPORT_FAILURE_PREFIX}{_field(status_text, escape)}"),
    )
