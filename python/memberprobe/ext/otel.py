"""
OpenTelemetry sink for instrumented calls.

Usage:
    from memberprobe import instrument
    from memberprobe.ext.otel import span_logger

    instrument(client, logger=span_logger())

Every CallObservation becomes one short span named ``"<label> <key>"``
carrying ``memberprobe.*`` attributes. Failed calls and rejected results set
an error status and record the exception.
"""

from typing import Any, Callable, Optional

from memberprobe.utils.py import _get_otel_trace


def _attributes(observation) -> dict:
    attrs = {
        "memberprobe.label": str(observation.label),
        "memberprobe.key": str(observation.key),
        "memberprobe.phase": str(observation.phase),
        "memberprobe.args": repr(observation.args),
    }
    if observation.kwargs:
        attrs["memberprobe.kwargs"] = repr(observation.kwargs)
    if observation.this_arg is not None:
        attrs["memberprobe.this"] = type(observation.this_arg).__name__
    return attrs


def span_logger(tracer=None) -> Callable[[Any], None]:
    """Build a CallObservation sink that exports spans.

    Parameters
    ----------
    tracer : opentelemetry.trace.Tracer, optional
        Tracer to record with. Defaults to the global provider's tracer.
    """
    trace = _get_otel_trace()
    from opentelemetry.trace import Status, StatusCode

    if tracer is None:
        tracer = trace.get_tracer("memberprobe")

    def sink(observation) -> None:
        name = f"{observation.label} {observation.key}"
        with tracer.start_as_current_span(
            name, kind=trace.SpanKind.INTERNAL, attributes=_attributes(observation)
        ) as span:
            error: Optional[BaseException] = observation.error
            if error is not None:
                span.set_status(Status(StatusCode.ERROR, str(error)))
                span.record_exception(error)
            else:
                span.set_attribute("memberprobe.result", repr(observation.result))
                span.set_status(Status(StatusCode.OK))

    return sink
