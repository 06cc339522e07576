"""
Integrations

Overview
--------
This package connects memberprobe observations to third-party telemetry.

Submodules:
- `otel`: OpenTelemetry span sink (requires the `otel` extra).
"""
