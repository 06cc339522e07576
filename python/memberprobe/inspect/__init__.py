"""
Runtime Instrumentation

Overview
--------
This package replaces callable members of live objects with observing
wrappers.

Responsibilities:
1.  Locate callable members through `collect_wide` match notifications.
2.  Install wrappers that report each call, and optionally each settlement, to a sink.
3.  Track installs per session so members are wrapped once and can be restored.

Public Interfaces:
- `instrument`/`with_logger`: One-shot instrumentation, returns the namespace.
- `Instrumentation`: Reusable session with `restore()`.
- `CallObservation`: Record handed to sinks.
- `log_observation`: Default sink.
"""

from .instrument import CallObservation
from .instrument import Instrumentation
from .instrument import WrapRegistry
from .instrument import instrument
from .instrument import log_observation
from .instrument import with_logger
