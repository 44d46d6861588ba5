from .base import Accumulator, BaseCollector, CollectorResult, Measurement, MetricSink
from .collector import UwsgiCollector
from .config import load_config
from .connector import open_stream
from .errors import CollectorError, ConfigError, TargetConnectionError, TargetParseError
from .mapper import gather_snapshot, process
from .models import AppStats, StatsSnapshot, WorkerStats
from .target import Scheme, Target, parse_target

__all__ = [
    "Accumulator",
    "BaseCollector",
    "CollectorResult",
    "Measurement",
    "MetricSink",
    "UwsgiCollector",
    "load_config",
    "open_stream",
    "CollectorError",
    "ConfigError",
    "TargetConnectionError",
    "TargetParseError",
    "gather_snapshot",
    "process",
    "AppStats",
    "StatsSnapshot",
    "WorkerStats",
    "Scheme",
    "Target",
    "parse_target",
]
