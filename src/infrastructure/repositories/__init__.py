"""Repository implementations."""

from .result_sink import SqlAlchemyResultSink

__all__ = [
    "SqlAlchemyResultSink",
]
