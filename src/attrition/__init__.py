from .exceptions import ConfigError, FormatError, PipelineError, SchemaError, StateError

__all__ = ["ConfigError", "FormatError", "PipelineError", "SchemaError", "StateError"]
