"""Core modules for the frequency list generator."""

from .frequency_list import FrequencyList, VerbEntry, FrequencyListError, SchemaError

__all__ = ["FrequencyList", "VerbEntry", "FrequencyListError", "SchemaError"]
