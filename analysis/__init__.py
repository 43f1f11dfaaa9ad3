"""Analysis of generated frequency lists."""

from .word_frequency import FrequencyListAnalyzer, get_top_verbs

__all__ = ["FrequencyListAnalyzer", "get_top_verbs"]
