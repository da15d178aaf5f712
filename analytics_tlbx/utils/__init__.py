from .config import DEFAULT_ANALYSIS_CFG, AnalysisConfig


__all__ = [
    "DEFAULT_ANALYSIS_CFG",
    "AnalysisConfig",
]
