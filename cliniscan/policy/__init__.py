from .engine import ImportPolicyEngine
from .rules import determine_strategy, estimate_import_time

__all__ = ["ImportPolicyEngine", "determine_strategy", "estimate_import_time"]
