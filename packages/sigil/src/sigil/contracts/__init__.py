"""Contract records: model, loading, matching, validation and mutation."""

from .loader import LoadResult, load_contracts
from .matcher import ContractMatch, PatternMatch, compile_glob, find_affected, match_contract, normalize_paths
from .model import ChangelogEntry, Contract, Priority, Rule, Status, Trigger
from .validate import Issue, ValidationReport, validate_all, validate_contract

__all__ = [
    "ChangelogEntry",
    "Contract",
    "ContractMatch",
    "Issue",
    "LoadResult",
    "PatternMatch",
    "Priority",
    "Rule",
    "Status",
    "Trigger",
    "ValidationReport",
    "compile_glob",
    "find_affected",
    "load_contracts",
    "match_contract",
    "normalize_paths",
    "validate_all",
    "validate_contract",
]
