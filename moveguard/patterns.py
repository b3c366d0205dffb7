"""Keyword patterns that hint at risky code, and their risk levels."""

from __future__ import annotations

from enum import Enum, auto


class PatternType(Enum):
    RESOURCE_LEAK = auto()
    UNSAFE_TRANSFER = auto()
    MISSING_CHECK = auto()
    EXTERNAL_CALL_IN_LOOP = auto()
    UNAUTHORIZED_ACCESS = auto()


class RiskLevel(Enum):
    CRITICAL = auto()
    HIGH = auto()
    MEDIUM = auto()
    LOW = auto()


_DEFAULT_PATTERNS: dict[PatternType, tuple[str, ...]] = {
    PatternType.RESOURCE_LEAK: ("init", "create", "store"),
    PatternType.UNSAFE_TRANSFER: ("transfer", "send", "move"),
    PatternType.MISSING_CHECK: ("assert", "verify", "check"),
    PatternType.EXTERNAL_CALL_IN_LOOP: ("while", "for", "loop"),
    PatternType.UNAUTHORIZED_ACCESS: ("admin", "owner", "capability"),
}

_RISK_LEVELS: dict[PatternType, RiskLevel] = {
    PatternType.RESOURCE_LEAK: RiskLevel.CRITICAL,
    PatternType.UNSAFE_TRANSFER: RiskLevel.HIGH,
    PatternType.MISSING_CHECK: RiskLevel.HIGH,
    PatternType.EXTERNAL_CALL_IN_LOOP: RiskLevel.MEDIUM,
    PatternType.UNAUTHORIZED_ACCESS: RiskLevel.CRITICAL,
}


class PatternDatabase:
    """Substring patterns grouped by the kind of risk they suggest."""

    def __init__(self) -> None:
        self.patterns: dict[PatternType, tuple[str, ...]] = dict(_DEFAULT_PATTERNS)

    def matches_pattern(self, pattern_type: PatternType, text: str) -> bool:
        """Whether ``text`` contains any pattern of the given type."""
        return any(pattern in text for pattern in self.patterns.get(pattern_type, ()))

    def get_risk_level(self, pattern_type: PatternType) -> RiskLevel:
        return _RISK_LEVELS[pattern_type]