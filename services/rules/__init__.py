"""
Rules Package
Pattern language, marker substitution and rule document loading
"""
from .pattern_compiler import JoinType, PatternGroup, compile_pattern, parse_pattern
from .markers import resolve_markers, substitute_markers
from .schema import FieldRule, SectionRule, PayDataRules, RuleDocument
from .rule_loader import load_rules

__all__ = [
    'JoinType',
    'PatternGroup',
    'compile_pattern',
    'parse_pattern',
    'resolve_markers',
    'substitute_markers',
    'FieldRule',
    'SectionRule',
    'PayDataRules',
    'RuleDocument',
    'load_rules',
]
