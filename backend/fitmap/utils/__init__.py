"""Shared utilities for site adapters and the processing pipeline."""

from .normalizers import (
    parse_prices,
    split_address,
)
from .extractors import (
    extract_text,
    extract_all_texts,
    extract_amounts,
)
from .classifiers import (
    judge_personal,
    is_personal,
    PersonalJudgement,
)

__all__ = [
    'parse_prices',
    'split_address',
    'extract_text',
    'extract_all_texts',
    'extract_amounts',
    'judge_personal',
    'is_personal',
    'PersonalJudgement',
]
