"""
Personal-training gym classification.

Checks, in order: personal keywords, general chain keywords, URL hints,
and finally the fee level.
"""

from dataclasses import dataclass

from ..base import GymRaw
from .extractors import extract_amounts


PERSONAL_KEYWORDS = [
    'パーソナル', 'personal', 'PERSONAL',
    'マンツーマン', '個別指導', 'プライベート',
    '1対1', '個人指導', 'オーダーメイド',
]

GENERAL_KEYWORDS = [
    'フィットネスクラブ', 'スポーツジム', 'スポーツクラブ',
    'フィットネス', '24時間', 'エニタイム', 'カーブス',
    'ジョイフィット', 'セントラル', 'コナミ', 'ルネサンス',
]

PERSONAL_URL_HINTS = ['personal', 'private']

# Fees above this are only charged by personal-training gyms
PERSONAL_PRICE_THRESHOLD = 50000


@dataclass
class PersonalJudgement:
    flag: bool
    status: str                         # 'personal' | 'general' | 'unknown'
    reason: str


def judge_personal(raw: GymRaw) -> PersonalJudgement:
    """
    Decide whether a gym is a personal-training gym.

    Args:
        raw: Parsed gym data

    Returns:
        PersonalJudgement with the rule that matched
    """
    text = ' '.join([
        raw.name or '',
        raw.description or '',
        ' '.join(raw.features or []),
    ]).lower()

    for keyword in PERSONAL_KEYWORDS:
        if keyword.lower() in text:
            return PersonalJudgement(True, 'personal', f'keyword "{keyword}" found')

    for keyword in GENERAL_KEYWORDS:
        if keyword.lower() in text:
            return PersonalJudgement(False, 'general', f'general gym "{keyword}"')

    if raw.url:
        url = raw.url.lower()
        if any(hint in url for hint in PERSONAL_URL_HINTS):
            return PersonalJudgement(True, 'personal', 'personal keyword in URL')

    amounts = extract_amounts(raw.price or '')
    if amounts and max(amounts) > PERSONAL_PRICE_THRESHOLD:
        return PersonalJudgement(True, 'personal', f'high fee ({max(amounts)} yen)')

    return PersonalJudgement(False, 'unknown', 'could not determine')


def is_personal(raw: GymRaw) -> bool:
    return judge_personal(raw).flag
