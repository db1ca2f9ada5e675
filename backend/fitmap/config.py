"""
Site configuration for the FitMap directory.

Defines:
- URLs for area (region) listing pages
- The 47 prefecture regions and their area ids
- Markers and keywords used by the pagination heuristic
- Browser launch settings shared by every session
"""

from .base import SiteConfig


# ============================================================
# SITE
# ============================================================

FITMAP = SiteConfig(
    name='FitMap',
    short_name='FITMAP',
    base_url='https://fitmap.jp',
    area_url_template='https://fitmap.jp/area/{region_id}/',
    listing_selector='a[href*="/gym/"]',
)


# ============================================================
# REGIONS (FitMap area ids -> prefecture)
# Area ids follow the site's own numbering, not JIS codes.
# ============================================================

REGION_IDS = range(1, 48)

REGION_NAMES = {
    1: '東京都', 2: '神奈川県', 3: '千葉県', 4: '埼玉県',
    5: '茨城県', 6: '栃木県', 7: '群馬県', 8: '愛知県',
    9: '岐阜県', 10: '三重県', 11: '静岡県', 12: '大阪府',
    13: '兵庫県', 14: '京都府', 15: '滋賀県', 16: '奈良県',
    17: '和歌山県', 18: '北海道', 19: '青森県', 20: '岩手県',
    21: '宮城県', 22: '秋田県', 23: '山形県', 24: '福島県',
    25: '山梨県', 26: '長野県', 27: '新潟県', 28: '富山県',
    29: '石川県', 30: '福井県', 31: '広島県', 32: '岡山県',
    33: '鳥取県', 34: '島根県', 35: '山口県', 36: '香川県',
    37: '徳島県', 38: '愛媛県', 39: '高知県', 40: '福岡県',
    41: '佐賀県', 42: '長崎県', 43: '熊本県', 44: '大分県',
    45: '宮崎県', 46: '鹿児島県', 47: '沖縄県',
}

# Prefectures in JIS order, used when splitting free-text addresses
PREFECTURES = [
    '北海道', '青森県', '岩手県', '宮城県', '秋田県', '山形県', '福島県',
    '茨城県', '栃木県', '群馬県', '埼玉県', '千葉県', '東京都', '神奈川県',
    '新潟県', '富山県', '石川県', '福井県', '山梨県', '長野県',
    '岐阜県', '静岡県', '愛知県', '三重県',
    '滋賀県', '京都府', '大阪府', '兵庫県', '奈良県', '和歌山県',
    '鳥取県', '島根県', '岡山県', '広島県', '山口県',
    '徳島県', '香川県', '愛媛県', '高知県',
    '福岡県', '佐賀県', '長崎県', '熊本県', '大分県', '宮崎県', '鹿児島県', '沖縄県',
]


# ============================================================
# PAGINATION HEURISTIC
# ============================================================

# Any of these selectors present -> the page is an error/empty page
ERROR_MARKER_SELECTORS = '.error, .not-found, .no-result'

# Page title containing any of these is not a real listing page
INVALID_TITLE_MARKERS = ['404', 'エラー', '見つかりません']

# A real listing page carries at least one of these words
DOMAIN_KEYWORDS = ['フィットネス', 'ジム', 'トレーニング']

LISTING_SECTION_SELECTORS = '.gym-list, #gym-list, [class*="gym"], [data-gym]'
NEXT_PAGE_SELECTORS = 'a[href*="?page="], .pagination .next, .page-next'

# Body text must be longer than this to count as a content page
MIN_CONTENT_LENGTH = 1000
# Pages without domain keywords must be at least this long
KEYWORDLESS_MIN_CONTENT_LENGTH = 2000


# ============================================================
# BROWSER
# ============================================================

USER_AGENT = (
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
)
ACCEPT_LANGUAGE = 'ja-JP,ja;q=0.9,en;q=0.8'
VIEWPORT = {'width': 1920, 'height': 1080}

BROWSER_ARGS = [
    '--no-sandbox',
    '--disable-setuid-sandbox',
    '--disable-dev-shm-usage',
    '--disable-accelerated-2d-canvas',
    '--no-first-run',
    '--no-zygote',
    '--disable-gpu',
    '--memory-pressure-off',
]

# Resource types aborted at the routing layer to keep memory down
BLOCKED_RESOURCE_TYPES = {'image', 'stylesheet', 'font'}


# ============================================================
# HELPER FUNCTIONS
# ============================================================

def get_region_name(region_id: int) -> str:
    """
    Get the prefecture name for a FitMap area id.

    Args:
        region_id: Area id (1-47)

    Returns:
        Prefecture name, or '' for an unknown id
    """
    return REGION_NAMES.get(region_id, '')


def list_regions() -> list:
    """List all region ids in crawl order."""
    return list(REGION_IDS)

