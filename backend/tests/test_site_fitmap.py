"""
Tests for the FitMap site adapter.
"""

from conftest import make_area_page, make_gym_page, BLANK_PAGE


class TestProbePage:
    """Test page signals read from area pages."""

    def test_listing_page_signals(self, site):
        html = make_area_page(['/gym/1/', '/gym/2/'])
        probe = site.probe_page(html)

        assert probe.listing_urls == ['https://fitmap.jp/gym/1/', 'https://fitmap.jp/gym/2/']
        assert probe.has_error_marker is False
        assert probe.has_valid_title is True
        assert probe.has_valid_content is True
        assert probe.has_domain_keywords is True
        assert probe.has_next_link is True
        assert probe.has_listing_section is True
        assert probe.content_length > 2000

    def test_error_marker_detected(self, site):
        probe = site.probe_page(make_area_page(['/gym/1/'], error_marker=True))
        assert probe.has_error_marker is True

    def test_invalid_title_detected(self, site):
        probe = site.probe_page(make_area_page(['/gym/1/'], title='404 ページが見つかりません'))
        assert probe.has_valid_title is False

    def test_blank_page(self, site):
        probe = site.probe_page(BLANK_PAGE)
        assert probe.listing_count == 0
        assert probe.has_valid_content is False
        assert probe.has_domain_keywords is False

    def test_keywordless_page(self, site):
        probe = site.probe_page(make_area_page(['/gym/1/'], keywords=False, padding=1500))
        assert probe.has_domain_keywords is False
        assert probe.has_valid_content is True
        assert probe.content_length < 2000

    def test_title_truncated(self, site):
        probe = site.probe_page(make_area_page([], title='ジム' * 80))
        assert len(probe.page_title) == 100

    def test_extract_listing_urls_keeps_order_and_duplicates(self, site):
        html = make_area_page(['/gym/2/', '/gym/1/', '/gym/2/'])
        assert site.extract_listing_urls(html) == [
            'https://fitmap.jp/gym/2/',
            'https://fitmap.jp/gym/1/',
            'https://fitmap.jp/gym/2/',
        ]


class TestParseDetail:
    """Test gym detail parsing."""

    def test_parse_full_page(self, site):
        raw = site.parse_detail('https://fitmap.jp/gym/1/', make_gym_page())

        assert raw.name == 'ゴールドジム 渋谷店'
        assert raw.url == 'https://fitmap.jp/gym/1/'
        assert raw.address == '東京都渋谷区道玄坂1-2-3 渋谷ビル5F'
        assert raw.price == '8,800円/月'
        assert '24時間' in raw.features
        assert 'シャワー' in raw.features
        assert raw.description.startswith('渋谷駅から')
        assert raw.area == '東京都'

    def test_name_from_title_when_no_og_title(self, site):
        html = '<html><head><title>ジムA 新宿店 | FitMap</title></head><body></body></html>'
        raw = site.parse_detail('https://fitmap.jp/gym/2/', html)
        assert raw.name == 'ジムA 新宿店'

    def test_site_title_rejected(self, site):
        html = '<html><head><title>FitMap | 日本最大級のジム検索</title></head><body></body></html>'
        assert site.parse_detail('https://fitmap.jp/gym/3/', html) is None

    def test_short_address_ignored(self, site):
        raw = site.parse_detail('https://fitmap.jp/gym/4/', make_gym_page(address='東京都'))
        assert raw.address is None

    def test_bare_number_price_gets_yen(self, site):
        raw = site.parse_detail('https://fitmap.jp/gym/5/', make_gym_page(price='5000'))
        assert raw.price == '5000円'

    def test_parse_details_skips_unnamed(self, site):
        html_map = {
            'https://fitmap.jp/gym/1/': make_gym_page(),
            'https://fitmap.jp/gym/2/': BLANK_PAGE,
        }
        results = site.parse_details(html_map)
        assert list(results) == ['https://fitmap.jp/gym/1/']


class TestParseList:
    """Test gym card parsing on area pages."""

    def test_parse_cards(self, site):
        html = (
            '<html><body>'
            '<div class="gym-card"><h3>ジムA</h3><a href="/gym/1/">詳細</a>'
            '<span class="address">東京都港区</span><span class="tag">24時間</span></div>'
            '<div class="gym-card"><h3>ジムB</h3><a href="/gym/2/">詳細</a></div>'
            '</body></html>'
        )
        gyms = site.parse_list(html)

        assert [g.name for g in gyms] == ['ジムA', 'ジムB']
        assert gyms[0].url == 'https://fitmap.jp/gym/1/'
        assert gyms[0].address == '東京都港区'
        assert gyms[0].features == ['24時間']

    def test_no_cards(self, site):
        assert site.parse_list(BLANK_PAGE) == []
