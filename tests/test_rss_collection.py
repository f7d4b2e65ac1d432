import pytest

from qbittorrent_sdk.rss_collection import RSSFeedCollection

from conftest import NOW


ALPHA = "https://alpha.example.com/rss"
BETA = "https://beta.example.com/rss"
GAMMA = "https://gamma.example.com/rss"


@pytest.fixture
def feeds():
    return RSSFeedCollection.from_array([
        {
            "url": ALPHA,
            "title": "Alpha",
            "path": "Linux",
            "autoDownloadEnabled": True,
            "downloadRules": {"isos": {"mustContain": "iso"}},
            "unreadCount": 2,
            "totalItems": 4,
            "lastUpdate": NOW - 600,
            "nextUpdate": NOW + 600,
        },
        {"url": BETA, "title": "beta", "isActive": False},
        {
            "url": GAMMA,
            "title": "Gamma",
            "path": "Linux",
            "hasError": True,
            "unreadCount": 1,
            "totalItems": 1,
            "nextUpdate": NOW - 1,
        },
    ])


class TestRSSFeedCollection:
    def test_round_trip_keeps_api_keys(self):
        raw = [
            {
                "url": ALPHA,
                "uid": "{1}",
                "title": "Alpha",
                "isActive": False,
                "autoDownloadEnabled": True,
                "lastUpdate": NOW - 600,
                "articles": [{"id": "1", "title": "Debian 12.6", "isRead": True}],
                "feedVersion": 2,
            },
            {"url": BETA, "hasError": True, "errorMessage": "Timed out"},
        ]
        dumped = RSSFeedCollection.from_array(raw).to_array()
        for original, restored in zip(raw, dumped):
            assert set(original) <= set(restored)
            for key, value in original.items():
                if key != "articles":
                    assert restored[key] == value
        assert set(raw[0]["articles"][0]) <= set(dumped[0]["articles"][0])

    def test_lookup(self, feeds):
        assert feeds.find_by_url(BETA).title == "beta"
        assert feeds.find_by_url("https://missing.example.com") is None
        assert feeds.has_url(GAMMA)
        assert feeds.find_by_path("Linux").count() == 2
        assert feeds.find_by_title("alp", exact=False).count() == 1

    def test_subsets(self, feeds):
        assert feeds.get_active().count() == 2
        assert feeds.get_inactive().first().url == BETA
        assert feeds.get_auto_download_enabled().count() == 1
        assert feeds.get_with_errors().first().url == GAMMA
        assert feeds.get_healthy(NOW).first().url == ALPHA
        assert feeds.get_due_for_update(NOW).first().url == GAMMA
        assert feeds.get_recently_updated(now=NOW).count() == 1
        assert feeds.get_with_unread_items().count() == 2
        assert feeds.get_with_download_rules().count() == 1

    def test_grouping(self, feeds):
        assert {k: g.count() for k, g in feeds.group_by_path().items()} == {"Linux": 2, "Root": 1}
        statuses = feeds.group_by_status(NOW)
        assert statuses["Healthy"].first().url == ALPHA
        assert statuses["Inactive"].first().url == BETA
        assert statuses["Error"].first().url == GAMMA

    def test_sorting(self, feeds):
        assert feeds.sort_by_title().map(lambda f: f.title) == ["Alpha", "beta", "Gamma"]
        assert feeds.sort_by_unread_count(descending=True).map(lambda f: f.url) == [ALPHA, GAMMA, BETA]
        assert feeds.sort_by_last_update(descending=True).first().url == ALPHA

    def test_aggregates(self, feeds):
        assert feeds.get_total_unread_count() == 3
        assert feeds.get_total_item_count() == 5
        assert feeds.get_total_read_count() == 2
        assert feeds.get_average_read_percentage() == pytest.approx(50.0)
        assert feeds.get_all_paths() == ["Linux"]
        assert feeds.get_all_urls() == [ALPHA, BETA, GAMMA]

    def test_errors(self, feeds):
        assert feeds.has_any_errors()
        assert feeds.get_all_errors() == {GAMMA: "Unknown error"}
        assert feeds.needs_update(NOW)

    def test_empty_collection(self):
        empty = RSSFeedCollection.empty()
        assert empty.get_average_read_percentage() == 100.0
        assert not empty.has_any_errors()
        assert empty.get_all_errors() == {}

    def test_bulk_status_updates(self, feeds):
        feeds.set_active_status([BETA], True)
        feeds.set_auto_download_status([ALPHA, GAMMA], False)
        assert feeds.get_inactive().is_empty()
        assert feeds.get_auto_download_enabled().is_empty()

    def test_statistics(self, feeds):
        stats = feeds.get_statistics(NOW)
        assert stats["total_feeds"] == 3
        assert stats["active_feeds"] == 2
        assert stats["feeds_with_errors"] == 1
        assert stats["healthy_feeds"] == 1
        assert stats["total_unread_items"] == 3
        assert stats["unique_paths"] == 1
