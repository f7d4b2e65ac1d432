import pytest

from qbittorrent_sdk.exceptions import ReadOnlyCollectionError
from qbittorrent_sdk.models import TorrentInfo
from qbittorrent_sdk.response import RSSItemsResponse, SearchResultsResponse, TorrentListResponse
from qbittorrent_sdk.rss_collection import RSSFeedCollection
from qbittorrent_sdk.search_collection import SearchResultCollection
from qbittorrent_sdk.torrent_collection import TorrentCollection

from conftest import HASH_A, HASH_C, NOW


class TestTorrentListResponse:
    def test_counts_by_state(self):
        response = TorrentListResponse.from_api_data([
            {"hash": "h1", "progress": 1.0, "state": "uploading"},
            {"hash": "h2", "progress": 0.5, "state": "downloading"},
        ])
        assert response.is_success()
        assert response.get_completed_torrents().count() == 1
        assert response.get_downloading_torrents().count() == 1
        assert response.get_torrents().get_average_progress() == pytest.approx(0.75)

    def test_empty_payload_is_success(self):
        response = TorrentListResponse.from_api_data([])
        assert response.is_success()
        assert not response.has_torrents()
        assert response.get_total_count() == 0
        assert response.get_errors() == []

    def test_wrong_shape_is_failure(self):
        response = TorrentListResponse.from_api_data({"torrents": []})
        assert not response.is_success()
        assert response.get_errors() == ["Expected a list of torrents, got dict"]
        assert response.get_total_count() == 0

    def test_malformed_element_is_failure(self, raw_torrents):
        raw_torrents[2]["progress"] = "almost"
        response = TorrentListResponse.from_api_data(raw_torrents)
        assert not response.is_success()
        assert response.get_errors()[0].startswith("Item 2: ")
        assert not response.has_torrents()
        assert response.get_raw() is raw_torrents

    def test_failure_factory(self):
        response = TorrentListResponse.failure(["boom"])
        assert response.get_status_code() == 400
        assert response.to_array() == {"success": False, "errors": ["boom"], "status_code": 400, "data": []}

    def test_collection_is_read_only(self, raw_torrents):
        torrents = TorrentListResponse.from_api_data(raw_torrents).get_torrents()
        with pytest.raises(ReadOnlyCollectionError):
            torrents.add(TorrentInfo.from_array({"hash": "x"}))
        assert torrents.count() == 4

    def test_success_does_not_freeze_callers_collection(self, raw_torrents):
        mine = TorrentCollection.from_array(raw_torrents)
        response = TorrentListResponse.success(mine)
        mine.add(TorrentInfo.from_array({"hash": "x"}))
        assert mine.count() == 5
        assert response.get_total_count() == 4
        assert response.get_torrents().read_only

    def test_lookups(self, raw_torrents):
        response = TorrentListResponse.from_api_data(raw_torrents, {"filter": "all"}, headers={"X-Test": "1"})
        assert response.get_torrent_by_hash(HASH_C).name == "Arch Linux"
        assert response.has_hash(HASH_A)
        assert response.has_active_torrents()
        assert response.has_errored_torrents()
        assert response.get_torrents_by_category("linux").count() == 2
        assert response.get_torrents_by_tag("cc").count() == 1
        assert response.get_uploading_torrents().count() == 1
        assert response.get_errored_torrents().count() == 1
        assert response.get_request_params() == {"filter": "all"}
        assert response.get_headers() == {"X-Test": "1"}

    def test_validate_reports_duplicates(self, raw_torrents):
        response = TorrentListResponse.from_api_data(raw_torrents + raw_torrents[:1])
        result = response.validate()
        assert result.is_valid()
        assert result.get_warnings() == ["1 duplicate torrent hashes in response"]

    def test_formatted_summary(self, raw_torrents):
        summary = TorrentListResponse.from_api_data(raw_torrents).get_formatted_summary()
        assert summary["total_count"] == 4
        assert summary["download_speed"] == "1 MB/s"
        assert summary["average_progress"] == "43.75%"
        assert summary["categories"] == ["linux", "movies"]


class TestSearchResultsResponse:
    def test_running_job(self, raw_search_results):
        response = SearchResultsResponse.from_api_data(
            {"results": raw_search_results, "status": "Running", "total": 10}, search_id=5,
        )
        assert response.is_success()
        assert response.is_running()
        assert response.get_search_id() == 5
        assert response.get_result_count() == 3
        assert response.get_total() == 10
        assert response.has_more_results()
        assert response.get_search_results().get_popular().count() == 1

    def test_stopped_job_with_everything_fetched(self, raw_search_results):
        response = SearchResultsResponse.from_api_data(
            {"results": raw_search_results, "status": "Stopped", "total": 3},
        )
        assert response.is_stopped()
        assert not response.has_more_results()

    def test_success_does_not_freeze_callers_collection(self, raw_search_results):
        mine = SearchResultCollection.from_array(raw_search_results)
        response = SearchResultsResponse.success(mine, "Stopped", 3)
        mine.clear()
        assert response.get_result_count() == 3
        assert response.get_search_results().read_only

    def test_missing_total_defaults_to_result_count(self, raw_search_results):
        response = SearchResultsResponse.from_api_data({"results": raw_search_results, "status": "Stopped"})
        assert response.get_total() == 3

    @pytest.mark.parametrize("raw", [{"results": []}, {"status": "Running"}, [], None])
    def test_missing_fields_is_failure(self, raw):
        response = SearchResultsResponse.from_api_data(raw)
        assert not response.is_success()
        assert response.get_errors() == ["Invalid API response: missing required fields"]
        assert not response.has_results()

    def test_formatted_summary(self, raw_search_results):
        response = SearchResultsResponse.from_api_data(
            {"results": raw_search_results, "status": "Running", "total": 10}, search_id=5,
        )
        summary = response.get_formatted_summary()
        assert summary["job_summary"] == {"search_id": 5, "status": "Running", "shown": "3 of 10"}
        assert summary["search_summary"]["total_results"] == 3


class TestRSSItemsResponse:
    def test_flattens_folder_tree(self, raw_rss_items):
        response = RSSItemsResponse.from_api_data(raw_rss_items, with_data=True)
        assert response.is_success()
        feeds = response.get_feeds()
        assert feeds.count() == 2

        distros = response.find_feed_by_url("https://distrowatch.example.com/rss")
        assert distros.path == "Linux"
        assert distros.title == "Distro releases"
        assert distros.item_path == "Linux\\Distros"
        assert distros.total_items == 3
        assert distros.unread_count == 2

        news = response.find_feed_by_url("https://news.example.com/feed")
        assert news.path == ""
        assert news.title == "News"
        assert news.item_path == "News"

    def test_articles_and_subsets(self, raw_rss_items):
        response = RSSItemsResponse.from_api_data(raw_rss_items, with_data=True)
        articles = response.get_articles()
        assert [a.id for a in articles] == ["1", "2", "3"]
        assert articles[2].torrent_url == "https://example.com/arch.torrent"
        assert response.get_feeds_with_errors().count() == 1
        assert response.get_active_feeds().count() == 1
        assert response.get_feeds_with_unread_items().count() == 1
        assert response.find_feeds_by_path("Linux").count() == 1
        assert response.get_all_paths() == ["Linux"]

    def test_without_data_keeps_counts_from_api(self, raw_rss_items):
        response = RSSItemsResponse.from_api_data(raw_rss_items)
        assert not response.is_with_data()
        assert response.get_feeds().get_total_unread_count() == 0

    def test_statistics(self, raw_rss_items):
        stats = RSSItemsResponse.from_api_data(raw_rss_items, with_data=True).get_statistics(NOW)
        assert stats["total_feeds"] == 2
        assert stats["article_count"] == 3
        assert stats["feeds_due_for_update"] == 1
        assert stats["has_feeds"]

    def test_formatted_summary(self, raw_rss_items):
        summary = RSSItemsResponse.from_api_data(raw_rss_items, with_data=True).get_formatted_summary(NOW)
        assert summary["feeds"] == "1 active of 2"
        assert summary["unread"] == "2 unread of 3"
        assert summary["errors"] == {"https://news.example.com/feed": "Timed out"}

    @pytest.mark.parametrize("raw", [[], "Ok.", {"Broken": 5}])
    def test_malformed_payload_is_failure(self, raw):
        response = RSSItemsResponse.from_api_data(raw)
        assert not response.is_success()
        assert response.get_feeds().is_empty()
        assert response.get_errors()

    def test_feed_named_url_inside_folder(self):
        response = RSSItemsResponse.from_api_data({
            "Folder": {"url": {"uid": "{1}", "url": "https://a.example.com/rss"}},
        })
        assert response.is_success()
        feed = response.get_feeds().first()
        assert feed.url == "https://a.example.com/rss"
        assert feed.title == "url"
        assert feed.path == "Folder"

    def test_success_does_not_freeze_callers_collection(self):
        mine = RSSFeedCollection.from_array([{"url": "https://a.example.com/rss"}])
        response = RSSItemsResponse.success(mine)
        mine.clear()
        assert response.get_feeds().count() == 1
        assert response.get_feeds().read_only

    def test_empty_tree(self):
        response = RSSItemsResponse.from_api_data({})
        assert response.is_success()
        assert response.get_statistics()["has_feeds"] is False
