import pytest

from qbittorrent_sdk.exceptions import HydrationError
from qbittorrent_sdk.search_collection import SearchResultCollection, size_bucket

from conftest import NOW


@pytest.fixture
def results(raw_search_results):
    return SearchResultCollection.from_array(raw_search_results)


class TestSearchResultCollection:
    def test_hydration_error_has_index(self):
        with pytest.raises(HydrationError) as excinfo:
            SearchResultCollection.from_array([{"fileName": "ok"}, {"nbSeeders": "many"}])
        assert excinfo.value.index == 1

    def test_round_trip_keeps_api_keys(self, raw_search_results, results):
        for raw, dumped in zip(raw_search_results, results.to_array()):
            assert set(raw) <= set(dumped)

    def test_lookup(self, results):
        assert results.find_by_domain("two").count() == 2
        assert results.find_by_site_url("https://tracker-one.example.org").count() == 1
        assert results.find_by_category("software").count() == 2
        assert results.find_by_file_name("ubuntu", exact=False).count() == 3
        assert results.find_by_file_name("Ubuntu 22.04 Server").count() == 1

    def test_filters(self, results):
        assert results.filter_by_min_seeders(10).count() == 2
        assert results.filter_by_min_leechers(5).count() == 1
        assert results.filter_by_keywords(["SERVER"]).count() == 1
        assert results.filter_by_size(max_size=100 * 1024 * 1024).count() == 1
        assert results.filter_by_text("wallpapers").count() == 1
        assert results.filter_by_text("   ").count() == 3

    def test_views(self, results):
        assert results.get_with_seeders().count() == 2
        assert results.get_healthy().count() == 2
        assert results.get_popular().count() == 1
        assert results.get_recent(now=NOW).count() == 1
        assert results.get_large_files().count() == 2

    def test_sorting(self, results):
        assert results.sort_by_seeders().map(lambda r: r.nb_seeders) == [120, 10, 0]
        assert results.sort_by_size(descending=False).first().file_name == "ubuntu wallpapers"
        assert results.sort_by_score().first().rank == "Excellent"
        assert results.sort_by_time().first().pub_date == NOW - 3600
        assert results.sort_by_file_name().map(lambda r: r.formatted_file_name) == [
            "Ubuntu 22.04 Server", "Ubuntu 24.04 Desktop ISO", "ubuntu wallpapers",
        ]

    def test_aggregates(self, results):
        assert results.get_total_seeders() == 130
        assert results.get_total_leechers() == 34
        assert results.get_average_seeders() == pytest.approx(130 / 3)
        assert results.get_all_domains() == ["tracker-one.example.org", "tracker-two.example.net"]
        assert results.get_all_categories() == ["software"]
        assert len(results.get_all_site_urls()) == 2

    def test_grouping(self, results):
        assert {k: g.count() for k, g in results.group_by_size().items()} == {"1-10GB": 2, "<1GB": 1}
        assert {k: g.count() for k, g in results.group_by_health().items()} == {
            "Popular": 1, "Normal": 1, "No seeders": 1,
        }
        assert {k: g.count() for k, g in results.group_by_category().items()} == {
            "software": 2, "Uncategorized": 1,
        }
        assert set(results.group_by_domain()) == {"tracker-one.example.org", "tracker-two.example.net"}

    def test_size_bucket_edges(self):
        gib = 1024 ** 3
        assert size_bucket(gib - 1) == "<1GB"
        assert size_bucket(gib) == "1-10GB"
        assert size_bucket(100 * gib) == ">100GB"

    def test_formatted_summary(self, results):
        summary = results.get_formatted_summary(now=NOW)
        assert summary["search_summary"]["total_results"] == 3
        assert summary["size_summary"]["total_size"] == "7.7 GB"
        assert summary["peer_summary"]["seed_leech_ratio"] == 3.82
        assert summary["diversity_summary"]["unique_domains"] == 2

    def test_formatted_summary_without_leechers(self):
        summary = SearchResultCollection.empty().get_formatted_summary()
        assert summary["peer_summary"]["seed_leech_ratio"] == "∞"
        assert summary["size_summary"]["average_size"] == "0 B"
