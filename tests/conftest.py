import pytest

from qbittorrent_sdk.transport import Transport


HASH_A = "a" * 40
HASH_B = "b" * 40
HASH_C = "c" * 40
HASH_D = "d" * 40

NOW = 1700000000


class FakeTransport(Transport):
    """Records every call and answers from a per-endpoint table."""

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    def send(self, method, endpoint, params=None, files=None):
        self.calls.append({"method": method, "endpoint": endpoint, "params": params, "files": files})
        response = self.responses.get(endpoint)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def last_call(self):
        return self.calls[-1]


@pytest.fixture
def raw_torrents():
    return [
        {
            "hash": HASH_A,
            "name": "Debian 12 netinst",
            "size": 661651456,
            "progress": 1.0,
            "state": "uploading",
            "dlspeed": 0,
            "upspeed": 51200,
            "ratio": 2.5,
            "category": "linux",
            "tags": "iso, debian",
            "priority": 0,
            "added_on": NOW - 86400,
            "eta": 8640000,
        },
        {
            "hash": HASH_B,
            "name": "Big Buck Bunny",
            "size": 276445467,
            "progress": 0.5,
            "state": "downloading",
            "dlspeed": 1048576,
            "upspeed": 2048,
            "ratio": 0.1,
            "category": "movies",
            "tags": "cc",
            "priority": 1,
            "added_on": NOW - 3600,
            "eta": 600,
        },
        {
            "hash": HASH_C,
            "name": "Arch Linux",
            "size": 1073741824,
            "progress": 0.25,
            "state": "stoppedDL",
            "ratio": 0.0,
            "category": "linux",
            "tags": "iso",
            "priority": 2,
            "added_on": NOW - 60,
        },
        {
            "hash": HASH_D,
            "name": "Broken torrent",
            "size": 1024,
            "progress": 0.0,
            "state": "missingFiles",
            "priority": 3,
            "added_on": NOW - 7200,
            "unknown_future_key": "kept",
        },
    ]


@pytest.fixture
def raw_search_results():
    return [
        {
            "fileName": "[Group] Ubuntu 24.04 Desktop ISO",
            "fileSize": 6114656256,
            "fileUrl": "magnet:?xt=urn:btih:" + HASH_A,
            "nbSeeders": 120,
            "nbLeechers": 30,
            "siteUrl": "https://tracker-one.example.org",
            "descrLink": "https://tracker-one.example.org/t/1",
            "engineName": "one",
            "pubDate": NOW - 3600,
            "category": "software",
        },
        {
            "fileName": "Ubuntu 22.04 Server",
            "fileSize": 2097152000,
            "fileUrl": "magnet:?xt=urn:btih:" + HASH_B,
            "nbSeeders": 10,
            "nbLeechers": 0,
            "siteUrl": "https://tracker-two.example.net",
            "descrLink": "https://tracker-two.example.net/view/2",
            "pubDate": NOW - 30 * 86400,
            "category": "software",
        },
        {
            "fileName": "ubuntu wallpapers",
            "fileSize": 52428800,
            "fileUrl": "https://tracker-two.example.net/dl/3.torrent",
            "nbSeeders": 0,
            "nbLeechers": 4,
            "siteUrl": "https://tracker-two.example.net",
            "descrLink": "https://tracker-two.example.net/view/3",
        },
    ]


@pytest.fixture
def raw_rss_items():
    return {
        "Linux": {
            "Distros": {
                "url": "https://distrowatch.example.com/rss",
                "uid": "{1}",
                "title": "Distro releases",
                "lastUpdate": NOW - 600,
                "nextUpdate": NOW - 60,
                "articles": [
                    {"id": "1", "title": "Debian 12.6", "isRead": True},
                    {"id": "2", "title": "Fedora 40", "isRead": False},
                    {"id": "3", "title": "Arch 2024.07", "torrentURL": "https://example.com/arch.torrent"},
                ],
            },
        },
        "News": {
            "url": "https://news.example.com/feed",
            "uid": "{2}",
            "hasError": True,
            "errorMessage": "Timed out",
            "isActive": False,
            "articles": [],
        },
    }


@pytest.fixture
def fake_transport():
    return FakeTransport()
