import textwrap

import pytest
import requests

ENV_KEYS = (
    "RSS_FEED_URL",
    "AUTHOR_WHITELIST",
    "AUTHOR_BLACKLIST",
    "FETCH_TIMEOUT",
    "LOG_LEVEL",
)

FEED_XML = textwrap.dedent(
    """\
    <?xml version="1.0" encoding="UTF-8"?>
    <rss version="2.0" xmlns:dc="http://purl.org/dc/elements/1.1/">
      <channel>
        <title>Instapundit</title>
        <link>https://instapundit.com</link>
        <description>Daily commentary</description>
        <language>en-US</language>
        <item>
          <title>First post</title>
          <link>https://instapundit.com/1</link>
          <description>Something &lt;b&gt;bold&lt;/b&gt;</description>
          <dc:creator>Glenn Reynolds</dc:creator>
          <pubDate>Mon, 01 Jan 2024 10:00:00 +0000</pubDate>
          <guid isPermaLink="false">post-1</guid>
          <category>Politics</category>
        </item>
        <item>
          <title>Second post</title>
          <link>https://instapundit.com/2</link>
          <description>Another take</description>
          <dc:creator>Ed Morrissey</dc:creator>
          <pubDate>Mon, 01 Jan 2024 11:00:00 +0000</pubDate>
          <guid isPermaLink="false">post-2</guid>
        </item>
      </channel>
    </rss>
    """
)


class FakeResponse:
    def __init__(self, content=b"", status_code=200):
        self.content = content
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(
                f"{self.status_code} Client Error for url", response=self
            )


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep process-wide filter settings out of the tests."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def feed_xml():
    return FEED_XML


@pytest.fixture
def fake_get(monkeypatch):
    """Route requests.get to a canned response and record the calls."""
    calls = []

    def install(content=FEED_XML.encode("utf-8"), status_code=200, exc=None):
        def _get(url, timeout=None, headers=None):
            calls.append({"url": url, "timeout": timeout, "headers": headers})
            if exc is not None:
                raise exc
            return FakeResponse(content, status_code)

        monkeypatch.setattr(requests, "get", _get)
        return calls

    return install
