"""Unit tests for payload and HTML normalizers."""

import logging

import pytest

from appstore_scraper.normalize import (
    clamp_score,
    clean_app,
    extract_screenshot_url,
    feed_entry_to_list_app,
    feed_entry_to_review,
    link_type_from_heading,
    parse_developer_id,
    parse_hints,
    parse_privacy,
    parse_ratings,
    parse_screenshots,
    parse_similar_entries,
    parse_version_history,
    to_int,
)
from appstore_scraper.payloads import HintsResponse, ListEntry, LookupResult, ReviewEntry


def _list_entry(**overrides) -> ListEntry:
    raw = {
        "id": {"label": "https://apps.apple.com/us/app/x/id553834731", "attributes": {"im:id": "553834731", "im:bundleId": "com.midasplayer.apps.candycrushsaga"}},
        "im:name": {"label": "Candy Crush Saga"},
        "im:image": [
            {"label": "https://example.com/53x53.png"},
            {"label": "https://example.com/100x100.png"},
        ],
        "im:price": {"label": "Get", "attributes": {"amount": "0.00000", "currency": "USD"}},
        "im:artist": {"label": "King", "attributes": {"href": "https://apps.apple.com/us/developer/king/id526656015?uo=2"}},
        "im:releaseDate": {"label": "2012-11-14T14:41:32-07:00"},
        "summary": {"label": "Match candies"},
        "category": {"attributes": {"im:id": "6014", "label": "Games"}},
        "link": {"attributes": {"rel": "alternate", "href": "https://apps.apple.com/us/app/candy-crush-saga/id553834731?uo=2"}},
    }
    raw.update(overrides)
    return ListEntry.model_validate(raw)


def _review_entry(rating) -> ReviewEntry:
    raw = {
        "id": {"label": "9001"},
        "author": {"name": {"label": "jo"}, "uri": {"label": "https://itunes.apple.com/us/reviews/id1"}},
        "im:version": {"label": "1.2.0"},
        "title": {"label": "Nice"},
        "content": {"label": "Works well"},
        "updated": {"label": "2024-03-01T10:00:00-07:00"},
    }
    if rating is not None:
        raw["im:rating"] = {"label": rating}
    return ReviewEntry.model_validate(raw)


class TestScores:
    @pytest.mark.parametrize(
        "label, expected",
        [
            ("4", 4), ("5", 5), ("0", 0), ("7", 5), ("-2", 0), ("abc", 0), ("", 0), (None, 0),
            ("4.0", 4), (" 3 stars", 3), ("+2", 2),
        ],
    )
    def test_clamp_score(self, label, expected):
        assert clamp_score(label) == expected

    def test_review_without_rating_scores_zero(self):
        review = feed_entry_to_review(_review_entry(None))
        assert review.score == 0
        assert review.user_name == "jo"
        assert review.version == "1.2.0"

    def test_review_keeps_zero_rating(self):
        assert feed_entry_to_review(_review_entry("0")).score == 0

    def test_review_decimal_rating_keeps_integer_part(self):
        assert feed_entry_to_review(_review_entry("4.0")).score == 4


class TestToInt:
    def test_zero_is_not_replaced(self):
        assert to_int("0", default=99) == 0

    def test_non_numeric_text_uses_default(self):
        assert to_int("12abc") == 0
        assert to_int(None) == 0


class TestDeveloperId:
    def test_parses_id_from_slugged_url(self):
        assert parse_developer_id("https://apps.apple.com/us/developer/identity-games/id284882218") == 284882218

    def test_ignores_query_string(self):
        assert parse_developer_id("https://apps.apple.com/us/developer/king/id526656015?uo=2") == 526656015

    def test_missing_id_is_zero(self):
        assert parse_developer_id("https://apps.apple.com/us/developer/king") == 0
        assert parse_developer_id(None) == 0


class TestListEntry:
    def test_maps_full_entry(self):
        app = feed_entry_to_list_app(_list_entry())
        assert app.id == 553834731
        assert app.app_id == "com.midasplayer.apps.candycrushsaga"
        assert app.icon == "https://example.com/100x100.png"
        assert app.free is True
        assert app.price == 0
        assert app.developer_id == 526656015
        assert app.genre == "Games"
        assert app.genre_id == 6014
        assert app.url.endswith("id553834731?uo=2")

    def test_single_image_object(self):
        app = feed_entry_to_list_app(_list_entry(**{"im:image": {"label": "https://example.com/only.png"}}))
        assert app.icon == "https://example.com/only.png"

    def test_textual_price_counts_as_free(self):
        entry = _list_entry(**{"im:price": {"label": "Free", "attributes": {"amount": "free", "currency": "USD"}}})
        app = feed_entry_to_list_app(entry)
        assert app.price == 0
        assert app.free is True

    def test_paid_app(self):
        entry = _list_entry(**{"im:price": {"label": "$2.99", "attributes": {"amount": "2.99000", "currency": "USD"}}})
        app = feed_entry_to_list_app(entry)
        assert app.price == pytest.approx(2.99)
        assert app.free is False

    def test_id_reads_leading_digits(self):
        app = feed_entry_to_list_app(_list_entry(id={"attributes": {"im:id": " 42 "}}))
        assert app.id == 42

    def test_missing_id_skipped(self):
        assert feed_entry_to_list_app(_list_entry(id={"label": "x"})) is None

    def test_unknown_developer_and_genre_are_zero(self):
        entry = _list_entry(**{"im:artist": {"label": "Someone"}, "category": None})
        app = feed_entry_to_list_app(entry)
        assert app.developer_id == 0
        assert app.genre_id == 0


class TestCleanApp:
    def test_sentinels_for_missing_fields(self):
        app = clean_app(LookupResult(kind="software", trackId=1))
        assert app.score == 0
        assert app.reviews == 0
        assert app.current_version_score == 0
        assert app.current_version_reviews == 0
        assert app.size == 0
        assert app.currency == "USD"
        assert app.free is True
        assert app.icon == ""
        assert app.histogram is None

    def test_maps_lookup_record(self):
        result = LookupResult.model_validate(
            {
                "kind": "software",
                "trackId": 553834731,
                "bundleId": "com.example.app",
                "trackName": "Example",
                "artworkUrl100": "https://example.com/100.png",
                "genreIds": ["6014", "7012", "bogus"],
                "fileSizeBytes": "123456",
                "price": 1.99,
                "currency": "EUR",
                "artistId": 42,
                "averageUserRating": 4.5,
                "userRatingCount": 1200,
            }
        )
        app = clean_app(result)
        assert app.icon == "https://example.com/100.png"
        assert app.genre_ids == [6014, 7012, 0]
        assert app.size == 123456
        assert app.free is False
        assert app.currency == "EUR"
        assert app.developer_id == 42
        assert app.score == 4.5
        assert app.reviews == 1200

    def test_prefers_large_artwork(self):
        result = LookupResult(trackId=1, artworkUrl512="big.png", artworkUrl100="small.png")
        assert clean_app(result).icon == "big.png"

    def test_idempotent(self):
        result = LookupResult(kind="software", trackId=7, trackName="Same", price=0.0)
        assert clean_app(result) == clean_app(result)


class TestHints:
    def test_string_array(self):
        data = HintsResponse.model_validate({"plist": {"dict": {"array": {"string": ["candy", "candy crush"]}}}})
        assert [s.term for s in parse_hints(data)] == ["candy", "candy crush"]

    def test_dict_array(self):
        tree = {
            "plist": {
                "dict": {
                    "array": {
                        "dict": [
                            {"key": ["term", "url"], "string": ["candy", "https://x"]},
                            {"key": ["term"], "string": "candy crush"},
                        ]
                    }
                }
            }
        }
        data = HintsResponse.model_validate(tree)
        assert [s.term for s in parse_hints(data)] == ["candy", "candy crush"]

    def test_single_dict(self):
        tree = {"plist": {"dict": {"array": {"dict": {"key": "term", "string": "solo"}}}}}
        data = HintsResponse.model_validate(tree)
        assert [s.term for s in parse_hints(data)] == ["solo"]

    def test_empty_array(self):
        data = HintsResponse.model_validate({"plist": {"dict": {"array": ""}}})
        assert parse_hints(data) == []

    def test_missing_plist(self):
        assert parse_hints(HintsResponse()) == []


class TestScreenshots:
    def test_picks_widest_and_normalizes_size(self):
        srcset = (
            "https://is1.mzstatic.com/image/a/230x0w.webp 230w, "
            "https://is1.mzstatic.com/image/a/600x1300bb.webp 600w, "
            "https://is1.mzstatic.com/image/a/300x650bb.webp 300w"
        )
        assert extract_screenshot_url(srcset) == "https://is1.mzstatic.com/image/a/392x696bb.webp"

    def test_keeps_extension_and_query(self):
        srcset = "https://is1.mzstatic.com/image/a/600x1300bb-60.JPG?v=2 600w"
        assert extract_screenshot_url(srcset) == "https://is1.mzstatic.com/image/a/392x696bb.jpg?v=2"

    def test_first_wins_on_equal_width(self):
        srcset = "https://x/first/1x1bb.png 100w, https://x/second/1x1bb.png 100w"
        assert extract_screenshot_url(srcset) == "https://x/first/392x696bb.png"

    def test_unrecognized_url_left_alone(self):
        assert extract_screenshot_url("https://x/image.gif 10w") == "https://x/image.gif"

    def test_empty_srcset(self):
        assert extract_screenshot_url("") is None

    def test_parse_shelves_and_dedupe(self):
        html = """
        <ul class="shelf-grid__list--grid-type-ScreenshotPhone">
          <li><picture><source type="image/webp" srcset="https://x/a/600x1300bb.webp 600w"></picture></li>
          <li><picture><source type="image/webp" srcset="https://x/a/300x650bb.webp 300w"></picture></li>
          <li><picture><source type="image/jpeg" srcset="https://x/a/600x1300bb.jpg 600w"></picture></li>
        </ul>
        <ul class="shelf-grid__list--grid-type-ScreenshotPad">
          <li><picture><source type="image/webp" srcset="https://x/p/2048x2732bb.webp 2048w"></picture></li>
        </ul>
        """
        shots = parse_screenshots(html)
        assert shots.screenshots == ["https://x/a/392x696bb.webp"]
        assert shots.ipad_screenshots == ["https://x/p/392x696bb.webp"]
        assert shots.appletv_screenshots == []


def _ratings_html(total, *bars) -> str:
    count = f'<div class="rating-count">{total} Ratings</div>' if total is not None else ""
    votes = "".join(f'<span class="vote"><span class="total">{n}</span></span>' for n in bars)
    return f"<div>{count}{votes}</div>"


class TestParseRatings:
    def test_five_bars_descending(self):
        result = parse_ratings(_ratings_html(100, 10, 20, 30, 25, 15))
        assert result.ratings == 100
        assert result.histogram == {5: 10, 4: 20, 3: 30, 2: 25, 1: 15}

    def test_extra_bars_ignored(self):
        result = parse_ratings(_ratings_html(15, 1, 2, 3, 4, 5, 99, 100))
        assert sorted(result.histogram) == [1, 2, 3, 4, 5]
        assert result.histogram == {5: 1, 4: 2, 3: 3, 2: 4, 1: 5}

    def test_missing_bars_are_zero(self):
        result = parse_ratings(_ratings_html(50, 10, 20, 20))
        assert result.histogram == {5: 10, 4: 20, 3: 20, 2: 0, 1: 0}

    def test_missing_count_is_zero(self):
        result = parse_ratings(_ratings_html(None, 1))
        assert result.ratings == 0
        assert result.histogram[5] == 1

    def test_sum_mismatch_only_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="appstore_scraper.normalize"):
            result = parse_ratings(_ratings_html(999, 1, 1, 1, 1, 1))
        assert result.ratings == 999
        assert "does not match" in caplog.text

    def test_matching_sum_does_not_warn(self, caplog):
        with caplog.at_level(logging.WARNING, logger="appstore_scraper.normalize"):
            parse_ratings(_ratings_html(5, 1, 1, 1, 1, 1))
        assert caplog.text == ""


class TestSimilar:
    HTML = """
    <html><body>
      <h2>Customers Also Bought</h2>
      <a href="https://apps.apple.com/us/app/foo/id111">App 1</a>
      <a href="https://apps.apple.com/us/app/bar/id222">App 2</a>
      <h3>More from this developer</h3>
      <a href="/us/app/baz/id333">App 3</a>
      <a href="/us/app/self/id999">Self</a>
      <h4>Ratings &amp; Reviews</h4>
      <a href="/us/app/foo/id111">App 1 again</a>
      <a href="/us/developer/king/id526656015">Developer</a>
    </body></html>
    """

    def test_entries_labelled_by_heading(self):
        entries = parse_similar_entries(self.HTML, exclude_id=999)
        assert entries == [
            (111, "customers-also-bought"),
            (222, "customers-also-bought"),
            (333, "more-by-developer"),
            (111, "other"),
        ]

    def test_links_before_any_heading_are_other(self):
        entries = parse_similar_entries('<body><a href="/us/app/x/id5">x</a></body>')
        assert entries == [(5, "other")]

    @pytest.mark.parametrize(
        "heading, expected",
        [
            ("You Might Also Like", "you-might-also-like"),
            ("  Similar Apps ", "similar-apps"),
            ("Related apps", "similar-apps"),
            ("More By Developer", "more-by-developer"),
            ("Information", "other"),
        ],
    )
    def test_heading_mapping(self, heading, expected):
        assert link_type_from_heading(heading) == expected


class TestPrivacy:
    def test_parses_dialog(self):
        html = """
        <dialog data-testid="dialog">
          <a data-test-id="external-link" aria-label="Developer's Privacy Policy" href="https://example.com/privacy">Privacy</a>
          <section class="purpose-section">
            <h3>Analytics</h3>
            <ul>
              <li class="purpose-category">
                <span class="category-title">Usage Data</span>
                <ul class="privacy-data-types"><li>Product Interaction</li><li>Advertising Data</li></ul>
              </li>
              <li class="purpose-category"><span class="category-title">Empty</span></li>
            </ul>
          </section>
        </dialog>
        """
        details = parse_privacy(html)
        assert details.privacy_policy_url == "https://example.com/privacy"
        assert len(details.privacy_types) == 1
        entry = details.privacy_types[0]
        assert entry.name == "Usage Data"
        assert entry.data_categories == ["Product Interaction", "Advertising Data"]
        assert entry.purposes == ["Analytics"]
        assert entry.description == "Used for Analytics"

    def test_no_dialog_is_empty(self):
        assert parse_privacy("<html><body><p>nothing</p></body></html>").is_empty


class TestVersionHistory:
    def test_articles_in_document_order(self):
        html = """
        <dialog data-testid="dialog">
          <article><h4>2.0.1</h4><time datetime="2024-05-02">May 2</time><p>Bug fixes</p></article>
          <article><h4>2.0.0</h4><time datetime="2024-04-01">Apr 1</time></article>
        </dialog>
        <dialog data-testid="dialog"><article><h4>Not a version</h4></article></dialog>
        """
        history = parse_version_history(html)
        assert [v.version_display for v in history] == ["2.0.1", "2.0.0"]
        assert history[0].release_date == "2024-05-02"
        assert history[0].release_notes == "Bug fixes"
        assert history[1].release_notes is None

    def test_no_dialog(self):
        assert parse_version_history("<html><body></body></html>") == []
