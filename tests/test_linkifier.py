from __future__ import annotations

import re
import time
from concurrent.futures import ThreadPoolExecutor

from core.config import SiteConfig
from core.link_rules import MatchRule, RuleAction, build_rules
from core.linkifier import LinkEdit, Linkifier, collect_edits, parse_message, reconstruct, resolve_segments
from core.models import BookRef, BookshelfRef, PreviewSegment, TextSegment


def test_book_link_between_words() -> None:
    assert parse_message("check /books/42 now") == [
        TextSegment("check "),
        PreviewSegment(BookRef(42)),
        TextSegment(" now"),
    ]


def test_book_link_with_site_domain_variants() -> None:
    for prefix in (
        "sirened.com",
        "www.sirened.com",
        "http://sirened.com",
        "https://www.sirened.com",
        "HTTPS://Sirened.com",
    ):
        segments = parse_message(f"look {prefix}/books/7")
        assert segments == [TextSegment("look "), PreviewSegment(BookRef(7))], prefix


def test_book_link_at_message_boundaries() -> None:
    assert parse_message("/books/5") == [PreviewSegment(BookRef(5))]
    assert parse_message("/books/5 is great") == [PreviewSegment(BookRef(5)), TextSegment(" is great")]
    assert parse_message("read\n/books/5") == [TextSegment("read\n"), PreviewSegment(BookRef(5))]


def test_book_link_needs_whitespace_boundaries() -> None:
    assert parse_message("see /books/5.") == [TextSegment("see /books/5.")]
    assert parse_message("(/books/5)") == [TextSegment("(/books/5)")]


def test_bookshelf_link_is_decoded() -> None:
    segments = parse_message("/book-shelf/share?username=al%20ice&shelfname=faves")
    assert segments == [PreviewSegment(BookshelfRef(username="al ice", shelf_name="faves"))]


def test_bookshelf_link_with_domain_and_unicode_name() -> None:
    segments = parse_message(
        "my shelf https://sirened.com/book-shelf/share?username=bob&shelfname=caf%C3%A9 :)"
    )
    assert segments == [
        TextSegment("my shelf "),
        PreviewSegment(BookshelfRef(username="bob", shelf_name="cafÃ©")),
        TextSegment(" :)"),
    ]


def test_malformed_bookshelf_link_degrades_to_text() -> None:
    message = "see /book-shelf/share?username=%E0%A4%A&shelfname=x ok"
    assert parse_message(message) == [TextSegment(message)]

    invalid_utf8 = "see /book-shelf/share?username=%FF&shelfname=x ok"
    assert parse_message(invalid_utf8) == [TextSegment(invalid_utf8)]


def test_external_url_is_stripped() -> None:
    assert parse_message("see https://example.com/x for more") == [
        TextSegment("see "),
        TextSegment(" for more"),
    ]


def test_bare_www_url_is_stripped() -> None:
    assert parse_message("go to www.example.org now") == [TextSegment("go to "), TextSegment(" now")]


def test_bare_site_domain_is_preserved() -> None:
    assert parse_message("sirened.com") == [TextSegment("sirened.com")]
    assert parse_message("I love sirened.com so much") == [TextSegment("I love sirened.com so much")]


def test_unrecognized_site_url_passes_through() -> None:
    message = "about page https://sirened.com/about and https://www.sirened.com"
    assert parse_message(message) == [TextSegment(message)]


def test_lookalike_domains_are_stripped() -> None:
    assert parse_message("a https://sirened.com.evil.io/books/1 b") == [TextSegment("a "), TextSegment(" b")]
    assert parse_message("a https://evilsirened.com/x b") == [TextSegment("a "), TextSegment(" b")]


def test_unparseable_external_urls_are_stripped() -> None:
    assert parse_message("see https://evil.com／scam now") == [TextSegment("see "), TextSegment(" now")]
    assert parse_message("see http://[evil.com/x now") == [TextSegment("see "), TextSegment(" now")]


def test_external_book_path_is_not_a_preview() -> None:
    assert parse_message("x https://other.com/books/3") == [TextSegment("x ")]


def test_plain_comment_is_a_single_segment() -> None:
    assert parse_message("just a plain comment") == [TextSegment("just a plain comment")]


def test_empty_and_whitespace_input() -> None:
    assert parse_message("") == [TextSegment("")]
    assert parse_message("   \n ") == [TextSegment("   \n ")]


def test_message_with_only_external_url() -> None:
    assert parse_message("https://example.com") == [TextSegment("")]


def test_multiple_book_links_resolve_independently() -> None:
    segments = parse_message("/books/1 /books/2 and /books/1")
    assert segments == [
        PreviewSegment(BookRef(1)),
        TextSegment(" "),
        PreviewSegment(BookRef(2)),
        TextSegment(" and "),
        PreviewSegment(BookRef(1)),
    ]


def test_mixed_links_keep_document_order() -> None:
    message = (
        "shelf /book-shelf/share?username=ann&shelfname=sci-fi then /books/9 "
        "skip http://spam.example/buy keep sirened.com"
    )
    assert parse_message(message) == [
        TextSegment("shelf "),
        PreviewSegment(BookshelfRef(username="ann", shelf_name="sci-fi")),
        TextSegment(" then "),
        PreviewSegment(BookRef(9)),
        TextSegment(" skip "),
        TextSegment(" keep sirened.com"),
    ]


def test_unicode_outside_links_is_preserved() -> None:
    message = "hÃ©llo ð /books/3 â"
    segments = parse_message(message)
    assert segments == [TextSegment("hÃ©llo ð "), PreviewSegment(BookRef(3)), TextSegment(" â")]
    assert reconstruct(segments, marker="/books/3") == message


def test_reconstruct_matches_input_minus_stripped_urls() -> None:
    message = "a  /books/4\t https://x.io/y  b"
    segments = parse_message(message)
    assert reconstruct(segments, marker="<>") == "a  <>\t   b"


def test_stripping_is_idempotent() -> None:
    message = "a https://x.com/1 b www.y.org c sirened.com d"
    once = reconstruct(parse_message(message))
    twice = reconstruct(parse_message(once))
    assert once == "a  b  c sirened.com d"
    assert twice == once


def test_custom_site_domain() -> None:
    site = SiteConfig(domain="books.example")
    assert parse_message("https://books.example/books/8", site=site) == [PreviewSegment(BookRef(8))]
    assert parse_message("x https://sirened.com/books/8", site=site) == [TextSegment("x ")]


def test_collect_edits_numbers_previews_left_to_right() -> None:
    text = "/book-shelf/share?username=a&shelfname=b /books/2"
    edits, bindings = collect_edits(text, build_rules())
    assert [edit.index for edit in edits] == [0, 1]
    assert bindings == [BookshelfRef(username="a", shelf_name="b"), BookRef(2)]


def test_resolver_keeps_unresolvable_placeholder_as_text() -> None:
    text = "x /books/1"
    edits = [LinkEdit(2, 10, RuleAction.PREVIEW, index=5)]
    assert resolve_segments(text, edits, []) == [TextSegment("x /books/1")]


def test_linkifier_never_raises() -> None:
    def explode(match: re.Match) -> None:
        raise RuntimeError("boom")

    linkifier = Linkifier([MatchRule(name="boom", pattern=re.compile(r"x"), extract=explode)])
    assert linkifier.parse("a x b") == [TextSegment("a x b")]


def test_concurrent_parses_are_independent() -> None:
    linkifier = Linkifier(build_rules())
    messages = [f"book /books/{number} and https://ads.example/{number}" for number in range(50)]

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(linkifier.parse, messages))

    assert results == [linkifier.parse(message) for message in messages]
    assert results[7][1] == PreviewSegment(BookRef(7))


def test_many_links_parse_in_linear_time() -> None:
    message = " ".join(f"/books/{number} https://ads.example/{number}" for number in range(10000))

    started = time.perf_counter()
    segments = parse_message(message)
    elapsed = time.perf_counter() - started

    previews = [segment for segment in segments if isinstance(segment, PreviewSegment)]
    assert len(previews) == 10000
    assert previews[-1] == PreviewSegment(BookRef(9999))
    assert elapsed < 5.0
