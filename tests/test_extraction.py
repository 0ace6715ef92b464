from dsa_tracker.services.external.extraction import (
    extract_labeled_number,
    extract_number,
    extract_text,
    find_number_by_range,
    number_candidates,
    parse_document,
)


def test_extract_number_uses_first_matching_selector():
    doc = parse_document('<div id="b">Rating: 1,234 pts</div>')
    assert extract_number(doc, ["#a", "#b"]) == 1234


def test_extract_number_prefers_earlier_selector():
    doc = parse_document('<span class="max">2,001</span><span class="cur">1500</span>')
    assert extract_number(doc, [".cur", ".max"]) == 1500


def test_extract_number_skips_match_without_digits():
    doc = parse_document('<p class="rating">unrated</p><p class="fallback">Rank 42</p>')
    assert extract_number(doc, [".rating", ".fallback"]) == 42


def test_extract_number_none_when_nothing_matches():
    doc = parse_document("<p>nothing to see</p>")
    assert extract_number(doc, ["#a", ".b"]) is None


def test_extract_number_tolerates_bad_selector():
    doc = parse_document('<p class="ok">7</p>')
    assert extract_number(doc, ["[[[", ".ok"]) == 7


def test_extract_text_skips_blank_matches():
    doc = parse_document('<span class="star">   </span><div class="stars">3★</div>')
    assert extract_text(doc, [".star", ".stars"]) == "3★"
    assert extract_text(doc, [".missing"]) is None


def test_extract_labeled_number_reads_badge_markup():
    doc = parse_document("<ul><li>EASY (16)</li><li>MEDIUM (51)</li></ul>")
    assert extract_labeled_number(doc, "medium") == 51
    assert extract_labeled_number(doc, "Easy") == 16


def test_extract_labeled_number_spaces_inside_parens():
    doc = parse_document("<div><span>Hard</span> <span>( 5 )</span></div>")
    assert extract_labeled_number(doc, "hard") == 5


def test_extract_labeled_number_none_without_label():
    doc = parse_document("<p>Problems (12)</p>")
    assert extract_labeled_number(doc, "medium") is None


def test_extract_labeled_number_exclude_word():
    doc = parse_document("<p>BASIC (3) EASY (16)</p>")
    assert extract_labeled_number(doc, "easy", exclude="basic") is None
    assert extract_labeled_number(doc, "easy") == 16


def test_number_candidates_pairs_numbers_with_context():
    doc = parse_document(
        "<div><span>Coding Score</span><span>279</span></div>"
        "<div><span>Streak</span><span>12</span></div>"
    )
    candidates = number_candidates(doc)
    assert [n for n, _ in candidates] == [279, 12]
    assert number_candidates(doc, "coding score")[0][0] == 279


def test_find_number_by_range():
    candidates = [(5, "a"), (75, "problem solved"), (279, "coding score")]
    assert find_number_by_range(candidates, 10, 100) == 75
    assert find_number_by_range(candidates, 1000, 2000) is None
    assert find_number_by_range([], 0, 10) is None


def test_number_candidates_ignore_joined_sibling_numbers():
    doc = parse_document("<section><div><b>3</b><b>16</b></div></section>")
    assert sorted(n for n, _ in number_candidates(doc)) == [3, 16]
