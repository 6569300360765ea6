import pytest

from textquiz import scorer
from textquiz.errors import InvalidInput


def test_normalize_strips_case_whitespace_and_punctuation():
    assert scorer.normalize("  Hello, World!  ") == "hello world"
    assert scorer.normalize("a.b,c!d?e;f:g") == "abcdefg"


def test_normalize_only_folds_ascii():
    assert scorer.normalize("ÀBC") == "Àbc"
    assert scorer.normalize("東京。") == "東京。"


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ("kitten", "sitting", 3),
        ("", "abc", 3),
        ("abc", "", 3),
        ("flaw", "lawn", 2),
        ("same", "same", 0),
    ],
)
def test_edit_distance(a, b, expected):
    assert scorer.edit_distance(a, b) == expected
    assert scorer.edit_distance(b, a) == expected


def test_similarity_is_symmetric():
    pairs = [("I like apple", "I like apples"), ("dog", "elephant"), ("abc", "")]
    for a, b in pairs:
        assert scorer.similarity(a, b) == scorer.similarity(b, a)


def test_similarity_of_two_empty_strings_is_one():
    assert scorer.similarity("", "") == 1.0
    assert scorer.similarity("?!", ".") == 1.0


def test_exact_match_after_punctuation_and_case():
    result = scorer.evaluate("Hello!", "hello")
    assert result.is_correct is True
    assert result.score == 100
    assert result.feedback == scorer.PERFECT_FEEDBACK


def test_sentence_with_trailing_period():
    result = scorer.evaluate("The cat sat.", "The cat sat")
    assert result.is_correct is True
    assert result.score == 100


def test_case_only_difference():
    assert scorer.evaluate("Bonjour", "bonjour").score == 100


def test_identity():
    for answer in ("photosynthesis", "東京", "It's raining."):
        result = scorer.evaluate(answer, answer)
        assert result.is_correct is True
        assert result.score == 100


def test_near_match_is_correct_with_proportional_score():
    result = scorer.evaluate("I like apple", "I like apples")
    assert result.is_correct is True
    assert result.score == 92
    assert "I like apples" in result.feedback


def test_distant_answer_is_incorrect():
    result = scorer.evaluate("dog", "elephant")
    assert result.is_correct is False
    assert result.score == 0
    assert "elephant" in result.feedback


def test_incorrect_answers_get_at_most_half_credit():
    # distance 2 over 5 characters: similarity 0.6
    result = scorer.evaluate("abcde", "abcxy")
    assert result.is_correct is False
    assert result.score == 30


def test_threshold_is_inclusive():
    # distance 3 over 10 characters: similarity exactly 0.7
    result = scorer.evaluate("abcdefghij", "abcdefgxyz")
    assert result.is_correct is True
    assert result.score == 70


def test_just_below_threshold():
    # 7 substitutions over 23 characters: similarity ~0.696
    reference = "abcdefghijklmnopqrstuvw"
    answer = "abcdefghijklmnop" + "xxxxxxx"
    assert scorer.edit_distance(answer, reference) == 7
    assert scorer.similarity(answer, reference) < scorer.PASS_THRESHOLD
    result = scorer.evaluate(answer, reference)
    assert result.is_correct is False
    assert result.score == 35


def test_answer_that_is_only_punctuation():
    result = scorer.evaluate("!!!", "abc")
    assert result.is_correct is False
    assert result.score == 0


@pytest.mark.parametrize(
    "user_answer, correct_answer",
    [("", "anything"), ("anything", ""), (None, "anything"), ("anything", None)],
)
def test_missing_answer_is_rejected(user_answer, correct_answer):
    with pytest.raises(InvalidInput):
        scorer.evaluate(user_answer, correct_answer)


def test_scores_are_bounded():
    pairs = [
        ("a", "zzzzzzzzzzzzzzzzzzzz"),
        ("zzzzzzzzzzzzzzzzzzzz", "a"),
        ("The quick brown fox", "the quick brown fox."),
        ("x", "x"),
        ("光合成", "こうごうせい"),
    ]
    for user_answer, correct_answer in pairs:
        assert 0 <= scorer.evaluate(user_answer, correct_answer).score <= 100


def test_closer_answers_never_score_lower():
    reference = "abcdefgh"
    answers = ["abcdefgh", "abcdefgx", "abcdefxx", "abcdexxx", "abcdxxxx", "xxxxxxxx"]
    scores = [scorer.similarity(a, reference) for a in answers]
    assert scores == sorted(scores, reverse=True)
