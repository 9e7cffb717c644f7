from sprintblog.services.reading_time import count_words, estimate_reading_time


def test_count_words_handles_contractions_and_cjk():
    assert count_words("Don't panic, it's **only** markdown.") == 5
    assert count_words("分布式系统 design") == 6


def test_estimate_rounds_up_to_whole_minutes():
    result = estimate_reading_time("word " * 450, words_per_minute=200)
    assert result.words == 450
    assert result.text == "3 min read"
    assert result.minutes == 2.25


def test_estimate_never_reports_zero_minutes():
    assert estimate_reading_time("").text == "1 min read"
    assert estimate_reading_time("short note").text == "1 min read"
