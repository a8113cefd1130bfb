"""Tests for segment boundary detection."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from audio_linguist import PreconditionError, SegmentDetector, Token, detect, is_marker
from audio_linguist.detector import ABSORPTION_WINDOW, DEFAULT_MIN_SEGMENT_DURATION


def make_tokens(*entries):
    """Build tokens from (text, start, end) tuples."""
    return [Token(text, start, end) for text, start, end in entries]


@st.composite
def token_sequences(draw):
    """Non-overlapping tokens ordered by start, mixing markers and words.

    Times are whole centiseconds so that gaps are exact.
    """
    specs = draw(st.lists(
        st.tuples(
            st.one_of(
                st.from_regex(r"[0-9]{1,4}", fullmatch=True),
                st.sampled_from(["hello", "world", "2nd", "one", "", "a1"]),
            ),
            st.integers(min_value=0, max_value=1500),
            st.integers(min_value=0, max_value=300),
        ),
        max_size=40,
    ))
    tokens = []
    cursor = 0
    for text, gap, length in specs:
        start = cursor + gap
        end = start + length
        tokens.append(Token(text, start / 100, end / 100))
        cursor = end
    return tokens


class TestIsMarker:
    """Test marker recognition."""

    @pytest.mark.parametrize("text", ["0", "7", "105", "007", " 42 ", "\t3\n"])
    def test_digit_strings_are_markers(self, text):
        """Test all-digit strings, after trimming, are markers."""
        assert is_marker(text)

    @pytest.mark.parametrize("text", ["", " ", "2nd", "a1", "1.5", "-3", "1 2", "٣", "²"])
    def test_other_strings_are_not_markers(self, text):
        """Test mixed, empty and non-ASCII digit strings are not markers."""
        assert not is_marker(text)

    @given(st.text(max_size=8))
    def test_matches_ascii_digit_definition(self, text):
        """Test is_marker agrees with a character-by-character definition."""
        trimmed = text.strip()
        expected = len(trimmed) > 0 and all(c in "0123456789" for c in trimmed)

        assert is_marker(text) == expected


class TestSegmentDetectorInitialization:
    """Test SegmentDetector parameter validation."""

    def test_default_min_duration(self):
        """Test the default minimum duration."""
        assert SegmentDetector().min_segment_duration == DEFAULT_MIN_SEGMENT_DURATION

    def test_int_min_duration_accepted(self):
        """Test integer durations are stored as float."""
        detector = SegmentDetector(3)

        assert detector.min_segment_duration == 3.0
        assert isinstance(detector.min_segment_duration, float)

    @pytest.mark.parametrize("value", [0, -1.0])
    def test_non_positive_min_duration(self, value):
        """Test non-positive minimum duration raises PreconditionError."""
        with pytest.raises(PreconditionError, match="must be positive"):
            SegmentDetector(value)

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_min_duration(self, value):
        """Test NaN and infinite minimum durations raise PreconditionError."""
        with pytest.raises(PreconditionError, match="must be finite"):
            SegmentDetector(value)

    def test_nan_min_duration_in_detect(self):
        """Test the detect helper rejects NaN instead of keeping every segment."""
        tokens = make_tokens(("7", 0.0, 0.3), ("8", 0.4, 0.7))

        with pytest.raises(PreconditionError):
            detect(tokens, float("nan"))

    @pytest.mark.parametrize("value", ["2.0", None, True])
    def test_non_numeric_min_duration(self, value):
        """Test non-numeric minimum duration raises TypeError."""
        with pytest.raises(TypeError, match="must be numeric"):
            SegmentDetector(value)


class TestDetect:
    """Test the detection algorithm on hand-written transcripts."""

    def test_single_segment(self):
        """Test a marker followed by words forms one segment."""
        tokens = make_tokens(("105", 0.0, 0.4), ("hello", 0.5, 1.0), ("world", 1.1, 2.6))

        segments = detect(tokens, 2.0)

        assert len(segments) == 1
        segment = segments[0]
        assert segment.id == 1
        assert segment.start == 0.0
        assert segment.end == 2.6
        assert segment.marker == 105
        assert segment.text == "105 hello world"
        assert len(segment.tokens) == 3

    def test_short_segments_dropped(self):
        """Test consecutive bare markers are both dropped."""
        tokens = make_tokens(("7", 0.0, 0.3), ("8", 0.4, 0.7))

        assert detect(tokens, 2.0) == []

    def test_empty_transcript(self):
        """Test no tokens gives no segments."""
        assert detect([], 2.0) == []

    def test_words_without_marker(self):
        """Test words before any marker are discarded."""
        tokens = make_tokens(("hello", 0.0, 1.0), ("world", 1.0, 4.0))

        assert detect(tokens) == []

    def test_leading_words_ignored(self):
        """Test words before the first marker do not join its segment."""
        tokens = make_tokens(
            ("intro", 0.0, 1.0),
            ("1", 1.5, 1.8),
            ("bonjour", 2.0, 4.0),
        )

        segments = detect(tokens)

        assert len(segments) == 1
        assert segments[0].start == 1.5
        assert segments[0].text == "1 bonjour"

    def test_marker_closes_previous_segment(self):
        """Test a new marker closes and emits the open segment."""
        tokens = make_tokens(
            ("1", 0.0, 0.5),
            ("hola", 0.6, 3.0),
            ("2", 3.5, 4.0),
            ("adios", 4.1, 6.0),
        )

        segments = detect(tokens)

        assert [s.marker for s in segments] == [1, 2]
        assert [s.id for s in segments] == [1, 2]
        assert segments[0].end == 3.0
        assert segments[1].start == 3.5

    def test_ids_count_only_kept_segments(self):
        """Test ids are consecutive even when segments are dropped."""
        tokens = make_tokens(
            ("1", 0.0, 0.5),
            ("long", 0.6, 3.0),
            ("2", 3.1, 3.4),
            ("3", 4.0, 4.5),
            ("long", 4.6, 7.0),
        )

        segments = detect(tokens)

        assert [(s.id, s.marker) for s in segments] == [(1, 1), (2, 3)]

    def test_word_past_window_closes_segment(self):
        """Test a word starting ABSORPTION_WINDOW after the marker ends the segment."""
        tokens = make_tokens(
            ("4", 0.0, 0.5),
            ("near", 1.0, 3.0),
            ("far", ABSORPTION_WINDOW, ABSORPTION_WINDOW + 1.0),
            ("later", ABSORPTION_WINDOW + 2.0, ABSORPTION_WINDOW + 3.0),
        )

        segments = detect(tokens)

        assert len(segments) == 1
        assert segments[0].end == 3.0
        assert segments[0].text == "4 near"

    def test_word_just_inside_window_absorbed(self):
        """Test a word starting just before the window edge is absorbed."""
        tokens = make_tokens(
            ("4", 0.0, 0.5),
            ("edge", 9.99, 11.0),
        )

        segments = detect(tokens)

        assert segments[0].end == 11.0
        assert segments[0].duration > ABSORPTION_WINDOW

    def test_window_measured_from_marker_start(self):
        """Test the window counts from the marker onset, not the last word."""
        tokens = make_tokens(
            ("9", 2.0, 2.2),
            ("a", 4.0, 6.0),
            ("b", 7.0, 9.0),
            ("c", 11.9, 12.5),
            ("d", 12.0, 13.0),
        )

        segments = detect(tokens)

        assert segments[0].text == "9 a b c"
        assert segments[0].end == 12.5

    def test_short_segment_closed_by_far_word_dropped(self):
        """Test the minimum duration applies when the window closes a segment."""
        tokens = make_tokens(
            ("5", 0.0, 0.5),
            ("far", 20.0, 21.0),
        )

        assert detect(tokens) == []

    def test_marker_after_far_word_opens_segment(self):
        """Test detection resumes at the next marker after a far word."""
        tokens = make_tokens(
            ("1", 0.0, 0.5),
            ("x", 1.0, 3.0),
            ("far", 15.0, 16.0),
            ("stray", 16.5, 17.0),
            ("2", 18.0, 18.5),
            ("y", 19.0, 21.0),
        )

        segments = detect(tokens)

        assert [s.text for s in segments] == ["1 x", "2 y"]

    def test_segment_exactly_min_duration_kept(self):
        """Test a segment of exactly the minimum duration is kept."""
        tokens = make_tokens(("3", 1.0, 1.5), ("ok", 2.0, 3.0))

        assert len(detect(tokens, 2.0)) == 1

    def test_leading_zeros_parsed(self):
        """Test "007" opens a segment with marker 7 and keeps its text."""
        tokens = make_tokens(("007", 0.0, 0.5), ("agent", 0.5, 2.5))

        segment = detect(tokens)[0]

        assert segment.marker == 7
        assert segment.text == "007 agent"

    def test_zero_is_a_marker(self):
        """Test "0" opens a segment."""
        tokens = make_tokens(("0", 0.0, 0.5), ("zero", 0.5, 2.5))

        assert detect(tokens)[0].marker == 0

    def test_mixed_token_is_absorbed(self):
        """Test tokens like "2nd" are words, not markers."""
        tokens = make_tokens(("1", 0.0, 0.5), ("2nd", 0.6, 1.0), ("place", 1.1, 2.5))

        segments = detect(tokens)

        assert len(segments) == 1
        assert segments[0].text == "1 2nd place"

    def test_blank_token_extends_without_text(self):
        """Test a blank token extends the segment but adds no text."""
        tokens = make_tokens(("1", 0.0, 0.5), ("word", 0.6, 1.0), ("", 1.0, 2.5))

        segment = detect(tokens)[0]

        assert segment.end == 2.5
        assert segment.text == "1 word"

    def test_marker_text_trimmed(self):
        """Test surrounding whitespace is trimmed from token texts."""
        tokens = make_tokens((" 12 ", 0.0, 0.5), (" hi ", 0.5, 2.5))

        assert detect(tokens)[0].text == "12 hi"

    def test_accepts_generator(self):
        """Test tokens may be any iterable."""
        tokens = make_tokens(("1", 0.0, 0.5), ("a", 0.5, 3.0))

        assert len(detect(token for token in tokens)) == 1

    def test_detector_is_reusable(self):
        """Test a detector carries no state between calls."""
        detector = SegmentDetector(1.0)
        first = make_tokens(("1", 0.0, 0.5), ("a", 0.5, 3.0))
        second = make_tokens(("2", 0.0, 0.5), ("b", 0.5, 3.0))

        detector.detect(first)
        segments = detector.detect(second)

        assert [(s.id, s.marker) for s in segments] == [(1, 2)]


class TestDetectProperties:
    """Property-based tests of detection invariants."""

    @settings(max_examples=200)
    @given(token_sequences(), st.sampled_from([1.0, 2.0, 3.5, 5.0]))
    def test_segments_meet_minimum_duration(self, tokens, min_duration):
        """Test every segment lasts at least the minimum duration."""
        for segment in detect(tokens, min_duration):
            assert segment.end - segment.start >= min_duration

    @settings(max_examples=200)
    @given(token_sequences())
    def test_segments_ordered_and_disjoint(self, tokens):
        """Test consecutive segments do not overlap."""
        segments = detect(tokens, 1.0)

        for current, following in zip(segments, segments[1:]):
            assert current.end <= following.start

    @settings(max_examples=200)
    @given(token_sequences())
    def test_ids_consecutive_from_one(self, tokens):
        """Test ids run 1, 2, 3, ..."""
        segments = detect(tokens, 1.0)

        assert [s.id for s in segments] == list(range(1, len(segments) + 1))

    @given(token_sequences())
    def test_segments_start_at_markers(self, tokens):
        """Test every segment opens with a marker token and parses it."""
        for segment in detect(tokens, 1.0):
            first = segment.tokens[0]
            assert is_marker(first.text)
            assert segment.start == first.start
            assert segment.marker == int(first.text.strip())

    @given(token_sequences())
    def test_absorbed_words_within_window(self, tokens):
        """Test absorbed words start less than ABSORPTION_WINDOW after the marker."""
        for segment in detect(tokens, 1.0):
            for token in segment.tokens[1:]:
                assert not is_marker(token.text)
                assert token.start - segment.start < ABSORPTION_WINDOW

    @given(token_sequences())
    def test_deterministic(self, tokens):
        """Test repeated detection gives identical descriptors."""
        assert detect(tokens, 2.0) == detect(tokens, 2.0)
