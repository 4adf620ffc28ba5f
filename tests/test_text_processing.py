"""
Unit tests for text processing: chunk_words.
"""

from ragchat.services.text_processing import chunk_words


class TestChunkWords:
    """Tests for chunk_words()."""

    def test_empty_returns_empty_list(self) -> None:
        assert chunk_words("") == []
        assert chunk_words("   \n\t ") == []

    def test_short_text_returns_single_chunk(self) -> None:
        assert chunk_words("Vacation policy: employees accrue 2 days/month.") == [
            "Vacation policy: employees accrue 2 days/month."
        ]

    def test_whitespace_is_collapsed_to_single_spaces(self) -> None:
        assert chunk_words("  one\n\ntwo\tthree  ", chunk_size=100) == ["one two three"]

    def test_packs_words_greedily(self) -> None:
        # "aaa bbb" is 7 chars; adding " ccc" would make 11 > 10
        assert chunk_words("aaa bbb ccc ddd", chunk_size=10) == ["aaa bbb", "ccc ddd"]

    def test_chunk_may_fill_bound_exactly(self) -> None:
        assert chunk_words("aaaa bbbbb cc", chunk_size=10) == ["aaaa bbbbb", "cc"]

    def test_oversized_word_becomes_its_own_chunk(self) -> None:
        long_word = "x" * 25
        assert chunk_words(f"aa {long_word} bb", chunk_size=10) == ["aa", long_word, "bb"]

    def test_oversized_first_word_produces_no_empty_chunk(self) -> None:
        chunks = chunk_words("y" * 12 + " z", chunk_size=10)
        assert chunks == ["y" * 12, "z"]
        assert "" not in chunks

    def test_reconstructs_word_sequence(self) -> None:
        words = [f"word{i}" * (i % 4 + 1) for i in range(300)]
        text = "\n".join(" ".join(words[i:i + 7]) for i in range(0, len(words), 7))
        chunks = chunk_words(text, chunk_size=80)
        assert " ".join(chunks).split() == text.split()

    def test_no_chunk_exceeds_bound_unless_single_word(self) -> None:
        text = " ".join(["alpha", "beta", "gamma" * 30, "delta"] * 50)
        for chunk in chunk_words(text, chunk_size=40):
            assert len(chunk) <= 40 or " " not in chunk

    def test_no_word_is_split(self) -> None:
        text = "employees accrue vacation days monthly according to tenure " * 20
        vocabulary = set(text.split())
        for chunk in chunk_words(text, chunk_size=33):
            assert set(chunk.split()) <= vocabulary

    def test_default_chunk_size_is_800(self) -> None:
        text = " ".join(["abcdefghi"] * 200)  # 1999 chars
        chunks = chunk_words(text)
        assert len(chunks) == 3
        assert all(len(c) <= 800 for c in chunks)
