"""Decoding and scanning of WAH2 word streams.

These helpers read words produced by :mod:`xsqz.wah`. A stream can be
decoded whole, or scanned until a given number of bits has been covered,
which is how a stream holding several consecutive encodings is walked.
"""

from __future__ import annotations

from typing import Iterator, Sequence

from xsqz.wah import _Layout, _layout


def _expand(word: int, layout: _Layout) -> list[bool]:
    """Return the bits that a single WAH2 word stands for."""
    if word & layout.high_bit:
        length = (word & layout.max_counter) * layout.payload
        return [bool(word & layout.count_one_bit)] * length
    return [bool((word >> shift) & 1) for shift in range(layout.payload)]


def _covered(word: int, layout: _Layout) -> int:
    """Return how many bits a single WAH2 word covers."""
    if word & layout.high_bit:
        return (word & layout.max_counter) * layout.payload
    return layout.payload


def _ones(word: int, layout: _Layout) -> int:
    """Return how many set bits a single WAH2 word stands for."""
    if word & layout.high_bit:
        if word & layout.count_one_bit:
            return (word & layout.max_counter) * layout.payload
        return 0
    return bin(word & layout.all_bits_set).count("1")


def _span(words: Sequence[int], size: int, layout: _Layout) -> Iterator[int]:
    """Yield words from the start of ``words`` until ``size`` bits are covered."""
    if size < 0:
        raise ValueError("size must not be negative")
    position = 0
    it = iter(words)
    while position < size:
        try:
            word = next(it)
        except StopIteration:
            raise ValueError(
                f"WAH stream ends after {position} bits, {size} were requested"
            ) from None
        position += _covered(word, layout)
        yield word


def wah_decode2(words: Sequence[int], word_bits: int = 8) -> list[bool]:
    """Decode every word of a WAH2 stream, padding bits included."""
    layout = _layout(word_bits)
    bits: list[bool] = []
    for word in words:
        bits.extend(_expand(word, layout))
    return bits


def wah2_count_ones(words: Sequence[int], size: int, word_bits: int = 16) -> int:
    """Count set bits in the words needed to cover ``size`` bits.

    Whole words are counted, so a counter reaching past ``size`` adds all
    of its bits.
    """
    layout = _layout(word_bits)
    return sum(_ones(word, layout) for word in _span(words, size, layout))


def wah2_extract(words: Sequence[int], size: int, word_bits: int = 16) -> list[bool]:
    """Decode the first ``size`` bits of a WAH2 stream."""
    layout = _layout(word_bits)
    bits: list[bool] = []
    for word in _span(words, size, layout):
        bits.extend(_expand(word, layout))
    return bits[:size]


def wah2_words_spanned(words: Sequence[int], size: int, word_bits: int = 16) -> int:
    """Return how many words must be read to cover ``size`` bits."""
    layout = _layout(word_bits)
    return sum(1 for _ in _span(words, size, layout))


def format_wah2_word(word: int, word_bits: int = 16) -> str:
    """Describe one WAH2 word.

    A counter reads ``<bits>*<value>``; a literal is shown as its payload
    bits, most significant first.
    """
    layout = _layout(word_bits)
    if word & layout.high_bit:
        value = "1" if word & layout.count_one_bit else "0"
        return f"{(word & layout.max_counter) * layout.payload}*{value}"
    return format(word & layout.all_bits_set, f"0{layout.payload}b")