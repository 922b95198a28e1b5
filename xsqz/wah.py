"""Word Aligned Hybrid (WAH2) encoding of bit vectors.

Each word of ``word_bits`` bits is either a literal or a counter. When the
high bit is clear, the remaining ``word_bits - 1`` bits are copied out, the
least significant bit first. When the high bit is set the word is a counter:
the next bit gives the repeated value and the remaining bits give the number
of ``word_bits - 1`` bit blocks that repeat it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, NamedTuple, Sequence

from xsqz.genotype import gt_allele

VALID_WORD_BITS = (8, 16, 32, 64)


class _Layout(NamedTuple):
    payload: int
    high_bit: int
    count_one_bit: int
    max_counter: int
    all_bits_set: int
    max_encode_0: int
    max_encode_1: int


def _layout(word_bits: int) -> _Layout:
    if word_bits not in VALID_WORD_BITS:
        raise ValueError(f"word_bits must be one of {VALID_WORD_BITS}, got {word_bits}")
    payload = word_bits - 1
    high_bit = 1 << payload
    count_one_bit = high_bit >> 1
    full = (1 << word_bits) - 1
    return _Layout(
        payload=payload,
        high_bit=high_bit,
        count_one_bit=count_one_bit,
        max_counter=count_one_bit - 1,
        all_bits_set=high_bit - 1,
        max_encode_0=full & ~count_one_bit,
        max_encode_1=full,
    )


class _WahWriter:
    """Accumulates literal words and folds runs into counters."""

    def __init__(self, layout: _Layout) -> None:
        self._layout = layout
        self._words: list[int] = []
        self._zeros = 0
        self._ones = 0

    def _flush_ones(self) -> None:
        if self._ones:
            lay = self._layout
            self._words.append(lay.high_bit | lay.count_one_bit | self._ones)
            self._ones = 0

    def _flush_zeros(self) -> None:
        if self._zeros:
            self._words.append(self._layout.high_bit | self._zeros)
            self._zeros = 0

    def push(self, word: int) -> None:
        lay = self._layout
        if word == 0:
            self._flush_ones()
            if self._zeros == lay.max_counter:
                self._words.append(lay.max_encode_0)
                self._zeros = 0
            self._zeros += 1
        elif word == lay.all_bits_set:
            self._flush_zeros()
            if self._ones == lay.max_counter:
                self._words.append(lay.max_encode_1)
                self._ones = 0
            self._ones += 1
        else:
            self._flush_ones()
            self._flush_zeros()
            self._words.append(word)

    def finish(self) -> list[int]:
        self._flush_zeros()
        self._flush_ones()
        return self._words


def _encode_bits(bits: Sequence[bool], layout: _Layout) -> list[int]:
    writer = _WahWriter(layout)
    payload = layout.payload
    for start in range(0, len(bits), payload):
        chunk = bits[start:start + payload]
        word = 0
        for offset, bit in enumerate(chunk):
            if bit:
                word |= 1 << offset
        writer.push(word)
    return writer.finish()


@dataclass(frozen=True)
class WahEncoding:
    """WAH words of a genotype line plus what was learnt while encoding it."""

    words: list[int]
    alt_allele_count: int
    has_missing: bool


def wah_encode2(bits: Iterable[bool], word_bits: int = 8) -> list[int]:
    """Encode a bit vector as WAH2 words, padding the last block with zeros."""
    return _encode_bits([bool(b) for b in bits], _layout(word_bits))


def wah_encode2_genotypes(
    gt_array: Sequence[int],
    alt_allele: int,
    order: Sequence[int],
    word_bits: int = 16,
) -> WahEncoding:
    """Encode which haplotypes carry ``alt_allele``, visited in ``order``.

    Also counts the matching haplotypes and reports whether any of the
    visited haplotypes is missing.
    """
    layout = _layout(word_bits)
    alleles = [gt_allele(gt_array[index]) for index in order]
    bits = [allele == alt_allele for allele in alleles]
    return WahEncoding(
        words=_encode_bits(bits, layout),
        alt_allele_count=sum(bits),
        has_missing=any(allele == -1 for allele in alleles),
    )


def wah_encode2_all_same_value(number: int, value: bool, word_bits: int = 16) -> list[int]:
    """Encode ``number`` repetitions of ``value`` as counter words.

    Full counters carry ``value``; the trailing counter word, which is always
    emitted, holds the remaining block count with the value bit clear.
    """
    if number < 0:
        raise ValueError("number must not be negative")
    layout = _layout(word_bits)
    wah_words = -(-number // layout.payload)
    full_counter = layout.high_bit | (layout.count_one_bit if value else 0) | layout.max_counter
    full_count, last_counter = divmod(wah_words, layout.max_counter)
    return [full_counter] * full_count + [layout.high_bit | last_counter]