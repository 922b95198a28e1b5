# xsqz

Building blocks for compressing and phasing diploid genotype data held in
memory. The package has no dependencies outside the standard library.

## Modules

### `xsqz.genotype`

Integer genotype values as stored in BCF records: a value holds
`(allele + 1) << 1`, with the lowest bit set when the allele is phased.
`GT_MISSING` (`0`) is a missing allele.

- `gt_allele(value)`: the allele index, `-1` for a missing allele.
- `gt_phased(allele)` / `gt_unphased(allele)`: build a value.
- `gt_is_phased(value)`: test the phased bit.

### `xsqz.wah`: WAH2 encoding

Word Aligned Hybrid encoding with word widths of 8, 16, 32 or 64 bits
(`VALID_WORD_BITS`). A word with its high bit clear is a literal of
`word_bits - 1` bits, least significant bit first. A word with its high bit
set is a counter: the next bit is the repeated value and the rest is the
number of repeated `word_bits - 1` bit blocks. Any other width raises
`ValueError`.

- `wah_encode2(bits, word_bits=8)`: encode a bit vector. The last block is
  padded with zeros.
- `wah_encode2_genotypes(gt_array, alt_allele, order, word_bits=16)`: visit
  the haplotypes of a genotype line in `order` and encode which of them carry
  `alt_allele`. The result is a frozen `WahEncoding` with `words`,
  `alt_allele_count` and `has_missing`.
- `wah_encode2_all_same_value(number, value, word_bits=16)`: counter words
  for `number` repeated bits. Full counters carry `value`. The trailing
  counter word is always emitted and has its value bit clear.

### `xsqz.wah_decode`: WAH2 decoding and scanning

- `wah_decode2(words, word_bits=8)`: decode every word, padding included.
- `wah2_extract(words, size, word_bits=16)`: decode only the first `size`
  bits.
- `wah2_count_ones(words, size, word_bits=16)`: count the set bits in the
  words that cover `size` bits. Whole words are counted.
- `wah2_words_spanned(words, size, word_bits=16)`: the number of words
  needed to cover `size` bits. Use it to step through streams that hold
  several encodings back to back.
- `format_wah2_word(word, word_bits=16)`: a counter is shown as
  `"<bits>*<value>"`, a literal as its payload bits.

The scanning functions raise `ValueError` when the stream ends before `size`
bits are covered, or when `size` is negative.

### `xsqz.transforms`

- `matrix_group_as(matrix, word_bits=8)`: pack every `word_bits` rows of a bit
  matrix (variant × haplotype) into rows of integers. Row `i` sets bit
  `i % word_bits`.
- `matrices_differ(m1, m2)`: returns `True` on the first difference in shape
  or value and reports that difference on standard error.

### `xsqz.phasing`: phasing from a haplotype ordering

- `rephase_samples_given_permutation(gt_array, gt_array_size, a)`: phases a
  line in place.
  - Homozygous samples are phased directly.
  - A heterozygous sample gets votes from the phased haplotypes next to its
    own in the permutation `a`. It is phased once its score reaches a
    threshold, which starts at 4 and drops each time a pass phases nothing.
  - Samples that are still undecided are phased `min|max`.
- The lower-level pieces are also public: `reverse_permutation`,
  `score_from_allele_position`, `score_sample_given_permutation_neighbors` and
  `phase_sample`.
- `PermutationPhaser(n_samples, maf=0.01)`: phases lines one after another
  with `phase_line(gt_array, n_alleles=2)`, which returns the phased values.
  After each line the ordering (`order`) is PBWT sorted on every alternative
  allele whose count exceeds `n_haplotypes * maf`. A line whose length is not
  `2 * n_samples` raises `ValueError`.

### `xsqz.machinery`: block-wise haplotype phasing

- `extract_haplotypes_as_words(bit_matrix, pos, word_bits=64)`: packs
  `word_bits` rows into one word per haplotype. Row `pos` becomes the most
  significant bit.
- `Sample`: one diploid sample over a block. It has these methods:
  - `can_be_phased_by`
  - `rephase_as`
  - `almost_phased_by`
  - `rephase_with_guides`
  - `rephase_arbitrarily`
  - `distance_to`
  - `phase_from_imperfect_match`
- `PhasingMachinery(haplotypes, word_bits=64)`: phases samples with pairs of
  known haplotypes. When no pair fits, it phases one sample arbitrarily.
- `PhasingMachineryNew(haplotypes, word_bits=64)`: phases samples after the
  most frequent compatible known haplotype. When none fits, it uses the
  closest one.
- `do_phase()` runs once on either class. The results are in `samples`.
- `phase_matrix_by_blocks(matrix, word_bits=64)`: returns a copy of a diploid
  bit matrix. Each complete block of rows is phased with
  `PhasingMachineryNew`, and trailing rows are copied unchanged.

### `xsqz.timing`

- `format_elapsed_time(begin, end)`: formats the span between two
  `time.monotonic_ns()` readings in seconds, milliseconds and microseconds.
- `print_elapsed_time(begin, end)`: writes that text to standard error.

## What the package does not do

- It does not read or write VCF/BCF files, and it has no compressed container
  file format.
- It has no command-line tool.

Genotype lines and bit matrices are passed in as Python sequences, and every
result is returned in memory.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Example

```python
from xsqz.wah import wah_encode2
from xsqz.wah_decode import wah_decode2, wah2_count_ones

bits = [True] * 30 + [False, True, False] * 5
words = wah_encode2(bits, 16)
assert wah_decode2(words, 16)[: len(bits)] == bits
assert wah2_count_ones(words, len(bits), 16) == bits.count(True)
```

Phasing one diploid line along a haplotype ordering:

```python
from xsqz.genotype import gt_allele, gt_unphased
from xsqz.phasing import rephase_samples_given_permutation

gt = [gt_unphased(0), gt_unphased(1), gt_unphased(1), gt_unphased(1)]
rephase_samples_given_permutation(gt, len(gt), list(range(len(gt))))
print([gt_allele(v) for v in gt])
```