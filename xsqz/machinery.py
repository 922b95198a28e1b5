"""Block-wise phasing of haplotypes packed into machine words.

A block of ``word_bits`` consecutive variants is packed, haplotype by
haplotype, into one integer whose most significant bit is the first variant.
Diploid samples are then phased by reusing haplotypes that are already known.
"""

from __future__ import annotations

from collections import Counter
from typing import Sequence

from xsqz.wah import VALID_WORD_BITS

PLOIDY = 2


def _check_word_bits(word_bits: int) -> int:
    if word_bits not in VALID_WORD_BITS:
        raise ValueError(f"word_bits must be one of {VALID_WORD_BITS}, got {word_bits}")
    return (1 << word_bits) - 1


def _popcount(value: int) -> int:
    return bin(value).count("1")


class Sample:
    """A diploid sample over one block, held as two haplotype words."""

    def __init__(self, hap_a: int, hap_b: int, id: int, word_bits: int = 64) -> None:
        self._mask = _check_word_bits(word_bits)
        self.word_bits = word_bits
        self.hap_a = min(hap_a, hap_b) & self._mask
        self.hap_b = max(hap_a, hap_b) & self._mask
        self.id = id
        self.het_template = (hap_a ^ hap_b) & self._mask
        self.het_sites = _popcount(self.het_template)

    def __repr__(self) -> str:
        return f"Sample(id={self.id}, hap_a={self.hap_a:#x}, hap_b={self.hap_b:#x})"

    @property
    def _not_het(self) -> int:
        return ~self.het_template & self._mask

    @property
    def _hom(self) -> int:
        return self.hap_a & self._not_het

    def can_be_phased_by(self, hap_1: int, hap_2: int | None = None) -> bool:
        """Tell whether one haplotype, or a pair of them, explains this sample.

        A single haplotype fits when it agrees on the homozygous sites; a pair
        fits when it has the same homozygous sites and the same het sites.
        """
        if hap_2 is None:
            return (hap_1 & self._not_het) == self._hom
        other_het = (hap_1 ^ hap_2) & self._mask
        other_hom = hap_1 & ~other_het & self._mask
        return other_hom == self._hom and other_het == self.het_template

    def rephase_as(self, hap_1: int, hap_2: int | None = None) -> None:
        """Take ``hap_1`` as the first haplotype and ``hap_2`` (or the complement) as the second."""
        self.hap_a = hap_1 & self._mask
        if hap_2 is None:
            self.hap_b = (hap_1 ^ self.het_template) & self._mask
        else:
            self.hap_b = hap_2 & self._mask

    def almost_phased_by(self, hap_1: int, hap_2: int) -> bool:
        """Tell whether the pair explains the sample except for one extra het site."""
        other_het = (hap_1 ^ hap_2) & self._mask
        template_diff = other_het ^ self.het_template
        other_hom = hap_1 & self._not_het
        het_site = self.het_template & template_diff
        return het_site != 0 and _popcount(template_diff) == 1 and other_hom == self._hom

    def rephase_with_guides(self, hap_1: int, hap_2: int) -> None:
        """Phase after the guides, putting the extra het site as 0 on A and 1 on B.

        Only meaningful when :meth:`almost_phased_by` holds for the guides.
        """
        other_het = (hap_1 ^ hap_2) & self._mask
        template_diff = (other_het ^ self.het_template) & self.het_template
        self.hap_a = hap_1 & ~template_diff & self._mask
        self.hap_b = (hap_2 | template_diff) & self._mask

    def rephase_arbitrarily(self) -> None:
        """Put every het site's 0 on the first haplotype and its 1 on the second."""
        self.hap_a &= self._not_het
        self.hap_b |= self.het_template

    def distance_to(self, hap: int) -> int:
        """Hamming distance to ``hap`` on the homozygous sites of the sample."""
        return _popcount(self._hom ^ (hap & self._not_het))

    def phase_from_imperfect_match(self, hap: int) -> None:
        """Phase the het sites after ``hap``, keeping the homozygous sites."""
        phasing = hap & self.het_template
        a = (self.hap_a & self._not_het) | phasing
        b = (self.hap_b & self._not_het) | (phasing ^ self.het_template)
        self.hap_a = min(a, b)
        self.hap_b = max(a, b)


class _MachineryBase:
    def __init__(self, haplotypes: Sequence[int], word_bits: int) -> None:
        _check_word_bits(word_bits)
        self.word_bits = word_bits
        self.samples = [
            Sample(haplotypes[i * 2], haplotypes[i * 2 + 1], i, word_bits)
            for i in range(len(haplotypes) // 2)
        ]
        self.unphased_samples: set[int] = set(range(len(self.samples)))
        self.phased_samples: set[int] = set()
        self._newly_phased: list[int] = []
        self._rephased = False

    def _update_sets(self) -> None:
        for i in self._newly_phased:
            self.unphased_samples.discard(i)
            self.phased_samples.add(i)
        self._newly_phased.clear()


class PhasingMachinery(_MachineryBase):
    """Phases samples by combining pairs of known haplotypes."""

    def __init__(self, haplotypes: Sequence[int], word_bits: int = 64) -> None:
        super().__init__(haplotypes, word_bits)
        self.haplotypes: set[int] = set()
        self.new_haplotypes: set[int] = set()

    def do_phase(self) -> None:
        """Phase every sample; later calls do nothing."""
        if not self._rephased:
            self._do_rephase()
            self._rephased = True

    def _do_rephase(self) -> None:
        self._initialize_phasing()
        self._do_direct_phasing()
        self._move_new_haplotypes_to_haplotypes()
        while self.unphased_samples:
            self._phase_a_sample_arbitrarily()
            if self.new_haplotypes:
                self._do_direct_phasing()
                self._move_new_haplotypes_to_haplotypes()

    def _initialize_phasing(self) -> None:
        for i in sorted(self.unphased_samples):
            sample = self.samples[i]
            if sample.het_sites == 0:
                self.new_haplotypes.add(sample.hap_a)
                self._newly_phased.append(i)
            elif sample.het_sites == 1:
                self.new_haplotypes.add(sample.hap_a)
                self.new_haplotypes.add(sample.hap_b)
                self._newly_phased.append(i)
        self._update_sets()

    def _find_pair(self, sample: Sample) -> tuple[int, int] | None:
        new_sorted = sorted(self.new_haplotypes)
        for hap_1 in new_sorted:
            for hap_2 in new_sorted:
                if hap_2 > hap_1 and sample.can_be_phased_by(hap_1, hap_2):
                    return hap_1, hap_2
        for hap_1 in sorted(self.haplotypes):
            for hap_2 in new_sorted:
                if sample.can_be_phased_by(hap_1, hap_2):
                    return hap_1, hap_2
        return None

    def _do_direct_phasing(self) -> None:
        for i in sorted(self.unphased_samples):
            sample = self.samples[i]
            pair = self._find_pair(sample)
            if pair is not None:
                sample.rephase_as(*pair)
                self._newly_phased.append(i)
        self._update_sets()

    def _phase_a_sample_arbitrarily(self) -> None:
        i = min(self.unphased_samples)
        sample = self.samples[i]
        sample.rephase_arbitrarily()
        self.new_haplotypes.add(sample.hap_a)
        self.new_haplotypes.add(sample.hap_b)
        self._newly_phased.append(i)
        self._update_sets()

    def _move_new_haplotypes_to_haplotypes(self) -> None:
        self.haplotypes |= self.new_haplotypes
        self.new_haplotypes.clear()


class PhasingMachineryNew(_MachineryBase):
    """Phases samples after the most frequent compatible known haplotype."""

    def __init__(self, haplotypes: Sequence[int], word_bits: int = 64) -> None:
        super().__init__(haplotypes, word_bits)
        self.haplotypes: Counter[int] = Counter()
        self.new_haplotypes: Counter[int] = Counter()

    def do_phase(self) -> None:
        """Phase every sample; later calls do nothing."""
        if not self._rephased:
            self._do_rephase()
            self._rephased = True

    def _do_rephase(self) -> None:
        self._initialize_phasing()
        self._do_direct_phasing()
        self._move_new_haplotypes_to_haplotypes()
        while self.unphased_samples:
            self._phase_a_sample_as_close_as_possible()
            while True:
                before = len(self.unphased_samples)
                self._do_direct_phasing()
                if before == len(self.unphased_samples):
                    break
            self._move_new_haplotypes_to_haplotypes()

    def _initialize_phasing(self) -> None:
        for i in sorted(self.unphased_samples):
            sample = self.samples[i]
            if sample.het_sites == 0:
                self.new_haplotypes[sample.hap_a] += 2
                self._newly_phased.append(i)
            elif sample.het_sites == 1:
                self.new_haplotypes[sample.hap_a] += 1
                self.new_haplotypes[sample.hap_b] += 1
                self._newly_phased.append(i)
        self._update_sets()

    def _do_direct_phasing(self) -> None:
        for i in sorted(self.unphased_samples):
            sample = self.samples[i]
            candidate = None
            candidate_score = 0
            for hap, count in self.new_haplotypes.items():
                if sample.can_be_phased_by(hap) and candidate_score < count:
                    candidate = hap
                    candidate_score = count
            if candidate is not None:
                sample.rephase_as(candidate)
                self.new_haplotypes[sample.hap_a] += 1
                self.new_haplotypes[sample.hap_b] += 1
                self._newly_phased.append(i)
        self._update_sets()

    def _phase_a_sample_as_close_as_possible(self) -> None:
        i = min(self.unphased_samples)
        sample = self.samples[i]
        best_candidate = 0
        closest: int | None = None
        score = 0
        for hap, count in self.haplotypes.items():
            dist = sample.distance_to(hap)
            if closest is None or dist < closest:
                closest = dist
                best_candidate = hap
                score = count
            elif dist == closest and score < count:
                best_candidate = hap
                score = count
        sample.phase_from_imperfect_match(best_candidate)
        self.new_haplotypes[sample.hap_a] += 1
        self.new_haplotypes[sample.hap_b] += 1
        self._newly_phased.append(i)
        self._update_sets()

    def _move_new_haplotypes_to_haplotypes(self) -> None:
        for hap, count in self.new_haplotypes.items():
            self.haplotypes[hap] += count
        self.new_haplotypes.clear()


def extract_haplotypes_as_words(
    bit_matrix: Sequence[Sequence[bool]], pos: int, word_bits: int = 64
) -> list[int]:
    """Pack rows ``pos`` to ``pos + word_bits - 1`` into one word per haplotype.

    Row ``pos`` becomes the most significant bit of each word.
    """
    _check_word_bits(word_bits)
    if not bit_matrix:
        raise ValueError("bit matrix is empty")
    if pos < 0 or pos + word_bits > len(bit_matrix):
        raise ValueError(
            f"rows {pos}..{pos + word_bits - 1} are outside a matrix of {len(bit_matrix)} rows"
        )
    n_haps = len(bit_matrix[0])
    result = [0] * n_haps
    for row in bit_matrix[pos:pos + word_bits]:
        for j in range(n_haps):
            result[j] = (result[j] << 1) | (1 if row[j] else 0)
    return result


def phase_matrix_by_blocks(
    matrix: Sequence[Sequence[bool]], word_bits: int = 64
) -> list[list[bool]]:
    """Return a copy of a diploid bit matrix phased block by block.

    Every complete block of ``word_bits`` rows is phased with
    :class:`PhasingMachineryNew`; trailing rows that do not fill a block are
    copied unchanged.
    """
    _check_word_bits(word_bits)
    if not matrix:
        return []
    if len(matrix[0]) % PLOIDY:
        raise ValueError("number of haplotypes is not a multiple of the ploidy")
    result = [[bool(bit) for bit in row] for row in matrix]
    limit = (len(matrix) // word_bits) * word_bits
    for block_start in range(0, limit, word_bits):
        machinery = PhasingMachineryNew(
            extract_haplotypes_as_words(matrix, block_start, word_bits), word_bits
        )
        machinery.do_phase()
        for offset, row in enumerate(result[block_start:block_start + word_bits]):
            shift = word_bits - 1 - offset
            for sample in machinery.samples:
                row[sample.id * 2] = bool((sample.hap_a >> shift) & 1)
                row[sample.id * 2 + 1] = bool((sample.hap_b >> shift) & 1)
    return result