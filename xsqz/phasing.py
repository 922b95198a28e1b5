"""Rephasing of diploid genotypes from a PBWT haplotype ordering.

Heterozygous samples are phased by letting the haplotypes that sit next to
theirs in the current permutation vote for an orientation. The permutation
itself is kept up to date line after line by a PBWT sort on common alleles.
"""

from __future__ import annotations

from typing import MutableSequence, Sequence

from xsqz.genotype import gt_allele, gt_is_phased, gt_phased
from xsqz.wah import wah_encode2_genotypes

PLOIDY = 2
DEFAULT_MAF = 0.01
_INITIAL_SCORING_THRESHOLD = 4


def reverse_permutation(a: Sequence[int]) -> list[int]:
    """Return the inverse of a permutation: ``result[a[i]] == i``."""
    result = [0] * len(a)
    for position, value in enumerate(a):
        result[value] = position
    return result


def _sample_alleles(sample: int, gt_array: Sequence[int]) -> tuple[int, int]:
    first = gt_allele(gt_array[sample * 2])
    second = gt_allele(gt_array[sample * 2 + 1])
    return min(first, second), max(first, second)


def score_from_allele_position(
    position: int, allele_min: int, allele_max: int, gt_array: Sequence[int]
) -> int:
    """Return the vote of the haplotype at ``position``.

    A phased haplotype carrying ``allele_min`` votes ``1``, one carrying
    ``allele_max`` votes ``-1``; unphased haplotypes and other alleles
    do not vote.
    """
    value = gt_array[position]
    if gt_is_phased(value):
        allele = gt_allele(value)
        if allele == allele_min:
            return 1
        if allele == allele_max:
            return -1
    return 0


def phase_sample(sample: int, gt_array: MutableSequence[int], polarity: int) -> None:
    """Phase a sample in place: ``min|max`` if ``polarity >= 0``, else ``max|min``."""
    allele_min, allele_max = _sample_alleles(sample, gt_array)
    if polarity >= 0:
        gt_array[sample * 2] = gt_phased(allele_min)
        gt_array[sample * 2 + 1] = gt_phased(allele_max)
    else:
        gt_array[sample * 2] = gt_phased(allele_max)
        gt_array[sample * 2 + 1] = gt_phased(allele_min)


def score_sample_given_permutation_neighbors(
    sample: int,
    gt_array: Sequence[int],
    gt_array_size: int,
    a: Sequence[int],
    a_index: Sequence[int],
) -> int:
    """Score a sample from the neighbours of its haplotypes in ``a``.

    The score lies in ``[-4, 4]``: positive favours ``min|max``, negative
    favours ``max|min`` and ``0`` is inconclusive.
    """
    allele_min, allele_max = _sample_alleles(sample, gt_array)
    first_position = a_index[sample * 2]
    second_position = a_index[sample * 2 + 1]
    last = gt_array_size - 1

    def vote(position: int) -> int:
        return score_from_allele_position(a[position], allele_min, allele_max, gt_array)

    score = 0
    if first_position:
        score += vote(first_position - 1)
    if first_position < last:
        score += vote(first_position + 1)
    # The second haplotype votes with the opposite polarity
    if second_position:
        score -= vote(second_position - 1)
    if second_position < last:
        score -= vote(second_position + 1)
    return score


def rephase_samples_given_permutation(
    gt_array: MutableSequence[int], gt_array_size: int, a: Sequence[int]
) -> None:
    """Phase every sample of ``gt_array`` in place using the permutation ``a``.

    Homozygous samples are phased directly. Heterozygous samples are phased
    once their score reaches a threshold, which starts at 4 and drops each
    time a pass phases nothing; samples still undecided are phased
    ``min|max``.
    """
    a_index = reverse_permutation(a)
    to_phase: set[int] = set()

    for sample in range(gt_array_size // 2):
        allele_min, allele_max = _sample_alleles(sample, gt_array)
        if allele_min == allele_max:
            gt_array[sample * 2] = gt_phased(allele_min)
            gt_array[sample * 2 + 1] = gt_phased(allele_max)
        else:
            to_phase.add(sample)

    threshold = _INITIAL_SCORING_THRESHOLD
    while to_phase and threshold:
        phased = []
        for sample in sorted(to_phase):
            score = score_sample_given_permutation_neighbors(
                sample, gt_array, gt_array_size, a, a_index
            )
            if score >= threshold:
                phase_sample(sample, gt_array, score)
                phased.append(sample)
        if phased:
            to_phase.difference_update(phased)
        else:
            threshold -= 1

    for sample in sorted(to_phase):
        phase_sample(sample, gt_array, 0)


class PermutationPhaser:
    """Phases diploid genotype lines one after another.

    The haplotype permutation starts in natural order and is PBWT sorted on
    every alternative allele whose count exceeds ``n_haplotypes * maf``.
    """

    def __init__(self, n_samples: int, maf: float = DEFAULT_MAF) -> None:
        if n_samples < 0:
            raise ValueError("n_samples must not be negative")
        self.n_samples = n_samples
        self.n_haplotypes = n_samples * PLOIDY
        self.minor_allele_count_threshold = int(self.n_haplotypes * maf)
        self._a = list(range(self.n_haplotypes))

    @property
    def order(self) -> tuple[int, ...]:
        """The current haplotype permutation."""
        return tuple(self._a)

    def phase_line(self, gt_array: Sequence[int], n_alleles: int = 2) -> list[int]:
        """Return the phased genotypes of one line and update the permutation."""
        if len(gt_array) != self.n_haplotypes:
            raise ValueError("Ploidy of samples is different than 2")
        phased = list(gt_array)
        rephase_samples_given_permutation(phased, len(phased), self._a)

        for alt_allele in range(1, n_alleles):
            encoding = wah_encode2_genotypes(phased, alt_allele, self._a)
            if encoding.alt_allele_count > self.minor_allele_count_threshold:
                carriers = [h for h in self._a if gt_allele(phased[h]) == alt_allele]
                others = [h for h in self._a if gt_allele(phased[h]) != alt_allele]
                self._a = others + carriers
        return phased