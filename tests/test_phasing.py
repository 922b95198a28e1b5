import pytest

from xsqz.genotype import gt_allele, gt_is_phased, gt_phased, gt_unphased
from xsqz.phasing import (
    PermutationPhaser,
    phase_sample,
    rephase_samples_given_permutation,
    reverse_permutation,
    score_from_allele_position,
    score_sample_given_permutation_neighbors,
)


def _het_between(left, right):
    """Sample 0 is ``left`` phased homozygous, sample 1 het, sample 2 ``right``."""
    return [
        gt_phased(left), gt_phased(left),
        gt_unphased(1), gt_unphased(0),
        gt_phased(right), gt_phased(right),
    ]


def test_reverse_permutation_inverts():
    a = [3, 0, 4, 1, 2]
    ra = reverse_permutation(a)
    assert [a[ra[i]] for i in range(len(a))] == list(range(len(a)))
    assert [ra[a[i]] for i in range(len(a))] == list(range(len(a)))


def test_reverse_permutation_of_identity():
    assert reverse_permutation([0, 1, 2, 3]) == [0, 1, 2, 3]


def test_score_from_allele_position_votes():
    gt = [gt_phased(0), gt_phased(1), gt_unphased(0), gt_phased(2)]
    assert score_from_allele_position(0, 0, 1, gt) == 1
    assert score_from_allele_position(1, 0, 1, gt) == -1
    assert score_from_allele_position(2, 0, 1, gt) == 0
    assert score_from_allele_position(3, 0, 1, gt) == 0


def test_phase_sample_polarity():
    gt = [gt_unphased(1), gt_unphased(0)]
    phase_sample(0, gt, 3)
    assert gt == [gt_phased(0), gt_phased(1)]
    phase_sample(0, gt, -1)
    assert gt == [gt_phased(1), gt_phased(0)]
    phase_sample(0, gt, 0)
    assert gt == [gt_phased(0), gt_phased(1)]


def test_score_sign_follows_neighbours():
    a = list(range(6))
    a_index = reverse_permutation(a)
    favour_min = score_sample_given_permutation_neighbors(1, _het_between(0, 1), 6, a, a_index)
    favour_max = score_sample_given_permutation_neighbors(1, _het_between(1, 0), 6, a, a_index)
    assert favour_min == 2
    assert favour_max == -favour_min


def test_score_is_bounded():
    gt = [gt_phased(0)] * 2 + [gt_unphased(0), gt_unphased(1)] + [gt_phased(1)] * 2
    a = [0, 2, 1, 4, 3, 5]
    score = score_sample_given_permutation_neighbors(1, gt, 6, a, reverse_permutation(a))
    assert -4 <= score <= 4


def test_rephase_phases_every_sample_and_keeps_alleles():
    gt = [
        gt_unphased(0), gt_unphased(0),
        gt_unphased(1), gt_unphased(0),
        gt_unphased(1), gt_unphased(1),
        gt_unphased(2), gt_unphased(1),
    ]
    before = [sorted((gt_allele(gt[i * 2]), gt_allele(gt[i * 2 + 1]))) for i in range(4)]
    rephase_samples_given_permutation(gt, len(gt), [7, 1, 0, 3, 2, 5, 4, 6])
    assert all(gt_is_phased(v) for v in gt)
    after = [sorted((gt_allele(gt[i * 2]), gt_allele(gt[i * 2 + 1]))) for i in range(4)]
    assert after == before


def test_rephase_orders_heterozygous_min_first():
    for left, right in ((0, 1), (1, 0)):
        gt = _het_between(left, right)
        rephase_samples_given_permutation(gt, 6, list(range(6)))
        assert gt[2:4] == [gt_phased(0), gt_phased(1)]


def test_phaser_rejects_wrong_ploidy():
    phaser = PermutationPhaser(2)
    with pytest.raises(ValueError):
        phaser.phase_line([gt_unphased(0)] * 3)


def test_phaser_sorts_common_allele_carriers_last():
    phaser = PermutationPhaser(2, maf=0.01)
    line = [gt_unphased(1), gt_unphased(1), gt_unphased(0), gt_unphased(0)]
    phased = phaser.phase_line(line, 2)
    assert phased == [gt_phased(1), gt_phased(1), gt_phased(0), gt_phased(0)]
    assert line == [gt_unphased(1), gt_unphased(1), gt_unphased(0), gt_unphased(0)]
    order = phaser.order
    assert sorted(order) == [0, 1, 2, 3]
    carriers = [gt_allele(phased[h]) == 1 for h in order]
    assert carriers == sorted(carriers)
    assert order == (2, 3, 0, 1)


def test_phaser_keeps_order_for_rare_allele():
    phaser = PermutationPhaser(2, maf=1.0)
    phaser.phase_line([gt_unphased(1), gt_unphased(1), gt_unphased(0), gt_unphased(0)], 2)
    assert phaser.order == (0, 1, 2, 3)