import pytest

from xsqz.genotype import (
    GT_MISSING,
    gt_allele,
    gt_is_phased,
    gt_phased,
    gt_unphased,
)


@pytest.mark.parametrize("allele", range(0, 10))
def test_phased_round_trip(allele):
    value = gt_phased(allele)
    assert gt_allele(value) == allele
    assert gt_is_phased(value) is True


@pytest.mark.parametrize("allele", range(0, 10))
def test_unphased_round_trip(allele):
    value = gt_unphased(allele)
    assert gt_allele(value) == allele
    assert gt_is_phased(value) is False


def test_missing_decodes_to_minus_one():
    assert gt_allele(GT_MISSING) == -1
    assert gt_is_phased(GT_MISSING) is False


def test_phased_and_unphased_differ_only_by_flag():
    for allele in range(5):
        assert gt_phased(allele) - gt_unphased(allele) == 1


def test_encoding_is_monotonic_in_allele():
    values = [gt_unphased(a) for a in range(6)]
    assert values == sorted(values)
    assert len(set(values)) == len(values)


def test_reference_allele_phased_value():
    assert gt_phased(0) == 3