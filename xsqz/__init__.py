"""Genotype value helpers, WAH2 bit-vector encoding and haplotype phasing."""

__version__ = "0.1.0"

__all__ = ["genotype", "machinery", "phasing", "timing", "transforms", "wah", "wah_decode"]