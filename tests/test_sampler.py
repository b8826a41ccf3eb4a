import random

import pytest

from cloudlat.models import PrefixRecord
from cloudlat.sampler import extract_addresses, sample_addresses, sample_size


def _records(region, cidrs):
    return [PrefixRecord(region, c, ":" in c) for c in cidrs]


@pytest.mark.parametrize(
    "total, expected",
    [(0, 0), (1, 1), (2, 2), (3, 3), (5, 3), (14, 3), (15, 3), (20, 4), (24, 4), (100, 20), (1001, 200)],
)
def test_sample_size(total, expected):
    assert sample_size(total) == expected


def test_extract_strips_prefix_length_and_skips_ipv6():
    records = _records("r", ["10.0.0.0/24", "2600:1f18::/33", "10.0.1.0/24"])

    assert extract_addresses(records) == ["10.0.0.0", "10.0.1.0"]
    assert extract_addresses(records, include_ipv6=True) == ["10.0.0.0", "2600:1f18::", "10.0.1.0"]


def test_extract_drops_malformed_and_duplicates():
    records = _records("r", ["10.0.0.0/24", "10.0.0.0/16", "not-an-ip/8", "/24", "10.0.5.1"])

    assert extract_addresses(records) == ["10.0.0.0", "10.0.5.1"]


def test_sample_is_subset_without_duplicates():
    addresses = [f"10.{i}.0.0" for i in range(57)]

    for seed in range(20):
        sampled = sample_addresses(addresses, rng=random.Random(seed))
        assert len(sampled) == 11
        assert len(set(sampled)) == len(sampled)
        assert set(sampled) <= set(addresses)


@pytest.mark.parametrize("n", [1, 2])
def test_small_regions_sample_everything(n):
    addresses = [f"10.0.{i}.0" for i in range(n)]

    assert sorted(sample_addresses(addresses)) == addresses


def test_seeded_draw_is_reproducible():
    addresses = [f"10.{i}.0.0" for i in range(40)]

    first = sample_addresses(addresses, rng=random.Random(7))
    second = sample_addresses(addresses, rng=random.Random(7))
    assert first == second


def test_example_region_draws_three_of_five():
    records = _records("us-east-1", [f"10.0.{i}.0/24" for i in range(5)])
    addresses = extract_addresses(records)

    sampled = sample_addresses(addresses)
    assert len(sampled) == 3
    assert set(sampled) <= {"10.0.0.0", "10.0.1.0", "10.0.2.0", "10.0.3.0", "10.0.4.0"}
