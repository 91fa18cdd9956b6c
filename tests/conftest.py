"""Shared fixtures for the family tree tests."""

import matplotlib

matplotlib.use("Agg")

import pytest  # noqa: E402

from models import Gender, Member  # noqa: E402


def make_member(member_id, parent_id=None, **fields):
    fields.setdefault("name", member_id)
    fields.setdefault("relation_type", "Root" if parent_id is None else "Son")
    return Member(id=member_id, parent_id=parent_id, **fields)


@pytest.fixture
def abc_members():
    return [make_member("A"), make_member("B", "A"), make_member("C", "A", gender=Gender.FEMALE)]


@pytest.fixture
def family():
    """A root with two branches, three generations deep."""
    return [
        make_member("A", spouse_name="Grandmother"),
        make_member("B", "A"),
        make_member("C", "A", relation_type="Daughter", gender=Gender.FEMALE),
        make_member("D", "B"),
        make_member("E", "D"),
        make_member("F", "C"),
    ]
