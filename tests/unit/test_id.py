"""Tests for ID generation."""

import time

from hypothesis import given, strategies as st
from ulid import ULID

from eventforms.core.id import (
    Prefix,
    generate_field_ids,
    generate_prefixed,
    generate_raw,
    new_field_id,
    new_form_id,
)


def _ulid_of(prefixed: str) -> ULID:
    prefix, _, raw = prefixed.rpartition("_")
    assert prefix
    return ULID.from_str(raw)


class TestGeneration:
    """Test basic ID generation."""

    def test_generate_unique_ids(self):
        """IDs should be unique."""
        id1 = generate_raw()
        id2 = generate_raw()

        assert id1 != id2
        assert len(id1) == 26
        assert str(ULID.from_str(id1)) == id1

    def test_prefixed_ids(self):
        field_id = new_field_id()
        form_id = new_form_id()

        assert field_id.startswith("field_")
        assert form_id.startswith("form_")
        assert abs(time.time() - _ulid_of(form_id).timestamp) < 5

    def test_generate_field_ids_distinct(self):
        ids = generate_field_ids(50)

        assert len(ids) == 50
        assert len(set(ids)) == 50
        assert all(i.startswith(f"{Prefix.FIELD}_") for i in ids)

    def test_later_ids_sort_after(self):
        """IDs generated later sort after earlier ones."""
        first = new_field_id()
        time.sleep(0.002)
        second = new_field_id()

        assert first < second


@given(st.sampled_from([Prefix.FORM, Prefix.FIELD, "step"]))
def test_prefix_is_kept_verbatim(prefix):
    generated = generate_prefixed(prefix)

    assert generated.rpartition("_")[0] == prefix
    assert len(generated) == len(prefix) + 27
