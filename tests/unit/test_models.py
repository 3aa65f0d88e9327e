"""Unit tests for API response models."""

import pytest
from pydantic import ValidationError

from scopeharvest.models import Program, ProgramsPage, ScopeEntry, ScopePage


class TestPage:
    """Tests for the generic page model."""

    def test_missing_data_is_empty(self) -> None:
        """A page without data has no items."""
        page = ProgramsPage.model_validate({})
        assert len(page) == 0
        assert page.items == []

    def test_null_data_is_empty(self) -> None:
        """``"data": null`` is an empty page."""
        page = ScopePage.model_validate_json(b'{"data": null}')
        assert page.data == []

    def test_items_preserve_order(self) -> None:
        """Items follow the order of the data array."""
        page = ProgramsPage.model_validate(
            {
                "data": [
                    {"attributes": {"handle": "b", "offers_bounties": True}},
                    {"attributes": {"handle": "a"}},
                ]
            }
        )

        assert [p.handle for p in page.items] == ["b", "a"]
        assert page.items[1].offers_bounties is False

    def test_record_requires_attributes(self) -> None:
        """A record without attributes does not validate."""
        with pytest.raises(ValidationError):
            ProgramsPage.model_validate({"data": [{"id": "1"}]})


class TestAttributes:
    """Tests for the attribute models."""

    def test_program_defaults(self) -> None:
        """Missing attributes fall back to safe defaults."""
        program = Program.model_validate({"name": "Acme"})
        assert program.handle == ""
        assert program.offers_bounties is False

    def test_scope_entry_ignores_extra_fields(self) -> None:
        """Unmodeled attributes are dropped."""
        entry = ScopeEntry.model_validate(
            {
                "asset_identifier": "acme.com",
                "asset_type": "URL",
                "eligible_for_bounty": True,
            }
        )
        assert entry.asset_identifier == "acme.com"
        assert not hasattr(entry, "asset_type")

    def test_models_are_frozen(self) -> None:
        """Decoded records cannot be mutated."""
        entry = ScopeEntry(asset_identifier="acme.com")
        with pytest.raises(ValidationError):
            entry.asset_identifier = "other.com"  # type: ignore[misc]
