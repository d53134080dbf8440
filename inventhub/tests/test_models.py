"""Tests for request parsing, list filters and the JSON wire format."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError as PydanticValidationError

from inventhub.errors import ValidationError
from inventhub.models.invention import (
    CreateInventionRequest,
    EngagementCounts,
    InventionFilters,
    InventionSummary,
    StatusUpdateRequest,
    normalize_tags,
)
from inventhub.models.like import ToggleLikeRequest
from inventhub.models.user import UserPublic

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


class TestInventionFilters:
    def test_empty_query_means_no_restriction(self):
        filters = InventionFilters.from_query()
        assert filters.status is None
        assert filters.tags is None

    def test_status_and_tags_parsed(self):
        filters = InventionFilters.from_query(status="approved", tags="IoT, Energy")
        assert filters.status == "approved"
        assert filters.tags == ("IoT", "Energy")

    def test_blank_tags_are_no_restriction(self):
        assert InventionFilters.from_query(tags=" , ,").tags is None
        assert InventionFilters.from_query(tags="").tags is None

    def test_blank_status_is_no_restriction(self):
        assert InventionFilters.from_query(status="  ").status is None

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            InventionFilters.from_query(status="archived")


def test_normalize_tags_trims_and_dedupes():
    assert normalize_tags([" AI/ML", "IoT ", "", "AI/ML", "  "]) == ["AI/ML", "IoT"]


def test_create_request_cleans_tags_and_rejects_blank_title():
    req = CreateInventionRequest(title=" Solar Roof ", description="Tiles", tags=["Energy", " Energy"])
    assert req.title == "Solar Roof"
    assert req.tags == ["Energy"]

    with pytest.raises(PydanticValidationError):
        CreateInventionRequest(title="   ", description="x")


class TestStatusUpdateRequest:
    def test_accepts_camel_case_funding(self):
        req = StatusUpdateRequest.model_validate({"status": "approved", "fundingAmount": 5000})
        assert req.funding_amount == 5000

    def test_approval_without_amount_allowed(self):
        assert StatusUpdateRequest(status="approved").funding_amount is None

    def test_negative_amount_rejected(self):
        with pytest.raises(PydanticValidationError):
            StatusUpdateRequest.model_validate({"status": "approved", "fundingAmount": -1})

    def test_amount_on_rejection_rejected(self):
        with pytest.raises(PydanticValidationError):
            StatusUpdateRequest.model_validate({"status": "rejected", "fundingAmount": 100})

    def test_unknown_status_rejected(self):
        with pytest.raises(PydanticValidationError):
            StatusUpdateRequest.model_validate({"status": "archived"})


def test_toggle_request_reads_is_like():
    assert ToggleLikeRequest.model_validate({"isLike": False}).is_like is False


def test_summary_serializes_camel_case_with_count_block():
    summary = InventionSummary(
        id=7,
        title="Smart Grid",
        description="Balancing load",
        tags=["IoT"],
        status="approved",
        funding_amount=2500,
        author_id="u1",
        created_at=NOW,
        updated_at=NOW,
        author=UserPublic(
            id="u1",
            email=None,
            first_name="Ada",
            last_name="Lovelace",
            profile_image_url=None,
            role="user",
        ),
        counts=EngagementCounts(likes=2, dislikes=1, comments=4, files=2),
    )

    data = summary.model_dump(mode="json", by_alias=True)

    assert data["fundingAmount"] == 2500
    assert data["authorId"] == "u1"
    assert data["author"]["firstName"] == "Ada"
    assert data["_count"] == {"likes": 2, "dislikes": 1, "comments": 4, "files": 2}
    assert "funding_amount" not in data
