"""Tests for request validation contracts."""
import uuid

import pytest
from pydantic import ValidationError

from box_organizer.schemas.box import BoxCreate, BoxSearchQuery, BoxUpdate, DuplicateNameCheck
from box_organizer.schemas.location import LocationCreate, LocationUpdate
from box_organizer.schemas.qr_code import QrCodeToken
from box_organizer.schemas.workspace import WorkspaceCreate, WorkspaceUpdate

WORKSPACE_ID = uuid.uuid4()


class TestBoxSchemas:
    def test_name_bounds(self):
        """Names are trimmed, then must be 1 to 100 characters."""
        assert BoxCreate(workspace_id=WORKSPACE_ID, name="x" * 100).name == "x" * 100
        with pytest.raises(ValidationError):
            BoxCreate(workspace_id=WORKSPACE_ID, name="x" * 101)
        with pytest.raises(ValidationError):
            BoxCreate(workspace_id=WORKSPACE_ID, name="   ")

    def test_description_bound(self):
        BoxCreate(workspace_id=WORKSPACE_ID, name="Box", description="d" * 10000)
        with pytest.raises(ValidationError):
            BoxCreate(workspace_id=WORKSPACE_ID, name="Box", description="d" * 10001)

    def test_references_must_be_uuids(self):
        with pytest.raises(ValidationError):
            BoxCreate(workspace_id="not-a-uuid", name="Box")
        with pytest.raises(ValidationError):
            BoxCreate(workspace_id=WORKSPACE_ID, name="Box", location_id="42")

    def test_update_needs_a_field(self):
        with pytest.raises(ValidationError):
            BoxUpdate()

    def test_update_name_cannot_be_null(self):
        with pytest.raises(ValidationError):
            BoxUpdate(name=None)

    def test_update_tracks_explicit_nulls(self):
        """Explicit null differs from absent for references."""
        update = BoxUpdate(location_id=None)

        assert update.model_fields_set == {"location_id"}


class TestSearchQuery:
    """Tests for pagination and query bounds."""

    def test_defaults(self):
        query = BoxSearchQuery(workspace_id=WORKSPACE_ID)

        assert query.limit == 50
        assert query.offset == 0
        assert query.q is None

    @pytest.mark.parametrize("params", [{"limit": 101}, {"limit": 0}, {"offset": -1}])
    def test_out_of_range(self, params):
        with pytest.raises(ValidationError):
            BoxSearchQuery(workspace_id=WORKSPACE_ID, **params)

    def test_limit_upper_bound(self):
        assert BoxSearchQuery(workspace_id=WORKSPACE_ID, limit=100).limit == 100

    def test_empty_query_is_rejected(self):
        """An empty or blank query is an error, not a missing filter."""
        with pytest.raises(ValidationError):
            BoxSearchQuery(workspace_id=WORKSPACE_ID, q="")
        with pytest.raises(ValidationError):
            BoxSearchQuery(workspace_id=WORKSPACE_ID, q="   ")

    def test_duplicate_check_name_is_trimmed(self):
        assert DuplicateNameCheck(workspace_id=WORKSPACE_ID, name=" Tools ").name == "Tools"


class TestLocationSchemas:
    def test_name_bounds(self):
        LocationCreate(workspace_id=WORKSPACE_ID, name="n" * 255)
        with pytest.raises(ValidationError):
            LocationCreate(workspace_id=WORKSPACE_ID, name="n" * 256)

    def test_description_bound(self):
        with pytest.raises(ValidationError):
            LocationCreate(workspace_id=WORKSPACE_ID, name="Shelf", description="d" * 1001)

    def test_update_needs_a_field(self):
        with pytest.raises(ValidationError):
            LocationUpdate()


class TestWorkspaceSchemas:
    def test_name_bounds(self):
        assert WorkspaceCreate(name="  Home  ").name == "Home"
        with pytest.raises(ValidationError):
            WorkspaceCreate(name="x" * 256)

    def test_description_bound(self):
        WorkspaceUpdate(description="d" * 1000)
        with pytest.raises(ValidationError):
            WorkspaceUpdate(description="d" * 1001)

    def test_update_needs_a_field(self):
        with pytest.raises(ValidationError):
            WorkspaceUpdate()

    def test_update_name_cannot_be_null(self):
        with pytest.raises(ValidationError):
            WorkspaceUpdate(name=None)


class TestQrCodeToken:
    @pytest.mark.parametrize("token", ["QR-A1B2C3", "AB-000000"])
    def test_valid(self, token):
        assert QrCodeToken(token=token).token == token

    @pytest.mark.parametrize("token", ["qr-a1b2c3", "QR-A1B2C", "QRA1B2C3", "Q1-A1B2C3"])
    def test_invalid(self, token):
        with pytest.raises(ValidationError):
            QrCodeToken(token=token)
