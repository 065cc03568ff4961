"""Tests for the QR code lifecycle."""
import re
import uuid

import pytest
from pydantic import ValidationError

from box_organizer.errors import (
    BoxNotFoundError,
    QrCodeAlreadyAssignedError,
    QrCodeNotFoundError,
    WorkspaceMismatchError,
)
from box_organizer.models.box import Box
from box_organizer.models.qr_code import QrCode, QrCodeStatus
from box_organizer.schemas.box import BoxCreate
from box_organizer.schemas.qr_code import QrCodeBatchCreate
from box_organizer.services import box_service, qr_code_service


def make_batch(db, workspace, quantity=2):
    return qr_code_service.generate_batch(db, QrCodeBatchCreate(workspace_id=workspace.id, quantity=quantity))


def make_box(db, workspace, name="Box"):
    return box_service.create_box(db, BoxCreate(workspace_id=workspace.id, name=name))


class TestGenerateBatch:
    """Tests for batch generation."""

    def test_hundred_distinct_tokens(self, db, workspace):
        """The largest batch yields 100 distinct, well-formed tokens."""
        codes = make_batch(db, workspace, quantity=100)

        tokens = {code.token for code in codes}
        assert len(tokens) == 100
        assert all(re.fullmatch(r"[A-Z]{2}-[A-Z0-9]{6}", token) for token in tokens)
        assert all(code.status == QrCodeStatus.available for code in codes)
        assert all(code.box_id is None for code in codes)

    @pytest.mark.parametrize("quantity", [0, 101, -1])
    def test_out_of_range_quantity(self, quantity, workspace):
        with pytest.raises(ValidationError):
            QrCodeBatchCreate(workspace_id=workspace.id, quantity=quantity)

    @pytest.mark.parametrize("quantity", ["5", 5.0, 2.5])
    def test_non_integer_quantity(self, quantity, workspace):
        with pytest.raises(ValidationError):
            QrCodeBatchCreate(workspace_id=workspace.id, quantity=quantity)


class TestAssignRelease:
    """Tests for the available/assigned transitions."""

    def test_assign_and_release(self, db, workspace):
        qr = make_batch(db, workspace)[0]
        box = make_box(db, workspace)

        assigned = qr_code_service.assign(db, qr.id, box.id)
        assert assigned.status == QrCodeStatus.assigned
        assert assigned.box_id == box.id
        db.expire_all()
        assert db.get(Box, box.id).qr_code_id == qr.id

        released = qr_code_service.release(db, qr.id)
        assert released.status == QrCodeStatus.available
        assert released.box_id is None
        db.expire_all()
        assert db.get(Box, box.id).qr_code_id is None

    def test_assign_to_second_box_conflicts(self, db, workspace):
        qr = make_batch(db, workspace)[0]
        first = make_box(db, workspace, "First")
        second = make_box(db, workspace, "Second")
        qr_code_service.assign(db, qr.id, first.id)

        with pytest.raises(QrCodeAlreadyAssignedError):
            qr_code_service.assign(db, qr.id, second.id)

    def test_reassign_same_box_is_noop(self, db, workspace):
        qr = make_batch(db, workspace)[0]
        box = make_box(db, workspace)
        qr_code_service.assign(db, qr.id, box.id)

        again = qr_code_service.assign(db, qr.id, box.id)

        assert again.box_id == box.id

    def test_assign_replaces_box_previous_code(self, db, workspace):
        """A box never holds two codes at once."""
        old, new = make_batch(db, workspace)
        box = make_box(db, workspace)
        qr_code_service.assign(db, old.id, box.id)

        qr_code_service.assign(db, new.id, box.id)
        db.expire_all()

        assert db.get(QrCode, old.id).status == QrCodeStatus.available
        assert db.get(Box, box.id).qr_code_id == new.id
        assert db.query(QrCode).filter(QrCode.box_id == box.id).count() == 1

    def test_assign_box_of_other_workspace(self, db, workspace, other_workspace):
        qr = make_batch(db, workspace)[0]
        foreign = make_box(db, other_workspace)

        with pytest.raises(WorkspaceMismatchError):
            qr_code_service.assign(db, qr.id, foreign.id)

    def test_unknown_ids(self, db, workspace):
        qr = make_batch(db, workspace)[0]

        with pytest.raises(QrCodeNotFoundError):
            qr_code_service.assign(db, uuid.uuid4(), uuid.uuid4())
        with pytest.raises(BoxNotFoundError):
            qr_code_service.assign(db, qr.id, uuid.uuid4())

    def test_release_available_code(self, db, workspace):
        qr = make_batch(db, workspace)[0]

        assert qr_code_service.release(db, qr.id).status == QrCodeStatus.available


class TestResolveByToken:
    """Tests for scanning a printed token."""

    def test_available_code(self, db, workspace):
        qr = make_batch(db, workspace)[0]

        resolved = qr_code_service.resolve_by_token(db, qr.token)

        assert resolved.id == qr.id
        assert resolved.box_id is None

    def test_assigned_code_points_at_box(self, db, workspace):
        qr = make_batch(db, workspace)[0]
        box = make_box(db, workspace)
        qr_code_service.assign(db, qr.id, box.id)

        resolved = qr_code_service.resolve_by_token(db, qr.token, workspace_id=workspace.id)

        assert resolved.status == QrCodeStatus.assigned
        assert resolved.box.name == "Box"

    def test_unknown_token(self, db):
        with pytest.raises(QrCodeNotFoundError):
            qr_code_service.resolve_by_token(db, "QR-ZZZZZZ")

    def test_other_workspace(self, db, workspace, other_workspace):
        qr = make_batch(db, workspace)[0]

        with pytest.raises(QrCodeNotFoundError):
            qr_code_service.resolve_by_token(db, qr.token, workspace_id=other_workspace.id)

    def test_malformed_token(self, db):
        with pytest.raises(ValidationError):
            qr_code_service.resolve_by_token(db, "qr-abc")


class TestListQrCodes:
    def test_status_filter(self, db, workspace):
        codes = make_batch(db, workspace, quantity=3)
        box = make_box(db, workspace)
        qr_code_service.assign(db, codes[0].id, box.id)

        available = qr_code_service.list_qr_codes(db, workspace.id, QrCodeStatus.available)
        assigned = qr_code_service.list_qr_codes(db, workspace.id, QrCodeStatus.assigned)

        assert len(available) == 2
        assert [qr.id for qr in assigned] == [codes[0].id]
        assert len(qr_code_service.list_qr_codes(db, workspace.id)) == 3
