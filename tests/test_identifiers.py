"""Tests for generated identifiers."""
import re

import pytest
from sqlalchemy.exc import IntegrityError

from box_organizer.errors import ConflictError, IdentifierExhaustedError
from box_organizer.models.qr_code import QrCode
from box_organizer.services.identifiers import (
    generate_qr_token,
    generate_short_id,
    insert_with_identifier,
)


class TestGenerators:
    def test_short_id_shape(self):
        """Short ids are 10 alphanumeric characters."""
        for _ in range(50):
            assert re.fullmatch(r"[A-Za-z0-9]{10}", generate_short_id())

    def test_qr_token_shape(self):
        for _ in range(50):
            assert re.fullmatch(r"QR-[A-Z0-9]{6}", generate_qr_token())

    def test_qr_token_custom_prefix(self):
        assert generate_qr_token("BX").startswith("BX-")


class TestInsertWithIdentifier:
    """Tests for bounded retry on identifier collisions."""

    def insert(self, db, workspace, candidates, exists=lambda c: False, max_attempts=5):
        candidates = iter(candidates)
        return insert_with_identifier(
            db,
            lambda token: QrCode(workspace_id=workspace.id, token=token),
            lambda: next(candidates),
            exists,
            column="token",
            max_attempts=max_attempts,
        )

    def test_skips_values_reported_taken(self, db, workspace):
        taken = {"QR-AAAAAA", "QR-BBBBBB"}

        row = self.insert(db, workspace, ["QR-AAAAAA", "QR-BBBBBB", "QR-CCCCCC"], exists=taken.__contains__)

        assert row.token == "QR-CCCCCC"

    def test_retries_unique_violation_missed_by_check(self, db, workspace):
        """A value taken after the check is retried, not surfaced as a failure."""
        self.insert(db, workspace, ["QR-AAAAAA"])

        row = self.insert(db, workspace, ["QR-AAAAAA", "QR-BBBBBB"])
        db.commit()

        assert row.token == "QR-BBBBBB"
        assert db.query(QrCode).count() == 2

    def test_exhaustion_raises_conflict(self, db, workspace):
        """After max_attempts collisions a ConflictError surfaces."""
        self.insert(db, workspace, ["QR-AAAAAA"])

        with pytest.raises(IdentifierExhaustedError) as exc_info:
            self.insert(db, workspace, ["QR-AAAAAA"] * 3, max_attempts=3)

        assert isinstance(exc_info.value, ConflictError)
        assert exc_info.value.status_code == 409

    def test_zero_attempts_is_respected(self, db, workspace):
        with pytest.raises(IdentifierExhaustedError):
            self.insert(db, workspace, ["QR-AAAAAA"], max_attempts=0)

    def test_other_integrity_errors_propagate(self, db, workspace):
        with pytest.raises(IntegrityError):
            insert_with_identifier(
                db,
                lambda token: QrCode(workspace_id=None, token=token),
                lambda: "QR-AAAAAA",
                lambda c: False,
                column="token",
            )
