"""Tests for column sorting across list endpoints and the sorting utility."""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.core.sorting import apply_order_by
from app.main import app
from app.models.coupon import Coupon
from app.repositories.coupon_repository import CouponRepository
from tests.conftest import ADMIN_USER_ID, auth_headers, create_coupon


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def coupons(db_session: Session) -> list[Coupon]:
    return [
        create_coupon(db_session, code="BRAVO", discount_value=Decimal("5.00")),
        create_coupon(db_session, code="ALPHA", discount_value=Decimal("15.00")),
        create_coupon(db_session, code="CHARLIE", discount_value=Decimal("10.00")),
    ]


class TestApplyOrderBy:
    def test_sort_by_valid_field_asc(self, db_session: Session, coupons):
        query = apply_order_by(db_session.query(Coupon), Coupon, "code:asc")
        assert [c.code for c in query.all()] == ["ALPHA", "BRAVO", "CHARLIE"]

    def test_sort_by_valid_field_desc(self, db_session: Session, coupons):
        query = apply_order_by(db_session.query(Coupon), Coupon, "discount_value:desc")
        assert [c.code for c in query.all()] == ["ALPHA", "CHARLIE", "BRAVO"]

    def test_missing_direction_means_ascending(self, db_session: Session, coupons):
        query = apply_order_by(db_session.query(Coupon), Coupon, "code")
        assert [c.code for c in query.all()] == ["ALPHA", "BRAVO", "CHARLIE"]

    def test_invalid_field_falls_back_to_default(self, db_session: Session, coupons):
        query = apply_order_by(db_session.query(Coupon), Coupon, "nonexistent:asc")
        assert "created_at DESC" in str(query)

    def test_invalid_direction_falls_back_to_default(self, db_session: Session, coupons):
        query = apply_order_by(db_session.query(Coupon), Coupon, "code:sideways")
        assert "code DESC" in str(query)

    def test_relationship_names_are_rejected(self, db_session: Session):
        query = apply_order_by(db_session.query(Coupon), Coupon, "__table__:asc")
        assert "created_at DESC" in str(query)


class TestSortingEndpoints:
    def test_admin_coupons_order_by(self, client, coupons):
        response = client.get(
            "/v1/admin/coupons/?order_by=code:asc",
            headers=auth_headers(ADMIN_USER_ID, role="admin"),
        )

        assert response.status_code == 200
        assert [c["code"] for c in response.json()] == ["ALPHA", "BRAVO", "CHARLIE"]

    def test_orders_order_by_payable_amount(self, client, merchant, address, products):
        for quantity in (3, 2, 4):
            response = client.post(
                "/v1/orders/",
                json={
                    "merchant_id": str(merchant.id),
                    "address_id": str(address.id),
                    "items": [{"product_id": str(products["noodles"].id), "quantity": quantity}],
                },
                headers=auth_headers(),
            )
            assert response.status_code == 201

        response = client.get("/v1/orders/?order_by=payable_amount:asc", headers=auth_headers())

        amounts = [Decimal(o["payable_amount"]) for o in response.json()]
        assert amounts == [Decimal("30.00"), Decimal("42.50"), Decimal("55.00")]

    def test_repository_passes_order_by(self, db_session: Session, coupons):
        result = CouponRepository(db_session).get_all(order_by="discount_value:asc")
        assert [c.code for c in result] == ["BRAVO", "CHARLIE", "ALPHA"]
