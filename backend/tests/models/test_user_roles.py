# tests/models/test_user_roles.py
import pytest

from bidding.models import Role


def test_buyer_capabilities():
    assert Role.BUYER.can_create_projects
    assert Role.BUYER.can_select_bids
    assert Role.BUYER.can_complete
    assert not Role.BUYER.can_bid
    assert not Role.BUYER.can_deliver


def test_seller_capabilities():
    assert Role.SELLER.can_bid
    assert Role.SELLER.can_deliver
    assert not Role.SELLER.can_create_projects
    assert not Role.SELLER.can_select_bids
    assert not Role.SELLER.can_complete


def test_role_parsing():
    assert Role("BUYER") is Role.BUYER
    with pytest.raises(ValueError):
        Role("buyer")


def test_user_relationships(db_session, open_project, sample_bid, buyer, seller):
    db_session.refresh(buyer)
    db_session.refresh(seller)

    assert [p.id for p in buyer.projects] == [open_project.id]
    assert [b.id for b in seller.bids] == [sample_bid.id]
    assert buyer.bids == []
