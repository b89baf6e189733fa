"""Tests for reparation entities."""

from datetime import datetime

import pytest

from src.core.entities.reparation import (
    Reparation,
    ReparationItem,
    ReparationService,
    ReparationStatus,
)


class TestReparationStatus:
    """Tests for status transitions."""

    @pytest.mark.parametrize(
        ("current", "target", "allowed"),
        [
            (ReparationStatus.PENDING, ReparationStatus.IN_PROGRESS, True),
            (ReparationStatus.PENDING, ReparationStatus.COMPLETED, True),
            (ReparationStatus.PENDING, ReparationStatus.CANCELLED, True),
            (ReparationStatus.IN_PROGRESS, ReparationStatus.COMPLETED, True),
            (ReparationStatus.IN_PROGRESS, ReparationStatus.PENDING, False),
            (ReparationStatus.COMPLETED, ReparationStatus.IN_PROGRESS, False),
            (ReparationStatus.CANCELLED, ReparationStatus.PENDING, False),
            (ReparationStatus.COMPLETED, ReparationStatus.COMPLETED, True),
        ],
    )
    def test_can_move_to(self, current, target, allowed):
        assert current.can_move_to(target) is allowed

    def test_terminal(self):
        assert ReparationStatus.COMPLETED.is_terminal
        assert ReparationStatus.CANCELLED.is_terminal
        assert not ReparationStatus.PENDING.is_terminal


class TestReparation:
    """Tests for Reparation totals."""

    def test_totals(self):
        reparation = Reparation(
            vehicle_id=1,
            description="Brake job",
            labor_cost=30.0,
            items=[
                ReparationItem(item_id=1, quantity=2, buy_price=40.0, sell_price=50.0),
                ReparationItem(item_id=2, quantity=1, buy_price=5.0, sell_price=8.0),
            ],
            services=[ReparationService(service_id=1, price=20.0)],
        )
        assert reparation.items[0].total_price == 100.0
        assert reparation.parts_cost == 108.0
        assert reparation.services_cost == 20.0
        assert reparation.total_profit == 23.0
        assert reparation.total_cost == 158.0

    def test_recompute_after_line_change(self):
        reparation = Reparation(vehicle_id=1, description="Oil change")
        assert reparation.total_cost == 0.0
        reparation.items = [ReparationItem(item_id=1, quantity=3, sell_price=10.0)]
        reparation.recompute_totals()
        assert reparation.parts_cost == 30.0
        assert reparation.total_cost == 30.0

    def test_line_quantity_must_be_positive(self):
        with pytest.raises(ValueError):
            ReparationItem(item_id=1, quantity=0)

    def test_complete_stamps_end_date(self):
        reparation = Reparation(vehicle_id=1, description="Oil change")
        reparation.set_status(ReparationStatus.COMPLETED)
        assert reparation.end_date is not None

    def test_complete_keeps_existing_end_date(self):
        end = datetime(2024, 5, 1, 12, 0)
        reparation = Reparation(vehicle_id=1, description="Oil change", end_date=end)
        reparation.set_status(ReparationStatus.COMPLETED)
        assert reparation.end_date == end
