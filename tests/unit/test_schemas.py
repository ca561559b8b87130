"""Unit tests for request schema validation."""

from datetime import date, timedelta

import pytest
from pydantic import ValidationError

from finsmart.schemas.auth import UserRegister
from finsmart.schemas.goal import ContributionRequest, GoalCreate, GoalResponse, GoalUpdate
from finsmart.schemas.transaction import TransactionCreate


class TestTransactionCreate:
    def test_minimal_expense(self):
        data = TransactionCreate(kind="expense", description="  Cena en restaurante ", amount=2500)

        assert data.description == "Cena en restaurante"
        assert data.category is None
        assert data.payment_method.value == "cash"

    def test_amount_must_be_positive(self):
        with pytest.raises(ValidationError):
            TransactionCreate(kind="expense", description="Taxi", amount=0)

    def test_future_date_rejected(self):
        with pytest.raises(ValidationError):
            TransactionCreate(
                kind="income",
                description="Salario",
                amount=100,
                txn_date=date.today() + timedelta(days=1),
            )

    def test_unknown_category_rejected(self):
        with pytest.raises(ValidationError):
            TransactionCreate(kind="expense", description="Taxi", amount=100, category="viajes")

    def test_category_is_lowercased(self):
        data = TransactionCreate(
            kind="expense", description="Taxi", amount=100, category="Transporte"
        )
        assert data.category == "transporte"

    def test_blank_category_means_classify(self):
        data = TransactionCreate(kind="expense", description="Taxi", amount=100, category="")
        assert data.category is None

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            TransactionCreate(kind="transfer", description="Taxi", amount=100)


class TestGoalCreate:
    def test_defaults(self):
        data = GoalCreate(title="Vacaciones", target_amount=100000)

        assert data.priority.value == "medium"
        assert data.category.value == "savings"
        assert data.reminder_frequency.value == "weekly"
        assert data.deadline is None

    def test_deadline_must_be_in_future(self):
        with pytest.raises(ValidationError):
            GoalCreate(title="Vacaciones", target_amount=100, deadline=date.today())

    def test_deadline_must_follow_start_date(self):
        in_a_month = date.today() + timedelta(days=30)
        with pytest.raises(ValidationError):
            GoalCreate(
                title="Vacaciones",
                target_amount=100,
                start_date=in_a_month,
                deadline=in_a_month - timedelta(days=1),
            )

    def test_target_must_be_positive(self):
        with pytest.raises(ValidationError):
            GoalCreate(title="Vacaciones", target_amount=0)

    def test_update_has_no_amount_fields_besides_target(self):
        assert "current_amount" not in GoalUpdate.model_fields

    def test_contribution_amount_positive(self):
        with pytest.raises(ValidationError):
            ContributionRequest(amount=-5)


class TestGoalResponse:
    def test_derived_fields(self):
        goal = GoalResponse(
            id="6f1c1f3e-2f4c-4b6a-9d57-1b0b5b0e0a11",
            title="Fondo",
            target_amount=1000,
            current_amount=250,
            start_date=date(2025, 1, 1),
            deadline=date.today() + timedelta(days=10),
            category="emergency",
            priority="high",
            status="active",
            reminder_frequency="never",
            created_at="2025-01-01T00:00:00Z",
            updated_at="2025-01-01T00:00:00Z",
        )

        dumped = goal.model_dump()
        assert dumped["progress"] == 25.0
        assert dumped["remaining_amount"] == 750
        assert dumped["days_remaining"] == 10


class TestUserRegister:
    def test_password_needs_mixed_characters(self):
        with pytest.raises(ValidationError):
            UserRegister(email="a@example.com", password="alllowercase1", full_name="Ana")

    def test_valid(self):
        data = UserRegister(email="a@example.com", password="Secret123", full_name="Ana")
        assert data.email == "a@example.com"
