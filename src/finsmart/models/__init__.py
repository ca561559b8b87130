"""Database models."""
from finsmart.models.base import Base, BaseModel
from finsmart.models.user import User
from finsmart.models.transaction import Transaction
from finsmart.models.goal import Goal

__all__ = ["Base", "BaseModel", "User", "Transaction", "Goal"]
