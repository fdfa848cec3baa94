"""Declarative base for the intake tables."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
