"""Shared column types."""

from sqlalchemy import BigInteger, Integer

# SQLite only auto-increments INTEGER PRIMARY KEY columns
BigIntegerKey = BigInteger().with_variant(Integer(), "sqlite")
