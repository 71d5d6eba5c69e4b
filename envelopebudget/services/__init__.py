"""Budget operations. Each takes an explicit SQLAlchemy session and caller id."""
