import os
import unittest

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")

from database import Base, SessionLocal, engine
import models  # noqa: F401  (registers every table)
from models.position import Position
from models.taxonomy import Taxonomy


class DbTestCase(unittest.TestCase):
    """Fresh schema per test on the shared in-memory engine."""

    def setUp(self):
        Base.metadata.drop_all(bind=engine)
        Base.metadata.create_all(bind=engine)
        self.db = SessionLocal()

    def tearDown(self):
        self.db.close()

    def add_position(self, ticker, long_short="long", amount=0.0, **kw):
        p = Position(ticker_bbg=ticker, long_short=long_short, position_amount=amount, **kw)
        self.db.add(p)
        self.db.commit()
        return p

    def add_taxonomy(self, type_, name, **kw):
        t = Taxonomy(type=type_, name=name, **kw)
        self.db.add(t)
        self.db.commit()
        return t
