import unittest

from fastapi.testclient import TestClient

from tests.db_case import DbTestCase

from main import app
from models.research import CompanyResearch
from schemas.research import ResearchCreate, ResearchUpdate
from services.errors import ConflictError, NotFoundError
from services.position_service import delete_position
from services.research_service import (
    create_research,
    get_research,
    list_research,
    update_research,
)


class TestResearchService(DbTestCase):
    def test_create_one_note_per_position(self):
        p = self.add_position("700 HK", "long", 100, name_en="TENCENT")
        note = create_research(self.db, p.id, ResearchCreate(strategy="platform", outlook_3to5y="steady"))

        self.assertEqual(note.position_id, p.id)
        self.assertEqual(note.strategy, "platform")
        self.assertEqual(note.outlook_3to5y, "steady")
        self.assertEqual(note.valuation, "")
        self.assertEqual(note.position.ticker_bbg, "700 HK")

        with self.assertRaises(ConflictError):
            create_research(self.db, p.id, ResearchCreate())

    def test_create_for_unknown_position(self):
        with self.assertRaises(NotFoundError):
            create_research(self.db, 404, ResearchCreate())

    def test_partial_update_keeps_other_sections(self):
        p = self.add_position("NVDA US", "long", 50)
        note = create_research(self.db, p.id, ResearchCreate(strategy="gpus", tam="large"))

        updated = update_research(self.db, note.id, ResearchUpdate(tam="larger", notes=None))
        self.assertEqual(updated.tam, "larger")
        self.assertEqual(updated.strategy, "gpus")
        self.assertEqual(updated.notes, "")

    def test_update_and_get_unknown(self):
        with self.assertRaises(NotFoundError):
            update_research(self.db, 1, ResearchUpdate(tam="x"))
        with self.assertRaises(NotFoundError):
            get_research(self.db, 1)

    def test_list_newest_first_with_position(self):
        a = self.add_position("A US", "long", 1, name_en="ALPHA")
        b = self.add_position("B US", "short", 1, name_en="BETA")
        create_research(self.db, a.id, ResearchCreate())
        create_research(self.db, b.id, ResearchCreate())

        rows = list_research(self.db)
        self.assertEqual([r.position.name_en for r in rows], ["BETA", "ALPHA"])

    def test_deleting_position_removes_its_note(self):
        p = self.add_position("X LN", "long", 1)
        create_research(self.db, p.id, ResearchCreate(notes="gone soon"))

        delete_position(self.db, p.id)
        self.assertEqual(self.db.query(CompanyResearch).count(), 0)


class TestResearchApi(DbTestCase):
    def setUp(self):
        super().setUp()
        self.client = TestClient(app)

    def test_create_update_and_fetch(self):
        p = self.add_position("700 HK", "long", 100, name_en="TENCENT")

        res = self.client.post(f"/api/research/{p.id}", json={"valueProposition": "moat", "outlook3to5y": "up"})
        self.assertEqual(res.status_code, 201)
        body = res.json()
        self.assertEqual(body["positionId"], p.id)
        self.assertEqual(body["valueProposition"], "moat")
        self.assertEqual(body["outlook3to5y"], "up")
        self.assertEqual(body["position"]["tickerBbg"], "700 HK")

        dup = self.client.post(f"/api/research/{p.id}", json={})
        self.assertEqual(dup.status_code, 409)

        res = self.client.put(f"/api/research/{body['id']}", json={"outlook3to5y": "flat", "tam": None})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["outlook3to5y"], "flat")
        self.assertEqual(res.json()["valueProposition"], "moat")

        listed = self.client.get("/api/research").json()
        self.assertEqual([r["id"] for r in listed], [body["id"]])
        self.assertEqual(self.client.get(f"/api/research/{body['id']}").status_code, 200)

    def test_unknown_ids(self):
        self.assertEqual(self.client.post("/api/research/99", json={}).status_code, 404)
        self.assertEqual(self.client.get("/api/research/99").status_code, 404)
        self.assertEqual(self.client.put("/api/research/99", json={"tam": "x"}).status_code, 404)


if __name__ == "__main__":
    unittest.main()
