import unittest

from portal.tests.support import PortalApiTestCase

CAMP = {
    "name": "Base scout Colle Verde",
    "description": "Prato e bosco con casetta attrezzata",
    "address": "Via dei Pini 4",
    "city": "Asiago",
    "province": " vi ",
    "contact": {"phone": "0424 000000", "email": "Info@ColleVerde.it", "responsible": "Marta Rossi"},
    "capacity": 40,
    "services": ["acqua", "bagni"],
}


class TestCampRoutes(PortalApiTestCase):

    def propose(self, headers=None, **overrides):
        payload = dict(CAMP, **overrides)
        return self.client.post("/api/camps", json=payload, headers=headers or self.member_headers)

    def test_member_proposal_is_pending(self):
        response = self.propose(status="approved")

        self.assertEqual(response.status_code, 201)
        camp = response.json()
        self.assertEqual(camp["status"], "pending")
        self.assertEqual(camp["addedBy"], self.member.user_id)
        self.assertEqual(camp["province"], "VI")
        self.assertEqual(camp["contact"]["email"], "info@colleverde.it")

        self.assertEqual(self.client.get("/api/camps").json(), [])

    def test_admin_may_set_status(self):
        response = self.propose(headers=self.admin_headers, status="approved")

        self.assertEqual(response.json()["status"], "approved")
        self.assertEqual(len(self.client.get("/api/camps").json()), 1)

    def test_approve_and_reject(self):
        camp_id = self.propose().json()["id"]

        forbidden = self.client.put(f"/api/camps/{camp_id}/approve", headers=self.member_headers)
        self.assertEqual(forbidden.status_code, 403)

        approved = self.client.put(f"/api/camps/{camp_id}/approve", headers=self.admin_headers)
        self.assertEqual(approved.json()["status"], "approved")
        self.assertEqual(self.client.get(f"/api/camps/{camp_id}").json()["status"], "approved")

        rejected = self.client.put(f"/api/camps/{camp_id}/reject", headers=self.admin_headers)
        self.assertEqual(rejected.json()["status"], "rejected")
        self.assertEqual(self.client.get("/api/camps").json(), [])

    def test_list_all_is_admin_only(self):
        self.propose()

        self.assertEqual(self.client.get("/api/camps/all", headers=self.member_headers).status_code, 403)
        self.assertEqual(len(self.client.get("/api/camps/all", headers=self.admin_headers).json()), 1)

    def test_partial_update(self):
        camp_id = self.propose().json()["id"]

        response = self.client.put(f"/api/camps/{camp_id}", json={"capacity": 55}, headers=self.admin_headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["capacity"], 55)
        self.assertEqual(response.json()["city"], "Asiago")

        empty = self.client.put(f"/api/camps/{camp_id}", json={}, headers=self.admin_headers)
        self.assertEqual(empty.status_code, 400)
        self.assertEqual(empty.json()["detail"], "No fields to update.")

    def test_invalid_proposal(self):
        response = self.propose(capacity=0)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "client_input")

        self.assertEqual(self.client.post("/api/camps", json=CAMP).status_code, 401)

    def test_delete(self):
        camp_id = self.propose().json()["id"]

        response = self.client.delete(f"/api/camps/{camp_id}", headers=self.admin_headers)
        self.assertEqual(response.json(), {"message": "Camp deleted successfully."})
        self.assertEqual(self.client.get(f"/api/camps/{camp_id}").status_code, 404)
        self.assertEqual(self.client.get("/api/camps/not-an-id").status_code, 404)


if __name__ == '__main__':
    unittest.main()
