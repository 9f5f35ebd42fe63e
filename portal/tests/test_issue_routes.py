import unittest

from portal.tests.support import PortalApiTestCase


class TestIssueRoutes(PortalApiTestCase):

    def publish(self, issue_number="12", title="Estate al campo", publish_date="2024-06-01", **extra):
        data = {"issueNumber": issue_number, "title": title, "publishDate": publish_date}
        data.update(extra)
        return self.client.post(
            "/api/issues",
            data=data,
            files={"issueFile": ("numero.pdf", b"%PDF-1.4 issue", "application/pdf")},
            headers=self.admin_headers,
        )

    def test_publish_and_list_newest_first(self):
        first = self.publish(issue_number="11", title="Primavera", publish_date="2024-03-01")
        second = self.publish(issue_number="12", title="Estate", publish_date="2024-06-01",
                              description="Numero speciale")

        self.assertEqual(first.status_code, 201)
        self.assertEqual(second.status_code, 201)
        self.assertEqual(second.json()["description"], "Numero speciale")
        self.assertTrue(second.json()["publishDate"].startswith("2024-06-01"))

        response = self.client.get("/api/issues", headers=self.member_headers)
        self.assertEqual([item["issueNumber"] for item in response.json()], ["12", "11"])
        self.assertEqual(len(self.blobs("issues")), 2)

    def test_missing_fields_leave_no_blob(self):
        response = self.publish(title="")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Issue number and title are required.")
        self.assertEqual(self.blobs("issues"), [])

    def test_bad_publish_date_leaves_no_blob(self):
        response = self.publish(publish_date="giugno 2024")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "publishDate must be a date in YYYY-MM-DD format.")
        self.assertEqual(self.blobs("issues"), [])
        self.assertEqual(self.database["magazine_issues"].count_documents({}), 0)

    def test_download_and_delete(self):
        issue_id = self.publish().json()["id"]

        download = self.client.get(f"/api/issues/{issue_id}/download", headers=self.member_headers)
        self.assertEqual(download.status_code, 200)
        self.assertEqual(download.content, b"%PDF-1.4 issue")

        response = self.client.delete(f"/api/issues/{issue_id}", headers=self.admin_headers)
        self.assertEqual(response.json(), {"message": "Issue (file and metadata) deleted successfully."})
        self.assertEqual(self.blobs("issues"), [])


if __name__ == '__main__':
    unittest.main()
