import unittest
from unittest.mock import MagicMock

from google.api_core.exceptions import ServiceUnavailable
from requests import ConnectionError as RequestsConnectionError

from gpatracker.core.access import Role
from gpatracker.services.auth_service import AuthServiceError, FirebaseAuthService, ProfileDirectory


def _response(status_code, payload):
    res = MagicMock(status_code=status_code)
    res.json.return_value = payload
    return res


class FirebaseAuthServiceTests(unittest.TestCase):
    def setUp(self):
        self.session = MagicMock()
        self.auth = FirebaseAuthService("api-key", session=self.session)

    def test_sign_in(self):
        self.session.post.return_value = _response(
            200,
            {"localId": "u1", "email": "s@csbs.com", "idToken": "tok", "refreshToken": "ref"},
        )

        result = self.auth.sign_in("s@csbs.com", "2004-05-06")

        self.assertEqual(result.uid, "u1")
        self.assertEqual(result.id_token, "tok")
        self.assertEqual(self.session.post.call_args.kwargs["params"], {"key": "api-key"})

    def test_sign_in_rejected(self):
        self.session.post.return_value = _response(400, {"error": {"message": "INVALID_PASSWORD"}})
        with self.assertRaisesRegex(AuthServiceError, "INVALID_PASSWORD"):
            self.auth.sign_in("s@csbs.com", "wrong")

    def test_network_failure(self):
        self.session.post.side_effect = RequestsConnectionError("offline")
        with self.assertRaisesRegex(AuthServiceError, "AUTH_SERVICE_UNAVAILABLE"):
            self.auth.sign_in("s@csbs.com", "pw")

    def test_missing_api_key(self):
        with self.assertRaises(AuthServiceError):
            FirebaseAuthService("")


class ProfileDirectoryTests(unittest.TestCase):
    def setUp(self):
        self.client = MagicMock()
        self.profiles = {"admins": {}, "students": {}}

        def collection(name):
            coll = MagicMock()

            def document(uid):
                doc = MagicMock()
                data = self.profiles[name].get(uid)
                snap = MagicMock(exists=data is not None)
                snap.to_dict.return_value = data
                doc.get.return_value = snap
                return doc

            coll.document.side_effect = document
            return coll

        self.client.collection.side_effect = collection
        self.directory = ProfileDirectory(self.client)

    def test_student_profile(self):
        self.profiles["students"]["u1"] = {"batch": "2023-2027", "regulation": "2023"}
        identity = self.directory.resolve("u1")
        self.assertEqual(identity.role, Role.STUDENT)
        self.assertEqual(identity.assigned_batch, "2023-2027")
        self.assertEqual(identity.regulation, "2023")

    def test_admin_profile_wins(self):
        self.profiles["admins"]["a1"] = {"role": "batch_admin", "batch": "2021-2025"}
        self.profiles["students"]["a1"] = {"batch": "2023-2027"}
        identity = self.directory.resolve("a1")
        self.assertEqual(identity.role, Role.BATCH_ADMIN)
        self.assertEqual(identity.assigned_batch, "2021-2025")

    def test_year_admin_is_batch_admin(self):
        self.profiles["admins"]["a2"] = {"role": "year_admin", "batch": "2022-2026"}
        self.assertEqual(self.directory.resolve("a2").role, Role.BATCH_ADMIN)

    def test_unknown_role(self):
        self.profiles["admins"]["a3"] = {"role": "janitor"}
        self.assertIsNone(self.directory.resolve("a3"))

    def test_unknown_identity(self):
        self.assertIsNone(self.directory.resolve("ghost"))
        self.assertIsNone(self.directory.resolve(""))

    def test_store_failure(self):
        self.client.collection.side_effect = None
        self.client.collection.return_value.document.return_value.get.side_effect = ServiceUnavailable("down")
        with self.assertRaises(AuthServiceError):
            self.directory.resolve("u1")


if __name__ == "__main__":
    unittest.main()
