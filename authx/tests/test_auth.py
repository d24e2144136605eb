# authx/tests/test_auth.py
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

User = get_user_model()


class AuthFlowTest(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()

    def register(self, email="Alice@Example.com", password="secret123", name="Alice"):
        return self.client.post(
            reverse("register"),
            {"email": email, "password": password, "name": name},
            format="json",
        )

    def test_register_returns_tokens(self):
        resp = self.register()
        self.assertEqual(resp.status_code, 201, resp.data)
        self.assertIn("access", resp.data)
        self.assertIn("refresh", resp.data)
        self.assertEqual(resp.data["user"]["email"], "alice@example.com")

        user = User.objects.get(email="alice@example.com")
        self.assertEqual(user.name, "Alice")
        self.assertTrue(user.check_password("secret123"))

    def test_register_rejects_duplicate_email_and_short_password(self):
        self.register()

        resp = self.register(email="alice@example.com")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data["kind"], "validation_error")
        self.assertIn("email", resp.data["errors"])

        resp = self.register(email="bob@example.com", password="123")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("password", resp.data["errors"])

    def test_login_and_me(self):
        self.register()

        resp = self.client.post(
            reverse("login"),
            {"email": "alice@example.com", "password": "secret123"},
            format="json",
        )
        self.assertEqual(resp.status_code, 200, resp.data)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {resp.data['access']}")
        resp = self.client.get(reverse("me"))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["name"], "Alice")

    def test_login_with_wrong_password(self):
        self.register()

        resp = self.client.post(
            reverse("login"),
            {"email": "alice@example.com", "password": "nope"},
            format="json",
        )
        self.assertEqual(resp.status_code, 401)
        self.assertFalse(resp.data["success"])
        self.assertEqual(resp.data["kind"], "authorization_error")
        self.assertEqual(resp.data["errors"]["detail"], "Invalid credentials")
        self.assertIn("Bearer", resp["WWW-Authenticate"])

    def test_login_unknown_email_uses_same_envelope(self):
        resp = self.client.post(
            reverse("login"),
            {"email": "ghost@example.com", "password": "secret123"},
            format="json",
        )
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.data["status_code"], 401)
        self.assertEqual(resp.data["errors"]["detail"], "Invalid credentials")
