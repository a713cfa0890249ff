from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase
from rest_framework_simplejwt.tokens import AccessToken

from apps.users.models import Role, User


class TestAuth(APITestCase):
    def setUp(self):
        self.login_url = reverse("auth-login")
        self.me_url = reverse("auth-me")
        self.refresh_url = reverse("auth-refresh")
        self.logout_url = reverse("auth-logout")
        operator = Role.objects.create(authority="ROLE_OPERATOR")
        self.user = User.objects.create_user(
            email="alex@gmail.com",
            password="123456",
            first_name="Alex",
            last_name="Brown",
        )
        self.user.roles.add(operator)
        self.credentials = {"email": "alex@gmail.com", "password": "123456"}

    def _login(self):
        return self.client.post(self.login_url, self.credentials, format="json")

    def test_login(self):
        response = self._login()
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("access", response.data)
        self.assertIn("refresh", response.data)

    def test_access_token_carries_name_and_authorities(self):
        token = AccessToken(self._login().data["access"])
        self.assertEqual(token["first_name"], "Alex")
        self.assertEqual(token["authorities"], ["ROLE_OPERATOR"])

    def test_login_with_wrong_password(self):
        response = self.client.post(
            self.login_url, {"email": "alex@gmail.com", "password": "nope"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data["error"]["code"], "UNAUTHORIZED")

    def test_me_authenticated(self):
        token = self._login().data["access"]
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        response = self.client.get(self.me_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["email"], "alex@gmail.com")
        self.assertEqual(response.data["firstName"], "Alex")
        self.assertEqual(response.data["roles"][0]["authority"], "ROLE_OPERATOR")

    def test_me_unauthenticated(self):
        response = self.client.get(self.me_url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_refresh_token(self):
        refresh = self._login().data["refresh"]
        response = self.client.post(self.refresh_url, {"refresh": refresh}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("access", response.data)

    def test_bearer_token_grants_operator_writes(self):
        token = self._login().data["access"]
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        response = self.client.post(
            reverse("api-categories-list"), {"name": "Garden"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_logout_blacklists_refresh(self):
        login = self._login()
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {login.data['access']}")
        response = self.client.post(
            self.logout_url, {"refresh": login.data["refresh"]}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        reused = self.client.post(
            self.refresh_url, {"refresh": login.data["refresh"]}, format="json"
        )
        self.assertEqual(reused.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_logout_with_invalid_token(self):
        token = self._login().data["access"]
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        response = self.client.post(self.logout_url, {"refresh": "garbage"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["code"], "VALIDATION_ERROR")
