from decimal import Decimal

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.catalog.models import Category, Product
from apps.users.models import Role, User


class CatalogApiTests(APITestCase):
    def setUp(self):
        operator_role = Role.objects.create(authority="ROLE_OPERATOR")
        self.operator = User.objects.create_user(
            email="alex@gmail.com", password="123456", first_name="Alex"
        )
        self.operator.roles.add(operator_role)
        self.client_user = User.objects.create_user(
            email="bob@gmail.com", password="123456", first_name="Bob"
        )
        self.books = Category.objects.create(name="Books")
        self.electronics = Category.objects.create(name="Electronics")
        self.computers = Category.objects.create(name="Computers")
        for i in range(1, 26):
            product = Product.objects.create(
                name=f"Product {i:02d}", price=Decimal("10.00") * i
            )
            product.categories.add(self.books if i % 2 else self.electronics)
        self.tv = Product.objects.create(name="Smart TV", price=Decimal("2190.00"))
        self.tv.categories.add(self.electronics, self.computers)
        self.list_url = reverse("api-products-list")
        self.detail_url = lambda pk: reverse("api-products-detail", args=[pk])
        self.payload = {
            "name": "Table",
            "price": 100.0,
            "description": "Good table",
            "imgUrl": "https://img.example.com/table.png",
            "date": "2020-07-14T10:00:00Z",
            "categories": [{"id": self.electronics.id}],
        }

    def test_list_returns_first_page_sorted_by_name(self):
        res = self.client.get(self.list_url, {"page": 1, "size": 12, "sort": "name"})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["count"], 26)
        self.assertEqual(res.data["totalPages"], 3)
        self.assertEqual(len(res.data["results"]), 12)
        self.assertEqual(res.data["results"][0]["name"], "Product 01")
        self.assertIsNone(res.data["previous"])
        self.assertIn("page=2", res.data["next"])

    def test_list_out_of_range_page_is_empty(self):
        res = self.client.get(self.list_url, {"page": 10})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["results"], [])
        self.assertEqual(res.data["count"], 26)

    def test_list_filters_by_category(self):
        res = self.client.get(self.list_url, {"categoryId": self.computers.id})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual([p["name"] for p in res.data["results"]], ["Smart TV"])
        self.assertEqual(
            [c["id"] for c in res.data["results"][0]["categories"]],
            sorted([self.electronics.id, self.computers.id]),
        )

    def test_product_in_several_filtered_categories_listed_once(self):
        res = self.client.get(
            self.list_url, {"categoryId": self.electronics.id, "name": "smart"}
        )
        self.assertEqual(res.data["count"], 1)

    def test_list_category_zero_returns_everything(self):
        res = self.client.get(self.list_url, {"categoryId": 0, "size": 100})
        self.assertEqual(res.data["count"], 26)
        self.assertEqual(len(res.data["results"]), 26)

    def test_get_existing_and_missing_product(self):
        res = self.client.get(self.detail_url(self.tv.id))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["id"], self.tv.id)
        self.assertEqual(res.data["price"], "2190.00")
        missing = self.client.get(self.detail_url(9999))
        self.assertEqual(missing.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(missing.data["error"]["code"], "NOT_FOUND")

    def test_insert_requires_operator(self):
        anonymous = self.client.post(self.list_url, self.payload, format="json")
        self.assertEqual(anonymous.status_code, status.HTTP_401_UNAUTHORIZED)
        self.client.force_authenticate(user=self.client_user)
        forbidden = self.client.post(self.list_url, self.payload, format="json")
        self.assertEqual(forbidden.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Product.objects.filter(name="Table").exists())

    def test_insert_returns_created_with_location(self):
        self.client.force_authenticate(user=self.operator)
        res = self.client.post(self.list_url, self.payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        new_id = res.data["id"]
        self.assertIsNotNone(new_id)
        self.assertTrue(res["Location"].endswith(f"/products/{new_id}"))
        self.assertEqual(res.data["name"], "Table")
        self.assertEqual(res.data["categories"], [{"id": self.electronics.id, "name": "Electronics"}])
        self.assertTrue(Product.objects.filter(pk=new_id, name="Table").exists())

    def test_insert_with_unknown_category_returns_404_and_creates_nothing(self):
        self.client.force_authenticate(user=self.operator)
        payload = dict(self.payload, categories=[{"id": 9999}])
        res = self.client.post(self.list_url, payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(res.data["error"]["details"], {"categoryIds": [9999]})
        self.assertFalse(Product.objects.filter(name="Table").exists())

    def test_update_replaces_category_set(self):
        self.client.force_authenticate(user=self.operator)
        payload = dict(self.payload, name="Smart TV 2", categories=[{"id": self.books.id}])
        res = self.client.put(self.detail_url(self.tv.id), payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["name"], "Smart TV 2")
        self.tv.refresh_from_db()
        self.assertEqual(list(self.tv.categories.values_list("id", flat=True)), [self.books.id])

    def test_update_missing_product_returns_404_and_creates_nothing(self):
        self.client.force_authenticate(user=self.operator)
        before = Product.objects.count()
        res = self.client.put(self.detail_url(999), self.payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
        self.assertIn("message", res.data["error"])
        self.assertEqual(Product.objects.count(), before)

    def test_delete_product_then_get_returns_404(self):
        self.client.force_authenticate(user=self.operator)
        res = self.client.delete(self.detail_url(self.tv.id))
        self.assertEqual(res.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(
            self.client.get(self.detail_url(self.tv.id)).status_code,
            status.HTTP_404_NOT_FOUND,
        )
        self.assertEqual(
            self.client.delete(self.detail_url(self.tv.id)).status_code,
            status.HTTP_404_NOT_FOUND,
        )

    def test_delete_category_in_use_returns_409_and_keeps_row(self):
        self.client.force_authenticate(user=self.operator)
        url = reverse("api-categories-detail", args=[self.computers.id])
        res = self.client.delete(url)
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["error"]["code"], "DATABASE_ERROR")
        self.assertTrue(Category.objects.filter(pk=self.computers.id).exists())

    def test_category_crud(self):
        self.client.force_authenticate(user=self.operator)
        list_url = reverse("api-categories-list")
        created = self.client.post(list_url, {"name": "Garden"}, format="json")
        self.assertEqual(created.status_code, status.HTTP_201_CREATED)
        cid = created.data["id"]
        self.assertTrue(created["Location"].endswith(f"/categories/{cid}"))
        duplicate = self.client.post(list_url, {"name": "Garden"}, format="json")
        self.assertEqual(duplicate.status_code, status.HTTP_409_CONFLICT)
        url = reverse("api-categories-detail", args=[cid])
        renamed = self.client.put(url, {"name": "Outdoor"}, format="json")
        self.assertEqual(renamed.data["name"], "Outdoor")
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(self.client.get(url).status_code, status.HTTP_404_NOT_FOUND)

    def test_category_list_is_public_and_paged(self):
        res = self.client.get(reverse("api-categories-list"), {"sort": "name,desc"})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["count"], 3)
        self.assertEqual(
            [c["name"] for c in res.data["results"]], ["Electronics", "Computers", "Books"]
        )
