from datetime import datetime, timedelta
from unittest import mock

from api_test_case import ApiTestCase

from tienda.core.config import settings
from tienda.models.product import Product
from tienda.models.product_image import ProductImage


class ProductListingTest(ApiTestCase):
    """Listados y detalle de productos"""

    def add_product(self, created_at=None, gallery=(), **fields):
        """Inserta un producto directamente en la base, sin pasar por la API"""
        data = {"name": "Reloj", "price": 99.0}
        data.update(fields)
        product = Product(**data)
        if created_at is not None:
            product.created_at = created_at
        self.db.add(product)
        self.db.flush()
        for i, url in enumerate(gallery):
            self.db.add(ProductImage(product_id=product.id, image_url=url, name=product.name, order=i))
        self.db.commit()
        return product

    def test_empty_catalog(self):
        response = self.client.get("/api/products")
        self.assertEqual(200, response.status_code)
        self.assertEqual([], response.json())

    def test_product_without_images_has_empty_list(self):
        self.add_product()
        data = self.client.get("/api/products").json()
        self.assertEqual([], data[0]["images"])

    def test_product_with_only_main_image(self):
        product = self.add_product(image_url="https://cdn.example.com/x.jpg")

        data = self.client.get("/api/products").json()
        self.assertEqual(["https://cdn.example.com/x.jpg"], data[0]["images"])

        detail = self.client.get(f"/api/products/{product.id}").json()
        self.assertEqual(["https://cdn.example.com/x.jpg"], detail["images"])

    def test_list_uses_gallery_in_insertion_order(self):
        self.add_product(image_url="x", gallery=["y", "x"])
        data = self.client.get("/api/products").json()
        self.assertEqual(["y", "x"], data[0]["images"])

    def test_list_collapses_repeated_gallery_rows(self):
        self.add_product(image_url="A", gallery=["A", "A", "B"])
        data = self.client.get("/api/products").json()
        self.assertEqual(["A", "B"], data[0]["images"])

    def test_list_is_ordered_by_most_recent(self):
        now = datetime(2024, 5, 1, 12, 0, 0)
        self.add_product(name="Antiguo", created_at=now - timedelta(days=2))
        self.add_product(name="Reciente", created_at=now)
        self.add_product(name="Intermedio", created_at=now - timedelta(days=1))

        names = [p["name"] for p in self.client.get("/api/products").json()]
        self.assertEqual(["Reciente", "Intermedio", "Antiguo"], names)

    def test_featured_returns_five_most_recent(self):
        now = datetime(2024, 5, 1, 12, 0, 0)
        for i in range(7):
            self.add_product(name=f"Destacado {i}", is_featured=True, created_at=now + timedelta(hours=i))
        self.add_product(name="Normal", is_featured=False, created_at=now + timedelta(days=1))

        response = self.client.get("/api/products/featured")
        self.assertEqual(200, response.status_code)
        data = response.json()
        self.assertEqual(5, len(data))
        self.assertTrue(all(p["is_featured"] for p in data))
        self.assertEqual(
            [f"Destacado {i}" for i in (6, 5, 4, 3, 2)],
            [p["name"] for p in data],
        )

    def test_featured_limit_is_configurable(self):
        settings.FEATURED_PRODUCTS_LIMIT = 2
        for _ in range(3):
            self.add_product(is_featured=True)
        self.assertEqual(2, len(self.client.get("/api/products/featured").json()))

    def test_featured_route_is_not_taken_as_an_id(self):
        response = self.client.get("/api/products/featured")
        self.assertEqual(200, response.status_code)
        self.assertEqual([], response.json())

    def test_get_product_not_found(self):
        response = self.client.get("/api/products/no-existe")
        self.assertEqual(404, response.status_code)
        self.assertEqual({"message": "Producto no encontrado"}, response.json())

    def test_get_product_merges_main_image_first(self):
        product = self.add_product(image_url="X", gallery=["Y", "X"])
        detail = self.client.get(f"/api/products/{product.id}").json()
        self.assertEqual(["X", "Y"], detail["images"])
        self.assertEqual("Reloj", detail["name"])
        self.assertIsNotNone(detail["created_at"])


class ProductMutationTest(ApiTestCase):
    """Creación, actualización y eliminación de productos"""

    def gallery_urls(self, product_id):
        with self.SessionTesting() as db:
            rows = (
                db.query(ProductImage)
                .filter(ProductImage.product_id == product_id)
                .order_by(ProductImage.order)
                .all()
            )
            return [row.image_url for row in rows]

    def test_create_product(self):
        data = self.create_product(
            name="Collar",
            description="Plata de ley",
            price=45.5,
            category="joyas",
            is_featured=True,
            is_new=True,
            is_luxury=False,
            image_url="A",
            images=["A", "B"],
        )
        self.assertTrue(data["id"])
        self.assertEqual("Collar", data["name"])
        self.assertEqual("joyas", data["category"])
        self.assertTrue(data["is_featured"])
        self.assertTrue(data["is_new"])
        self.assertFalse(data["is_luxury"])
        self.assertEqual(["A", "B"], data["images"])
        self.assertIsNotNone(data["created_at"])
        self.assertEqual(1, self.count(Product))

    def test_create_deduplicates_gallery(self):
        data = self.create_product(image_url="A", images=["A", "B", "", None])
        self.assertEqual(["A", "B"], self.gallery_urls(data["id"]))

    def test_create_legacy_mode_duplicates_main_image(self):
        settings.GALLERY_DEDUPLICATE = False
        data = self.create_product(image_url="A", images=["A", "B"])
        self.assertEqual(["A", "A", "B"], self.gallery_urls(data["id"]))

    def test_create_copies_product_name_into_gallery(self):
        data = self.create_product(name="Anillo", image_url="A")
        with self.SessionTesting() as db:
            image = db.query(ProductImage).filter(ProductImage.product_id == data["id"]).one()
        self.assertEqual("Anillo", image.name)

    def test_create_without_images(self):
        data = self.create_product()
        self.assertEqual([], data["images"])
        self.assertEqual([], self.gallery_urls(data["id"]))

    def test_create_requires_name(self):
        response = self.client.post(
            "/api/products", json={"price": 10}, headers=self.admin_headers(),
        )
        self.assertEqual(400, response.status_code)
        body = response.json()
        self.assertIn("message", body)
        self.assertTrue(any(e["field"].endswith("name") for e in body["errors"]))
        self.assertEqual(0, self.count(Product))

    def test_create_rejects_non_positive_price(self):
        response = self.client.post(
            "/api/products", json={"name": "Gratis", "price": 0}, headers=self.admin_headers(),
        )
        self.assertEqual(400, response.status_code)
        self.assertEqual(0, self.count(Product))

    def test_update_replaces_fields_and_gallery(self):
        created = self.create_product(name="Viejo", image_url="A", images=["B"])

        response = self.client.put(
            f"/api/products/{created['id']}",
            json={"name": "Nuevo", "price": 200, "image_url": "C", "images": ["D", "C"]},
            headers=self.admin_headers(),
        )
        self.assertEqual(200, response.status_code, response.text)
        data = response.json()
        self.assertEqual("Nuevo", data["name"])
        self.assertEqual(200, data["price"])
        self.assertEqual(["C", "D"], data["images"])
        self.assertEqual(["D", "C"], self.gallery_urls(created["id"]))

        with self.SessionTesting() as db:
            names = {row.name for row in db.query(ProductImage).all()}
        self.assertEqual({"Nuevo"}, names)

    def test_update_legacy_mode_reinserts_main_image(self):
        settings.GALLERY_DEDUPLICATE = False
        created = self.create_product(image_url="A")

        response = self.client.put(
            f"/api/products/{created['id']}",
            json={"name": "Bolso", "price": 10, "image_url": "A", "images": ["B", "A"]},
            headers=self.admin_headers(),
        )
        self.assertEqual(200, response.status_code)
        self.assertEqual(["B", "A", "A"], self.gallery_urls(created["id"]))
        self.assertEqual(["A", "B"], response.json()["images"])

    def test_update_overwrites_omitted_fields(self):
        created = self.create_product(description="Con descripción", is_featured=True, image_url="A")

        response = self.client.put(
            f"/api/products/{created['id']}",
            json={"name": "Bolso", "price": 10},
            headers=self.admin_headers(),
        )
        data = response.json()
        self.assertIsNone(data["description"])
        self.assertFalse(data["is_featured"])
        self.assertIsNone(data["image_url"])
        self.assertEqual([], data["images"])

    def test_update_unknown_product_returns_404(self):
        response = self.client.put(
            "/api/products/no-existe",
            json={"name": "Nada", "price": 1, "images": ["A"]},
            headers=self.admin_headers(),
        )
        self.assertEqual(404, response.status_code)
        self.assertEqual(0, self.count(ProductImage))

    def test_create_rolls_back_when_gallery_insert_fails(self):
        with mock.patch("tienda.crud.product.plan_gallery", return_value=["A", None]):
            response = self.client.post(
                "/api/products",
                json={"name": "Bolso", "price": 10, "image_url": "A"},
                headers=self.admin_headers(),
            )
        self.assertEqual(500, response.status_code)
        self.assertEqual({"message": "Error de base de datos"}, response.json())
        self.assertEqual(0, self.count(Product))
        self.assertEqual(0, self.count(ProductImage))

    def test_update_rolls_back_when_gallery_insert_fails(self):
        created = self.create_product(name="Viejo", image_url="A", images=["B"])

        with mock.patch("tienda.crud.product.plan_gallery", return_value=["C", None]):
            response = self.client.put(
                f"/api/products/{created['id']}",
                json={"name": "Nuevo", "price": 20, "image_url": "C"},
                headers=self.admin_headers(),
            )
        self.assertEqual(500, response.status_code)

        detail = self.client.get(f"/api/products/{created['id']}").json()
        self.assertEqual("Viejo", detail["name"])
        self.assertEqual("A", detail["image_url"])
        self.assertEqual(["A", "B"], self.gallery_urls(created["id"]))

    def test_delete_product_removes_gallery(self):
        created = self.create_product(image_url="A", images=["B"])
        self.assertEqual(2, self.count(ProductImage))

        response = self.client.delete(f"/api/products/{created['id']}", headers=self.admin_headers())
        self.assertEqual(200, response.status_code)
        self.assertEqual({"success": True}, response.json())
        self.assertEqual(0, self.count(Product))
        self.assertEqual(0, self.count(ProductImage))

    def test_delete_unknown_product_returns_404(self):
        self.create_product(image_url="A")

        response = self.client.delete("/api/products/no-existe", headers=self.admin_headers())
        self.assertEqual(404, response.status_code)
        self.assertEqual(1, self.count(Product))
        self.assertEqual(1, self.count(ProductImage))


class ProductAuthorizationTest(ApiTestCase):
    """Las mutaciones exigen la cabecera x-admin-auth"""

    payload = {"name": "Bolso", "price": 10, "image_url": "A", "images": ["B"]}

    def test_create_without_header(self):
        response = self.client.post("/api/products", json=self.payload)
        self.assertEqual(401, response.status_code)
        self.assertEqual({"message": "Unauthorized"}, response.json())
        self.assertEqual(0, self.count(Product))
        self.assertEqual(0, self.count(ProductImage))

    def test_create_with_wrong_secret(self):
        response = self.client.post(
            "/api/products", json=self.payload, headers=self.admin_headers("incorrecta"),
        )
        self.assertEqual(401, response.status_code)
        self.assertEqual(0, self.count(Product))

    def test_unauthorized_check_runs_before_validation(self):
        response = self.client.post("/api/products", json={})
        self.assertEqual(401, response.status_code)

    def test_update_without_header(self):
        created = self.create_product(name="Original", image_url="A")

        response = self.client.put(f"/api/products/{created['id']}", json=self.payload)
        self.assertEqual(401, response.status_code)

        detail = self.client.get(f"/api/products/{created['id']}").json()
        self.assertEqual("Original", detail["name"])
        self.assertEqual(["A"], detail["images"])

    def test_delete_without_header(self):
        created = self.create_product()

        response = self.client.delete(f"/api/products/{created['id']}")
        self.assertEqual(401, response.status_code)
        self.assertEqual(1, self.count(Product))

    def test_no_configured_secret_rejects_everything(self):
        settings.ADMIN_PASSWORD = None
        response = self.client.post("/api/products", json=self.payload, headers={"x-admin-auth": ""})
        self.assertEqual(401, response.status_code)
        self.assertEqual(0, self.count(Product))


class StoreFailureTest(ApiTestCase):
    """Los errores de base de datos se responden con 500 sin detalles internos"""

    def test_missing_table_returns_generic_500(self):
        ProductImage.__table__.drop(bind=self.engine, checkfirst=True)
        Product.__table__.drop(bind=self.engine, checkfirst=True)

        response = self.client.get("/api/products")
        self.assertEqual(500, response.status_code)
        self.assertEqual({"message": "Error de base de datos"}, response.json())
