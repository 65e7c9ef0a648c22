from datetime import datetime, timedelta, timezone

from src.api.models import Announcement

ADDRESS = {
    "fullName": "Le Thi C",
    "phone": "0912345678",
    "street": "5 Tran Hung Dao",
    "city": "Da Nang",
}


class TestAddresses:
    def test_first_address_becomes_default(self, client, customer_headers):
        response = client.post("/addresses", json=ADDRESS, headers=customer_headers)

        assert response.status_code == 201
        assert response.json()["data"]["isDefault"] is True

    def test_single_default(self, client, customer_headers):
        first = client.post("/addresses", json=ADDRESS, headers=customer_headers).json()["data"]
        second = client.post("/addresses", json={**ADDRESS, "isDefault": True}, headers=customer_headers).json()["data"]

        listed = client.get("/addresses", headers=customer_headers).json()["data"]

        assert [a["id"] for a in listed if a["isDefault"]] == [second["id"]]
        assert listed[0]["id"] == second["id"]
        assert first["id"] in [a["id"] for a in listed]

    def test_deleting_default_promotes_another(self, client, customer_headers):
        first = client.post("/addresses", json=ADDRESS, headers=customer_headers).json()["data"]
        second = client.post("/addresses", json={**ADDRESS, "city": "Hue"}, headers=customer_headers).json()["data"]

        assert client.delete(f"/addresses/{first['id']}", headers=customer_headers).status_code == 200

        listed = client.get("/addresses", headers=customer_headers).json()["data"]
        assert listed == [{**listed[0], "id": second["id"], "isDefault": True}]

    def test_other_users_address(self, client, address, admin_headers):
        response = client.put(f"/addresses/{address.id}", json={"city": "Hanoi"}, headers=admin_headers)

        assert response.status_code == 404


class TestWishlist:
    def test_add_check_remove(self, client, customer_headers, product):
        added = client.post("/wishlist", json={"productId": product.id}, headers=customer_headers)
        assert added.status_code == 201

        duplicate = client.post("/wishlist", json={"productId": product.id}, headers=customer_headers)
        assert duplicate.status_code == 400

        check = client.get("/wishlist/check", params={"productId": product.id}, headers=customer_headers)
        assert check.json()["data"]["isInWishlist"] is True

        listed = client.get("/wishlist", headers=customer_headers).json()
        assert listed["data"][0]["product"]["name"] == "Linen Shirt"

        assert client.delete(f"/wishlist/{product.id}", headers=customer_headers).status_code == 200
        check = client.get("/wishlist/check", params={"productId": product.id}, headers=customer_headers)
        assert check.json()["data"]["isInWishlist"] is False

    def test_requires_signin(self, client, product):
        assert client.post("/wishlist", json={"productId": product.id}).status_code == 401


class TestAnnouncements:
    def add(self, session, title, **kwargs):
        announcement = Announcement(title=title, message=f"{title} message", **kwargs)
        session.add(announcement)
        session.commit()
        return announcement

    def test_newest_active_in_window(self, client, session):
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        self.add(session, "Old sale", created_at=now - timedelta(days=2))
        self.add(session, "Disabled", active=False)
        self.add(session, "Future", start_at=now + timedelta(days=1))
        self.add(session, "Flash sale", created_at=now - timedelta(days=1), end_at=now + timedelta(hours=2))

        data = client.get("/announcements/active").json()["data"]

        assert data["title"] == "Flash sale"

    def test_nothing_active(self, client, session):
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        self.add(session, "Ended", end_at=now - timedelta(minutes=1))

        response = client.get("/announcements/active")

        assert response.status_code == 200
        assert response.json()["data"] is None

    def test_admin_rejects_inverted_window(self, client, admin_headers):
        now = datetime.now(timezone.utc)
        response = client.post(
            "/admin/announcements",
            json={
                "title": "Sale",
                "message": "Everything 10% off",
                "startAt": now.isoformat(),
                "endAt": (now - timedelta(hours=1)).isoformat(),
            },
            headers=admin_headers,
        )

        assert response.status_code == 400


class TestContact:
    FORM = {
        "name": "Pham Van D",
        "email": "pham@example.com",
        "phone": "0987654321",
        "subject": "order",
        "message": "Where is my order?",
    }

    def test_sends_email(self, client, monkeypatch):
        sent = {}
        monkeypatch.setattr("src.api.routers.contactRoute.send_contact_email", lambda **kwargs: sent.update(kwargs))

        response = client.post("/contact", json=self.FORM)

        assert response.status_code == 200
        assert sent["email"] == "pham@example.com"
        assert sent["subject"].endswith("- Pham Van D")

    def test_smtp_failure_is_500(self, client, monkeypatch):
        def broken(**kwargs):
            raise OSError("smtp down")

        monkeypatch.setattr("src.api.routers.contactRoute.send_contact_email", broken)

        response = client.post("/contact", json=self.FORM)

        assert response.status_code == 500
        assert response.json()["success"] is False
