import pytest

from tests.conftest import headers_for


class TestRegisterCompany:
    """Self-service company registration"""

    @pytest.mark.asyncio
    async def test_register_company(self, client):
        response = await client.post(
            "/api/companies", json={"name": "Initech", "subdomain": "initech"}
        )

        assert response.status_code == 201
        data = response.json()
        assert data["subdomain"] == "initech"
        assert data["is_active"] is True
        assert data["allows_self_provisioning"] is False
        assert data["primary_color"] == "#2563EB"
        assert data["id"].startswith("company_")

    @pytest.mark.asyncio
    async def test_subdomain_is_lowercased(self, client):
        response = await client.post(
            "/api/companies", json={"name": "Initech", "subdomain": "  IniTech "}
        )

        assert response.status_code == 201
        assert response.json()["subdomain"] == "initech"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("subdomain", ["my_co", "my.co", "my co", "café"])
    async def test_invalid_subdomain_rejected(self, client, subdomain):
        response = await client.post(
            "/api/companies", json={"name": "Bad", "subdomain": subdomain}
        )

        assert response.status_code == 400
        assert "lowercase letters" in response.json()["detail"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("subdomain", ["www", "admin"])
    async def test_reserved_subdomain_rejected(self, client, subdomain):
        response = await client.post(
            "/api/companies", json={"name": "Sneaky", "subdomain": subdomain}
        )

        assert response.status_code == 400
        assert "reserved" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_taken_subdomain_rejected(self, client, acme):
        response = await client.post(
            "/api/companies", json={"name": "Acme Again", "subdomain": "acme"}
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "This subdomain is already taken"

    @pytest.mark.asyncio
    async def test_blank_name_rejected(self, client):
        response = await client.post(
            "/api/companies", json={"name": "   ", "subdomain": "blank"}
        )

        assert response.status_code == 422


class TestCurrentCompany:
    @pytest.mark.asyncio
    async def test_current_company_from_host(self, client, acme):
        response = await client.get(
            "/api/companies/current", headers={"Host": "acme.platform.com"}
        )

        assert response.status_code == 200
        assert response.json()["id"] == acme.id

    @pytest.mark.asyncio
    async def test_current_company_from_query_override(self, client, acme):
        response = await client.get("/api/companies/current", params={"subdomain": "acme"})

        assert response.status_code == 200
        assert response.json()["name"] == "Acme Corp"

    @pytest.mark.asyncio
    async def test_unknown_tenant_reports_not_found(self, client):
        response = await client.get(
            "/api/companies/current", headers={"Host": "nosuch.platform.com"}
        )

        assert response.status_code == 404
        body = response.json()
        assert body["code"] == "tenant_not_found"
        assert body["tenant_key"] == "nosuch"

    @pytest.mark.asyncio
    async def test_deactivated_company_is_not_found(self, client, db_session, acme):
        acme.is_active = False
        await db_session.commit()

        response = await client.get("/api/companies/current", params={"subdomain": "acme"})

        assert response.status_code == 404
        assert response.json()["code"] == "tenant_not_found"

    @pytest.mark.asyncio
    async def test_main_site_has_no_company(self, client):
        response = await client.get(
            "/api/companies/current", headers={"Host": "platform.com"}
        )

        assert response.status_code == 404
        assert "code" not in response.json()


class TestDescribeSite:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "host,kind,tenant_key",
        [
            ("platform.com", "main_site", None),
            ("www.platform.com", "main_site", None),
            ("admin.platform.com", "admin", None),
            ("localhost:8000", "main_site", None),
        ],
    )
    async def test_non_tenant_sites(self, client, host, kind, tenant_key):
        response = await client.get("/api/companies/site", headers={"Host": host})

        assert response.status_code == 200
        assert response.json() == {"kind": kind, "tenant_key": tenant_key, "company": None}

    @pytest.mark.asyncio
    async def test_tenant_site_carries_company(self, client, acme):
        response = await client.get("/api/companies/site", headers={"Host": "acme.platform.com"})

        data = response.json()
        assert data["kind"] == "tenant"
        assert data["tenant_key"] == "acme"
        assert data["company"]["id"] == acme.id

    @pytest.mark.asyncio
    async def test_unknown_tenant_site_has_null_company(self, client):
        response = await client.get("/api/companies/site", headers={"Host": "ghost.platform.com"})

        data = response.json()
        assert data["kind"] == "tenant"
        assert data["company"] is None


@pytest.mark.asyncio
async def test_tenant_not_found_precedes_membership(client):
    """An unknown tenant is reported before any membership check"""
    response = await client.get("/api/tickets", headers=headers_for("a@x.test", subdomain="ghost"))

    assert response.status_code == 404
    assert response.json()["code"] == "tenant_not_found"
