"""
Tests for the /inventory/{userId}/buymenu routes.
"""

SUB_MENUS = ("pistols", "shotguns", "smgs", "rifles", "snipers", "machineguns", "melees", "equipment")


class TestBuyMenu:
    async def test_create_then_get(self, client):
        res = await client.post("/inventory/7/buymenu")

        assert res.status_code == 201
        body = res.json()
        assert body["userId"] == 7
        for name in SUB_MENUS:
            assert body[name] == []

        res = await client.get("/inventory/7/buymenu")
        assert res.status_code == 200
        assert res.json() == body

    async def test_create_twice_conflicts(self, client):
        await client.post("/inventory/7/buymenu")
        assert (await client.post("/inventory/7/buymenu")).status_code == 409

    async def test_put_replaces_only_given_sub_menus(self, client):
        await client.post("/inventory/7/buymenu")
        await client.put("/inventory/7/buymenu", json={"rifles": [46, 45]})

        res = await client.put("/inventory/7/buymenu", json={"pistols": [5280, 5279]})
        assert res.status_code == 200

        body = (await client.get("/inventory/7/buymenu")).json()
        assert body["pistols"] == [5280, 5279]
        assert body["rifles"] == [46, 45]
        assert body["melees"] == []

    async def test_put_missing_menu(self, client):
        res = await client.put("/inventory/404/buymenu", json={"pistols": [1]})
        assert res.status_code == 404

    async def test_put_bad_body(self, client):
        await client.post("/inventory/7/buymenu")
        res = await client.put("/inventory/7/buymenu", json={"pistols": "not a list"})
        assert res.status_code == 400

    async def test_delete(self, client):
        await client.post("/inventory/7/buymenu")

        assert (await client.delete("/inventory/7/buymenu")).status_code == 200
        assert (await client.get("/inventory/7/buymenu")).status_code == 404
        assert (await client.delete("/inventory/7/buymenu")).status_code == 404

    async def test_non_numeric_user_id(self, client):
        for method in ("GET", "POST", "DELETE"):
            res = await client.request(method, "/inventory/abc/buymenu")
            assert res.status_code == 400

    async def test_user_id_wider_than_the_column(self, client):
        for method in ("GET", "POST", "DELETE"):
            res = await client.request(method, f"/inventory/{2**40}/buymenu")
            assert res.status_code == 400
