"""
Table management and table API tests.
"""
import pytest

from tables.models import TableRecord
from tables.records import KitchenStatus, TableStatus
from tables.services import TableService


@pytest.mark.django_db
class TestTableService:
    def test_create_strips_name(self):
        table = TableService.create_table("  Patio 2 ")
        assert table.name == "Patio 2"
        assert table.status == TableStatus.AVAILABLE
        assert table.occupied is False
        assert table.order == []

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_name_is_rejected(self, name):
        with pytest.raises(ValueError):
            TableService.create_table(name)

    def test_list_is_sorted_by_name(self):
        for name in ["b table", "Alpha", "Cellar"]:
            TableService.create_table(name)

        assert [table.name for table in TableService.list_tables()] == ["Alpha", "b table", "Cellar"]

    def test_rename(self, table):
        TableService.rename_table(table.pk, "Window")
        table.refresh_from_db()
        assert table.name == "Window"

    def test_reset_discards_order(self, serving_table):
        assert TableService.reset_table(serving_table.pk) is True

        serving_table.refresh_from_db()
        assert serving_table.status == TableStatus.AVAILABLE
        assert serving_table.order == []
        assert serving_table.order_placed_at is None
        assert serving_table.kitchen_status is None

    def test_delete(self, table):
        TableService.delete_table(table.pk)
        assert not TableRecord.objects.filter(pk=table.pk).exists()

    @pytest.mark.parametrize(
        "current,new,allowed",
        [
            (TableStatus.AVAILABLE, TableStatus.SERVING, True),
            (TableStatus.AVAILABLE, TableStatus.ORDER_READY, False),
            (TableStatus.SERVING, TableStatus.ORDER_READY, True),
            (TableStatus.ORDER_READY, TableStatus.SERVING, True),
            (TableStatus.ORDER_READY, TableStatus.AVAILABLE, True),
            (None, TableStatus.SERVING, True),
        ],
    )
    def test_status_transitions(self, current, new, allowed):
        assert TableService.can_transition(current, new) is allowed

    def test_open_for_order_subscribes_a_builder(self, table):
        builder = TableService.open_for_order(table.pk)
        assert builder.table.id == table.pk
        builder.close()


@pytest.mark.django_db
class TestTableAPI:
    def test_create_and_list(self, api_client):
        response = api_client.post("/api/tables/", {"name": "Table 9"}, format="json")
        assert response.status_code == 201
        assert response.data["status"] == TableStatus.AVAILABLE

        response = api_client.get("/api/tables/")
        assert [row["name"] for row in response.data] == ["Table 9"]

    def test_status_is_read_only(self, api_client, table):
        response = api_client.patch(
            f"/api/tables/{table.pk}/", {"name": "Bar", "status": TableStatus.SERVING}, format="json"
        )

        assert response.status_code == 200
        table.refresh_from_db()
        assert table.name == "Bar"
        assert table.status == TableStatus.AVAILABLE

    def test_reset_action(self, api_client, serving_table):
        response = api_client.post(f"/api/tables/{serving_table.pk}/reset/")

        assert response.status_code == 200
        assert response.data["status"] == TableStatus.AVAILABLE

    def test_pending_view(self, api_client, serving_table):
        response = api_client.get(f"/api/tables/{serving_table.pk}/pending/")

        assert response.status_code == 200
        assert response.data["display_status"] == "Pending in Kitchen"
        assert response.data["table"]["kitchenStatus"] == KitchenStatus.PENDING

    def test_serve_before_ready_conflicts(self, api_client, serving_table):
        response = api_client.post(f"/api/tables/{serving_table.pk}/pending/serve/")

        assert response.status_code == 409
        assert response.data["code"] == "not_ready"

    def test_serve_ready_table(self, api_client, serving_table):
        TableRecord.objects.filter(pk=serving_table.pk).update(status=TableStatus.ORDER_READY)

        response = api_client.post(f"/api/tables/{serving_table.pk}/pending/serve/")

        assert response.status_code == 200
        assert response.data["redirect"] is True
        serving_table.refresh_from_db()
        assert serving_table.status == TableStatus.AVAILABLE
