from cashdesk.db.seed import DEMO_CASHIER_PASSWORD, seed_admin, seed_demo_data
from cashdesk.models.admin import Admin
from cashdesk.models.cashier import Cashier
from cashdesk.models.transaction import Transaction


def test_admin_seeded_once(db_session):
    seed_admin(db_session)
    seed_admin(db_session)
    assert db_session.query(Admin).count() == 1


def test_demo_data_is_idempotent(client, db_session, admin_headers):
    seed_demo_data(db_session)
    seed_demo_data(db_session)
    assert db_session.query(Cashier).count() == 2
    assert db_session.query(Transaction).count() == 5

    stats = client.get("/api/transactions/stats", headers=admin_headers).json()["data"]
    assert stats["totalSales"] == 787.04
    assert stats["totalRefunds"] == 45.20
    assert stats["netBalance"] == 741.84
    assert stats["avgTransactionAmount"] == 166.45
    assert stats["activeCashiers"] == 2


def test_demo_cashier_can_log_in(client, db_session):
    seed_demo_data(db_session)
    response = client.post(
        "/api/auth/cashier/login",
        json={"cashierId": "CASH001", "password": DEMO_CASHIER_PASSWORD},
    )
    assert response.status_code == 200
    assert response.json()["data"]["user"]["name"] == "John Doe"


def test_demo_transactions_join_cashier_names(client, db_session, admin_headers):
    seed_demo_data(db_session)
    rows = client.get("/api/transactions", headers=admin_headers).json()["data"]["transactions"]
    assert rows[0]["transactionId"] == "TXN005"
    assert {row["cashierName"] for row in rows} == {"John Doe", "Jane Smith"}
