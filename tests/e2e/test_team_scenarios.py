"""
E2E tests for team personas driven entirely through the HTTP API.

Personas:
- ana: admin running her own cycles and managing the team
- bruno: operator at 20%, profitable with SMS costs
- carla: operator at 10%, loses money in the period
- diego: operator at 15% who is removed after recording cycles
- zed: admin of an unrelated team, with operator yuri at 30%
"""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def personas(client: TestClient) -> dict:
    ana = client.post("/v1/users/admins", json={"name": "Ana", "username": "ana"}).json()["id"]
    zed = client.post("/v1/users/admins", json={"name": "Zed", "username": "zed"}).json()["id"]

    def operator(name: str, rate: float, admin_id: str = ana) -> str:
        body = {"admin_id": admin_id, "name": name, "username": name.lower(), "commission_rate": rate}
        return client.post("/v1/users/operators", json=body).json()["id"]

    ids = {
        "ana": ana,
        "zed": zed,
        "bruno": operator("Bruno", 20),
        "carla": operator("Carla", 10),
        "diego": operator("Diego", 15),
        "yuri": operator("Yuri", 30, admin_id=zed),
    }

    def cycle(user: str, deposit, withdraw, day: str = "10/03/2026", **extra):
        body = {"user_id": ids[user], "date": day, "deposit": deposit, "withdraw": withdraw}
        body.update(extra)
        assert client.post("/v1/cycles", json=body).status_code == 201

    def cost(user: str, amount, category: str = "sms", day: str = "10/03/2026"):
        body = {"user_id": ids[user], "name": "Expense", "amount": amount, "category": category, "date": day}
        assert client.post("/v1/costs", json=body).status_code == 201

    cycle("ana", 1000, 1100)
    cycle("bruno", 500, 650)
    cycle("bruno", 200, "212.35", day="11/03/2026", chest="40.10", cooperation=3)
    cost("bruno", 50)
    cost("bruno", "7.77", category="proxy", day="11/03/2026")
    cycle("carla", 300, 250)
    cost("carla", 20, category="tool")
    cycle("diego", 100, 400)
    cycle("yuri", 100, 10000)
    return ids


def dashboard(client: TestClient, user_id: str) -> dict:
    response = client.get("/v1/dashboard", params={"user_id": user_id})
    assert response.status_code == 200
    return response.json()


@pytest.mark.integration
def test_bruno_profitable_operator(client: TestClient, personas):
    """
    bruno: two profitable days, two costs
    Expected: 20% of the period net is paid to the admin
    """
    data = dashboard(client, personas["bruno"])

    # gross 15000 + 5545, costs 5000 + 777, net 14768
    assert data["final_consolidated_cents"] == 14768 - 2954
    assert data["my_expenses_cents"] == 5777
    assert data["my_invested_cents"] == 70000
    assert [p["display_label"] for p in data["daily_series"]] == ["10/03", "11/03"]
    assert data["operator_ranking"] == []


@pytest.mark.integration
def test_carla_loss_pays_nothing(client: TestClient, personas):
    """
    carla: loss in the period
    Expected: no commission, the loss stays with her
    """
    data = dashboard(client, personas["carla"])

    assert data["final_consolidated_cents"] == -7000
    assert data["team_commissions_cents"] == 0


@pytest.mark.integration
def test_ana_consolidates_her_team_only(client: TestClient, personas):
    """
    ana: own profit plus team commissions
    Expected: yuri's cycle (zed's team) never reaches ana
    """
    data = dashboard(client, personas["ana"])

    assert data["my_personal_profit_cents"] == 10000
    # bruno 2954 + carla 0 + diego 15% of 30000
    assert data["team_commissions_cents"] == 2954 + 4500
    assert data["final_consolidated_cents"] == 10000 + 7454
    assert [r["name"] for r in data["operator_ranking"]] == ["Diego", "Bruno"]


@pytest.mark.integration
def test_commissions_are_zero_sum(client: TestClient, personas):
    """Every cent an operator pays shows up on the admin side"""
    admin = dashboard(client, personas["ana"])

    paid = 0
    for name, net in (("bruno", 14768), ("carla", -7000), ("diego", 30000)):
        kept = dashboard(client, personas[name])["final_consolidated_cents"]
        paid += net - kept

    assert paid == admin["team_commissions_cents"]


@pytest.mark.integration
def test_rate_change_is_retroactive(client: TestClient, personas):
    """
    ana raises bruno to 50%
    Expected: the next load recomputes past cycles with the new rate
    """
    response = client.patch(
        f"/v1/users/{personas['bruno']}/commission",
        json={"admin_id": personas["ana"], "commission_rate": 50},
    )
    assert response.status_code == 200

    assert dashboard(client, personas["bruno"])["final_consolidated_cents"] == 7384
    assert dashboard(client, personas["ana"])["team_commissions_cents"] == 7384 + 4500


@pytest.mark.integration
def test_removed_operator_keeps_history(client: TestClient, personas):
    """
    diego: removed by ana after recording a cycle
    Expected: his cycle still counts for ana but no longer pays commission
    """
    response = client.delete(f"/v1/users/{personas['diego']}", params={"admin_id": personas["ana"]})
    assert response.status_code == 204

    data = dashboard(client, personas["ana"])
    assert data["team_commissions_cents"] == 2954
    assert data["team_total_return_cents"] == 110000 + 65000 + 25545 + 25000 + 40000

    cycles = client.get("/v1/cycles", params={"user_id": personas["ana"]}).json()["cycles"]
    assert "Diego" in {c["operator_name"] for c in cycles}


@pytest.mark.integration
def test_foreign_admin_cannot_manage_team(client: TestClient, personas):
    response = client.delete(f"/v1/users/{personas['bruno']}", params={"admin_id": personas["zed"]})
    assert response.status_code == 403

    zed = dashboard(client, personas["zed"])
    assert zed["team_commissions_cents"] == 297000
