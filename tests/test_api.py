from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from config import Settings


@pytest.fixture
def client():
    settings = Settings(max_rule_length=200, trace_evaluation=False)
    with TestClient(create_app(settings)) as c:
        yield c


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "version": "0.1.0"}


def test_evaluate_with_variables(client):
    resp = client.post("/evaluate", json={
        "rule": "IF (x == 99) RETURN 10\nIF (x == 99) RETURN 2\nELSE RETURN 8",
        "variables": {"x": 99},
    })

    assert resp.status_code == 200
    body = resp.json()
    assert body["result"] == 2
    assert body["selected"] == 1
    assert [o["matched"] for o in body["outcomes"]] == [True, True]
    assert body["steps"] == []


def test_evaluate_with_assignment_list(client):
    resp = client.post("/evaluate", json={
        "rule": "IF (x > 1 AND y < 5) RETURN 1 ELSE RETURN 0",
        "assignments": "x=2;\ny=3",
    })

    assert resp.status_code == 200
    assert resp.json()["result"] == 1


def test_variables_override_assignment_list(client):
    resp = client.post("/evaluate", json={
        "rule": "IF (x > 1) RETURN 1 ELSE RETURN 0",
        "assignments": "x=5",
        "variables": {"x": 0},
    })

    assert resp.json()["result"] == 0


def test_evaluate_trace_returns_steps(client):
    resp = client.post("/evaluate", json={
        "rule": "IF (IS-MISSING(x)) RETURN 1 ELSE RETURN 0",
        "trace": True,
    })

    body = resp.json()
    assert body["result"] == 1
    assert "IS-MISSING(x): absent = True" in body["steps"]


def test_undefined_variable_maps_to_422(client):
    resp = client.post("/evaluate", json={
        "rule": "IF (x > 1) RETURN 1 ELSE RETURN 0",
        "variables": {},
    })

    assert resp.status_code == 422
    assert resp.json()["error"] == "undefined_variable"
    assert resp.json()["identifier"] == "x"


def test_syntax_error_maps_to_422(client):
    resp = client.post("/evaluate", json={"rule": "IF (x > 1) RETURN 1"})

    assert resp.status_code == 422
    body = resp.json()
    assert body["error"] == "syntax_error"
    assert body["expected"] == "IF or ELSE"
    assert body["position"] == 19


def test_lex_error_maps_to_422(client):
    resp = client.post("/tokenize", json={"rule": "IF (x ~ 1)"})

    assert resp.status_code == 422
    assert resp.json()["error"] == "lex_error"
    assert resp.json()["position"] == 6


def test_bad_assignment_maps_to_422(client):
    resp = client.post("/evaluate", json={
        "rule": "IF (x > 1) RETURN 1 ELSE RETURN 0",
        "assignments": "x=abc",
    })

    assert resp.status_code == 422
    assert resp.json()["error"] == "assignment_error"


def test_rule_too_long_is_rejected(client):
    rule = "IF (x > 1) RETURN 1 " * 20 + "ELSE RETURN 0"

    assert client.post("/evaluate", json={"rule": rule, "variables": {"x": 1}}).status_code == 413
    assert client.post("/parse", json={"rule": rule}).status_code == 413


def test_parse_returns_canonical_program(client):
    resp = client.post("/parse", json={"rule": "IF (((x > 0))) RETURN 1 ELSE RETURN 0"})

    assert resp.status_code == 200
    condition = resp.json()["program"]["clauses"][0]["condition"]
    assert condition == {"node_type": "relational", "identifier": "x", "op": ">", "value": 0}


def test_tokenize_returns_tokens(client):
    resp = client.post("/tokenize", json={"rule": "ELSE RETURN 3"})

    assert [t["kind"] for t in resp.json()["tokens"]] == ["ELSE", "RETURN", "NUMBER"]


def _and_chain(terms: int) -> str:
    return "IF (" + " AND ".join(["x>0"] * terms) + ") RETURN 1 ELSE RETURN 0"


def test_long_and_chain_within_length_limit_evaluates():
    rule = _and_chain(1200)
    assert len(rule) < Settings().max_rule_length

    with TestClient(create_app(Settings())) as c:
        resp = c.post("/evaluate", json={"rule": rule, "variables": {"x": 1}})

    assert resp.status_code == 200
    assert resp.json()["result"] == 1


def test_deeply_nested_parentheses_evaluate():
    rule = "IF " + "(" * 1500 + "x>0" + ")" * 1500 + " RETURN 1 ELSE RETURN 0"

    with TestClient(create_app(Settings())) as c:
        resp = c.post("/evaluate", json={"rule": rule, "variables": {"x": 0}})

    assert resp.status_code == 200
    assert resp.json()["result"] == 0


def test_parse_rejects_condition_tree_over_depth_limit():
    settings = Settings(max_condition_depth=5)

    with TestClient(create_app(settings)) as c:
        ok = c.post("/parse", json={"rule": _and_chain(3)})
        too_deep = c.post("/parse", json={"rule": _and_chain(6)})

    assert ok.status_code == 200
    assert too_deep.status_code == 413
    assert "limit 5" in too_deep.json()["detail"]
