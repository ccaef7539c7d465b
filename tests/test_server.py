"""Tests for the expansion service."""

import pytest
from fastapi.testclient import TestClient

import server
from jsonexpand.config import TemplateLoader


@pytest.fixture
def client(monkeypatch, examples_dir):
    monkeypatch.setattr(server, "template_loader", TemplateLoader(str(examples_dir)))
    return TestClient(server.app)


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "version": "1.0.0"}


def test_list_templates(client):
    response = client.get("/templates")

    assert response.status_code == 200
    assert response.json() == {"templates": ["basic", "fragments", "medals"]}


def test_expand_with_bundle_input(client):
    response = client.post("/expand/basic")

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json"
    assert response.text == '{"name":"Bob Smith","age":42,"adult":true,"tags":["customer"],"version":2}'


def test_expand_with_request_body(client):
    body = {"firstName": "Ann", "lastName": "Lee", "age": 12, "orders": 20, "nickname": "Annie"}

    response = client.post("/expand/basic", json=body)

    assert response.status_code == 200
    assert response.text == (
        '{"name":"Ann Lee","age":12,"adult":false,"nickname":"Annie","tags":["customer","vip"],"version":2}'
    )


def test_expand_uses_compute_functions(client):
    response = client.post("/expand/medals")

    assert response.status_code == 200
    assert response.json()["awarded"] == "Dec 01, 2025"


def test_unknown_template(client):
    response = client.post("/expand/nope")

    assert response.status_code == 404
    assert "nope" in response.json()["detail"]


def test_missing_key_errors(client):
    response = client.post("/expand/basic", params={"missing_key_errors": "true"})

    assert response.status_code == 422
    assert "no such key: nickname" in response.json()["detail"]
