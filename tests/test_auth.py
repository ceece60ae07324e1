"""Admin authentication endpoint tests."""

from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from hostel_orders.db import session as db_session
from hostel_orders.db.base import Base
from hostel_orders.main import app
from hostel_orders.services.admin_service import create_admin


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def test_login_by_username_or_email_returns_token(tmp_path: Path, monkeypatch) -> None:
    """Login should accept either username or email and issue a bearer token."""
    engine = _build_test_engine(tmp_path / "test_login.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)

    with testing_session_local() as db:
        create_admin(db, "manager", "secret123", email="Manager@Hostel.example")
        db.commit()

    with TestClient(app) as client:
        by_username = client.post("/api/v1/auth/login", json={"username": "manager", "password": "secret123"})
        by_email = client.post("/api/v1/auth/login", json={"username": "manager@hostel.example", "password": "secret123"})
        token = by_username.json()["access_token"]
        me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert by_username.status_code == 200
    assert by_username.json()["token_type"] == "bearer"
    assert by_email.status_code == 200
    assert me.status_code == 200
    assert me.json()["username"] == "manager"
    assert me.json()["email"] == "manager@hostel.example"


def test_login_rejects_bad_credentials(tmp_path: Path, monkeypatch) -> None:
    engine = _build_test_engine(tmp_path / "test_login_bad.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)

    with testing_session_local() as db:
        create_admin(db, "manager", "secret123")
        db.commit()

    with TestClient(app) as client:
        wrong_password = client.post("/api/v1/auth/login", json={"username": "manager", "password": "nope"})
        unknown = client.post("/api/v1/auth/login", json={"username": "ghost", "password": "secret123"})
        bad_token = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert wrong_password.status_code == 401
    assert unknown.status_code == 401
    assert bad_token.status_code == 401


def _login(client: TestClient, username: str, password: str) -> dict[str, str]:
    response = client.post("/api/v1/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def test_profile_update_changes_username_email_and_password(tmp_path: Path, monkeypatch) -> None:
    """A password change is accepted only with the correct current password."""
    engine = _build_test_engine(tmp_path / "test_profile.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)

    with testing_session_local() as db:
        create_admin(db, "manager", "secret123")
        db.commit()

    with TestClient(app) as client:
        headers = _login(client, "manager", "secret123")
        missing_current = client.put("/api/v1/auth/me", headers=headers, json={"new_password": "brandnew1"})
        wrong_current = client.put(
            "/api/v1/auth/me",
            headers=headers,
            json={"current_password": "nope", "new_password": "brandnew1"},
        )
        too_short = client.put(
            "/api/v1/auth/me",
            headers=headers,
            json={"current_password": "secret123", "new_password": "abc"},
        )
        updated = client.put(
            "/api/v1/auth/me",
            headers=headers,
            json={
                "username": "kitchen-lead",
                "email": "Lead@Hostel.example",
                "current_password": "secret123",
                "new_password": "brandnew1",
            },
        )
        old_login = client.post("/api/v1/auth/login", json={"username": "manager", "password": "secret123"})
        new_login = client.post("/api/v1/auth/login", json={"username": "kitchen-lead", "password": "brandnew1"})

    assert missing_current.status_code == 400
    assert wrong_current.status_code == 401
    assert too_short.status_code == 400
    assert updated.status_code == 200
    assert updated.json()["username"] == "kitchen-lead"
    assert updated.json()["email"] == "lead@hostel.example"
    assert old_login.status_code == 401
    assert new_login.status_code == 200


def test_profile_update_rejects_taken_username(tmp_path: Path, monkeypatch) -> None:
    engine = _build_test_engine(tmp_path / "test_profile_taken.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)

    with testing_session_local() as db:
        create_admin(db, "manager", "secret123")
        create_admin(db, "cashier", "secret456")
        db.commit()

    with TestClient(app) as client:
        headers = _login(client, "manager", "secret123")
        taken = client.put("/api/v1/auth/me", headers=headers, json={"username": "cashier"})
        unchanged = client.put("/api/v1/auth/me", headers=headers, json={"username": "manager"})
        me = client.get("/api/v1/auth/me", headers=headers)

    assert taken.status_code == 409
    assert taken.json()["detail"] == "Username already taken"
    assert unchanged.status_code == 200
    assert me.json()["username"] == "manager"


def test_register_and_list_admins_requires_admin(tmp_path: Path, monkeypatch) -> None:
    engine = _build_test_engine(tmp_path / "test_register.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)

    with testing_session_local() as db:
        create_admin(db, "manager", "secret123")
        db.commit()

    with TestClient(app) as client:
        anonymous = client.post("/api/v1/auth/admins", json={"username": "cook", "password": "secret789"})
        headers = _login(client, "manager", "secret123")
        created = client.post("/api/v1/auth/admins", headers=headers, json={"username": "cook", "password": "secret789"})
        duplicate = client.post("/api/v1/auth/admins", headers=headers, json={"username": "cook", "password": "other123"})
        listed = client.get("/api/v1/auth/admins", headers=headers)
        cook_login = client.post("/api/v1/auth/login", json={"username": "cook", "password": "secret789"})

    assert anonymous.status_code in (401, 403)
    assert created.status_code == 201
    assert created.json()["username"] == "cook"
    assert duplicate.status_code == 409
    assert [admin["username"] for admin in listed.json()] == ["manager", "cook"]
    assert "password_hash" not in listed.json()[0]
    assert cook_login.status_code == 200
