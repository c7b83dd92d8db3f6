import pytest
from rest_framework.test import APIClient

from accounts.models import Role, User, UserRole, grant_role


@pytest.fixture
def user(db):
    return User.objects.create_user(
        username="sari@example.com",
        email="sari@example.com",
        password="password123",
        full_name="Sari Wulandari",
    )


@pytest.mark.django_db
def test_roles_are_seeded():
    assert set(Role.objects.values_list("name", flat=True)) >= {"admin", "mentor", "mentee", "affiliator"}


@pytest.mark.django_db
def test_grant_role_is_idempotent(user):
    grant_role(user, Role.AFFILIATOR)
    grant_role(user, Role.AFFILIATOR)

    assert UserRole.objects.filter(user=user).count() == 1
    assert user.has_role(Role.AFFILIATOR)
    assert not user.has_role(Role.ADMIN)


@pytest.mark.django_db
def test_me_endpoint_lists_roles(user):
    grant_role(user, Role.MENTEE)
    grant_role(user, Role.MENTOR)
    client = APIClient()
    client.force_authenticate(user)

    response = client.get("/api/auth/me/")

    assert response.status_code == 200
    assert response.json()["roles"] == ["mentee", "mentor"]
    assert response.json()["full_name"] == "Sari Wulandari"


@pytest.mark.django_db
def test_me_requires_authentication():
    assert APIClient().get("/api/auth/me/").status_code == 401
