from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    full_name = models.CharField(max_length=200, blank=True)
    phone_number = models.CharField(max_length=30, blank=True)
    roles = models.ManyToManyField("Role", through="UserRole", related_name="users", blank=True)

    def __str__(self):
        return self.full_name or self.email or self.username

    def has_role(self, role_name: str) -> bool:
        return self.user_roles.filter(role__name=role_name).exists()


class Role(models.Model):
    ADMIN = "admin"
    MENTOR = "mentor"
    MENTEE = "mentee"
    AFFILIATOR = "affiliator"
    NAMES = [
        (ADMIN, "Admin"),
        (MENTOR, "Mentor"),
        (MENTEE, "Mentee"),
        (AFFILIATOR, "Affiliator"),
    ]

    name = models.CharField(max_length=30, choices=NAMES, unique=True)

    def __str__(self):
        return self.name


class UserRole(models.Model):
    user = models.ForeignKey("User", on_delete=models.CASCADE, related_name="user_roles")
    role = models.ForeignKey("Role", on_delete=models.CASCADE, related_name="user_roles")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ("user", "role")

    def __str__(self):
        return f"{self.user} × {self.role}"


def grant_role(user: User, role_name: str) -> UserRole:
    role, _ = Role.objects.get_or_create(name=role_name)
    user_role, _ = UserRole.objects.get_or_create(user=user, role=role)
    return user_role
