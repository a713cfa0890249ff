from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models


class Role(models.Model):
    authority = models.CharField(max_length=50, unique=True)

    class Meta:
        db_table = "tb_role"

    def __str__(self):
        return self.authority


class UserManager(BaseUserManager):
    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError("The email address must be set")
        user = self.model(email=self.normalize_email(email), **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")
        return self._create_user(email, password, **extra_fields)

    def get_by_natural_key(self, username):
        # e-mails are unique ignoring case, so login matches the same way
        return self.get(**{f"{self.model.USERNAME_FIELD}__iexact": username})


class User(AbstractUser):
    # Login happens by e-mail; the inherited username column is dropped.
    username = None
    email = models.EmailField(unique=True)
    roles = models.ManyToManyField(
        Role, related_name="users", blank=True, db_table="tb_user_role"
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        db_table = "tb_user"

    def __str__(self):
        return self.email

    def authorities(self):
        return [role.authority for role in self.roles.all()]

    def has_any_role(self, *authorities: str) -> bool:
        return self.roles.filter(authority__in=authorities).exists()
