"""
Authentication models.

This module defines the slim User model used across the LMS:
- User: Email-based login with a single role (learner, instructor, admin)

Related files:
    - managers.py: Custom user manager for email-based creation
    - context.py: CallerContext handed to every service operation
    - permissions.py: DRF role permissions

Security:
    - Passwords hashed with Django's configured hasher
    - The role is the only authority the escrow and approval services trust
"""

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from authentication.managers import UserManager
from core.model_mixins import UUIDPrimaryKeyMixin


class UserRole(models.TextChoices):
    """
    Roles a caller can act in.

    Values:
        LEARNER: Buys courses, holds a bank account
        INSTRUCTOR: Authors courses, accepts or declines purchases
        ADMIN: Reviews courses and purchases (LMS operator)
    """

    LEARNER = "learner", "Learner"
    INSTRUCTOR = "instructor", "Instructor"
    ADMIN = "lms_admin", "LMS Admin"


class User(UUIDPrimaryKeyMixin, AbstractBaseUser, PermissionsMixin):
    """
    Custom User model using email as the primary identifier.

    Fields:
        id: UUID primary key; also the owner id of the user's ledger account
        email: Primary identifier, unique, used for login
        name: Display name shown in transaction listings
        role: learner / instructor / lms_admin
        is_active: Whether the user account is active
        is_staff: Whether the user can access Django admin
        date_joined: When the user account was created
        updated_at: When the user record was last modified

    Usage:
        learner = User.objects.create_user(
            email="learner@example.com",
            password="pass",
            name="Lena",
            role=UserRole.LEARNER,
        )
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="User's email address (primary identifier)",
    )
    name = models.CharField(
        max_length=150,
        blank=True,
        help_text="Display name",
    )
    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.LEARNER,
        db_index=True,
        help_text="Role the user acts in",
    )

    # Account status flags
    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    # Timestamps
    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        return self.email

    def get_full_name(self):
        return self.name or self.email

    def get_short_name(self):
        return self.name.split(" ")[0] if self.name else self.email.split("@")[0]

    @property
    def is_learner(self) -> bool:
        return self.role == UserRole.LEARNER

    @property
    def is_instructor(self) -> bool:
        return self.role == UserRole.INSTRUCTOR

    @property
    def is_lms_admin(self) -> bool:
        return self.role == UserRole.ADMIN
