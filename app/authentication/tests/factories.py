"""
Factory Boy factories for authentication models.

Provides realistic test data generation for:
- User: Custom user model with email-based authentication, one per role

Usage:
    from authentication.tests.factories import InstructorFactory, LearnerFactory

    learner = LearnerFactory()
    instructor = InstructorFactory(name="Ada Lovelace")
"""

import factory

from authentication.models import User, UserRole


class UserFactory(factory.django.DjangoModelFactory):
    """
    Factory for User model.

    Creates active learners by default.

    Examples:
        user = UserFactory()
        user = UserFactory(role=UserRole.INSTRUCTOR)
        user = UserFactory(is_active=False)
    """

    class Meta:
        model = User
        skip_postgeneration_save = True

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    name = factory.Faker("name")
    role = UserRole.LEARNER
    is_active = True
    is_staff = False

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        """Override create to use UserManager.create_user()."""
        password = kwargs.pop("password", "TestPass123!")
        return model_class.objects.create_user(
            email=kwargs.pop("email"), password=password, **kwargs
        )


class LearnerFactory(UserFactory):
    email = factory.Sequence(lambda n: f"learner{n}@example.com")
    role = UserRole.LEARNER


class InstructorFactory(UserFactory):
    email = factory.Sequence(lambda n: f"instructor{n}@example.com")
    role = UserRole.INSTRUCTOR


class AdminFactory(UserFactory):
    email = factory.Sequence(lambda n: f"admin{n}@example.com")
    role = UserRole.ADMIN
    is_staff = True
