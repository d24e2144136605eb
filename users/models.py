# users/models.py
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Accounts log in with their email; ``username`` is kept because Django's
    auth backend still authenticates on it, and is set to the email on signup.
    """
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=150, blank=True)

    def __str__(self):
        return self.name or self.email or self.username
