"""
Student app models
Defines the Student model, optionally linked to a Django User for the student portal
"""
from django.contrib.auth.models import User
from django.db import models

QR_TOKEN_PREFIX = "STUDENT:"


class Student(models.Model):
    """
    Student model - identity referenced by the QR token STUDENT:<id>
    The User link is optional: students without portal access can still be scanned.
    """
    user = models.OneToOneField(User, on_delete=models.SET_NULL, null=True, blank=True, related_name="student")
    name = models.CharField(max_length=100)
    surname = models.CharField(max_length=100)
    phone = models.CharField(max_length=30, blank=True)
    email = models.EmailField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("surname", "name")

    @property
    def qr_token(self):
        """Value encoded in the student's identity card"""
        return f"{QR_TOKEN_PREFIX}{self.pk}"

    def __str__(self):
        return f"{self.name} {self.surname} ({self.pk})"
