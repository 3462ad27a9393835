"""
Persistence models for the worklog application.

Projects and users carry dynamic attributes through a single EAV value table
keyed by a tagged owner reference ``(owner_type, owner_id)``.
"""

from django.conf import settings
from django.db import models


class AttributeType(models.TextChoices):
    TEXT = "text", "Text"
    NUMBER = "number", "Number"
    DATE = "date", "Date"
    SELECT = "select", "Select"


class OwnerType(models.TextChoices):
    PROJECT = "project", "Project"
    USER = "user", "User"


class ProjectStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    COMPLETED = "completed", "Completed"
    ON_HOLD = "on-hold", "On hold"


class Attribute(models.Model):
    """
    Dynamic attribute definition shared by every owner type.

    ``options`` holds the ordered list of allowed values for ``select``
    attributes and is empty for every other type.
    """

    name = models.CharField(max_length=255, unique=True)
    type = models.CharField(max_length=16, choices=AttributeType.choices)
    options = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "worklog"
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.type})"


class AttributeValue(models.Model):
    """One EAV fact attached to an owner."""

    attribute = models.ForeignKey(
        Attribute, on_delete=models.CASCADE, related_name="values"
    )
    owner_type = models.CharField(max_length=16, choices=OwnerType.choices)
    owner_id = models.PositiveBigIntegerField()
    value = models.TextField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "worklog"
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(
                fields=["attribute", "owner_type", "owner_id"],
                name="worklog_attribute_value_unique_owner",
            )
        ]
        indexes = [
            models.Index(fields=["owner_type", "owner_id"], name="worklog_av_owner_idx"),
        ]

    def __str__(self):
        return f"{self.owner_type}:{self.owner_id} {self.attribute_id}={self.value!r}"


class Project(models.Model):
    name = models.CharField(max_length=255)
    description = models.TextField(null=True, blank=True)
    status = models.CharField(
        max_length=16, choices=ProjectStatus.choices, default=ProjectStatus.ACTIVE
    )
    users = models.ManyToManyField(
        settings.AUTH_USER_MODEL, related_name="projects", blank=True
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "worklog"
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return self.name

    def attribute_values(self):
        return AttributeValue.objects.filter(
            owner_type=OwnerType.PROJECT, owner_id=self.pk
        ).select_related("attribute")


class Timesheet(models.Model):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="timesheets"
    )
    project = models.ForeignKey(
        Project, on_delete=models.CASCADE, related_name="timesheets"
    )
    task_name = models.CharField(max_length=255)
    date = models.DateField()
    hours = models.DecimalField(max_digits=5, decimal_places=2)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "worklog"
        ordering = ["-date", "-created_at", "-id"]

    def __str__(self):
        return f"{self.task_name} ({self.date}, {self.hours}h)"


class TrackedCacheKey(models.Model):
    """
    Index of response cache keys created by the API cache.

    One row per key. The row is removed whenever the cache entry is
    invalidated.
    """

    key = models.CharField(max_length=255, unique=True)
    path = models.CharField(max_length=2048, db_index=True)
    created_at = models.DateTimeField(db_index=True)
    expires_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        app_label = "worklog"
        ordering = ["created_at"]

    def __str__(self):
        return f"{self.path} -> {self.key}"
