"""
Validation of write payloads.

Forms receive the decoded JSON body. With ``partial=True`` (PUT/PATCH) only
the submitted fields are validated, each with its usual rules.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from django import forms
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password

from ..models import Attribute, AttributeType, Project, ProjectStatus
from ..services.attribute_values import OwnerRef, values_for
from ..utils.datetime_utils import parse_date
from ..utils.normalization import is_numeric
from ..utils.sanitization import sanitize_payload, sanitize_text

logger = logging.getLogger(__name__)

START_DATE_ATTRIBUTE = "start date"
END_DATE_ATTRIBUTE = "end date"


class APIForm(forms.Form):
    """Base form adding partial validation and nested error reporting."""

    sanitized_fields: tuple[str, ...] = ()

    def __init__(self, data=None, *, partial: bool = False, **kwargs):
        super().__init__(data=data or {}, **kwargs)
        self.partial = partial
        self.nested_errors: dict[str, list[str]] = {}
        if partial:
            for name in list(self.fields):
                if name not in self.data:
                    del self.fields[name]

    def add_nested_error(self, key: str, message: str) -> None:
        self.nested_errors.setdefault(key, []).append(message)

    def is_valid(self) -> bool:
        valid = super().is_valid()
        return valid and not self.nested_errors

    def error_dict(self) -> dict[str, list[str]]:
        errors = {name: [str(m) for m in messages] for name, messages in self.errors.items()}
        for key, messages in self.nested_errors.items():
            errors.setdefault(key, []).extend(messages)
        return errors

    def _post_clean(self):
        super()._post_clean()
        self.cleaned_data = sanitize_payload(self.cleaned_data, list(self.sanitized_fields))

    @property
    def submitted(self) -> dict[str, Any]:
        """Cleaned values for the fields present in the form."""
        return {name: self.cleaned_data[name] for name in self.fields if name in self.cleaned_data}


class AttributeForm(APIForm):
    name = forms.CharField(
        max_length=255,
        error_messages={
            "required": "The attribute name is required.",
            "max_length": "The attribute name cannot exceed 255 characters.",
        },
    )
    type = forms.ChoiceField(
        choices=AttributeType.choices,
        error_messages={
            "required": "The attribute type is required.",
            "invalid_choice": "The attribute type must be one of: text, number, date, select.",
        },
    )
    options = forms.JSONField(required=False)

    def __init__(self, data=None, *, instance: Optional[Attribute] = None, **kwargs):
        self.instance = instance
        super().__init__(data, **kwargs)

    def clean_name(self):
        name = sanitize_text(self.cleaned_data["name"])
        duplicates = Attribute.objects.filter(name__iexact=name)
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise forms.ValidationError("This attribute name is already in use.")
        return name

    def clean_options(self):
        options = self.cleaned_data.get("options")
        if options in (None, ""):
            return []
        if not isinstance(options, list):
            raise forms.ValidationError("Options must be a list of values.")
        seen = set()
        for option in options:
            if not isinstance(option, str) or not option.strip():
                raise forms.ValidationError("Each option value must be a string.")
            if len(option) > 255:
                raise forms.ValidationError("Each option value cannot exceed 255 characters.")
            if option in seen:
                raise forms.ValidationError("All options must be unique.")
            seen.add(option)
        return options

    def clean(self):
        cleaned = super().clean()
        attribute_type = cleaned.get("type") or getattr(self.instance, "type", None)
        if attribute_type is None or "type" in self.errors:
            return cleaned

        options_submitted = "options" in self.fields
        options = cleaned.get("options")
        if options is None and not options_submitted and self.instance is not None:
            options = self.instance.options

        if attribute_type == AttributeType.SELECT:
            if not options and "options" not in self.errors:
                self.add_nested_error("options", "Options are required when type is select.")
        elif "type" in self.fields or options_submitted:
            cleaned["options"] = []
        return cleaned


class ProjectForm(APIForm):
    sanitized_fields = ("name", "description")

    name = forms.CharField(
        max_length=255,
        error_messages={
            "required": "The project name is required.",
            "max_length": "The project name cannot exceed 255 characters.",
        },
    )
    description = forms.CharField(required=False, strip=True)
    status = forms.ChoiceField(
        choices=ProjectStatus.choices,
        error_messages={
            "required": "The project status is required.",
            "invalid_choice": "The project status must be one of: active, completed, on-hold.",
        },
    )
    attributes = forms.JSONField(required=False)

    def __init__(self, data=None, *, instance: Optional[Project] = None, **kwargs):
        self.instance = instance
        super().__init__(data, **kwargs)

    def clean_description(self):
        return self.cleaned_data.get("description") or None

    def clean_attributes(self):
        items = self.cleaned_data.get("attributes")
        if items in (None, ""):
            return []
        if not isinstance(items, list):
            raise forms.ValidationError("Project attributes must be a list.")

        ids = [item.get("attribute_id") for item in items if isinstance(item, dict)]
        known = Attribute.objects.in_bulk([i for i in ids if isinstance(i, int)])

        cleaned_items = []
        dates: dict[str, tuple[int, Any]] = {}
        for index, item in enumerate(items):
            prefix = f"attributes.{index}"
            if not isinstance(item, dict):
                self.add_nested_error(prefix, "Each attribute must be an object.")
                continue
            attribute_id = item.get("attribute_id")
            if attribute_id is None:
                self.add_nested_error(f"{prefix}.attribute_id", "Each attribute must have an ID.")
                continue
            attribute = known.get(attribute_id) if isinstance(attribute_id, int) else None
            if attribute is None:
                self.add_nested_error(
                    f"{prefix}.attribute_id", "One or more selected attributes do not exist."
                )
                continue

            value = item.get("value")
            message = self._value_error(attribute, value)
            if message:
                self.add_nested_error(f"{prefix}.value", message)
                continue

            if attribute.type == AttributeType.DATE:
                dates[attribute.name.strip().lower()] = (index, parse_date(value))
            cleaned_items.append({"attribute_id": attribute.pk, "value": value})

        self._check_date_range(dates)
        return cleaned_items

    def _value_error(self, attribute: Attribute, value: Any) -> Optional[str]:
        if value is None or (isinstance(value, str) and not value.strip()):
            return "Each attribute must have a value."
        if attribute.type == AttributeType.NUMBER:
            return None if is_numeric(value) else "The value must be a number."
        if not isinstance(value, str):
            return "Attribute values must be strings."
        if attribute.type == AttributeType.DATE and parse_date(value) is None:
            return "The value must be a valid date."
        if attribute.type == AttributeType.SELECT and value not in (attribute.options or []):
            return "The selected value is not a valid option."
        return None

    def _check_date_range(self, dates: dict[str, tuple[int, Any]]) -> None:
        """End Date must fall after Start Date (submitted or already stored)."""
        if END_DATE_ATTRIBUTE not in dates:
            return
        end_index, end_date = dates[END_DATE_ATTRIBUTE]
        start_date = dates.get(START_DATE_ATTRIBUTE, (None, None))[1]
        if start_date is None and self.instance is not None:
            stored = (
                values_for(OwnerRef.for_project(self.instance))
                .filter(attribute__name__iexact=START_DATE_ATTRIBUTE)
                .values_list("value", flat=True)
                .first()
            )
            start_date = parse_date(stored)
        if start_date is not None and end_date is not None and end_date <= start_date:
            self.add_nested_error(
                f"attributes.{end_index}.value", "The end date must be after the start date."
            )


class TimesheetForm(APIForm):
    sanitized_fields = ("task_name",)

    date = forms.DateField(
        error_messages={
            "required": "The date field is required.",
            "invalid": "The date must be a valid date.",
        }
    )
    hours = forms.DecimalField(
        min_value=0,
        max_value=24,
        max_digits=5,
        decimal_places=2,
        error_messages={
            "required": "The hours field is required.",
            "invalid": "The hours must be a number.",
            "min_value": "The hours must be at least 0.",
            "max_value": "The hours cannot exceed 24.",
        },
    )
    task_name = forms.CharField(
        max_length=255,
        error_messages={
            "required": "The task name field is required.",
            "max_length": "The task name cannot exceed 255 characters.",
        },
    )
    project_id = forms.IntegerField(error_messages={"required": "The project ID is required."})
    user_id = forms.IntegerField(error_messages={"required": "The user ID is required."})

    def __init__(self, data=None, *, user=None, **kwargs):
        self.user = user
        super().__init__(data, **kwargs)

    def clean_project_id(self):
        project_id = self.cleaned_data["project_id"]
        project = Project.objects.filter(pk=project_id).first()
        if project is None:
            raise forms.ValidationError("The selected project does not exist.")
        if not project.users.filter(pk=self.user.pk).exists():
            raise forms.ValidationError(
                "You can only create timesheets for projects you are assigned to."
            )
        return project_id

    def clean_user_id(self):
        user_id = self.cleaned_data["user_id"]
        if not get_user_model().objects.filter(pk=user_id).exists():
            raise forms.ValidationError("The selected user does not exist.")
        if user_id != self.user.pk:
            raise forms.ValidationError("You can only create timesheets for yourself.")
        return user_id


class UserForm(APIForm):
    sanitized_fields = ("first_name", "last_name")

    first_name = forms.CharField(max_length=150)
    last_name = forms.CharField(max_length=150)
    email = forms.EmailField(max_length=254)
    password = forms.CharField(min_length=8, strip=False)

    def __init__(self, data=None, *, instance=None, **kwargs):
        self.instance = instance
        super().__init__(data, **kwargs)

    def clean_email(self):
        email = self.cleaned_data["email"].lower()
        duplicates = get_user_model().objects.filter(email__iexact=email)
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise forms.ValidationError("The email has already been taken.")
        return email

    def clean_password(self):
        password = self.cleaned_data["password"]
        validate_password(password, user=self.instance)
        return password


class LoginForm(forms.Form):
    email = forms.EmailField()
    password = forms.CharField(strip=False)
