"""
Forms for departments app.

Includes:
- DepartmentForm: create and edit drafts (name + code)
- DepartmentSearchForm: live search box above the department table
"""

from django import forms
from django.core.exceptions import ValidationError

from .validators import (
    CODE_REQUIRED_MESSAGE, NAME_REQUIRED_MESSAGE,
    validate_no_digits, validate_not_blank,
)

INPUT_CLASS = (
    'mt-1 block w-full px-3 py-2 border border-gray-300 rounded-md shadow-sm '
    'focus:outline-none focus:ring-indigo-500 focus:border-indigo-500 sm:text-sm'
)
INVALID_INPUT_CLASS = 'border-red-500'


class DepartmentForm(forms.Form):
    """
    Form for creating and editing department drafts.

    Fields are not marked required and not stripped: the draft is validated
    as a whole in clean() so that every rule runs on the raw values and the
    last message per field is the one shown.
    """

    name = forms.CharField(
        required=False,
        strip=False,
        widget=forms.TextInput(attrs={
            'class': INPUT_CLASS,
            'placeholder': 'e.g., Engineering',
            'autocomplete': 'off',
        }),
    )
    code = forms.CharField(
        required=False,
        strip=False,
        widget=forms.TextInput(attrs={
            'class': INPUT_CLASS,
            'placeholder': 'e.g., ENG',
            'autocomplete': 'off',
        }),
    )

    def __init__(self, *args, field_url=None, field_errors=None, **kwargs):
        """
        Args:
            field_url: Endpoint the name input posts to on change, so digits
                are stripped server-side as the user types
            field_errors: Validation error map to flag inputs as invalid
        """
        super().__init__(*args, **kwargs)

        # Only the draft rules in clean() decide validity.
        for field in self.fields.values():
            field.validators = []

        if field_url:
            self.fields['name'].widget.attrs.update({
                'hx-post': field_url,
                'hx-trigger': 'change',
                'hx-target': 'this',
                'hx-swap': 'outerHTML',
            })

        for field_name in (field_errors or {}):
            if field_name in self.fields:
                widget = self.fields[field_name].widget
                widget.attrs['class'] = f"{widget.attrs['class']} {INVALID_INPUT_CLASS}"
                widget.attrs['aria-invalid'] = 'true'

        self.fields['code'].help_text = 'Short identifier (e.g., ENG, HR, FIN).'

    def clean(self):
        """
        Validate the draft.

        Both name rules run; when both fail the digit message is the one
        that survives in error_map().
        """
        cleaned_data = super().clean()
        name = cleaned_data.get('name') or ''
        code = cleaned_data.get('code') or ''

        self._run_check('name', validate_not_blank, name, NAME_REQUIRED_MESSAGE)
        self._run_check('name', validate_no_digits, name)
        self._run_check('code', validate_not_blank, code, CODE_REQUIRED_MESSAGE)

        return cleaned_data

    def _run_check(self, field_name, validator, *args):
        try:
            validator(*args)
        except ValidationError as e:
            self.add_error(field_name, e)

    def error_map(self):
        """Return {field: message}, keeping the last message per field."""
        return {
            field_name: field_errors[-1]['message']
            for field_name, field_errors in self.errors.get_json_data().items()
            if field_errors
        }


class DepartmentSearchForm(forms.Form):
    """Search box filtering the department table by name."""

    search = forms.CharField(
        required=False,
        strip=False,
        label='Search',
        widget=forms.TextInput(attrs={
            'placeholder': 'Search by department name...',
            'class': INPUT_CLASS,
            'hx-trigger': 'keyup changed delay:300ms',
            'hx-target': '#department-table',
            'hx-swap': 'outerHTML',
            'hx-push-url': 'false',
        }),
    )

    def __init__(self, *args, table_url=None, **kwargs):
        super().__init__(*args, **kwargs)
        if table_url:
            self.fields['search'].widget.attrs['hx-get'] = table_url
