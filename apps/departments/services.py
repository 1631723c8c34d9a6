"""
Service layer for departments app.

DepartmentManager holds the page state mirrored from the remote Department
API and implements every operation the department page offers:

- refresh: reload the authoritative list
- begin_create / update_create_field / submit_create / dismiss_create
- begin_edit / update_edit_field / submit_edit / dismiss_edit
- delete: confirmed removal
- set_search_term / visible_departments: name search

State survives between requests in the user's session (see from_session /
save). Remote calls are made through DepartmentServiceClient; notices are
reported through a notify(level, message) callable so the manager never
touches request or UI state itself.
"""

import logging
from typing import Callable, Dict, List, NamedTuple, Optional

from django.contrib import messages
from django.utils.translation import gettext_lazy as _

from .clients import DepartmentServiceError
from .forms import DepartmentForm
from .validators import strip_digits

logger = logging.getLogger(__name__)

SESSION_KEY = 'department_manager'

DRAFT_FIELDS = ('name', 'code')
INITIAL_DEPARTMENT = {'name': '', 'code': ''}

DELETE_PROMPT = _('Are you sure you want to delete this department?')

LIST_FAILED_MESSAGE = _('Failed to load departments.')
ADD_FAILED_MESSAGE = _('Failed to add the department.')
UPDATE_FAILED_MESSAGE = _('Failed to update the department.')
DELETE_FAILED_MESSAGE = _('Failed to delete the department.')

ADDED_MESSAGE = _('Department added successfully.')
UPDATED_MESSAGE = _('Department updated successfully.')
DELETED_MESSAGE = _('Department deleted successfully.')


class SubmitResult(NamedTuple):
    """Outcome of a create or edit submission."""
    succeeded: bool
    close_dialog: bool


NOT_SUBMITTED = SubmitResult(succeeded=False, close_dialog=False)


def _discard_notice(level, message):
    logger.debug(f'Department notice dropped: {message}')


class DepartmentManager:
    """
    State and operations behind the department management page.

    Attributes:
        departments: Authoritative list, as last returned by the API
        create_draft: Draft for the create dialog
        edit_draft: Copy of the department being edited, or None
        errors: Validation error map {field: message}
        search_term: Current name filter
        busy: True while a mutating remote call is outstanding
    """

    def __init__(self, client, notify: Optional[Callable] = None, state: Optional[Dict] = None):
        self.client = client
        self.notify = notify or _discard_notice

        state = state or {}
        self.departments: List[Dict] = list(state.get('departments', []))
        self.create_draft: Dict = dict(state.get('create_draft') or INITIAL_DEPARTMENT)
        edit_draft = state.get('edit_draft')
        self.edit_draft: Optional[Dict] = dict(edit_draft) if edit_draft is not None else None
        self.errors: Dict = dict(state.get('errors', {}))
        self.search_term: str = state.get('search_term', '')
        self.busy: bool = state.get('busy', False)

    # =========================================================================
    # Session persistence
    # =========================================================================

    @classmethod
    def from_session(cls, session, client, notify=None):
        """Restore the manager saved in session, or start with empty state."""
        return cls(client, notify=notify, state=session.get(SESSION_KEY))

    def save(self, session):
        session[SESSION_KEY] = {
            'departments': self.departments,
            'create_draft': self.create_draft,
            'edit_draft': self.edit_draft,
            'errors': self.errors,
            'search_term': self.search_term,
            'busy': self.busy,
        }

    # =========================================================================
    # Listing & search
    # =========================================================================

    def refresh(self) -> bool:
        """
        Reload the authoritative list from the API.

        On failure the previous list is kept and an error notice is shown.

        Returns:
            True if the list was replaced
        """
        try:
            departments = self.client.list_departments()
        except DepartmentServiceError as e:
            logger.warning(f'Refreshing departments failed: {e}')
            self.notify(messages.ERROR, e.message or LIST_FAILED_MESSAGE)
            return False

        self.departments = departments
        return True

    def set_search_term(self, term):
        self.search_term = term or ''

    @property
    def visible_departments(self) -> List[Dict]:
        """Departments whose name contains the search term, ignoring case."""
        term = self.search_term.lower()
        return [
            department for department in self.departments
            if term in str(department.get('name') or '').lower()
        ]

    def get_department(self, department_id) -> Optional[Dict]:
        """Find a department in the authoritative list by id."""
        for department in self.departments:
            if str(department.get('id')) == str(department_id):
                return department
        return None

    # =========================================================================
    # Drafts & validation
    # =========================================================================

    def _apply_field(self, draft, field, value):
        if field not in DRAFT_FIELDS:
            raise ValueError(f'Unknown department field: {field}')
        if field == 'name':
            value = strip_digits(value)
        draft[field] = value or ''

    def validate(self, draft) -> bool:
        """
        Validate a draft and replace the error map with the result.

        The map is always replaced, so a passing draft clears stale errors.
        """
        form = DepartmentForm(data={field: draft.get(field, '') for field in DRAFT_FIELDS})
        is_valid = form.is_valid()
        self.errors = form.error_map()
        return is_valid

    # =========================================================================
    # Create
    # =========================================================================

    def begin_create(self):
        self.create_draft = dict(INITIAL_DEPARTMENT)
        self.errors = {}

    def dismiss_create(self):
        self.begin_create()

    def update_create_field(self, field, value):
        self._apply_field(self.create_draft, field, value)

    def submit_create(self) -> SubmitResult:
        """
        Validate and send the create draft.

        Invalid drafts never reach the API. On success the draft is reset,
        the list refreshed and the dialog should close. On failure the draft
        is kept for correction.
        """
        if not self.validate(self.create_draft):
            return NOT_SUBMITTED

        self.busy = True
        try:
            message = self.client.create_department(self.create_draft)
        except DepartmentServiceError as e:
            logger.warning(f'Creating department {self.create_draft!r} failed: {e}')
            self.notify(messages.ERROR, e.message or ADD_FAILED_MESSAGE)
            return NOT_SUBMITTED
        finally:
            self.busy = False

        self.notify(messages.SUCCESS, message or ADDED_MESSAGE)
        self.begin_create()
        self.refresh()
        return SubmitResult(succeeded=True, close_dialog=True)

    # =========================================================================
    # Edit
    # =========================================================================

    def begin_edit(self, department):
        """Copy department into the edit draft; the list entry is never aliased."""
        self.edit_draft = dict(department)
        self.errors = {}

    def dismiss_edit(self):
        self.edit_draft = None
        self.errors = {}

    def update_edit_field(self, field, value):
        if self.edit_draft is None:
            self.edit_draft = dict(INITIAL_DEPARTMENT)
        self._apply_field(self.edit_draft, field, value)

    def submit_edit(self) -> SubmitResult:
        """
        Validate and send the edit draft.

        A draft without an id is ignored: no validation, no remote call.
        """
        if not self.edit_draft or self.edit_draft.get('id') in (None, ''):
            return NOT_SUBMITTED

        if not self.validate(self.edit_draft):
            return NOT_SUBMITTED

        department_id = self.edit_draft['id']
        self.busy = True
        try:
            message = self.client.update_department(department_id, self.edit_draft)
        except DepartmentServiceError as e:
            logger.warning(f'Updating department {department_id} failed: {e}')
            self.notify(messages.ERROR, e.message or UPDATE_FAILED_MESSAGE)
            return NOT_SUBMITTED
        finally:
            self.busy = False

        self.notify(messages.SUCCESS, message or UPDATED_MESSAGE)
        self.dismiss_edit()
        self.refresh()
        return SubmitResult(succeeded=True, close_dialog=True)

    # =========================================================================
    # Delete
    # =========================================================================

    def delete(self, department_id, confirm: Callable) -> bool:
        """
        Delete a department after confirmation.

        Args:
            department_id: Id of the department to delete
            confirm: Called with the prompt text; deletion proceeds only if
                it returns True

        Returns:
            True if the API deleted the department
        """
        if not confirm(DELETE_PROMPT):
            return False

        self.busy = True
        try:
            message = self.client.delete_department(department_id)
        except DepartmentServiceError as e:
            logger.warning(f'Deleting department {department_id} failed: {e}')
            self.notify(messages.ERROR, e.message or DELETE_FAILED_MESSAGE)
            return False
        finally:
            self.busy = False

        self.notify(messages.SUCCESS, message or DELETED_MESSAGE)
        self.refresh()
        return True
