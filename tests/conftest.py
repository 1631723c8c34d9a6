import pytest

from apps.departments.clients import DepartmentServiceClient, DepartmentServiceError
from apps.departments.services import DepartmentManager


class FakeDepartmentClient:
    """In-memory stand-in for the Department API."""

    def __init__(self, departments=None):
        self.departments = [dict(d) for d in (departments or [])]
        self.calls = []
        self.failures = {}
        self.manager = None
        self.busy_seen = []
        self._next_id = max([d['id'] for d in self.departments] or [0]) + 1

    def fail(self, operation, message=None, status_code=500):
        self.failures[operation] = DepartmentServiceError(message, status_code)

    def _record_busy(self):
        if self.manager is not None:
            self.busy_seen.append(self.manager.busy)

    def _check(self, operation):
        if operation in self.failures:
            raise self.failures[operation]

    def list_departments(self):
        self.calls.append(('list',))
        self._check('list')
        return [dict(d) for d in self.departments]

    def create_department(self, draft):
        self.calls.append(('create', dict(draft)))
        self._record_busy()
        self._check('create')
        self.departments.append({'id': self._next_id, 'name': draft['name'], 'code': draft['code']})
        self._next_id += 1
        return 'Department created'

    def update_department(self, department_id, draft):
        self.calls.append(('update', department_id, dict(draft)))
        self._record_busy()
        self._check('update')
        for department in self.departments:
            if str(department['id']) == str(department_id):
                department.update(name=draft['name'], code=draft['code'])
        return 'Department updated'

    def delete_department(self, department_id):
        self.calls.append(('delete', department_id))
        self._record_busy()
        self._check('delete')
        self.departments = [d for d in self.departments if str(d['id']) != str(department_id)]
        return 'Department deleted'

    def operations(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def fake_client():
    return FakeDepartmentClient([
        {'id': 1, 'name': 'Engineering', 'code': 'ENG'},
        {'id': 2, 'name': 'Human Resources', 'code': 'HR'},
        {'id': 3, 'name': 'Finance', 'code': 'FIN'},
    ])


@pytest.fixture
def notices():
    return []


@pytest.fixture
def manager(fake_client, notices):
    def notify(level, message):
        notices.append((level, str(message)))

    manager = DepartmentManager(fake_client, notify=notify)
    fake_client.manager = manager
    manager.refresh()
    fake_client.calls.clear()
    return manager


@pytest.fixture
def api(monkeypatch, fake_client):
    """Route every view's Department API calls to the in-memory client."""
    monkeypatch.setattr(DepartmentServiceClient, 'from_settings', lambda: fake_client)
    return fake_client
